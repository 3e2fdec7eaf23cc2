import random

import pytest

import groovesmith.blend
import groovesmith.drum_generator


@pytest.mark.parametrize("weights, expected", [
	((1, 1), (0.5, 0.5)),
	((3, 1), (0.75, 0.25)),
	((0, 0), (0.5, 0.5)),
	((-2, 4), (0.0, 1.0)),
])
def test_normalize_weights (weights: tuple, expected: tuple) -> None:

	assert groovesmith.blend.normalize_weights(*weights) == pytest.approx(expected)


@pytest.mark.parametrize("seed", range(10))
def test_full_weight_always_picks_that_style (seed: int) -> None:

	a = groovesmith.blend.blend_choice("edm", "drill", bars=1, weight_a=1, weight_b=0, seed=seed)
	b = groovesmith.blend.blend_choice("edm", "drill", bars=1, weight_a=0, weight_b=1, seed=seed)

	assert a.style.name == "edm"
	assert b.style.name == "drill"


def test_both_styles_appear_at_even_weights () -> None:

	chosen = {
		groovesmith.blend.blend_choice("rock", "trap", bars=1, seed=seed).style.name
		for seed in range(40)
	}

	assert chosen == {"rock", "trap"}


def test_blend_is_seeded () -> None:

	a = groovesmith.blend.blend("pop", "r&b", bars=4, weight_a=2, weight_b=1, seed=42)
	b = groovesmith.blend.blend("pop", "r&b", bars=4, weight_a=2, weight_b=1, seed=42)

	assert a == b


def test_blend_generates_the_winner_with_the_same_rng () -> None:

	"""After the coin flip, the pattern is exactly what the drum generator makes from the same source."""

	rng = random.Random(5)
	rng.random()
	expected = groovesmith.drum_generator.generate("edm", bars=2, rng=rng)

	result = groovesmith.blend.blend_choice("edm", "trap", bars=2, weight_a=1, weight_b=0, rng=random.Random(5))

	assert result.pattern == expected
