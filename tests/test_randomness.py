import random

import groovesmith.randomness


def test_explicit_seed_is_kept () -> None:

	assert groovesmith.randomness.resolve_seed(42) == 42
	assert groovesmith.randomness.resolve_seed(0) == 0


def test_auto_seeds_differ () -> None:

	"""Back-to-back unseeded requests never collide."""

	seeds = {groovesmith.randomness.resolve_seed(-1) for _ in range(50)}

	assert len(seeds) > 1
	assert all(0 <= s <= 0x7FFFFFFF for s in seeds)


def test_injected_rng_is_returned_as_is () -> None:

	rng = random.Random(1)

	assert groovesmith.randomness.make_rng(5, rng) is rng


def test_chance_edges () -> None:

	rng = random.Random(3)

	assert not any(groovesmith.randomness.chance(rng, 0) for _ in range(100))
	assert all(groovesmith.randomness.chance(rng, 100) for _ in range(100))
	assert all(groovesmith.randomness.chance(rng, 150) for _ in range(100))
