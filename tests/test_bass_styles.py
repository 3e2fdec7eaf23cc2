import dataclasses

import pytest

import groovesmith.bass_styles


def test_style_choices_order () -> None:

	assert groovesmith.bass_styles.style_choices() == [
		"edm", "trap", "drill", "r&b", "rock", "reggaeton", "hip hop", "wxstie",
	]
	assert len(groovesmith.bass_styles.all_styles()) == 8


def test_unknown_style_returns_trap () -> None:

	assert groovesmith.bass_styles.get_style("totally-unknown").name == "trap"
	assert groovesmith.bass_styles.get_style(None) is groovesmith.bass_styles.default_style()


def test_lookup_is_case_insensitive () -> None:

	assert groovesmith.bass_styles.get_style("Reggaeton").enforce_tresillo
	assert groovesmith.bass_styles.get_style("RNB").name == "r&b"


@pytest.mark.parametrize("spec", groovesmith.bass_styles.all_styles(), ids=lambda s: s.name)
def test_normalized_weights_sum_to_one (spec) -> None:

	weights = groovesmith.bass_styles.normalized_subdivision_weights(spec)

	assert len(weights) == 6
	assert sum(weights) == pytest.approx(1.0)


def test_zero_weights_become_uniform () -> None:

	empty = dataclasses.replace(
		groovesmith.bass_styles.default_style(),
		div_quarter=0, div_eighth=0, div_off_eighth=0, div_sixteenth=0, div_eighth_triplet=0, div_sixteenth_triplet=0,
	)

	assert groovesmith.bass_styles.normalized_subdivision_weights(empty) == pytest.approx((1 / 6,) * 6)


@pytest.mark.parametrize("numerator, denominator, expected", [
	(5, 8, (3, 2)),
	(7, 8, (3, 2, 2)),
	(9, 8, (3, 3, 3)),
	(11, 8, (3, 3, 3, 2)),
	(13, 8, (3, 3, 3, 2, 2)),
	(15, 8, (3, 3, 3, 3, 3)),
	(6, 8, ()),
	(4, 4, ()),
	(7, 16, ()),
])
def test_accent_cells (numerator: int, denominator: int, expected: tuple) -> None:

	assert groovesmith.bass_styles.default_accent_cells_for_meter(numerator, denominator) == expected
