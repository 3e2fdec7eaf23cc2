import dataclasses
import random

import pytest

import groovesmith.bass_styles
import groovesmith.grid
import groovesmith.intervals
import groovesmith.melodic_generator
import groovesmith.pattern


GENERATORS = [groovesmith.melodic_generator.generate, groovesmith.melodic_generator.generate_808]


def _assert_in_key (pattern: groovesmith.pattern.Pattern, key_pc: int, scale_name: str) -> None:

	members = set(groovesmith.intervals.scale_pitch_classes(key_pc, groovesmith.intervals.get_scale(scale_name)))

	for note in pattern.notes:
		assert 0 <= note.pitch_or_row <= 127
		assert note.pitch_or_row % 12 in members
		assert 0 <= note.start_tick < pattern.span_ticks
		assert 1 <= note.velocity <= 127


# ── Key and scale ────────────────────────────────────────────────────

@pytest.mark.parametrize("generator", GENERATORS)
@pytest.mark.parametrize("style", groovesmith.bass_styles.style_choices())
def test_every_note_is_in_key (generator, style: str) -> None:

	"""All pitches are members of the requested key and scale."""

	pattern = generator(style, key="F#", scale="Dorian", bars=4, triplet_pct=50, dotted_pct=50, seed=13)

	assert pattern.kind == groovesmith.pattern.PatternKind.MELODIC
	assert pattern.bars == 4
	_assert_in_key(pattern, 6, "Dorian")


@pytest.mark.parametrize("generator", GENERATORS)
def test_unknown_style_and_scale_fall_back (generator) -> None:

	"""An unknown style plays as trap and an unknown scale as chromatic."""

	fallback = generator("polka", key="C", scale="no such scale", bars=2, seed=5)
	trap = generator("trap", key="C", scale="Chromatic", bars=2, seed=5)

	assert fallback == trap


@pytest.mark.parametrize("generator", GENERATORS)
@pytest.mark.parametrize("octave", [-5, -2, 0, 2, 9])
def test_octave_offset_keeps_pitches_valid (generator, octave: int) -> None:

	pattern = generator("edm", key="A", scale="Natural Minor", bars=2, octave=octave, seed=3)

	_assert_in_key(pattern, 9, "Natural Minor")


# ── Determinism ──────────────────────────────────────────────────────

@pytest.mark.parametrize("generator", GENERATORS)
def test_same_seed_same_line (generator) -> None:

	a = generator("drill", key="D", scale="Phrygian", bars=8, rest_pct=30, seed=42)
	b = generator("drill", key="D", scale="Phrygian", bars=8, rest_pct=30, seed=42)

	assert a == b


@pytest.mark.parametrize("generator", GENERATORS)
def test_injected_rng_overrides_seed (generator) -> None:

	a = generator("rock", bars=2, seed=1, rng=random.Random(99))
	b = generator("rock", bars=2, seed=2, rng=random.Random(99))

	assert a == b


@pytest.mark.parametrize("generator", GENERATORS)
def test_auto_seed_differs_between_calls (generator) -> None:

	"""Unseeded calls with identical arguments produce different lines."""

	lines = {
		tuple((n.pitch_or_row, n.start_tick, n.length_ticks, n.velocity) for n in generator("trap", key="C", bars=4, seed=-1).notes)
		for _ in range(10)
	}

	assert len(lines) > 1


# ── Step-scan bass ───────────────────────────────────────────────────

def test_full_rest_produces_silence () -> None:

	pattern = groovesmith.melodic_generator.generate("r&b", bars=4, rest_pct=100, seed=8)

	assert len(pattern) == 0


def test_triplet_burst_needs_triplet_amount () -> None:

	"""With no triplet amount the 8-tick burst subdivision is replaced by 32nds."""

	ctx = groovesmith.melodic_generator._build_context(
		"trap", "C", "Minor", 1, 0, 0, 0, 0, 0, None, "4/4", random.Random(0),
	)

	for _ in range(200):
		assert groovesmith.melodic_generator._burst_subdivision(ctx) != groovesmith.melodic_generator.TRIPLET_BURST_TICKS


def test_low_styles_sit_an_octave_down () -> None:

	trap = groovesmith.melodic_generator._build_context("trap", "C", "Minor", 1, 0, 0, 0, 0, 0, 1, "4/4", None)
	edm = groovesmith.melodic_generator._build_context("edm", "C", "Minor", 1, 0, 0, 0, 0, 0, 1, "4/4", None)

	assert trap.register == groovesmith.melodic_generator.LOW_BASE_OCTAVE
	assert edm.register == groovesmith.melodic_generator.BASE_OCTAVE


@pytest.mark.parametrize("signature", ["5/8", "7/8", "3/4", "3+3+2/8"])
def test_odd_meters (signature: str) -> None:

	pattern = groovesmith.melodic_generator.generate("reggaeton", bars=2, time_signature=signature, seed=17)
	steps = groovesmith.grid.TimeSignature.parse(signature).steps_per_bar

	assert pattern.steps_per_bar == steps
	_assert_in_key(pattern, 0, "Natural Minor")


def test_accent_steps () -> None:

	edm = groovesmith.bass_styles.get_style("edm")
	reggaeton = groovesmith.bass_styles.get_style("reggaeton")
	four_four = groovesmith.grid.TimeSignature.parse("4/4")

	assert groovesmith.melodic_generator.accent_steps(edm, four_four) == frozenset({0, 4, 8, 12})
	assert groovesmith.melodic_generator.accent_steps(reggaeton, four_four) == frozenset({0, 6, 12})
	assert groovesmith.melodic_generator.accent_steps(edm, groovesmith.grid.TimeSignature.parse("7/8")) == frozenset({0, 6, 10})


# ── 808 lines ────────────────────────────────────────────────────────

@pytest.mark.parametrize("seed", range(6))
def test_808_always_plays_each_downbeat (seed: int) -> None:

	"""Even at full rest, every bar opens with a note."""

	pattern = groovesmith.melodic_generator.generate_808("trap", bars=4, rest_pct=100, seed=seed)
	starts = {n.start_tick for n in pattern.notes}

	for bar in range(4):
		assert bar * 384 in starts

	assert len(pattern) == 4


def test_grid_family_respects_triplets () -> None:

	rng = random.Random(4)
	families = {groovesmith.melodic_generator.choose_grid_family(rng, allow_triplets=False) for _ in range(300)}

	assert "eighth_triplet" not in families
	assert families <= set(groovesmith.melodic_generator.GRID_FAMILIES)


def test_808_root_lines_jump_an_octave () -> None:

	"""Some root-centric lines leap from the root to the root an octave up."""

	jumps = 0

	for seed in range(60):

		pitches = [n.pitch_or_row for n in groovesmith.melodic_generator.generate_808("edm", key="C", scale="Natural Minor", bars=4, seed=seed).notes]
		low = min(pitches)

		if max(pitches) == low + 12:
			assert low % 12 == 0
			jumps += 1

	assert jumps > 0


# ── Phrasing ─────────────────────────────────────────────────────────

def test_phrase_reset_follows_the_style_cadence () -> None:

	"""Rock returns to the root every 4 bars and to its home octave every 8."""

	rock = groovesmith.bass_styles.get_style("rock")
	reset = groovesmith.melodic_generator.phrase_reset

	assert reset(rock, 0, 3, 4, 2) == (3, 4)
	assert reset(rock, 3, 3, 4, 2) == (3, 4)
	assert reset(rock, 4, 3, 4, 2) == (0, 4)
	assert reset(rock, 8, 3, 4, 2) == (0, 2)


def test_zero_cadence_never_resets () -> None:

	still = dataclasses.replace(groovesmith.bass_styles.get_style("trap"), small_var_every_bars=0, big_var_every_bars=0)

	for bar in range(16):
		assert groovesmith.melodic_generator.phrase_reset(still, bar, 5, 3, 2) == (5, 3)


def test_cell_accents_replace_the_beat_grid () -> None:

	"""A style preferring cell accents lands its accents on the 3-3-2 cells in 4/4."""

	plain = dataclasses.replace(groovesmith.bass_styles.get_style("edm"), prefers_cell_accents=False, enforce_tresillo=False)
	cells = dataclasses.replace(plain, prefers_cell_accents=True)
	four = groovesmith.grid.TimeSignature.parse("4/4")

	assert groovesmith.melodic_generator.accent_steps(plain, four) == frozenset({0, 4, 8, 12})
	assert groovesmith.melodic_generator.accent_steps(cells, four) == frozenset({0, 6, 12})
