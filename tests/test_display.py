import pytest

import groovesmith.display
import groovesmith.pattern


@pytest.mark.parametrize("velocity, expected", [
	(-1, "-"),
	(0, "."),
	(40, "."),
	(41, "o"),
	(80, "o"),
	(81, "O"),
	(110, "O"),
	(111, "X"),
	(127, "X"),
	(200, "X"),
])
def test_cell_char (velocity: int, expected: str) -> None:

	assert groovesmith.display.cell_char(velocity) == expected


def test_note_name () -> None:

	assert groovesmith.display.note_name(36) == "C3"
	assert groovesmith.display.note_name(46) == "A#3"
	assert groovesmith.display.note_name(0) == "C0"


def test_render_drums (drum_pattern: groovesmith.pattern.Pattern) -> None:

	"""Drum rows are labelled with lane names in lane order."""

	lines = groovesmith.display.render(drum_pattern)

	assert lines == [
		"kick        |O . . . . . . . O . . . . . . .|",
		"snare       |. . . . O . . . . . . . X . . .|",
	]


def test_render_melodic_shows_sustain (melodic_pattern: groovesmith.pattern.Pattern) -> None:

	"""Pitches run high to low and held steps show as '-'."""

	lines = groovesmith.display.render(melodic_pattern)

	assert [line.split()[0] for line in lines] == ["A#3", "F#3", "C#3", "C3"]
	assert lines[-1] == "C3          |O - . . . . . . . . . . . . . .|"


def test_render_empty_pattern_has_one_line () -> None:

	pattern = groovesmith.pattern.Pattern(groovesmith.pattern.PatternKind.DRUM, bars=2)

	text = groovesmith.display.render_text(pattern)

	assert text.startswith("(empty)")
	assert text.count("|") == 3
	assert "\n" not in text


def test_grid_keeps_the_loudest_hit_per_step () -> None:

	pattern = groovesmith.pattern.Pattern(groovesmith.pattern.PatternKind.DRUM, bars=1)
	pattern.add_note(0, 0, 24, 50)
	pattern.add_note(0, 12, 24, 120)

	grid = groovesmith.display.build_velocity_grid(pattern)

	assert grid[0][0] == 120
	assert grid[0][1:] == [0] * 15
