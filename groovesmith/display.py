"""ASCII grid rendering of a pattern.

Drum patterns show one row per lane in use and melodic patterns show one row
per pitch, highest first. Each cell is one 16th step and bars are separated
by ``|``::

	kick        |X . . . O . . . X . . . O . . .|
	snare       |. . . . X . . . . . . . X . . .|
	closed_hat  |O o O o O o O o O o O o O o O o|

	A#2         |. . . . . . X - - . . . . . . .|
	G2          |X - . . . . . . . . O . . . . .|
"""

import typing

import groovesmith.constants
import groovesmith.constants.gm_drums as gm_drums
import groovesmith.intervals
import groovesmith.pattern


_LABEL_WIDTH = 12
_SUSTAIN = -1


# Upper velocity bound of each shading tier, quietest first.
_SHADES = ((40, "."), (80, "o"), (110, "O"))


def cell_char (velocity: int) -> str:

	"""One grid cell: ``-`` while a note sustains, else the shade of its velocity tier."""

	if velocity == _SUSTAIN:
		return "-"

	for ceiling, char in _SHADES:
		if velocity <= ceiling:
			return char

	return "X"


def note_name (pitch: int) -> str:

	"""Convert a MIDI note number to a name with the octave numbering used by the generators.

	Examples: 36 → ``"C3"``, 46 → ``"A#3"``.
	"""

	return f"{groovesmith.intervals.KEY_NAMES[pitch % 12]}{pitch // 12}"


def build_velocity_grid (pattern: groovesmith.pattern.Pattern, show_sustain: bool = False) -> typing.Dict[int, typing.List[int]]:

	"""Build a ``{lane_or_pitch: [velocity_per_step]}`` dict.

	Each slot holds the highest velocity of any note starting in that step.
	With ``show_sustain`` the steps a note keeps sounding through are
	marked as sustain.
	"""

	columns = pattern.total_steps
	tps = groovesmith.constants.TICKS_PER_STEP
	grid: typing.Dict[int, typing.List[int]] = {}

	for note in pattern.notes:

		slot = note.start_tick // tps

		if slot < 0 or slot >= columns:
			continue

		cells = grid.setdefault(note.pitch_or_row, [0] * columns)

		if show_sustain:
			last = min(columns - 1, (note.start_tick + note.length_ticks - 1) // tps)
			for held in range(slot + 1, last + 1):
				if cells[held] == 0:
					cells[held] = _SUSTAIN

		if note.velocity > cells[slot]:
			cells[slot] = note.velocity

	return grid


def _render_row (label: str, cells: typing.List[int], steps_per_bar: int) -> str:

	bars = [
		" ".join(cell_char(v) for v in cells[i:i + steps_per_bar])
		for i in range(0, len(cells), steps_per_bar)
	]

	return f"{label[:_LABEL_WIDTH].ljust(_LABEL_WIDTH)}|" + "|".join(bars) + "|"


def render (pattern: groovesmith.pattern.Pattern) -> typing.List[str]:

	"""Return the grid lines for a pattern (an empty pattern gives a single placeholder line)."""

	if not pattern.notes:
		return [f"{'(empty)'.ljust(_LABEL_WIDTH)}|" + "|".join([" ".join(["."] * pattern.steps_per_bar)] * pattern.bars) + "|"]

	if pattern.is_drum:
		grid = build_velocity_grid(pattern)
		return [
			_render_row(gm_drums.ROW_NAMES.get(row, str(row)), grid[row], pattern.steps_per_bar)
			for row in sorted(grid)
		]

	grid = build_velocity_grid(pattern, show_sustain=True)
	return [
		_render_row(note_name(pitch), grid[pitch], pattern.steps_per_bar)
		for pitch in sorted(grid, reverse=True)
	]


def render_text (pattern: groovesmith.pattern.Pattern) -> str:

	return "\n".join(render(pattern))
