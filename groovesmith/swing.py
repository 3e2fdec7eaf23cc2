"""Swing as a fixed tick delay on off-beat grid positions.

Swing never moves a note by more than half of the subdivision it swings, so
a swung note always stays inside the step it was placed on and inside the
pattern span.
"""

import groovesmith.constants
import groovesmith.constants.gm_drums
import groovesmith.grid


def swing_offset_ticks (swing_pct: float, max_offset_ticks: int) -> int:

	"""
	Scale a 0–100 swing amount onto ``[0, max_offset_ticks]``.
	"""

	swing_pct = groovesmith.grid.clamp_percent(swing_pct)

	return int(round(max_offset_ticks * swing_pct / 100.0))


def drum_swing_ticks (row: int, step: int, swing_pct: float) -> int:

	"""
	Return the swing delay for a drum hit.

	Only the hat and perc lanes swing, and only on odd (off-16th) steps. The
	full-strength delay is half a 16th (12 ticks).
	"""

	if row not in groovesmith.constants.gm_drums.SWUNG_ROWS or step % 2 != 1:
		return 0

	return swing_offset_ticks(swing_pct, groovesmith.constants.TICKS_PER_STEP // 2)


def melodic_swing_ticks (step: int, swing_pct: float) -> int:

	"""
	Return the swing delay for a melodic note.

	The off-beat 8th of each beat (``step % 4 == 2``) is delayed by up to a
	quarter of an 8th note, i.e. ``round(24 × swing_pct / 100 × 0.5)`` ticks.
	"""

	if step % 4 != 2:
		return 0

	return swing_offset_ticks(swing_pct, groovesmith.constants.TICKS_PER_STEP // 2)


def style_swing_to_pct (swing: float) -> float:

	"""
	Convert a "50 = straight" swing figure (as used by bass styles) to 0–100.

	50 maps to 0, 75 (hard triplet swing) and above map to 100.
	"""

	return float(groovesmith.grid.clamp(int(round((swing - 50.0) * 4.0)), 0, 100))
