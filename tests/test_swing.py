import pytest

import groovesmith.constants.gm_drums as gm_drums
import groovesmith.swing


@pytest.mark.parametrize("pct, expected", [(0, 0), (50, 6), (100, 12), (250, 12), (-10, 0)])
def test_swing_offset_scales_with_percent (pct: float, expected: int) -> None:

	assert groovesmith.swing.swing_offset_ticks(pct, 12) == expected


def test_drum_swing_only_moves_offbeat_swung_lanes () -> None:

	assert groovesmith.swing.drum_swing_ticks(gm_drums.CLOSED_HAT, 1, 100) == 12
	assert groovesmith.swing.drum_swing_ticks(gm_drums.PERC, 3, 50) == 6
	assert groovesmith.swing.drum_swing_ticks(gm_drums.CLOSED_HAT, 2, 100) == 0
	assert groovesmith.swing.drum_swing_ticks(gm_drums.KICK, 1, 100) == 0
	assert groovesmith.swing.drum_swing_ticks(gm_drums.SNARE, 3, 100) == 0


def test_melodic_swing_delays_the_and_of_each_beat () -> None:

	offsets = [groovesmith.swing.melodic_swing_ticks(step, 100) for step in range(8)]

	assert offsets == [0, 0, 12, 0, 0, 0, 12, 0]


@pytest.mark.parametrize("style_swing, expected", [(50, 0), (54, 16), (62, 48), (80, 100), (40, 0)])
def test_style_swing_to_pct (style_swing: float, expected: int) -> None:

	assert groovesmith.swing.style_swing_to_pct(style_swing) == expected
