"""Logical drum lanes and their General MIDI percussion pitches.

Drum patterns store a *lane* index rather than a MIDI pitch so the grid
stays independent of whatever kit it is exported to. The lane order below is
the order the generators and the flip engine work in; the first six lanes are
the ones the style tables describe.

Two ways to use this module:

1. **As lane indices** when building or inspecting a drum pattern::

       import groovesmith.constants.gm_drums as gm_drums

       pattern.add_note(gm_drums.SNARE, start_tick=96, length_ticks=24, velocity=110)

2. **As an export map** - ``GM_DRUM_MAP`` maps each lane to its General MIDI
   note number on channel 10 (0-indexed channel 9)::

       pitch = gm_drums.GM_DRUM_MAP[gm_drums.CLAP]   # 39
"""

import typing


# ─── General MIDI percussion note numbers ───────────────────────────

KICK_1 = 36
SIDE_STICK = 37
SNARE_1 = 38
HAND_CLAP = 39
HI_HAT_CLOSED = 42
LOW_TOM = 45
HI_HAT_OPEN = 46
LOW_MID_TOM = 47
HIGH_MID_TOM = 48
CRASH_1 = 49
HIGH_TOM = 50
RIDE_1 = 51

GM_DRUM_CHANNEL = 9


# ─── Logical lanes ──────────────────────────────────────────────────

KICK = 0
SNARE = 1
CLOSED_HAT = 2
OPEN_HAT = 3
CLAP = 4
PERC = 5
RIM = 6
LOW_TOM_ROW = 7
MID_TOM_ROW = 8
HIGH_TOM_ROW = 9
CRASH = 10
RIDE = 11

NUM_ROWS = 12

# Lanes described by the drum style tables
GENERATED_ROWS: typing.Tuple[int, ...] = (KICK, SNARE, CLOSED_HAT, OPEN_HAT, CLAP, PERC)

# Lanes that pick up swing on off-beat steps
SWUNG_ROWS: typing.FrozenSet[int] = frozenset({CLOSED_HAT, OPEN_HAT, PERC})

# Lanes that carry the backbeat
BACKBEAT_ROWS: typing.Tuple[int, ...] = (SNARE, CLAP)


ROW_NAMES: typing.Dict[int, str] = {
	KICK: "kick",
	SNARE: "snare",
	CLOSED_HAT: "closed_hat",
	OPEN_HAT: "open_hat",
	CLAP: "clap",
	PERC: "perc",
	RIM: "rim",
	LOW_TOM_ROW: "low_tom",
	MID_TOM_ROW: "mid_tom",
	HIGH_TOM_ROW: "high_tom",
	CRASH: "crash",
	RIDE: "ride",
}


# ─── Lane → General MIDI pitch ──────────────────────────────────────

GM_DRUM_MAP: typing.Dict[int, int] = {
	KICK: KICK_1,
	SNARE: SNARE_1,
	CLOSED_HAT: HI_HAT_CLOSED,
	OPEN_HAT: HI_HAT_OPEN,
	CLAP: HAND_CLAP,
	PERC: HIGH_MID_TOM,
	RIM: SIDE_STICK,
	LOW_TOM_ROW: LOW_TOM,
	MID_TOM_ROW: LOW_MID_TOM,
	HIGH_TOM_ROW: HIGH_TOM,
	CRASH: CRASH_1,
	RIDE: RIDE_1,
}


def row_to_pitch (row: int) -> int:

	"""Return the General MIDI pitch for a lane, clamping out-of-range lanes."""

	return GM_DRUM_MAP[max(0, min(NUM_ROWS - 1, row))]
