"""Whole-pattern edits applied after generation.

All functions return a new pattern and leave their input untouched.
"""

import logging
import random
import typing

import groovesmith.constants
import groovesmith.constants.gm_drums as gm_drums
import groovesmith.constants.velocity
import groovesmith.grid
import groovesmith.intervals
import groovesmith.pattern
import groovesmith.randomness


logger = logging.getLogger(__name__)

# Full-strength humanize: half a 16th of timing drift, ±25 % velocity.
MAX_TIMING_JITTER_TICKS = groovesmith.constants.TICKS_PER_STEP // 2
MAX_VELOCITY_JITTER = 0.25

MIN_OCTAVE_DELTA = -4
MAX_OCTAVE_DELTA = 4


def humanize (
	pattern: groovesmith.pattern.Pattern,
	timing_pct: float = 0,
	velocity_pct: float = 0,
	seed: typing.Optional[int] = groovesmith.constants.AUTO_SEED,
	rng: typing.Optional[random.Random] = None,
) -> groovesmith.pattern.Pattern:

	"""
	Add small random variations to note timing and velocity.

	Parameters:
		pattern: Source pattern (not modified).
		timing_pct: 0–100. Each note moves by a random amount within
			``±timing_pct/100 × 12`` ticks, kept inside the pattern span.
		velocity_pct: 0–100. Each velocity is multiplied by a random value
			in ``[1 − v, 1 + v]`` with ``v = velocity_pct/100 × 0.25``,
			clamped to 1–127.
		seed: ``-1`` derives a fresh seed.
		rng: Injected random source; overrides ``seed``.
	"""

	result = pattern.copy()
	rng = groovesmith.randomness.make_rng(seed, rng)

	max_timing = groovesmith.grid.clamp_percent(timing_pct) / 100.0 * MAX_TIMING_JITTER_TICKS
	max_velocity = groovesmith.grid.clamp_percent(velocity_pct) / 100.0 * MAX_VELOCITY_JITTER
	last_tick = result.span_ticks - 1

	for note in result.notes:

		if max_timing > 0.0:
			offset = rng.uniform(-max_timing, max_timing)
			note.start_tick = groovesmith.grid.clamp(int(round(note.start_tick + offset)), 0, last_tick)

		if max_velocity > 0.0:
			scale = rng.uniform(1.0 - max_velocity, 1.0 + max_velocity)
			note.velocity = groovesmith.grid.clamp(
				int(round(note.velocity * scale)),
				groovesmith.constants.velocity.MIN_VELOCITY,
				groovesmith.constants.velocity.MAX_VELOCITY,
			)

	return result


def bump_rows (pattern: groovesmith.pattern.Pattern) -> groovesmith.pattern.Pattern:

	"""
	Rotate every drum note up one lane.

	The rotation wraps within the lanes in use: with ``max_row`` the highest
	lane present, each note moves to ``(row + 1) % (max_row + 1)``. Empty and
	melodic patterns are returned unchanged.
	"""

	result = pattern.copy()

	if not result.is_drum or not result.notes:
		return result

	max_row = max(n.pitch_or_row for n in result.notes)

	for note in result.notes:
		note.pitch_or_row = (note.pitch_or_row + 1) % (max_row + 1)

	return result


def transpose_to_scale (
	pattern: groovesmith.pattern.Pattern,
	key: typing.Union[str, int, None],
	scale: typing.Optional[str],
	octave_delta: int = 0,
) -> groovesmith.pattern.Pattern:

	"""
	Shift a melodic pattern by whole octaves and snap every pitch into a key and scale.

	Rhythm, lengths and velocities are kept. ``octave_delta`` is clamped to
	-4…+4 and unknown scales snap to the chromatic set (pitches unchanged).
	Drum patterns are returned unchanged.
	"""

	result = pattern.copy()

	if result.is_drum:
		return result

	root_pc = groovesmith.intervals.key_to_pc(key)
	intervals = groovesmith.intervals.get_scale(scale)
	shift = 12 * groovesmith.grid.clamp(int(octave_delta), MIN_OCTAVE_DELTA, MAX_OCTAVE_DELTA)

	for note in result.notes:

		pitch = groovesmith.intervals.snap_to_scale(note.pitch_or_row + shift, root_pc, intervals)

		# Fold back inside the MIDI range by octaves so the pitch class survives.
		while pitch > 127:
			pitch -= 12
		while pitch < 0:
			pitch += 12

		note.pitch_or_row = pitch

	logger.debug(f"Transposed {len(result)} note(s) to {groovesmith.intervals.KEY_NAMES[root_pc]} {groovesmith.intervals.resolve_scale_name(scale)}")

	return result


def _add_if_free (pattern: groovesmith.pattern.Pattern, row: int, tick: int, length: int, velocity: int) -> None:

	if not pattern.has_note_at(row, tick):
		pattern.add_note(row, tick, length, velocity)


def expand_groove (pattern: groovesmith.pattern.Pattern, bars: typing.Optional[int] = None) -> groovesmith.pattern.Pattern:

	"""
	Grow a sparse seed drum pattern into a full groove.

	The seed notes are kept and the following are layered on top of every
	bar, skipping positions where the lane already has a hit:

	- closed hats on every 8th, ghost hats on every off-16th
	- a snare on beats 2 and 4 with grace notes a 64th either side
	- kick anchors on the downbeat and on beat 3, with a pickup three
	  16ths before each downbeat

	Melodic patterns are returned unchanged.
	"""

	if not pattern.is_drum:
		return pattern.copy()

	bars = pattern.bars if bars is None else groovesmith.grid.clamp_bars(bars)
	steps_in_bar = pattern.steps_per_bar
	tps = groovesmith.constants.TICKS_PER_STEP
	grace = tps // 4

	result = groovesmith.pattern.Pattern(groovesmith.pattern.PatternKind.DRUM, bars=bars, steps_per_bar=steps_in_bar, channel=pattern.channel)

	for note in pattern.notes:
		result.add_note(note.pitch_or_row, note.start_tick, note.length_ticks, note.velocity)

	for step in range(result.total_steps):

		tick = step * tps

		if step % 2 == 0:
			_add_if_free(result, gm_drums.CLOSED_HAT, tick, 12, 78)
		else:
			_add_if_free(result, gm_drums.CLOSED_HAT, tick, 8, 58)

	for bar in range(bars):

		bar_start = bar * steps_in_bar * tps

		for step in (4, 12):
			if step >= steps_in_bar:
				continue
			tick = bar_start + step * tps
			_add_if_free(result, gm_drums.SNARE, tick - grace, 8, 72)
			_add_if_free(result, gm_drums.SNARE, tick, 24, 110)
			_add_if_free(result, gm_drums.SNARE, tick + grace, 8, 72)

		# The pickup before the very first downbeat would fall before tick 0; add_note drops it.
		_add_if_free(result, gm_drums.KICK, bar_start - 3 * tps, 12, 95)
		_add_if_free(result, gm_drums.KICK, bar_start, 24, 118)
		if steps_in_bar > 8:
			_add_if_free(result, gm_drums.KICK, bar_start + 8 * tps, 24, 112)

	logger.info(f"Expanded groove to {bars} bar(s), {len(result)} hits")

	return result
