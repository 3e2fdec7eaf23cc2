"""Micro-variation ("flip") of an existing pattern.

A flip applies a bounded number of independent local edits to randomly
chosen notes: shift by one grid step, lengthen or shorten by a 32nd, move to
the neighbouring lane (drums) or semitone (melodic), and always a small
velocity jitter. The input pattern is never modified; a changed copy is
returned.
"""

import logging
import random
import typing

import groovesmith.constants
import groovesmith.constants.velocity
import groovesmith.grid
import groovesmith.pattern
import groovesmith.randomness


logger = logging.getLogger(__name__)

DRUM_MAX_OPS = 16
MELODIC_MAX_OPS = 20
DRUM_VELOCITY_JITTER = 8
MELODIC_VELOCITY_JITTER = 6


def operation_count (density: float, drum: bool) -> int:

	"""Number of edits a flip performs at a given density (0–100)."""

	density = groovesmith.grid.clamp_percent(density)

	if drum:
		return groovesmith.grid.clamp(density // 6, 1, DRUM_MAX_OPS)

	return groovesmith.grid.clamp(int(round(density / 5.0)), 1, MELODIC_MAX_OPS)


def _sign (rng: random.Random) -> int:

	return 1 if rng.random() < 0.5 else -1


def flip (
	pattern: groovesmith.pattern.Pattern,
	seed: typing.Optional[int] = groovesmith.constants.AUTO_SEED,
	density: float = 50,
	bars: typing.Optional[int] = None,
	rng: typing.Optional[random.Random] = None,
) -> groovesmith.pattern.Pattern:

	"""
	Return a varied copy of ``pattern``.

	Parameters:
		pattern: The pattern to vary. It is left untouched.
		seed: ``-1`` derives a fresh seed.
		density: 0–100; how many edits to make.
		bars: Column range for step shifts. Defaults to the pattern's own
			bar count and never exceeds it.
		rng: Injected random source; overrides ``seed``.
	"""

	result = pattern.copy()

	if not result.notes:
		return result

	rng = groovesmith.randomness.make_rng(seed, rng)
	bars = result.bars if bars is None else min(groovesmith.grid.clamp_bars(bars), result.bars)

	tps = groovesmith.constants.TICKS_PER_STEP
	columns = groovesmith.grid.total_steps(bars, result.steps_per_bar)
	low, high = result.valid_pitch_range()
	jitter = DRUM_VELOCITY_JITTER if result.is_drum else MELODIC_VELOCITY_JITTER
	ops = operation_count(density, result.is_drum)

	for _ in range(ops):

		note = result.notes[rng.randrange(len(result.notes))]
		kind = rng.randrange(3)

		if kind == 0:
			column = groovesmith.grid.clamp(note.start_tick // tps + _sign(rng), 0, columns - 1)
			note.start_tick = column * tps

		elif kind == 1:
			note.length_ticks = groovesmith.grid.clamp(
				note.length_ticks + _sign(rng) * groovesmith.constants.THIRTYSECOND_TICKS,
				groovesmith.constants.MIN_LENGTH_TICKS,
				groovesmith.constants.MAX_FLIP_LENGTH_TICKS,
			)

		else:
			note.pitch_or_row = groovesmith.grid.clamp(note.pitch_or_row + _sign(rng), low, high)

		note.velocity = groovesmith.grid.clamp(
			note.velocity + _sign(rng) * jitter,
			groovesmith.constants.velocity.FLIP_MIN_VELOCITY,
			groovesmith.constants.velocity.FLIP_MAX_VELOCITY,
		)

	logger.debug(f"Flipped {result.kind.value} pattern with {ops} edit(s)")

	return result
