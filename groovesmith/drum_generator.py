"""Probabilistic drum pattern generator.

Generation is two-phase. The first phase scans every bar, lane and step and
rolls an independent Bernoulli trial against the style's per-step
probability, nudged by the dotted/triplet feel controls and pulled down by
the rest density. The second phase repairs the result: when the style locks
its backbeat, every bar is guaranteed a snare and a clap on beats 2 and 4.

The generator is a pure function of its arguments and the random source.
Passing the same seed and the same inputs always yields the same pattern.

Example:
	```python
	import groovesmith.drum_generator

	pattern = groovesmith.drum_generator.generate("trap", bars=4, seed=42)
	```
"""

import logging
import random
import typing

import groovesmith.constants
import groovesmith.constants.gm_drums as gm_drums
import groovesmith.constants.velocity
import groovesmith.drum_styles
import groovesmith.grid
import groovesmith.pattern
import groovesmith.randomness
import groovesmith.swing


logger = logging.getLogger(__name__)

# Probability nudges applied on dotted (step % 4 == 3) and odd (triplet-ish) steps.
DOTTED_PUSH = 0.35
TRIPLET_PUSH = 0.25
FEEL_SCALE = 0.75

BACKBEAT_STEPS = (4, 12)

StyleArg = typing.Union[str, groovesmith.drum_styles.DrumStyle, groovesmith.drum_styles.DrumStyleSpec, None]


def resolve_style (style: StyleArg) -> groovesmith.drum_styles.DrumStyleSpec:

	if isinstance(style, groovesmith.drum_styles.DrumStyleSpec):
		return style

	return groovesmith.drum_styles.get_spec(style)


def _feel (bias: float, pct: int) -> float:

	return max(0.0, min(1.0, bias + (pct / 100.0) * FEEL_SCALE))


def step_probability (base: float, step: int, dotted_feel: float, triplet_feel: float, rest_bias: float) -> float:

	"""
	Return the effective hit probability for one step.

	Dotted positions (``step % 4 == 3``) and odd positions get additive
	pushes, each capped at 1, before the rest density scales everything down.
	"""

	p = base

	if dotted_feel > 0.0 and step % 4 == 3:
		p = min(1.0, p + DOTTED_PUSH * dotted_feel)

	if triplet_feel > 0.0 and step % 2 == 1:
		p = min(1.0, p + TRIPLET_PUSH * triplet_feel)

	return p * (1.0 - rest_bias)


def _add_roll (
	pattern: groovesmith.pattern.Pattern,
	rng: random.Random,
	row: int,
	row_spec: groovesmith.drum_styles.RowSpec,
	start_tick: int,
	velocity: int,
	bar_end_tick: int,
) -> None:

	"""
	Expand one hit into 2–4 quick decaying sub-hits.

	A subdivision of 2 spaces the hits a 32nd apart (12 ticks); anything
	faster uses triplet-ish 16-tick spacing. Sub-hits that would cross the
	bar line are dropped.
	"""

	sub = max(2, min(row_spec.max_roll_sub, rng.randint(2, row_spec.max_roll_sub)))
	div_ticks = groovesmith.constants.THIRTYSECOND_TICKS if sub == 2 else groovesmith.constants.SIXTEENTH_TRIPLET_TICKS
	hits = rng.randint(2, 4)

	for r in range(hits):

		tick = start_tick + r * div_ticks

		if tick >= bar_end_tick:
			continue

		pattern.add_note(
			row,
			tick,
			max(groovesmith.constants.MIN_LENGTH_TICKS, row_spec.length_ticks - 4 * r),
			groovesmith.grid.clamp(velocity - 3 * r, groovesmith.constants.velocity.ROLL_MIN_VELOCITY, groovesmith.constants.velocity.MAX_VELOCITY),
		)


def _lock_backbeat (
	pattern: groovesmith.pattern.Pattern,
	rng: random.Random,
	row: int,
	row_spec: groovesmith.drum_styles.RowSpec,
	bar_start_tick: int,
	steps_in_bar: int,
) -> None:

	"""Make sure ``row`` has a hit on steps 4 and 12 of the bar starting at ``bar_start_tick``."""

	for step in BACKBEAT_STEPS:

		if step >= steps_in_bar:
			continue

		tick = bar_start_tick + groovesmith.grid.step_to_tick(step)

		if not pattern.has_note_at(row, tick):
			pattern.add_note(row, tick, row_spec.length_ticks, rng.randint(row_spec.vel_min, row_spec.vel_max))


def generate (
	style: StyleArg = None,
	bars: int = 4,
	rest_pct: float = 0,
	dotted_pct: float = 0,
	triplet_pct: float = 0,
	swing_pct: typing.Optional[float] = None,
	seed: typing.Optional[int] = groovesmith.constants.AUTO_SEED,
	rng: typing.Optional[random.Random] = None,
	time_signature: typing.Union[str, groovesmith.grid.TimeSignature, None] = None,
) -> groovesmith.pattern.Pattern:

	"""
	Generate a drum pattern from a style's rule table.

	Parameters:
		style: A style name, :class:`~groovesmith.drum_styles.DrumStyle` or
			spec. Unknown names fall back to "hip hop".
		bars: Number of bars (clamped to 1–16).
		rest_pct: 0–100; scales every probability by ``1 − rest_pct/100``.
		dotted_pct: 0–100; strengthens dotted-position hits.
		triplet_pct: 0–100; strengthens odd-step hits.
		swing_pct: 0–100; delays off-16th hats and perc. ``None`` uses the
			style's own swing.
		seed: ``-1`` (or ``None``) derives a fresh seed.
		rng: Injected random source; overrides ``seed``.
		time_signature: Optional meter. The 16-step row tables repeat
			cyclically across a longer bar and are cut short in a shorter one.

	Returns:
		A new drum :class:`~groovesmith.pattern.Pattern`.
	"""

	spec = resolve_style(style)
	bars = groovesmith.grid.clamp_bars(bars)
	signature = groovesmith.grid.TimeSignature.parse(time_signature)
	steps_in_bar = signature.steps_per_bar
	bar_ticks = groovesmith.grid.span_ticks(1, steps_in_bar)

	rest_bias = groovesmith.grid.clamp_percent(rest_pct) / 100.0
	dotted_feel = _feel(spec.dotted_bias, groovesmith.grid.clamp_percent(dotted_pct))
	triplet_feel = _feel(spec.triplet_bias, groovesmith.grid.clamp_percent(triplet_pct))
	swing = spec.swing_pct if swing_pct is None else groovesmith.grid.clamp_percent(swing_pct)

	rng = groovesmith.randomness.make_rng(seed, rng)

	pattern = groovesmith.pattern.Pattern(groovesmith.pattern.PatternKind.DRUM, bars=bars, steps_per_bar=steps_in_bar)

	for bar in range(bars):

		bar_start = bar * bar_ticks

		for row in gm_drums.GENERATED_ROWS:

			row_spec = spec.row(row)

			for step in range(steps_in_bar):

				p = step_probability(row_spec.p[step % len(row_spec.p)], step, dotted_feel, triplet_feel, rest_bias)

				if p <= 0.0 or rng.random() > p:
					continue

				velocity = rng.randint(row_spec.vel_min, row_spec.vel_max)
				start = bar_start + groovesmith.grid.step_to_tick(step) + groovesmith.swing.drum_swing_ticks(row, step, swing)

				if row_spec.timing_jitter_ticks > 0:
					jitter = rng.randint(-row_spec.timing_jitter_ticks, row_spec.timing_jitter_ticks)
					start = groovesmith.grid.clamp(start + jitter, bar_start, bar_start + bar_ticks - 1)

				if row_spec.roll_prob > 0.0 and row_spec.max_roll_sub > 1 and rng.random() < row_spec.roll_prob:
					_add_roll(pattern, rng, row, row_spec, start, velocity, bar_start + bar_ticks)

				else:
					pattern.add_note(row, start, row_spec.length_ticks, velocity)

			if spec.lock_backbeat and row in gm_drums.BACKBEAT_ROWS:
				_lock_backbeat(pattern, rng, row, row_spec, bar_start, steps_in_bar)

	logger.info(f"Generated {spec.name} drums: {bars} bar(s) in {signature}, {len(pattern)} hits")

	return pattern
