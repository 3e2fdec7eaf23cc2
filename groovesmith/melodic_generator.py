"""Bass and 808 line generation.

Two generators share the same arguments:

- :func:`generate` scans the grid step by step. Each step is kept or left
  empty according to the style's rest density, and a kept step becomes either
  a sustained note followed by a melodic move or a burst of short notes at a
  fast subdivision.
- :func:`generate_808` works at phrase level. It picks one rhythmic grid
  family for the whole call (quarters, 8ths, 8th triplets or, rarely, 16ths)
  and one pitch strategy (stay on the root, or walk a chord progression), so
  consecutive calls differ in character and not only in detail.

Pitches always come from ``intervals.degree_to_pitch``, so every note is in
the requested key and scale.
"""

import dataclasses
import logging
import random
import typing

import groovesmith.bass_styles
import groovesmith.constants
import groovesmith.grid
import groovesmith.intervals
import groovesmith.pattern
import groovesmith.randomness
import groovesmith.swing


logger = logging.getLogger(__name__)

BASE_OCTAVE = 3
LOW_BASE_OCTAVE = 2
MIN_OCTAVE_OFFSET = -2
MAX_OCTAVE_OFFSET = 2
LOWEST_OCTAVE = 1
HIGHEST_OCTAVE = 6

# Styles that sit an octave lower and lean on short repeated notes.
_LOW_STYLES = frozenset({"trap", "drill", "wxstie"})

# Styles that favour rapid-fire bursts.
_BURSTY_STYLES = frozenset({"trap", "drill"})

BURST_SUBDIVISIONS: typing.Tuple[int, ...] = (24, 12, 8, 6, 4)
TRIPLET_BURST_TICKS = 8

# (upper bound of a 0–99 roll, degree move); the final entry is a neighbour move.
_DEGREE_MOVES: typing.Dict[str, typing.Tuple[typing.Tuple[int, int], ...]] = {
	"trap": ((40, 0), (65, 4), (80, -3), (90, 7)),
	"drill": ((35, 0), (60, 4), (75, -2), (90, 7)),
	"wxstie": ((45, 0), (70, 4)),
	"generic": ((50, 0), (75, 4)),
}

_NEIGHBOUR_STEP: typing.Dict[str, int] = {"trap": 1, "drill": 2, "wxstie": 1, "generic": 1}

StyleArg = typing.Union[str, groovesmith.bass_styles.BassStyle, groovesmith.bass_styles.BassStyleSpec, None]


@dataclasses.dataclass
class _Context:

	"""Resolved, clamped inputs shared by both generators."""

	spec: groovesmith.bass_styles.BassStyleSpec
	key_pc: int
	scale: typing.Tuple[int, ...]
	bars: int
	register: int
	rest_pct: int
	dotted_pct: int
	triplet_pct: int
	swing_pct: float
	signature: groovesmith.grid.TimeSignature
	rng: random.Random

	@property
	def steps_in_bar (self) -> int:
		return self.signature.steps_per_bar

	@property
	def allow_triplets (self) -> bool:
		return self.triplet_pct > 0 or self.spec.prefers_triplet_meters

	def pitch (self, degree: int, octave: int) -> int:
		return groovesmith.intervals.degree_to_pitch(degree, octave, self.key_pc, self.scale)

	def new_pattern (self) -> groovesmith.pattern.Pattern:
		return groovesmith.pattern.Pattern(groovesmith.pattern.PatternKind.MELODIC, bars=self.bars, steps_per_bar=self.steps_in_bar)

	def bar_keep_probability (self) -> float:

		"""Draw this bar's rest density from the style range and fold in ``rest_pct``."""

		rest = self.rng.uniform(self.spec.rest_density_min, self.spec.rest_density_max)
		rest = rest + (self.rest_pct / 100.0) * (1.0 - rest)
		return max(0.0, min(1.0, 1.0 - rest))


def _resolve_style (style: StyleArg) -> groovesmith.bass_styles.BassStyleSpec:

	if isinstance(style, groovesmith.bass_styles.BassStyleSpec):
		return style

	return groovesmith.bass_styles.get_style(style)


def _build_context (
	style: StyleArg,
	key: typing.Union[str, int, None],
	scale: typing.Optional[str],
	bars: int,
	octave: int,
	rest_pct: float,
	dotted_pct: float,
	triplet_pct: float,
	swing_pct: float,
	seed: typing.Optional[int],
	time_signature: typing.Union[str, groovesmith.grid.TimeSignature, None],
	rng: typing.Optional[random.Random],
) -> _Context:

	spec = _resolve_style(style)
	base = LOW_BASE_OCTAVE if spec.name in _LOW_STYLES else BASE_OCTAVE
	offset = groovesmith.grid.clamp(int(octave), MIN_OCTAVE_OFFSET, MAX_OCTAVE_OFFSET)

	# The style's own swing ("50 = straight") is a floor under the user's amount.
	swing = max(groovesmith.grid.clamp_percent(swing_pct), groovesmith.swing.style_swing_to_pct(spec.swing_pct))

	return _Context(
		spec = spec,
		key_pc = groovesmith.intervals.key_to_pc(key),
		scale = groovesmith.intervals.get_scale(scale),
		bars = groovesmith.grid.clamp_bars(bars),
		register = groovesmith.grid.clamp(base + offset, LOWEST_OCTAVE, HIGHEST_OCTAVE),
		rest_pct = groovesmith.grid.clamp_percent(rest_pct),
		dotted_pct = groovesmith.grid.clamp_percent(dotted_pct),
		triplet_pct = groovesmith.grid.clamp_percent(triplet_pct),
		swing_pct = swing,
		signature = groovesmith.grid.TimeSignature.parse(time_signature),
		rng = groovesmith.randomness.make_rng(seed, rng),
	)


def accent_steps (spec: groovesmith.bass_styles.BassStyleSpec, signature: groovesmith.grid.TimeSignature) -> typing.FrozenSet[int]:

	"""
	Return the in-bar steps that should be favoured for a style in a meter.

	Additive signatures and odd x/8 meters accent the start of each cell.
	Styles that enforce a tresillo or prefer cell accents place the 3-3-2
	blueprint across an even bar.
	Otherwise every beat is an accent.
	"""

	steps_in_bar = signature.steps_per_bar
	cells = signature.cells or groovesmith.bass_styles.default_accent_cells_for_meter(signature.numerator, signature.denominator)

	if cells:
		unit = max(1, steps_in_bar // max(1, sum(cells)))
		accents = []
		position = 0
		for cell in cells:
			accents.append(position * unit)
			position += cell
		return frozenset(a for a in accents if a < steps_in_bar)

	if spec.enforce_tresillo or spec.prefers_cell_accents:
		# 3+3+2 eighths scaled to the bar.
		return frozenset(s for s in (0, steps_in_bar * 3 // 8, steps_in_bar * 6 // 8) if s < steps_in_bar)

	beat = 4 if signature.denominator != 8 else 6
	return frozenset(range(0, steps_in_bar, beat))


def _position_weight (spec: groovesmith.bass_styles.BassStyleSpec, step: int, accents: typing.FrozenSet[int]) -> float:

	"""Scale a step's retention by how strongly the style uses its subdivision."""

	if step in accents:
		return 1.0

	w = groovesmith.bass_styles.normalized_subdivision_weights(spec)
	quarter, eighth, off_eighth, sixteenth, eighth_triplet, sixteenth_triplet = w

	if step % 4 == 0:
		weight = 0.5 + quarter + eighth
	elif step % 2 == 0:
		weight = 0.35 + eighth + off_eighth + 0.5 * spec.syncopation_prob
	else:
		weight = 0.2 + sixteenth + eighth_triplet + sixteenth_triplet + 0.5 * spec.syncopation_prob

	return min(1.0, weight)


def _degree_move (ctx: _Context) -> int:

	"""Pick the next degree move: mostly root and fifth, sometimes darker or neighbouring."""

	table = ctx.spec.name if ctx.spec.name in _DEGREE_MOVES else "generic"
	roll = ctx.rng.randrange(100)

	for bound, move in _DEGREE_MOVES[table]:
		if roll < bound:
			return move

	if table == "wxstie" and roll >= 85:
		return 7

	step = _NEIGHBOUR_STEP[table]
	return step if ctx.rng.random() < 0.5 else -step


def _octave_hop (ctx: _Context, octave: int) -> int:

	"""Move one octave up or down, staying within one octave of the register."""

	hop = 1 if ctx.rng.random() < 0.5 else -1
	low = max(LOWEST_OCTAVE, ctx.register - 1)
	high = min(HIGHEST_OCTAVE, ctx.register + 1)
	return groovesmith.grid.clamp(octave + hop, low, high)


def phrase_reset (spec: groovesmith.bass_styles.BassStyleSpec, bar: int, degree: int, octave: int, register: int) -> typing.Tuple[int, int]:

	"""
	Apply the style's phrasing cadence at the start of ``bar``.

	Every ``small_var_every_bars`` bars the degree cursor returns to the
	root; every ``big_var_every_bars`` bars the octave returns to the
	register as well. A cadence of zero or less never fires.
	"""

	if bar <= 0:
		return degree, octave

	if spec.big_var_every_bars > 0 and bar % spec.big_var_every_bars == 0:
		return 0, register

	if spec.small_var_every_bars > 0 and bar % spec.small_var_every_bars == 0:
		return 0, octave

	return degree, octave


def _burst_subdivision (ctx: _Context) -> int:

	sub = ctx.rng.choice(BURST_SUBDIVISIONS)

	if sub == TRIPLET_BURST_TICKS and ctx.triplet_pct <= 0:
		sub = groovesmith.constants.THIRTYSECOND_TICKS

	return sub


def generate (
	style: StyleArg = None,
	key: typing.Union[str, int, None] = "C",
	scale: typing.Optional[str] = "Natural Minor",
	bars: int = 4,
	octave: int = 0,
	rest_pct: float = 0,
	dotted_pct: float = 0,
	triplet_pct: float = 0,
	swing_pct: float = 0,
	seed: typing.Optional[int] = groovesmith.constants.AUTO_SEED,
	time_signature: typing.Union[str, groovesmith.grid.TimeSignature, None] = "4/4",
	rng: typing.Optional[random.Random] = None,
) -> groovesmith.pattern.Pattern:

	"""
	Generate a bass line by scanning the grid step by step.

	Parameters:
		style: Bass style name (unknown → "trap").
		key: Key name (``"C"``, ``"F#"``, ``"Bb"``) or pitch class 0–11.
		scale: Scale name (unknown → chromatic).
		bars: 1–16.
		octave: Register offset -2…+2 around the style's base octave.
		rest_pct: 0–100; more rests on top of the style's own rest density.
		dotted_pct: 0–100; chance that a sustained note is dotted (× 1.5).
		triplet_pct: 0–100; when zero, bursts never use the triplet-ish
			8-tick subdivision.
		swing_pct: 0–100; delays the off-beat 8th of each beat.
		seed: ``-1`` derives a fresh seed.
		time_signature: Meter; decides steps per bar and accent cells.
		rng: Injected random source; overrides ``seed``.

	Returns:
		A new melodic :class:`~groovesmith.pattern.Pattern`.
	"""

	ctx = _build_context(style, key, scale, bars, octave, rest_pct, dotted_pct, triplet_pct, swing_pct, seed, time_signature, rng)
	spec = ctx.spec
	pattern = ctx.new_pattern()

	steps_in_bar = ctx.steps_in_bar
	total = pattern.total_steps
	span = pattern.span_ticks
	tps = groovesmith.constants.TICKS_PER_STEP
	accents = accent_steps(spec, ctx.signature)

	sustain_default = 2 if ctx.signature.denominator == 8 else 1
	if spec.name in _LOW_STYLES:
		sustain_default = 1

	burst_prob = 0.55 if spec.name in _BURSTY_STYLES else 0.25

	degree = 0
	octave_now = ctx.register
	keep = ctx.bar_keep_probability()
	hits_in_bar = 0
	bar = 0

	step = 0
	while step < total:

		if step // steps_in_bar != bar:
			bar = step // steps_in_bar
			keep = ctx.bar_keep_probability()
			hits_in_bar = 0
			degree, octave_now = phrase_reset(spec, bar, degree, octave_now, ctx.register)

		in_bar = step % steps_in_bar

		if hits_in_bar >= spec.max_hits_per_bar or ctx.rng.random() >= keep * _position_weight(spec, in_bar, accents):
			step += 1
			continue

		hits_in_bar += 1
		start = step * tps + groovesmith.swing.melodic_swing_ticks(in_bar, ctx.swing_pct)

		if ctx.rng.random() < burst_prob:

			sub = _burst_subdivision(ctx)
			dur_steps = 1 + ctx.rng.randint(0, 2)
			end = min(step * tps + dur_steps * tps, span)
			local_degree = degree
			t = start

			while t < end:
				length = max(3, min(sub, end - t))
				pattern.add_note(ctx.pitch(local_degree, octave_now), t, length, 90 + ctx.rng.randint(0, 24))

				if ctx.rng.random() < 0.35:
					local_degree += 1 if ctx.rng.random() < 0.5 else -1

				t += length

			step += dur_steps

			if ctx.rng.random() < 0.20:
				octave_now = _octave_hop(ctx, octave_now)

		else:

			length_ticks = (sustain_default + ctx.rng.randint(0, 1)) * tps

			if groovesmith.randomness.chance(ctx.rng, ctx.dotted_pct):
				length_ticks += length_ticks // 2

			length_steps = -(-length_ticks // tps)

			velocity = 96 + ctx.rng.randint(0, 19)
			if in_bar in accents:
				velocity += 6

			pattern.add_note(ctx.pitch(degree, octave_now), start, length_ticks, velocity)

			step += length_steps
			degree += _degree_move(ctx)

			if ctx.rng.random() < 0.10:
				octave_now = _octave_hop(ctx, octave_now)

	logger.info(f"Generated {spec.name} bass: {ctx.bars} bar(s) in {ctx.signature}, {len(pattern)} notes")

	return pattern


# ─── Grid-family 808 generator ───────────────────────────────────────


GRID_FAMILIES: typing.Dict[str, int] = {
	"quarter": groovesmith.constants.QUARTER_TICKS,
	"eighth": groovesmith.constants.EIGHTH_TICKS,
	"eighth_triplet": groovesmith.constants.EIGHTH_TRIPLET_TICKS,
	"sixteenth": groovesmith.constants.SIXTEENTH_TICKS,
}

_FAMILY_WEIGHTS: typing.Dict[str, float] = {
	"quarter": 0.3,
	"eighth": 0.4,
	"eighth_triplet": 0.2,
	"sixteenth": 0.1,
}

# I, IV, V and vi as scale degrees.
_PROGRESSION_DEGREES: typing.Tuple[int, ...] = (0, 3, 4, 5)


def choose_grid_family (rng: random.Random, allow_triplets: bool) -> str:

	"""Pick the rhythmic grid for a whole 808 line; 16ths are rare."""

	families = [f for f in _FAMILY_WEIGHTS if allow_triplets or f != "eighth_triplet"]
	weights = [_FAMILY_WEIGHTS[f] for f in families]
	return rng.choices(families, weights=weights, k=1)[0]


def _chord_walk (ctx: _Context, ticks_per_bar: int) -> typing.Tuple[int, typing.List[int]]:

	"""Return (segment length in ticks, target degree per segment) for a chord-walking line."""

	segment = ticks_per_bar if ctx.rng.random() < 0.5 else max(groovesmith.constants.TICKS_PER_STEP, ticks_per_bar // 2)
	count = (ctx.bars * ticks_per_bar + segment - 1) // segment

	targets = [0]
	while len(targets) < count:
		targets.append(ctx.rng.choice([d for d in _PROGRESSION_DEGREES if d != targets[-1]]))

	return segment, targets


def generate_808 (
	style: StyleArg = None,
	key: typing.Union[str, int, None] = "C",
	scale: typing.Optional[str] = "Natural Minor",
	bars: int = 4,
	octave: int = 0,
	rest_pct: float = 0,
	dotted_pct: float = 0,
	triplet_pct: float = 0,
	swing_pct: float = 0,
	seed: typing.Optional[int] = groovesmith.constants.AUTO_SEED,
	time_signature: typing.Union[str, groovesmith.grid.TimeSignature, None] = "4/4",
	rng: typing.Optional[random.Random] = None,
) -> groovesmith.pattern.Pattern:

	"""
	Generate an 808 line from one grid family and one pitch strategy.

	The grid family fixes the rhythmic slot size for the whole call. The
	strategy is either *root-centric* (mostly the root, with fifths and
	octave jumps) or *chord-walking* (the target degree moves through I, IV,
	V and vi every bar or half bar). Each bar's first slot is always played.

	Takes the same arguments as :func:`generate`.
	"""

	ctx = _build_context(style, key, scale, bars, octave, rest_pct, dotted_pct, triplet_pct, swing_pct, seed, time_signature, rng)
	pattern = ctx.new_pattern()

	family = choose_grid_family(ctx.rng, ctx.allow_triplets)
	strategy = "chord_walk" if ctx.rng.random() < 0.5 else "root"
	unit = GRID_FAMILIES[family]
	bar_ticks = ctx.signature.ticks_per_bar
	span = pattern.span_ticks

	segment, targets = _chord_walk(ctx, bar_ticks)
	jump_octave = min(HIGHEST_OCTAVE, ctx.register + 1)

	logger.debug(f"808 line uses {family} grid with {strategy} strategy")

	for bar in range(ctx.bars):

		bar_start = bar * bar_ticks
		keep = ctx.bar_keep_probability()
		slots = list(range(bar_start, bar_start + bar_ticks, unit))

		for index, tick in enumerate(slots):

			downbeat = index == 0

			if not downbeat and ctx.rng.random() >= keep:
				continue

			octave_now = ctx.register

			if strategy == "chord_walk":
				degree = targets[min(len(targets) - 1, tick // segment)]
				if not downbeat and ctx.rng.random() < 0.2:
					degree += 1 if ctx.rng.random() < 0.5 else -1
			else:
				roll = ctx.rng.random()
				degree = 0
				if not downbeat and roll < 0.25:
					degree = 4
				elif not downbeat and roll < 0.35:
					octave_now = jump_octave

			length = unit * (2 if ctx.rng.random() < 0.3 else 1)
			if groovesmith.randomness.chance(ctx.rng, ctx.dotted_pct):
				length += length // 2

			start = tick
			if unit != groovesmith.constants.EIGHTH_TRIPLET_TICKS:
				start += groovesmith.swing.melodic_swing_ticks(groovesmith.grid.tick_to_step(tick - bar_start), ctx.swing_pct)

			length = min(length, span - start)
			velocity = ctx.rng.randint(105, 120) if downbeat else ctx.rng.randint(88, 110)

			pattern.add_note(ctx.pitch(degree, octave_now), start, length, velocity)

	logger.info(f"Generated {ctx.spec.name} 808: {ctx.bars} bar(s), {family} grid, {strategy}, {len(pattern)} notes")

	return pattern
