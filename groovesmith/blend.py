"""Weighted choice between two drum styles.

A blend makes one weighted coin flip between style A and style B and then
generates the winner with the ordinary drum generator. Weights are relative:
``(3, 1)`` picks A three times as often as B.
"""

import dataclasses
import logging
import random
import typing

import groovesmith.constants
import groovesmith.drum_generator
import groovesmith.drum_styles
import groovesmith.pattern
import groovesmith.randomness


logger = logging.getLogger(__name__)


@dataclasses.dataclass
class BlendResult:

	"""The generated pattern and the style that won the coin flip."""

	pattern: groovesmith.pattern.Pattern
	style: groovesmith.drum_styles.DrumStyleSpec


def normalize_weights (weight_a: float, weight_b: float) -> typing.Tuple[float, float]:

	"""
	Clamp negative weights to zero and scale the pair to sum to 1.

	Two zero weights become an even split.
	"""

	weight_a = max(0.0, float(weight_a))
	weight_b = max(0.0, float(weight_b))
	total = weight_a + weight_b

	if total <= 0.0:
		return 0.5, 0.5

	return weight_a / total, weight_b / total


def blend_choice (
	style_a: groovesmith.drum_generator.StyleArg,
	style_b: groovesmith.drum_generator.StyleArg,
	bars: int = 4,
	weight_a: float = 0.5,
	weight_b: float = 0.5,
	seed: typing.Optional[int] = groovesmith.constants.AUTO_SEED,
	rest_pct: float = 0,
	dotted_pct: float = 0,
	triplet_pct: float = 0,
	swing_pct: typing.Optional[float] = None,
	rng: typing.Optional[random.Random] = None,
) -> BlendResult:

	"""
	Pick style A or B by weight and generate it.

	The same random source drives the coin flip and the generation, so one
	seed reproduces both. ``swing_pct`` of ``None`` uses the winning style's
	own swing.
	"""

	rng = groovesmith.randomness.make_rng(seed, rng)
	share_a, _ = normalize_weights(weight_a, weight_b)

	spec_a = groovesmith.drum_generator.resolve_style(style_a)
	spec_b = groovesmith.drum_generator.resolve_style(style_b)
	chosen = spec_a if rng.random() < share_a else spec_b

	logger.info(f"Blend {spec_a.name}/{spec_b.name} ({share_a:.2f}/{1.0 - share_a:.2f}) chose {chosen.name}")

	pattern = groovesmith.drum_generator.generate(
		chosen,
		bars = bars,
		rest_pct = rest_pct,
		dotted_pct = dotted_pct,
		triplet_pct = triplet_pct,
		swing_pct = swing_pct,
		rng = rng,
	)

	return BlendResult(pattern=pattern, style=chosen)


def blend (
	style_a: groovesmith.drum_generator.StyleArg,
	style_b: groovesmith.drum_generator.StyleArg,
	bars: int = 4,
	weight_a: float = 0.5,
	weight_b: float = 0.5,
	seed: typing.Optional[int] = groovesmith.constants.AUTO_SEED,
	rest_pct: float = 0,
	dotted_pct: float = 0,
	triplet_pct: float = 0,
	swing_pct: typing.Optional[float] = None,
	rng: typing.Optional[random.Random] = None,
) -> groovesmith.pattern.Pattern:

	"""Blend two drum styles and return only the pattern (see :func:`blend_choice`)."""

	return blend_choice(
		style_a, style_b, bars, weight_a, weight_b, seed,
		rest_pct=rest_pct, dotted_pct=dotted_pct, triplet_pct=triplet_pct, swing_pct=swing_pct, rng=rng,
	).pattern
