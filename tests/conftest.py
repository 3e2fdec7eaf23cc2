import typing

import numpy
import pytest

import groovesmith.pattern


SAMPLE_RATE = 44100


def make_click (
	seconds: float,
	click_at: float,
	frequency: float = 60.0,
	duration: float = 0.06,
	amplitude: float = 0.9,
	attack: float = 0.01,
	sample_rate: int = SAMPLE_RATE,
) -> numpy.ndarray:

	"""Silence with a single exponentially decaying sine burst starting at ``click_at``.

	The burst fades in along a raised cosine over ``attack`` seconds and has
	decayed to well under 1 % by the end of ``duration``, so it carries no
	broadband click at either edge.
	"""

	audio = numpy.zeros(int(seconds * sample_rate), dtype=numpy.float32)
	start = int(click_at * sample_rate)
	n = int(duration * sample_rate)
	t = numpy.arange(n) / sample_rate

	fade = 0.5 - 0.5 * numpy.cos(numpy.pi * numpy.minimum(1.0, t / attack))
	burst = amplitude * fade * numpy.sin(2.0 * numpy.pi * frequency * t) * numpy.exp(-t / (duration / 6.0))
	audio[start:start + n] = burst[:max(0, min(n, audio.shape[0] - start))]

	return audio


@pytest.fixture
def sample_rate () -> int:

	return SAMPLE_RATE


@pytest.fixture
def silence () -> numpy.ndarray:

	"""Two seconds of digital silence."""

	return numpy.zeros(2 * SAMPLE_RATE, dtype=numpy.float32)


@pytest.fixture
def low_click () -> typing.Callable[..., numpy.ndarray]:

	"""Factory for a buffer holding one strong low-frequency click."""

	return make_click


@pytest.fixture
def drum_pattern () -> groovesmith.pattern.Pattern:

	"""A one-bar drum pattern: kick on 1 and 3, snare on 2 and 4."""

	pattern = groovesmith.pattern.Pattern(groovesmith.pattern.PatternKind.DRUM, bars=1)

	for step, row, velocity in ((0, 0, 110), (8, 0, 100), (4, 1, 105), (12, 1, 115)):
		pattern.add_note(row, step * 24, 24, velocity)

	return pattern


@pytest.fixture
def melodic_pattern () -> groovesmith.pattern.Pattern:

	"""A one-bar melodic pattern containing out-of-scale pitches for C major."""

	pattern = groovesmith.pattern.Pattern(groovesmith.pattern.PatternKind.MELODIC, bars=1)

	for step, pitch in ((0, 36), (4, 37), (8, 42), (12, 46)):
		pattern.add_note(pitch, step * 24, 48, 100)

	return pattern
