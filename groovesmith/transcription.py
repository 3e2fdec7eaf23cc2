"""Onset transcription: mono audio → quantized drum pattern.

The signal is split into three bands with Butterworth filters:

- low (20–200 Hz) becomes kicks
- mid (200–2000 Hz) becomes snares
- high (5 kHz and up) becomes closed hats

Each band gets a short-time energy envelope: the mean absolute value of the
pre-emphasised signal over a 1024-sample window, hopped every 512 samples,
normalised to its own peak and scaled by the band weight. A band whose own
level never reaches about -50 dBFS holds only filter leakage and is silenced.
Each envelope is peak-picked on its own, with a band threshold and a
minimum gap between peaks. Every peak frame is converted to seconds,
snapped to the nearest 16th at the supplied tempo and wrapped into the
pattern.

Tempo is never estimated; the caller supplies it.
"""

import dataclasses
import logging
import typing

import numpy
import scipy.signal

import groovesmith.constants
import groovesmith.constants.gm_drums as gm_drums
import groovesmith.constants.velocity
import groovesmith.grid
import groovesmith.pattern


logger = logging.getLogger(__name__)

HOP_SIZE = 512
WINDOW_SIZE = 1024
PRE_EMPHASIS = 0.97
ENVELOPE_FLOOR = 1e-6
LEVEL_FLOOR = 0.003
FILTER_ORDER = 8

MIN_BPM = 40
MAX_BPM = 240

HIT_LENGTH_TICKS = groovesmith.constants.THIRTYSECOND_TICKS


@dataclasses.dataclass(frozen=True)
class Band:

	"""One analysis band and the drum lane its onsets become."""

	name: str
	low_hz: float
	high_hz: typing.Optional[float]
	weight: float
	threshold: float
	min_gap_seconds: float
	row: int
	velocity: int


BANDS: typing.Tuple[Band, ...] = (
	Band("low", 20.0, 200.0, 1.0, 0.35, 0.040, gm_drums.KICK, groovesmith.constants.velocity.TRANSCRIBED_KICK_VELOCITY),
	Band("mid", 200.0, 2000.0, 0.7, 0.30, 0.050, gm_drums.SNARE, groovesmith.constants.velocity.TRANSCRIBED_SNARE_VELOCITY),
	Band("high", 5000.0, None, 0.5, 0.28, 0.030, gm_drums.CLOSED_HAT, groovesmith.constants.velocity.TRANSCRIBED_HAT_VELOCITY),
)


def band_filter (mono: numpy.ndarray, band: Band, sample_rate: int) -> numpy.ndarray:

	"""
	Return ``mono`` restricted to one band.

	An upper edge near the Nyquist limit turns the band into a high-pass; a
	band that starts there (very low sample rates) yields silence.
	"""

	nyquist = sample_rate / 2.0
	low = band.low_hz
	high = band.high_hz

	if low >= nyquist * 0.95:
		return numpy.zeros_like(mono)

	if high is None or high >= nyquist * 0.95:
		sos = scipy.signal.butter(FILTER_ORDER, low, btype="highpass", fs=sample_rate, output="sos")
	else:
		sos = scipy.signal.butter(FILTER_ORDER, [low, high], btype="bandpass", fs=sample_rate, output="sos")

	return scipy.signal.sosfilt(sos, mono)


def energy_envelope (signal: numpy.ndarray, emphasis: float = PRE_EMPHASIS) -> numpy.ndarray:

	"""
	Return the raw short-time energy envelope of ``signal``.

	Frame ``i`` covers samples ``[i × 512, i × 512 + 1024)``; frames that
	would run past the end are dropped. Within a frame the pre-emphasis
	filter starts from zero; ``emphasis=0`` gives the plain mean level.
	"""

	if signal.shape[0] < WINDOW_SIZE:
		return numpy.zeros(0, dtype=numpy.float64)

	frames = numpy.lib.stride_tricks.sliding_window_view(signal, WINDOW_SIZE)[::HOP_SIZE]

	emphasised = numpy.array(frames, dtype=numpy.float64)
	emphasised[:, 1:] -= emphasis * frames[:, :-1]

	return numpy.mean(numpy.abs(emphasised), axis=1)


def band_envelopes (samples: numpy.ndarray, sample_rate: int) -> typing.List[numpy.ndarray]:

	"""
	Return one weighted envelope per entry of :data:`BANDS`.

	Each envelope is normalised to its own peak and then scaled by the band
	weight. Bands never look at each other: a band whose plain
	(un-emphasised) level stays below ``LEVEL_FLOOR`` comes back as zeros.
	"""

	envelopes = []

	for band in BANDS:

		signal = band_filter(samples, band, sample_rate)
		level = energy_envelope(signal, emphasis=0.0)
		level_peak = float(level.max()) if level.shape[0] else 0.0

		envelope = energy_envelope(signal)
		peak = float(envelope.max()) if envelope.shape[0] else 0.0

		if level_peak < LEVEL_FLOOR or peak < ENVELOPE_FLOOR:
			envelopes.append(numpy.zeros_like(envelope))
			continue

		envelopes.append(band.weight * envelope / peak)

	return envelopes


def pick_peaks (envelope: numpy.ndarray, threshold: float, min_gap_frames: int) -> typing.List[int]:

	"""
	Return frames that are local maxima above ``threshold``.

	A peak must rise above its left neighbour and be no lower than its right
	one. Peaks closer than ``min_gap_frames`` to the previous accepted peak
	are ignored.
	"""

	peaks: typing.List[int] = []
	last = -min_gap_frames

	for i in range(1, envelope.shape[0] - 1):

		e = envelope[i]

		if e > threshold and e > envelope[i - 1] and e >= envelope[i + 1] and i - last >= min_gap_frames:
			peaks.append(i)
			last = i

	return peaks


def frame_to_tick (frame: int, sample_rate: int, bpm: float, total_steps: int) -> int:

	"""Convert an analysis frame to the tick of the nearest 16th, wrapped into the pattern."""

	seconds = frame * HOP_SIZE / float(sample_rate)
	step = groovesmith.grid.seconds_to_step(seconds, bpm) % total_steps
	return groovesmith.grid.step_to_tick(step)


def transcribe (
	mono: typing.Optional[numpy.ndarray],
	bars: int = 4,
	bpm: float = 120,
	sample_rate: int = 44100,
) -> groovesmith.pattern.Pattern:

	"""
	Transcribe a mono buffer into a drum pattern.

	Parameters:
		mono: 1-D float samples. ``None``, empty and silent input all give an
			empty pattern.
		bars: Pattern length (clamped to 1–16); onsets past the end wrap.
		bpm: Tempo used for quantizing, clamped to 40–240.
		sample_rate: Sample rate of ``mono``.
	"""

	pattern = groovesmith.pattern.Pattern(groovesmith.pattern.PatternKind.DRUM, bars=bars)

	if mono is None:
		return pattern

	samples = numpy.asarray(mono, dtype=numpy.float64).reshape(-1)

	if samples.shape[0] == 0 or not numpy.any(samples):
		return pattern

	sample_rate = int(sample_rate) if sample_rate and sample_rate > 0 else 44100
	bpm = max(MIN_BPM, min(MAX_BPM, float(bpm)))
	total_steps = pattern.total_steps

	for band, envelope in zip(BANDS, band_envelopes(samples, sample_rate)):

		min_gap = int(round(band.min_gap_seconds * sample_rate / HOP_SIZE))

		for frame in pick_peaks(envelope, band.threshold, min_gap):
			pattern.add_note(band.row, frame_to_tick(frame, sample_rate, bpm, total_steps), HIT_LENGTH_TICKS, band.velocity)

	logger.info(f"Transcribed {samples.shape[0] / sample_rate:.2f}s at {bpm:g} BPM into {len(pattern)} hits")

	return pattern
