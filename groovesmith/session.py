"""Stateful facade tying the generators, edits, capture and export together.

A :class:`Session` owns one drum pattern, one melodic pattern and a capture
buffer, and remembers which engine is active. Melodic operations are silent
no-ops while the drum engine is active, and drum-only operations leave the
melodic pattern alone.

```python
session = Session(GenerationConfig(engine="drums", drum_style="trap", seed=7))
session.generate()
session.flip(density=40)
session.export("trap.mid")
```
"""

import enum
import logging
import os
import typing

import numpy

import groovesmith.blend
import groovesmith.capture
import groovesmith.config
import groovesmith.drum_generator
import groovesmith.flip
import groovesmith.melodic_generator
import groovesmith.midi_export
import groovesmith.pattern
import groovesmith.transcription
import groovesmith.transforms


logger = logging.getLogger(__name__)


class Engine (enum.Enum):

	"""Which generator the session's primary actions target."""

	E808 = "808"
	BASS = "bass"
	DRUMS = "drums"


class Session:

	"""
	Holds the current patterns and routes requests to the right engine.
	"""

	def __init__ (
		self,
		config: typing.Optional[groovesmith.config.GenerationConfig] = None,
		capture_seconds: float = groovesmith.capture.DEFAULT_CAPTURE_SECONDS,
		sample_rate: int = groovesmith.capture.DEFAULT_SAMPLE_RATE,
	) -> None:

		self.config = config if config is not None else groovesmith.config.GenerationConfig()
		self.engine = Engine(self.config.engine)

		self.drum_pattern = groovesmith.pattern.Pattern(groovesmith.pattern.PatternKind.DRUM, bars=self.config.bars)
		self.melodic_pattern = groovesmith.pattern.Pattern(groovesmith.pattern.PatternKind.MELODIC, bars=self.config.bars)

		self.capture = groovesmith.capture.CaptureBuffer(sample_rate=sample_rate, seconds=capture_seconds)

	@property
	def is_drum_engine (self) -> bool:

		return self.engine is Engine.DRUMS

	@property
	def active_pattern (self) -> groovesmith.pattern.Pattern:

		"""The pattern the active engine works on."""

		return self.drum_pattern if self.is_drum_engine else self.melodic_pattern


	def set_engine (self, engine: typing.Union[Engine, str]) -> None:

		self.engine = engine if isinstance(engine, Engine) else Engine(str(engine).lower())
		logger.info(f"Engine set to {self.engine.value}")


	# ─── Generation ──────────────────────────────────────────────────

	def generate (self) -> groovesmith.pattern.Pattern:

		"""Run the active engine's generator and return the active pattern."""

		if self.engine is Engine.E808:
			self.generate_808()
		elif self.engine is Engine.BASS:
			self.generate_bass()
		else:
			self.generate_drums()

		return self.active_pattern


	def _melodic_kwargs (self) -> typing.Dict[str, typing.Any]:

		cfg = self.config

		return dict(
			style = cfg.bass_style,
			key = cfg.key,
			scale = cfg.scale,
			bars = cfg.bars,
			octave = cfg.octave,
			rest_pct = cfg.rest_pct,
			dotted_pct = cfg.dotted_pct,
			triplet_pct = cfg.triplet_pct,
			swing_pct = cfg.swing_pct or 0,
			seed = cfg.seed,
			time_signature = cfg.time_signature,
		)


	def _humanized (self, pattern: groovesmith.pattern.Pattern) -> groovesmith.pattern.Pattern:

		cfg = self.config

		if not cfg.humanize_timing and not cfg.humanize_velocity:
			return pattern

		return groovesmith.transforms.humanize(pattern, cfg.humanize_timing, cfg.humanize_velocity, seed=cfg.seed)


	def generate_808 (self) -> None:

		"""Replace the melodic pattern with a new 808 line. No-op under the drum engine."""

		if self.is_drum_engine:
			return

		self.melodic_pattern = self._humanized(groovesmith.melodic_generator.generate_808(**self._melodic_kwargs()))


	def generate_bass (self) -> None:

		"""Replace the melodic pattern with a new bass line. No-op under the drum engine."""

		if self.is_drum_engine:
			return

		self.melodic_pattern = self._humanized(groovesmith.melodic_generator.generate(**self._melodic_kwargs()))


	def generate_drums (self) -> None:

		"""Replace the drum pattern. Runs under every engine."""

		cfg = self.config

		pattern = groovesmith.drum_generator.generate(
			cfg.drum_style,
			bars = cfg.bars,
			rest_pct = cfg.rest_pct,
			dotted_pct = cfg.dotted_pct,
			triplet_pct = cfg.triplet_pct,
			swing_pct = cfg.swing_pct,
			seed = cfg.seed,
			time_signature = cfg.time_signature,
		)

		self.drum_pattern = self._humanized(pattern)


	# ─── Edits ───────────────────────────────────────────────────────

	def flip (self, density: float = 50, seed: typing.Optional[int] = None) -> groovesmith.pattern.Pattern:

		"""Vary the active engine's pattern in place and return it."""

		seed = self.config.seed if seed is None else seed
		pattern = self.active_pattern
		flipped = groovesmith.flip.flip(pattern, seed=seed, density=density, bars=pattern.bars)

		if self.is_drum_engine:
			self.drum_pattern = flipped
		else:
			self.melodic_pattern = flipped

		return flipped


	def blend (self, style_a: str, style_b: str, weight_b: float = 0.5) -> groovesmith.pattern.Pattern:

		"""Replace the drum pattern with a weighted blend of two styles (``weight_a = 1 − weight_b``)."""

		weight_b = max(0.0, min(1.0, float(weight_b)))
		cfg = self.config

		self.drum_pattern = groovesmith.blend.blend(
			style_a, style_b,
			bars = cfg.bars,
			weight_a = 1.0 - weight_b,
			weight_b = weight_b,
			seed = cfg.seed,
			rest_pct = cfg.rest_pct,
			dotted_pct = cfg.dotted_pct,
			triplet_pct = cfg.triplet_pct,
			swing_pct = cfg.swing_pct,
		)

		return self.drum_pattern


	def bump (self) -> groovesmith.pattern.Pattern:

		"""Rotate the drum lanes up by one."""

		self.drum_pattern = groovesmith.transforms.bump_rows(self.drum_pattern)
		return self.drum_pattern


	def transpose (
		self,
		key: typing.Union[str, int, None] = None,
		scale: typing.Optional[str] = None,
		octave_delta: int = 0,
	) -> groovesmith.pattern.Pattern:

		"""
		Snap the melodic pattern into a key and scale (defaults: the config's).

		No-op under the drum engine.
		"""

		if self.is_drum_engine:
			return self.melodic_pattern

		key = self.config.key if key is None else key
		scale = self.config.scale if scale is None else scale

		self.melodic_pattern = groovesmith.transforms.transpose_to_scale(self.melodic_pattern, key, scale, octave_delta)
		return self.melodic_pattern


	def expand (self, bars: typing.Optional[int] = None) -> groovesmith.pattern.Pattern:

		"""Grow the drum pattern into a full groove."""

		self.drum_pattern = groovesmith.transforms.expand_groove(self.drum_pattern, bars if bars is not None else self.config.bars)
		return self.drum_pattern


	# ─── Capture ─────────────────────────────────────────────────────

	def start_capture (self, source: groovesmith.capture.CaptureSource = groovesmith.capture.CaptureSource.LOOPBACK) -> None:

		self.capture.start(source)


	def stop_capture (self) -> None:

		self.capture.stop()


	def process_audio (self, block: numpy.ndarray) -> None:

		"""Forward one audio block from the host callback to the capture buffer."""

		self.capture.process_block(block)


	def analyze_capture (self, bars: typing.Optional[int] = None, bpm: typing.Optional[float] = None) -> groovesmith.pattern.Pattern:

		"""
		Transcribe the captured audio into the drum pattern.

		An empty capture leaves the drum pattern unchanged.
		"""

		if self.capture.length_samples == 0:
			return self.drum_pattern

		bars = self.config.bars if bars is None else bars
		bpm = self.config.bpm if bpm is None else bpm

		self.drum_pattern = groovesmith.transcription.transcribe(self.capture.snapshot(), bars=bars, bpm=bpm, sample_rate=self.capture.sample_rate)
		return self.drum_pattern


	# ─── Export ──────────────────────────────────────────────────────

	def export (self, path: typing.Union[str, os.PathLike], pattern: typing.Optional[groovesmith.pattern.Pattern] = None) -> str:

		"""Write the active (or given) pattern to a MIDI file."""

		return groovesmith.midi_export.save_midi(pattern if pattern is not None else self.active_pattern, path, bpm=self.config.bpm)
