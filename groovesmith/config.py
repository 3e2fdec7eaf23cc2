"""Generation settings and their YAML loader.

A config file may be flat or keep its settings under a ``generation:``
section:

```yaml
generation:
  engine: drums
  drum_style: trap
  bars: 4
  swing_pct: 12
  seed: 42
```

Unknown keys are ignored and out-of-range values are clamped, so a config
file never stops a session from starting. A file whose top level is not a
mapping is a programmer error and raises :class:`ConfigError`.
"""

import dataclasses
import logging
import os
import typing

import yaml

import groovesmith.constants
import groovesmith.grid


logger = logging.getLogger(__name__)

ENGINE_NAMES: typing.Tuple[str, ...] = ("808", "bass", "drums")
DEFAULT_BPM = 120.0


class ConfigError (ValueError):

	"""Raised when a config file is structurally wrong (e.g. a list at the top level)."""


@dataclasses.dataclass
class GenerationConfig:

	"""
	Every control a generation request can set.

	``swing_pct`` of ``None`` means "use the drum style's own swing".
	"""

	engine: str = "drums"
	drum_style: str = "hip hop"
	bass_style: str = "trap"
	key: str = "C"
	scale: str = "Natural Minor"
	octave: int = 0
	bars: int = 4
	time_signature: str = "4/4"
	rest_pct: float = 0
	dotted_pct: float = 0
	triplet_pct: float = 0
	swing_pct: typing.Optional[float] = None
	humanize_timing: float = 0
	humanize_velocity: float = 0
	seed: int = groovesmith.constants.AUTO_SEED
	bpm: float = DEFAULT_BPM

	def __post_init__ (self) -> None:

		engine = str(self.engine).strip().lower()
		if engine not in ENGINE_NAMES:
			logger.debug(f"Unknown engine {self.engine!r}, using 'drums'")
			engine = "drums"
		self.engine = engine

		self.octave = groovesmith.grid.clamp(int(self.octave), -2, 2)
		self.bars = groovesmith.grid.clamp_bars(self.bars)
		self.time_signature = str(groovesmith.grid.TimeSignature.parse(self.time_signature))

		self.rest_pct = groovesmith.grid.clamp_percent(self.rest_pct)
		self.dotted_pct = groovesmith.grid.clamp_percent(self.dotted_pct)
		self.triplet_pct = groovesmith.grid.clamp_percent(self.triplet_pct)
		self.humanize_timing = groovesmith.grid.clamp_percent(self.humanize_timing)
		self.humanize_velocity = groovesmith.grid.clamp_percent(self.humanize_velocity)

		if self.swing_pct is not None:
			self.swing_pct = groovesmith.grid.clamp_percent(self.swing_pct)

		self.seed = int(self.seed) if self.seed is not None else groovesmith.constants.AUTO_SEED
		self.bpm = max(40.0, min(240.0, float(self.bpm)))

	@classmethod
	def from_mapping (cls, data: typing.Optional[typing.Mapping[str, typing.Any]]) -> "GenerationConfig":

		"""
		Build a config from a plain mapping.

		A nested ``generation`` mapping takes precedence over top-level keys.
		Keys that are not config fields are ignored.
		"""

		if not data:
			return cls()

		if not isinstance(data, typing.Mapping):
			raise ConfigError(f"Expected a mapping of settings, got {type(data).__name__}")

		merged = dict(data)
		section = merged.pop("generation", None)

		if isinstance(section, typing.Mapping):
			merged.update(section)
		elif section is not None:
			raise ConfigError(f"'generation' must be a mapping, got {type(section).__name__}")

		names = {f.name for f in dataclasses.fields(cls)}
		unknown = sorted(k for k in merged if k not in names)

		if unknown:
			logger.debug(f"Ignoring unknown config keys: {', '.join(unknown)}")

		return cls(**{k: v for k, v in merged.items() if k in names})

	def to_dict (self) -> typing.Dict[str, typing.Any]:

		return dataclasses.asdict(self)


def load_config (config_path: str = "groovesmith.yaml") -> GenerationConfig:

	"""
	Load generation settings from a YAML file.

	A missing file logs a warning and returns the defaults.
	"""

	if not os.path.exists(config_path):
		logger.warning(f"Config file {config_path} not found. Using defaults.")
		return GenerationConfig()

	with open(config_path, "r") as f:
		data = yaml.safe_load(f)

	return GenerationConfig.from_mapping(data)
