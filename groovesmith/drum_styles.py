"""Declarative per-genre drum rules.

Each style is a frozen :class:`DrumStyleSpec`: one :class:`RowSpec` per
generated lane (kick, snare, closed hat, open hat, clap, perc) plus the
global feel controls. Row probabilities are independent per-step Bernoulli
weights in ``[0, 1]``; they do not need to sum to anything.

The supported styles form a closed enumeration (:class:`DrumStyle`) that is
mapped to its spec once at import. Lookups by name are case-insensitive and
never fail - an unrecognised name resolves to the default ("hip hop").

```python
spec = get_spec("Trap")
spec.rows[gm_drums.SNARE].p[4]   # → 1.0
get_spec("polka").name            # → "hip hop"
```
"""

import dataclasses
import enum
import logging
import typing

import groovesmith.constants
import groovesmith.constants.gm_drums as gm_drums


logger = logging.getLogger(__name__)

_STEPS = groovesmith.constants.STEPS_PER_BAR


@dataclasses.dataclass(frozen=True)
class RowSpec:

	"""
	Generation rules for one drum lane.

	Parameters:
		p: Per-step hit probability (0–1), one entry per 16th step.
		vel_min: Lowest velocity a hit may receive.
		vel_max: Highest velocity a hit may receive.
		roll_prob: Chance that a hit expands into a quick roll (0–1).
		max_roll_sub: Fastest roll subdivision of a 16th (1 = no rolls,
			2 = 32nds, 3 = triplet-ish).
		timing_jitter_ticks: Each hit is nudged by up to this many ticks
			either way, staying inside its bar.
		length_ticks: Default note length.
	"""

	p: typing.Tuple[float, ...] = (0.0,) * _STEPS
	vel_min: int = 90
	vel_max: int = 120
	roll_prob: float = 0.0
	max_roll_sub: int = 1
	timing_jitter_ticks: int = 0
	length_ticks: int = groovesmith.constants.TICKS_PER_STEP


@dataclasses.dataclass(frozen=True)
class DrumStyleSpec:

	"""
	A complete drum style: global feel plus one :class:`RowSpec` per generated lane.

	``rows`` is indexed by lane (``gm_drums.KICK`` … ``gm_drums.PERC``).
	"""

	name: str
	rows: typing.Tuple[RowSpec, ...]
	swing_pct: float = 0.0
	triplet_bias: float = 0.0
	dotted_bias: float = 0.0
	bpm_range: typing.Tuple[int, int] = (70, 160)
	lock_backbeat: bool = True

	def row (self, lane: int) -> RowSpec:

		"""Return the rules for a lane, or an empty row for lanes the style does not describe."""

		if 0 <= lane < len(self.rows):
			return self.rows[lane]

		return RowSpec()


# ─── Row builders ────────────────────────────────────────────────────


def _pulses (every: int, on: float, vel_min: int = 92, vel_max: int = 120) -> RowSpec:

	"""A hit chance on every ``every``-th step."""

	return RowSpec(
		p = tuple(on if i % every == 0 else 0.0 for i in range(_STEPS)),
		vel_min = vel_min,
		vel_max = vel_max,
	)


def _backbeat (on: float = 1.0, vel_min: int = 100, vel_max: int = 127) -> RowSpec:

	"""Strong hits on beats 2 and 4 (steps 4 and 12)."""

	p = [0.0] * _STEPS
	p[4] = on
	p[12] = on
	return RowSpec(p=tuple(p), vel_min=vel_min, vel_max=vel_max)


def _alternating (even: float, odd: float, **kwargs: typing.Any) -> RowSpec:

	"""One probability on even (8th) steps and another on odd (off-16th) steps."""

	return RowSpec(p=tuple(even if i % 2 == 0 else odd for i in range(_STEPS)), **kwargs)


def _at (steps: typing.Dict[int, float], **kwargs: typing.Any) -> RowSpec:

	"""Explicit probabilities at a handful of steps, zero elsewhere."""

	p = [0.0] * _STEPS
	for step, prob in steps.items():
		p[step] = prob
	return RowSpec(p=tuple(p), **kwargs)


def _sprinkle (row: RowSpec, steps: typing.Sequence[int], prob: float, vel_min: int, vel_max: int) -> RowSpec:

	"""Raise the chance at ``steps`` to at least ``prob`` and widen the velocity window."""

	p = list(row.p)
	for step in steps:
		step = max(0, min(_STEPS - 1, step))
		p[step] = max(p[step], prob)

	return dataclasses.replace(
		row,
		p = tuple(p),
		vel_min = min(row.vel_min, vel_min),
		vel_max = max(row.vel_max, vel_max),
	)


def _velocities (row: RowSpec, vel_min: int, vel_max: int) -> RowSpec:

	return dataclasses.replace(row, vel_min=vel_min, vel_max=vel_max)


def _rows (**lanes: RowSpec) -> typing.Tuple[RowSpec, ...]:

	"""Assemble the per-lane tuple; lanes not given are silent."""

	order = ("kick", "snare", "closed_hat", "open_hat", "clap", "perc")
	return tuple(lanes.get(name, RowSpec()) for name in order)


# ─── Style definitions ───────────────────────────────────────────────


def _make_trap () -> DrumStyleSpec:

	# Fast hats with rolls, backbeat snare/clap, syncopated kicks, off-beat open hats.
	snare = _backbeat()

	return DrumStyleSpec(
		name = "trap",
		swing_pct = 10, triplet_bias = 0.25, dotted_bias = 0.1, bpm_range = (120, 160),
		rows = _rows(
			kick = _sprinkle(_pulses(4, 0.55, 95, 120), (1, 3, 6, 7, 9, 11, 14, 15), 0.35, 92, 118),
			snare = snare,
			clap = _backbeat(0.6, 96, 115),
			closed_hat = _alternating(0.85, 0.35, roll_prob=0.45, max_roll_sub=2, vel_min=75, vel_max=105),
			open_hat = RowSpec(p=tuple(0.45 if i % 4 == 2 else 0.05 for i in range(_STEPS)), length_ticks=36),
			perc = _sprinkle(RowSpec(), (2, 10), 0.15, 70, 100),
		),
	)


def _make_drill () -> DrumStyleSpec:

	# Triplet feel, choppy kicks, the late snare on beat 4 dominates.
	snare = _at({12: 1.0, 4: 0.2}, vel_min=100, vel_max=127)

	return DrumStyleSpec(
		name = "drill",
		swing_pct = 5, triplet_bias = 0.55, dotted_bias = 0.1, bpm_range = (130, 145),
		rows = _rows(
			kick = _sprinkle(_pulses(4, 0.6), (3, 5, 7, 8, 11, 13, 15), 0.4, 95, 120),
			snare = snare,
			clap = _velocities(snare, 90, 115),
			closed_hat = _alternating(0.6, 0.25, roll_prob=0.6, max_roll_sub=3, vel_min=70, vel_max=100),
			open_hat = dataclasses.replace(_sprinkle(RowSpec(), (11, 13), 0.4, 80, 105), length_ticks=28),
		),
	)


def _make_edm () -> DrumStyleSpec:

	# Four on the floor, claps on 2 and 4, off-beat hats.
	return DrumStyleSpec(
		name = "edm",
		swing_pct = 0, triplet_bias = 0.0, dotted_bias = 0.05, bpm_range = (120, 128),
		rows = _rows(
			kick = _pulses(4, 1.0, 105, 120),
			snare = _backbeat(0.9, 100, 118),
			clap = _backbeat(0.9, 96, 115),
			closed_hat = _alternating(0.05, 0.9, vel_min=85, vel_max=105),
			open_hat = _at({2: 0.25, 10: 0.25}, length_ticks=32),
		),
	)


def _make_reggaeton () -> DrumStyleSpec:

	# Dembow backbone with the 3+3+2 kick and the offbeat "chick".
	snare = _at({4: 0.85, 10: 0.95})

	return DrumStyleSpec(
		name = "reggaeton",
		swing_pct = 0, triplet_bias = 0.15, dotted_bias = 0.1, bpm_range = (85, 105),
		rows = _rows(
			kick = _at({0: 0.95, 6: 0.65, 8: 0.55}, vel_min=96, vel_max=118),
			snare = snare,
			clap = _velocities(snare, 90, 112),
			closed_hat = _alternating(0.55, 0.2),
			open_hat = _at({15: 0.35}),
		),
	)


def _make_rnb () -> DrumStyleSpec:

	# Laid-back swing, deep syncopated kicks, ghosty hats.
	snare = _backbeat(0.95, 98, 118)

	return DrumStyleSpec(
		name = "r&b",
		swing_pct = 18, triplet_bias = 0.2, dotted_bias = 0.15, bpm_range = (70, 95),
		rows = _rows(
			kick = _sprinkle(RowSpec(), (0, 3, 8, 11, 14), 0.5, 92, 115),
			snare = snare,
			clap = _velocities(snare, 85, 108),
			closed_hat = _alternating(0.7, 0.25, vel_min=70, vel_max=96, roll_prob=0.2, max_roll_sub=2),
			open_hat = _at({2: 0.2, 10: 0.2}, length_ticks=28),
		),
	)


def _make_pop () -> DrumStyleSpec:

	snare = _backbeat(0.95, 98, 118)

	return DrumStyleSpec(
		name = "pop",
		swing_pct = 5, triplet_bias = 0.05, dotted_bias = 0.05, bpm_range = (90, 120),
		rows = _rows(
			kick = _pulses(4, 0.85, 98, 118),
			snare = snare,
			clap = _velocities(snare, 90, 112),
			closed_hat = _alternating(0.8, 0.2),
			open_hat = _at({2: 0.25, 10: 0.25}, length_ticks=30),
		),
	)


def _make_rock () -> DrumStyleSpec:

	# Straight 8th hats, hard 2 and 4, open hat on the "and" of 2 and 4.
	return DrumStyleSpec(
		name = "rock",
		swing_pct = 0, triplet_bias = 0.0, dotted_bias = 0.0, bpm_range = (90, 140),
		rows = _rows(
			kick = _pulses(4, 0.75, 98, 118),
			snare = _backbeat(1.0, 100, 124),
			closed_hat = _alternating(0.95, 0.0),
			open_hat = _at({7: 0.35, 15: 0.35}),
		),
	)


def _make_wxstie () -> DrumStyleSpec:

	# West Coast bounce: swingy pocket, sparse hats, layered snare and clap.
	snare = _backbeat(0.95, 100, 124)

	return DrumStyleSpec(
		name = "wxstie",
		swing_pct = 20, triplet_bias = 0.15, dotted_bias = 0.1, bpm_range = (85, 105),
		rows = _rows(
			kick = _sprinkle(RowSpec(), (0, 3, 7, 8, 11, 15), 0.55, 95, 118),
			snare = snare,
			clap = _velocities(snare, 92, 114),
			closed_hat = _alternating(0.55, 0.15, roll_prob=0.25, max_roll_sub=2),
			open_hat = _at({2: 0.25, 10: 0.25}, length_ticks=28),
			perc = _sprinkle(RowSpec(), (6, 14), 0.2, 75, 100),
		),
	)


def _make_hip_hop () -> DrumStyleSpec:

	# General boom-bap: simple hats, steady backbeat, few rolls.
	return DrumStyleSpec(
		name = "hip hop",
		swing_pct = 8, triplet_bias = 0.05, dotted_bias = 0.05, bpm_range = (85, 100),
		rows = _rows(
			kick = _pulses(4, 0.7, 96, 115),
			snare = _backbeat(0.95, 98, 118),
			closed_hat = _alternating(0.75, 0.05),
			open_hat = _at({10: 0.2}, length_ticks=28),
		),
	)


# ─── Closed enumeration ──────────────────────────────────────────────


class DrumStyle (enum.Enum):

	"""Every drum style the generator knows about."""

	TRAP = "trap"
	DRILL = "drill"
	EDM = "edm"
	REGGAETON = "reggaeton"
	RNB = "r&b"
	POP = "pop"
	ROCK = "rock"
	WXSTIE = "wxstie"
	HIP_HOP = "hip hop"

	@classmethod
	def from_name (cls, name: typing.Optional[str]) -> "DrumStyle":

		"""Resolve a user-facing name (any case, common aliases) to a style; unknown → HIP_HOP."""

		key = " ".join(str(name or "").split()).lower()
		key = _ALIASES.get(key, key)

		for style in cls:
			if style.value == key:
				return style

		logger.debug(f"Unknown drum style {name!r}, falling back to {DEFAULT_STYLE.value!r}")
		return DEFAULT_STYLE


_ALIASES: typing.Dict[str, str] = {
	"rnb": "r&b",
	"r and b": "r&b",
	"hiphop": "hip hop",
	"hip-hop": "hip hop",
	"westcoast": "wxstie",
	"west coast": "wxstie",
	"house": "edm",
}

DEFAULT_STYLE = DrumStyle.HIP_HOP

DRUM_STYLES: typing.Mapping[DrumStyle, DrumStyleSpec] = {
	DrumStyle.TRAP: _make_trap(),
	DrumStyle.DRILL: _make_drill(),
	DrumStyle.EDM: _make_edm(),
	DrumStyle.REGGAETON: _make_reggaeton(),
	DrumStyle.RNB: _make_rnb(),
	DrumStyle.POP: _make_pop(),
	DrumStyle.ROCK: _make_rock(),
	DrumStyle.WXSTIE: _make_wxstie(),
	DrumStyle.HIP_HOP: _make_hip_hop(),
}


def style_names () -> typing.List[str]:

	"""Return every drum style name, in selection-list order."""

	return [style.value for style in DrumStyle]


def get_spec (name: typing.Union[str, DrumStyle, None]) -> DrumStyleSpec:

	"""Look up a style by name; unknown names return :func:`default_spec`."""

	if isinstance(name, DrumStyle):
		return DRUM_STYLES[name]

	return DRUM_STYLES[DrumStyle.from_name(name)]


def default_spec () -> DrumStyleSpec:

	"""Return the fallback style ("hip hop")."""

	return DRUM_STYLES[DEFAULT_STYLE]
