"""Rhythm-focused style specs for the bass / 808 melodic generator.

Each :class:`BassStyleSpec` weighs six rhythmic subdivisions and describes
the groove feel (syncopation, swing, how much of each bar stays empty) and
how the style projects into odd meters.
"""

import dataclasses
import enum
import logging
import typing


logger = logging.getLogger(__name__)


SUBDIVISION_NAMES: typing.Tuple[str, ...] = ("quarter", "eighth", "off_eighth", "sixteenth", "eighth_triplet", "sixteenth_triplet")


@dataclasses.dataclass(frozen=True)
class BassStyleSpec:

	"""
	Rhythm rules for one bass style.

	Subdivision weights do not have to sum to 1; use
	:func:`normalized_subdivision_weights` to get a distribution.
	``swing_pct`` follows the "50 = straight" convention.
	``small_var_every_bars`` and ``big_var_every_bars`` set the phrasing
	cadence: how often the line returns to the root, and to the root in its
	home octave. ``prefers_cell_accents`` favours 3-3-2 cell accents over
	the beat grid in even meters.
	"""

	name: str

	div_quarter: float
	div_eighth: float
	div_off_eighth: float
	div_sixteenth: float
	div_eighth_triplet: float
	div_sixteenth_triplet: float

	syncopation_prob: float
	swing_pct: float
	rest_density_min: float
	rest_density_max: float

	small_var_every_bars: int
	big_var_every_bars: int
	max_hits_per_bar: int

	prefers_triplet_meters: bool = False
	prefers_cell_accents: bool = False
	enforce_tresillo: bool = False

	@property
	def subdivision_weights (self) -> typing.Tuple[float, ...]:

		"""Raw weights in ``SUBDIVISION_NAMES`` order."""

		return (
			self.div_quarter,
			self.div_eighth,
			self.div_off_eighth,
			self.div_sixteenth,
			self.div_eighth_triplet,
			self.div_sixteenth_triplet,
		)


class BassStyle (enum.Enum):

	EDM = "edm"
	TRAP = "trap"
	DRILL = "drill"
	RNB = "r&b"
	ROCK = "rock"
	REGGAETON = "reggaeton"
	HIP_HOP = "hip hop"
	WXSTIE = "wxstie"


_STYLES: typing.Tuple[BassStyleSpec, ...] = (
	# Off-beat and 8th focus, short notes.
	BassStyleSpec("edm", 0.05, 0.55, 0.25, 0.15, 0.00, 0.00, 0.35, 50.0, 0.30, 0.55, 2, 4, 8),
	# Mid density, occasional triplet gestures.
	BassStyleSpec("trap", 0.25, 0.35, 0.00, 0.25, 0.10, 0.05, 0.40, 50.0, 0.25, 0.55, 2, 4, 8),
	# Choppy and triplet-leaning: space, then bursts.
	BassStyleSpec("drill", 0.10, 0.20, 0.00, 0.30, 0.30, 0.10, 0.45, 50.0, 0.30, 0.60, 2, 4, 8, prefers_triplet_meters=True),
	BassStyleSpec("r&b", 0.20, 0.40, 0.00, 0.40, 0.00, 0.00, 0.35, 56.0, 0.25, 0.55, 2, 4, 8, prefers_triplet_meters=True),
	# Driving 8ths, fills at section edges.
	BassStyleSpec("rock", 0.15, 0.70, 0.00, 0.15, 0.00, 0.00, 0.15, 50.0, 0.10, 0.40, 4, 8, 10),
	# Dembow / tresillo 3-3-2.
	BassStyleSpec("reggaeton", 0.10, 0.55, 0.15, 0.20, 0.00, 0.00, 0.45, 50.0, 0.25, 0.55, 2, 4, 8, prefers_cell_accents=True, enforce_tresillo=True),
	BassStyleSpec("hip hop", 0.25, 0.55, 0.00, 0.20, 0.00, 0.00, 0.30, 52.0, 0.20, 0.50, 2, 4, 8),
	# Sparse mid-tempo bounce with bar-end pickups.
	BassStyleSpec("wxstie", 0.10, 0.55, 0.00, 0.25, 0.10, 0.00, 0.40, 50.0, 0.35, 0.50, 2, 4, 8),
)

BASS_STYLES: typing.Mapping[BassStyle, BassStyleSpec] = {BassStyle(spec.name): spec for spec in _STYLES}

DEFAULT_STYLE = BassStyle.TRAP

_ALIASES: typing.Dict[str, str] = {
	"rnb": "r&b",
	"r and b": "r&b",
	"hiphop": "hip hop",
	"hip-hop": "hip hop",
	"westcoast": "wxstie",
	"west coast": "wxstie",
}

_ACCENT_CELLS_EIGHTHS: typing.Dict[int, typing.Tuple[int, ...]] = {
	5: (3, 2),
	7: (3, 2, 2),
	9: (3, 3, 3),
	11: (3, 3, 3, 2),
	13: (3, 3, 3, 2, 2),
	15: (3, 3, 3, 3, 3),
}


def all_styles () -> typing.List[BassStyleSpec]:

	"""Return every bass style spec in selection-list order."""

	return list(_STYLES)


def style_choices () -> typing.List[str]:

	"""Return every bass style name in selection-list order."""

	return [spec.name for spec in _STYLES]


def default_style () -> BassStyleSpec:

	return BASS_STYLES[DEFAULT_STYLE]


def get_style (name: typing.Union[str, BassStyle, None]) -> BassStyleSpec:

	"""Look up a bass style by name (case-insensitive); unknown names return "trap"."""

	if isinstance(name, BassStyle):
		return BASS_STYLES[name]

	key = " ".join(str(name or "").split()).lower()
	key = _ALIASES.get(key, key)

	for style, spec in BASS_STYLES.items():
		if style.value == key:
			return spec

	logger.debug(f"Unknown bass style {name!r}, falling back to {DEFAULT_STYLE.value!r}")
	return default_style()


def normalized_subdivision_weights (spec: BassStyleSpec) -> typing.Tuple[float, ...]:

	"""
	Return the six subdivision weights scaled to sum to 1.

	A spec whose weights sum to zero or less gets a uniform distribution.
	"""

	weights = spec.subdivision_weights
	total = sum(weights)

	if total <= 0:
		return (1.0 / len(weights),) * len(weights)

	return tuple(w / total for w in weights)


def default_accent_cells_for_meter (numerator: int, denominator: int) -> typing.Tuple[int, ...]:

	"""
	Return an accent-cell plan for projecting a style into an odd meter.

	Only odd x/8 meters have a plan (7/8 → 3+2+2, 9/8 → 3+3+3, …). x/4,
	x/16 and even x/8 meters return an empty tuple, meaning uniform accenting.
	"""

	if denominator != 8:
		return ()

	return _ACCENT_CELLS_EIGHTHS.get(numerator, ())
