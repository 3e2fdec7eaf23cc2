import logging
import typing

import groovesmith.grid


logger = logging.getLogger(__name__)


KEY_NAMES: typing.Tuple[str, ...] = ("C", "C#", "D", "D#", "E", "F", "F#", "G", "G#", "A", "A#", "B")

_FLAT_ALIASES: typing.Dict[str, str] = {
	"DB": "C#",
	"EB": "D#",
	"GB": "F#",
	"AB": "G#",
	"BB": "A#",
}


SCALE_DEFINITIONS: typing.Dict[str, typing.Tuple[int, ...]] = {
	"Major": (0, 2, 4, 5, 7, 9, 11),
	"Natural Minor": (0, 2, 3, 5, 7, 8, 10),
	"Harmonic Minor": (0, 2, 3, 5, 7, 8, 11),
	"Dorian": (0, 2, 3, 5, 7, 9, 10),
	"Phrygian": (0, 1, 3, 5, 7, 8, 10),
	"Lydian": (0, 2, 4, 6, 7, 9, 11),
	"Mixolydian": (0, 2, 4, 5, 7, 9, 10),
	"Aeolian": (0, 2, 3, 5, 7, 8, 10),
	"Locrian": (0, 1, 3, 5, 6, 8, 10),
	"Locrian Nat6": (0, 1, 3, 5, 6, 9, 10),
	"Ionian #5": (0, 2, 4, 6, 7, 9, 11),
	"Dorian #4": (0, 2, 3, 6, 7, 9, 10),
	"Phrygian Dom": (0, 1, 3, 5, 7, 9, 10),
	"Lydian #2": (0, 3, 4, 6, 7, 9, 11),
	"Super Locrian": (0, 1, 3, 4, 6, 8, 10),
	"Dorian b2": (0, 1, 3, 5, 7, 9, 10),
	"Lydian Aug": (0, 2, 4, 6, 8, 9, 11),
	"Lydian Dom": (0, 2, 4, 6, 7, 9, 10),
	"Mixo b6": (0, 2, 4, 5, 7, 8, 10),
	"Locrian #2": (0, 2, 3, 5, 6, 8, 10),
	"8 Tone Spanish": (0, 1, 3, 4, 5, 6, 8, 10),
	"Phrygian Nat3": (0, 1, 4, 5, 7, 8, 10),
	"Blues": (0, 3, 5, 6, 7, 10),
	"Hungarian Min": (0, 3, 5, 8, 11),
	"Harmonic Maj(Ethiopian)": (0, 2, 4, 5, 7, 8, 11),
	"Dorian b5": (0, 2, 3, 5, 6, 9, 10),
	"Phrygian b4": (0, 1, 3, 4, 7, 8, 10),
	"Lydian b3": (0, 2, 3, 6, 7, 9, 11),
	"Mixolydian b2": (0, 1, 4, 5, 7, 9, 10),
	"Lydian Aug2": (0, 3, 4, 6, 8, 9, 11),
	"Locrian bb7": (0, 1, 3, 5, 6, 8, 9),
	"Pentatonic Maj": (0, 2, 5, 7, 8),
	"Pentatonic Min": (0, 3, 5, 7, 10),
	"Neopolitan Maj": (0, 1, 3, 5, 7, 9, 11),
	"Neopolitan Min": (0, 1, 3, 5, 7, 8, 10),
	"Spanish Gypsy": (0, 1, 4, 5, 7, 8, 10),
	"Romanian Minor": (0, 2, 3, 6, 7, 9, 10),
	"Chromatic": (0, 1, 2, 3, 4, 5, 6, 7, 8, 9, 10, 11),
	"Bebop Major": (0, 2, 4, 5, 7, 8, 9, 11),
	"Bebop Minor": (0, 2, 3, 5, 7, 8, 9, 10),
}

CHROMATIC = "Chromatic"


def _normalise (name: str) -> str:

	return " ".join(str(name).replace("_", " ").split()).lower()


_SCALE_LOOKUP: typing.Dict[str, str] = {_normalise(name): name for name in SCALE_DEFINITIONS}


def scale_names () -> typing.List[str]:

	"""Return every scale name in a stable, user-facing order."""

	return list(SCALE_DEFINITIONS)


def resolve_scale_name (name: typing.Optional[str]) -> str:

	"""
	Return the canonical spelling of a scale name.

	Matching ignores case, surrounding whitespace and underscores. Unknown
	names resolve to ``"Chromatic"``.
	"""

	if name:
		canonical = _SCALE_LOOKUP.get(_normalise(name))
		if canonical is not None:
			return canonical

	logger.debug(f"Unknown scale {name!r}, falling back to {CHROMATIC}")
	return CHROMATIC


def get_scale (name: typing.Optional[str]) -> typing.Tuple[int, ...]:

	"""
	Return the semitone offsets of a named scale.

	Unknown names fall back to the 12-tone chromatic set.
	"""

	return SCALE_DEFINITIONS[resolve_scale_name(name)]


def key_to_pc (key: typing.Union[str, int, None]) -> int:

	"""
	Convert a key name (``"C"``, ``"F#"``, ``"Bb"``) or index to a pitch class.

	Integers are wrapped into 0–11. Unknown names resolve to C (0).
	"""

	if isinstance(key, int):
		return key % 12

	if key is None:
		return 0

	text = str(key).strip().upper()
	text = _FLAT_ALIASES.get(text, text)

	if text in KEY_NAMES:
		return KEY_NAMES.index(text)

	logger.debug(f"Unknown key {key!r}, falling back to C")
	return 0


def scale_pitch_classes (key_pc: int, scale: typing.Sequence[int]) -> typing.List[int]:

	"""Return the sorted pitch classes (0–11) of a scale rooted at ``key_pc``."""

	return sorted({(key_pc + offset) % 12 for offset in scale})


def degree_to_pitch (degree: int, octave: int, key_pc: int, scale: typing.Sequence[int]) -> int:

	"""
	Convert a scale degree and octave to a MIDI pitch.

	The degree wraps into the scale's cardinality (negative degrees wrap
	backwards), so the result is always a member of the scale. The pitch is
	``octave × 12 + (key + offset) mod 12``, clamped to 0–127.

	Example:
		```python
		minor = get_scale("Natural Minor")
		degree_to_pitch(2, 3, key_to_pc("A"), minor)   # → 36 + (9 + 3) % 12 = 36 (C3)
		```
	"""

	if not scale:
		scale = SCALE_DEFINITIONS[CHROMATIC]

	offset = scale[degree % len(scale)]
	return groovesmith.grid.clamp(octave * 12 + (key_pc + offset) % 12, 0, 127)


def snap_to_scale (pitch: int, root_pc: int, scale: typing.Sequence[int]) -> int:

	"""
	Snap a MIDI pitch to the nearest note of ``scale`` rooted at ``root_pc``.

	A pitch already in the scale is returned unchanged. Otherwise the search
	moves outward one semitone at a time and, when two candidates are
	equidistant, the upward one wins.

	Example:
		```python
		# C# (61) snaps up to D (62) in C major: C and D are equidistant
		snap_to_scale(61, 0, get_scale("Major"))  # → 62
		```
	"""

	scale_pcs = set(scale_pitch_classes(root_pc, scale))

	if not scale_pcs:
		return pitch

	pc = pitch % 12

	if pc in scale_pcs:
		return pitch

	for offset in range(1, 7):
		if (pc + offset) % 12 in scale_pcs:
			return pitch + offset
		if (pc - offset) % 12 in scale_pcs:
			return pitch - offset

	return pitch
