"""Grid and tick model shared by every generator.

Musical positions (bar, step) map onto an absolute integer tick clock. A step
is a 16th note of ``TICKS_PER_STEP`` ticks; how many steps a bar holds depends
on the time signature:

- ``x/4`` → ``x × 4`` steps (4/4 = 16, 3/4 = 12)
- ``x/8`` → ``x × 2`` steps (6/8 = 12, 7/8 = 14)
- ``x/16`` → ``x`` steps

Additive signatures such as ``"3+2+2/8"`` are accepted: the numerator is the
sum of the parts and the parts themselves are the accent cells.
"""

import dataclasses
import logging
import typing

import groovesmith.constants


logger = logging.getLogger(__name__)


TIME_SIGNATURE_CHOICES: typing.Tuple[str, ...] = (
	"4/4", "3/4", "6/8", "7/8", "5/4", "9/8", "12/8", "2/4", "7/4", "9/4",
	"5/8", "10/8", "11/8", "13/8", "15/8", "17/8", "19/8", "21/8",
	"5/16", "7/16", "9/16", "11/16", "13/16", "15/16", "17/16", "19/16",
	"3+2/8", "2+3/8",
	"2+2+3/8", "3+2+2/8", "2+3+2/8",
	"3+3+2/8", "3+2+3/8", "2+3+3/8",
	"4+3/8", "3+4/8",
	"3+2+2+3/8",
)


@dataclasses.dataclass(frozen=True)
class TimeSignature:

	"""
	A parsed time signature.

	``cells`` holds the additive grouping when the signature was written as
	one (``"3+2+2/8"`` → ``(3, 2, 2)``), and is empty otherwise.
	"""

	numerator: int = 4
	denominator: int = 4
	cells: typing.Tuple[int, ...] = ()

	@staticmethod
	def parse (text: typing.Union[str, "TimeSignature", None]) -> "TimeSignature":

		"""
		Parse ``"num/den"`` or ``"a+b+c/den"``.

		Malformed text falls back to 4/4 rather than raising.
		"""

		if isinstance(text, TimeSignature):
			return text

		if not text:
			return TimeSignature()

		try:
			top, bottom = str(text).strip().split("/", 1)
			denominator = int(bottom)
			parts = tuple(int(p) for p in top.split("+") if p.strip())

		except ValueError:
			logger.debug(f"Unparseable time signature {text!r}, using 4/4")
			return TimeSignature()

		if not parts or denominator <= 0 or any(p <= 0 for p in parts):
			logger.debug(f"Invalid time signature {text!r}, using 4/4")
			return TimeSignature()

		cells = parts if len(parts) > 1 else ()
		return TimeSignature(numerator=sum(parts), denominator=denominator, cells=cells)

	@property
	def steps_per_bar (self) -> int:

		"""Number of 16th-note grid steps in one bar of this signature."""

		return steps_per_bar(self.numerator, self.denominator)

	@property
	def ticks_per_bar (self) -> int:

		"""Number of ticks in one bar of this signature."""

		return self.steps_per_bar * groovesmith.constants.TICKS_PER_STEP

	def __str__ (self) -> str:

		if self.cells:
			return "+".join(str(c) for c in self.cells) + f"/{self.denominator}"

		return f"{self.numerator}/{self.denominator}"


def steps_per_bar (numerator: int, denominator: int) -> int:

	"""Map a time signature onto a count of 16th-note steps per bar."""

	numerator = max(1, numerator)

	if denominator == 4:
		return numerator * 4

	if denominator == 8:
		return numerator * 2

	if denominator == 16:
		return numerator

	return numerator * 4


def clamp (value: int, low: int, high: int) -> int:

	"""Clamp an integer into ``[low, high]``."""

	return max(low, min(high, value))


def clamp_bars (bars: int) -> int:

	"""Clamp a bar count into the range every generator accepts."""

	return clamp(int(bars), groovesmith.constants.MIN_BARS, groovesmith.constants.MAX_BARS)


def clamp_percent (value: float) -> int:

	"""Clamp a percentage slider value into ``[0, 100]``."""

	return clamp(int(round(value)), 0, 100)


def step_to_tick (step: int) -> int:

	"""Convert an absolute step index to a tick."""

	return step * groovesmith.constants.TICKS_PER_STEP


def tick_to_step (tick: int) -> int:

	"""Convert a tick to the step that contains it."""

	return tick // groovesmith.constants.TICKS_PER_STEP


def position_to_tick (bar: int, step: int, steps_in_bar: int = groovesmith.constants.STEPS_PER_BAR) -> int:

	"""Convert a (bar, step-within-bar) position to an absolute tick."""

	return (bar * steps_in_bar + step) * groovesmith.constants.TICKS_PER_STEP


def span_ticks (bars: int, steps_in_bar: int = groovesmith.constants.STEPS_PER_BAR) -> int:

	"""Total number of ticks covered by ``bars`` bars."""

	return bars * steps_in_bar * groovesmith.constants.TICKS_PER_STEP


def total_steps (bars: int, steps_in_bar: int = groovesmith.constants.STEPS_PER_BAR) -> int:

	"""Total number of grid steps covered by ``bars`` bars."""

	return bars * steps_in_bar


def seconds_to_step (seconds: float, bpm: float) -> int:

	"""Quantize a time in seconds to the nearest 16th step at ``bpm``."""

	seconds_per_step = 60.0 / bpm / groovesmith.constants.STEPS_PER_BEAT
	return int(round(seconds / seconds_per_step))
