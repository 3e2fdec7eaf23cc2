import dataclasses
import enum
import typing

import groovesmith.constants
import groovesmith.constants.gm_drums
import groovesmith.constants.velocity
import groovesmith.grid


class PatternKind (enum.Enum):

	"""
	Whether ``Note.pitch_or_row`` holds a drum lane or an absolute MIDI pitch.
	"""

	DRUM = "drum"
	MELODIC = "melodic"


@dataclasses.dataclass
class Note:

	"""
	Represents a single note event on the tick clock.
	"""

	pitch_or_row: int
	start_tick: int
	length_ticks: int = groovesmith.constants.TICKS_PER_STEP
	velocity: int = groovesmith.constants.velocity.DEFAULT_VELOCITY
	channel: int = 1


class Pattern:

	"""
	A collection of notes scoped to a fixed span of bars.

	The span is ``bars × steps_per_bar × TICKS_PER_STEP`` ticks. Notes are
	stored in insertion order, but order carries no meaning.
	"""

	def __init__ (
		self,
		kind: PatternKind = PatternKind.DRUM,
		bars: int = 4,
		steps_per_bar: int = groovesmith.constants.STEPS_PER_BAR,
		channel: int = 1,
	) -> None:

		"""
		Initialize an empty pattern of the given kind and span.
		"""

		self.kind = kind
		self.bars = groovesmith.grid.clamp_bars(bars)
		self.steps_per_bar = max(1, steps_per_bar)
		self.channel = channel

		self.notes: typing.List[Note] = []


	@property
	def span_ticks (self) -> int:

		"""Total length of the pattern in ticks."""

		return groovesmith.grid.span_ticks(self.bars, self.steps_per_bar)

	@property
	def total_steps (self) -> int:

		"""Total number of grid steps in the pattern."""

		return groovesmith.grid.total_steps(self.bars, self.steps_per_bar)

	@property
	def is_drum (self) -> bool:

		return self.kind is PatternKind.DRUM


	def add_note (self, pitch_or_row: int, start_tick: int, length_ticks: int, velocity: int) -> typing.Optional[Note]:

		"""
		Add a note, clamping it into the pattern's domain.

		Velocity is clamped to 1–127, length to at least ``MIN_LENGTH_TICKS``
		and the lane or pitch to its valid range. A note whose start falls
		outside ``[0, span_ticks)`` is dropped and ``None`` is returned.
		"""

		start_tick = int(start_tick)

		if start_tick < 0 or start_tick >= self.span_ticks:
			return None

		note = Note(
			pitch_or_row = self._clamp_pitch_or_row(int(pitch_or_row)),
			start_tick = start_tick,
			length_ticks = max(groovesmith.constants.MIN_LENGTH_TICKS, int(length_ticks)),
			velocity = groovesmith.grid.clamp(
				int(velocity),
				groovesmith.constants.velocity.MIN_VELOCITY,
				groovesmith.constants.velocity.MAX_VELOCITY
			),
			channel = self.channel
		)

		self.notes.append(note)
		return note


	def has_note_at (self, pitch_or_row: int, start_tick: int) -> bool:

		"""Return True when a note with this lane/pitch starts at ``start_tick``."""

		return any(n.pitch_or_row == pitch_or_row and n.start_tick == start_tick for n in self.notes)


	def notes_for_row (self, pitch_or_row: int) -> typing.List[Note]:

		"""Return the notes on one lane (or pitch), in start order."""

		return sorted(
			(n for n in self.notes if n.pitch_or_row == pitch_or_row),
			key = lambda n: n.start_tick
		)


	def sorted_notes (self) -> typing.List[Note]:

		"""Return the notes ordered by start tick, then lane or pitch."""

		return sorted(self.notes, key=lambda n: (n.start_tick, n.pitch_or_row, n.length_ticks, n.velocity))


	def copy (self) -> "Pattern":

		"""Return a deep copy of the pattern."""

		clone = Pattern(kind=self.kind, bars=self.bars, steps_per_bar=self.steps_per_bar, channel=self.channel)
		clone.notes = [dataclasses.replace(n) for n in self.notes]
		return clone


	def clear (self) -> None:

		"""Remove every note."""

		self.notes.clear()


	def valid_pitch_range (self) -> typing.Tuple[int, int]:

		"""Inclusive bounds of ``Note.pitch_or_row`` for this pattern kind."""

		if self.is_drum:
			return 0, groovesmith.constants.gm_drums.NUM_ROWS - 1

		return 0, 127


	def _clamp_pitch_or_row (self, value: int) -> int:

		low, high = self.valid_pitch_range()
		return groovesmith.grid.clamp(value, low, high)


	def __len__ (self) -> int:

		return len(self.notes)


	def __iter__ (self) -> typing.Iterator[Note]:

		return iter(self.notes)


	def __eq__ (self, other: object) -> bool:

		if not isinstance(other, Pattern):
			return NotImplemented

		return (
			self.kind == other.kind
			and self.bars == other.bars
			and self.steps_per_bar == other.steps_per_bar
			and self.notes == other.notes
		)


	def __repr__ (self) -> str:

		return f"Pattern(kind={self.kind.value}, bars={self.bars}, steps_per_bar={self.steps_per_bar}, notes={len(self.notes)})"
