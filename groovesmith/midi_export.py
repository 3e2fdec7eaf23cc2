"""Standard MIDI File export with mido.

Patterns are written as a single-track (type 0) file at 96 ticks per quarter
note. That is exactly the internal tick clock, so no rescaling is needed.
Drum lanes are mapped to General MIDI percussion pitches on channel 10.
Melodic notes keep their pitch and channel.
"""

import logging
import os
import typing

import mido

import groovesmith.constants
import groovesmith.constants.gm_drums as gm_drums
import groovesmith.grid
import groovesmith.pattern


logger = logging.getLogger(__name__)


def _events (pattern: groovesmith.pattern.Pattern, scale: float) -> typing.List[typing.Tuple[int, int, mido.Message]]:

	"""Return ``(absolute_tick, order, message)`` for every note on and note off."""

	events = []

	for note in pattern.notes:

		if pattern.is_drum:
			pitch = gm_drums.row_to_pitch(note.pitch_or_row)
			channel = gm_drums.GM_DRUM_CHANNEL
		else:
			pitch = groovesmith.grid.clamp(note.pitch_or_row, 0, 127)
			channel = groovesmith.grid.clamp(note.channel - 1, 0, 15)

		start = int(round(note.start_tick * scale))
		end = int(round((note.start_tick + max(groovesmith.constants.MIN_LENGTH_TICKS, note.length_ticks)) * scale))

		# Note offs sort before note ons at the same tick so repeated hits retrigger.
		events.append((start, 1, mido.Message("note_on", channel=channel, note=pitch, velocity=note.velocity)))
		events.append((end, 0, mido.Message("note_off", channel=channel, note=pitch, velocity=0)))

	events.sort(key=lambda e: (e[0], e[1], e[2].note))

	return events


def pattern_to_midi (
	pattern: groovesmith.pattern.Pattern,
	ticks_per_beat: int = groovesmith.constants.EXPORT_TICKS_PER_BEAT,
	bpm: typing.Optional[float] = None,
) -> mido.MidiFile:

	"""
	Build a type 0 ``mido.MidiFile`` from a pattern.

	Parameters:
		pattern: The pattern to export.
		ticks_per_beat: File resolution. Internal ticks are rescaled when
			this differs from 96.
		bpm: Optional tempo; written as a ``set_tempo`` meta event.
	"""

	mid = mido.MidiFile(type=0, ticks_per_beat=ticks_per_beat)
	track = mido.MidiTrack()
	mid.tracks.append(track)

	if bpm is not None and bpm > 0:
		track.append(mido.MetaMessage("set_tempo", tempo=mido.bpm2tempo(bpm), time=0))

	scale = ticks_per_beat / float(groovesmith.constants.TICKS_PER_BEAT)
	last_tick = 0

	for tick, _, message in _events(pattern, scale):
		message.time = tick - last_tick
		track.append(message)
		last_tick = tick

	track.append(mido.MetaMessage("end_of_track", time=0))

	return mid


def save_midi (
	pattern: groovesmith.pattern.Pattern,
	path: typing.Union[str, os.PathLike],
	ticks_per_beat: int = groovesmith.constants.EXPORT_TICKS_PER_BEAT,
	bpm: typing.Optional[float] = None,
) -> str:

	"""
	Write a pattern to a ``.mid`` file and return the path written.

	Write failures are logged and re-raised.
	"""

	filename = os.fspath(path)

	logger.info(f"Saving MIDI pattern ({len(pattern)} notes) to {filename}...")

	mid = pattern_to_midi(pattern, ticks_per_beat=ticks_per_beat, bpm=bpm)

	try:
		mid.save(filename)

	except OSError as e:
		logger.error(f"Failed to save MIDI file {filename}: {e}")
		raise

	logger.info(f"Saved {filename}")

	return filename
