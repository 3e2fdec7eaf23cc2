import mido
import pytest

import groovesmith.constants.gm_drums as gm_drums
import groovesmith.midi_export
import groovesmith.pattern


def _absolute (track: mido.MidiTrack) -> list:

	"""Return ``(absolute_tick, message)`` for every message in a track."""

	tick = 0
	events = []

	for message in track:
		tick += message.time
		events.append((tick, message))

	return events


def test_drums_use_gm_pitches_on_channel_ten (drum_pattern: groovesmith.pattern.Pattern) -> None:

	mid = groovesmith.midi_export.pattern_to_midi(drum_pattern)

	assert mid.type == 0
	assert mid.ticks_per_beat == 96
	assert len(mid.tracks) == 1

	notes = [(t, m) for t, m in _absolute(mid.tracks[0]) if m.type == "note_on"]

	assert {m.channel for _, m in notes} == {9}
	assert [(t, m.note) for t, m in notes] == [
		(0, gm_drums.KICK_1), (96, gm_drums.SNARE_1), (192, gm_drums.KICK_1), (288, gm_drums.SNARE_1),
	]


def test_note_off_follows_length (melodic_pattern: groovesmith.pattern.Pattern) -> None:

	mid = groovesmith.midi_export.pattern_to_midi(melodic_pattern)
	events = _absolute(mid.tracks[0])

	offs = {(m.note, t) for t, m in events if m.type == "note_off"}

	assert offs == {(36, 48), (37, 144), (42, 240), (46, 336)}
	assert {m.channel for _, m in events if not m.is_meta} == {0}
	assert events[-1][1].type == "end_of_track"


def test_note_off_sorts_before_note_on_at_same_tick () -> None:

	pattern = groovesmith.pattern.Pattern(groovesmith.pattern.PatternKind.DRUM, bars=1)
	pattern.add_note(gm_drums.CLOSED_HAT, 24, 24, 90)
	pattern.add_note(gm_drums.CLOSED_HAT, 0, 24, 90)

	events = [(t, m.type) for t, m in _absolute(groovesmith.midi_export.pattern_to_midi(pattern).tracks[0]) if not m.is_meta]

	assert events == [(0, "note_on"), (24, "note_off"), (24, "note_on"), (48, "note_off")]


def test_tempo_and_resolution () -> None:

	pattern = groovesmith.pattern.Pattern(groovesmith.pattern.PatternKind.DRUM, bars=1)
	pattern.add_note(gm_drums.KICK, 96, 24, 100)

	mid = groovesmith.midi_export.pattern_to_midi(pattern, ticks_per_beat=480, bpm=90)
	events = _absolute(mid.tracks[0])

	assert events[0][1].type == "set_tempo"
	assert events[0][1].tempo == mido.bpm2tempo(90)
	assert [t for t, m in events if m.type == "note_on"] == [480]


def test_save_and_reload (tmp_path, drum_pattern: groovesmith.pattern.Pattern) -> None:

	path = tmp_path / "groove.mid"

	written = groovesmith.midi_export.save_midi(drum_pattern, path, bpm=120)

	assert written == str(path)

	reloaded = mido.MidiFile(written)
	assert sum(1 for m in reloaded.tracks[0] if m.type == "note_on") == 4


def test_save_failure_is_raised (tmp_path, drum_pattern: groovesmith.pattern.Pattern) -> None:

	with pytest.raises(OSError):
		groovesmith.midi_export.save_midi(drum_pattern, tmp_path / "missing" / "groove.mid")
