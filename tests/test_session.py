import numpy
import pytest

import groovesmith.capture
import groovesmith.config
import groovesmith.constants.gm_drums as gm_drums
import groovesmith.melodic_generator
import groovesmith.session


def _session (**overrides) -> groovesmith.session.Session:

	settings = dict(seed=7, bars=2)
	settings.update(overrides)
	return groovesmith.session.Session(groovesmith.config.GenerationConfig(**settings))


def test_generate_dispatches_on_engine () -> None:

	session = _session(engine="drums")
	drums = session.generate()

	assert drums is session.drum_pattern
	assert drums.is_drum
	assert len(session.melodic_pattern) == 0

	session.set_engine("bass")
	bass = session.generate()

	assert bass is session.melodic_pattern
	assert not bass.is_drum
	assert session.active_pattern is bass


def test_melodic_actions_are_no_ops_under_drums () -> None:

	session = _session(engine="drums")

	session.generate_808()
	session.generate_bass()
	session.transpose("D", "Dorian", octave_delta=1)

	assert len(session.melodic_pattern) == 0


def test_808_matches_the_generator () -> None:

	session = _session(engine="808", bass_style="drill", key="G", scale="Phrygian")
	pattern = session.generate()

	expected = groovesmith.melodic_generator.generate_808(
		"drill", key="G", scale="Phrygian", bars=2, seed=7, time_signature="4/4",
	)

	assert pattern == expected


def test_flip_replaces_only_the_active_pattern () -> None:

	session = _session(engine="bass")
	session.generate_drums()
	session.generate()

	drums_before = session.drum_pattern
	melodic_before = session.melodic_pattern

	flipped = session.flip(density=100)

	assert session.drum_pattern is drums_before
	assert session.melodic_pattern is flipped
	assert flipped is not melodic_before


def test_blend_and_bump_target_drums () -> None:

	session = _session(engine="drums")

	blended = session.blend("edm", "trap", weight_b=0.0)
	assert blended.is_drum
	assert blended.bars == 2

	rows_before = [n.pitch_or_row for n in blended.notes]
	bumped = session.bump()
	assert [n.pitch_or_row for n in bumped.notes] != rows_before


def test_expand_uses_config_bars () -> None:

	session = _session(engine="drums", bars=4)
	session.drum_pattern.add_note(gm_drums.KICK, 0, 24, 110)

	expanded = session.expand()

	assert expanded.bars == 4
	assert len(expanded.notes_for_row(gm_drums.CLOSED_HAT)) == 64


def test_analyze_empty_capture_keeps_pattern () -> None:

	session = _session(engine="drums")
	session.generate()
	before = session.drum_pattern

	assert session.analyze_capture() is before


def test_capture_round_trip (low_click, sample_rate: int) -> None:

	"""Audio fed through the session's capture becomes a kick on step 4."""

	session = groovesmith.session.Session(
		groovesmith.config.GenerationConfig(bars=1, bpm=120),
		capture_seconds = 3,
		sample_rate = sample_rate,
	)

	audio = low_click(seconds=2.0, click_at=0.5, sample_rate=sample_rate)
	stereo = numpy.stack([audio, audio], axis=1)

	session.start_capture(groovesmith.capture.CaptureSource.MICROPHONE)
	for offset in range(0, stereo.shape[0], 1024):
		session.process_audio(stereo[offset:offset + 1024])
	session.stop_capture()

	pattern = session.analyze_capture()
	kicks = pattern.notes_for_row(gm_drums.KICK)

	assert len(kicks) == 1
	assert abs(kicks[0].start_tick - 96) <= 24


def test_export_writes_active_pattern (tmp_path) -> None:

	session = _session(engine="drums")
	session.generate()

	path = session.export(tmp_path / "out.mid")

	assert path.endswith("out.mid")
	assert (tmp_path / "out.mid").exists()


def test_unknown_engine_name_raises () -> None:

	session = _session()

	with pytest.raises(ValueError):
		session.set_engine("theremin")
