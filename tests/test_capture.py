import numpy
import pytest

import groovesmith.capture


def _buffer (capacity: int) -> groovesmith.capture.CaptureBuffer:

	"""A tiny buffer: ``capacity`` samples at 10 Hz with 4-sample scratch."""

	return groovesmith.capture.CaptureBuffer(sample_rate=10, seconds=capacity / 10.0, max_block_size=4)


def _ramp (start: int, stop: int) -> numpy.ndarray:

	return numpy.arange(start, stop, dtype=numpy.float32)


def test_capacity_follows_seconds_and_rate () -> None:

	buffer = groovesmith.capture.CaptureBuffer(sample_rate=48000, seconds=2.5)

	assert buffer.capacity == 120000
	assert buffer.length_samples == 0
	assert not buffer.is_capturing


def test_blocks_are_ignored_while_idle () -> None:

	buffer = _buffer(8)
	buffer.process_block(_ramp(1, 5))

	assert buffer.length_samples == 0
	assert buffer.snapshot().shape == (0,)


def test_snapshot_is_chronological_before_wrap () -> None:

	buffer = _buffer(8)
	buffer.start(groovesmith.capture.CaptureSource.MICROPHONE)
	buffer.process_block(_ramp(1, 6))

	assert buffer.source == groovesmith.capture.CaptureSource.MICROPHONE
	numpy.testing.assert_array_equal(buffer.snapshot(), _ramp(1, 6))


def test_ring_overwrites_oldest () -> None:

	"""Writing 11 samples into 8 slots keeps the newest 8 in order."""

	buffer = _buffer(8)
	buffer.start()
	buffer.process_block(_ramp(1, 6))
	buffer.process_block(_ramp(6, 12))

	assert buffer.length_samples == 8
	numpy.testing.assert_array_equal(buffer.snapshot(), _ramp(4, 12))


def test_block_larger_than_capacity () -> None:

	buffer = _buffer(8)
	buffer.start()
	buffer.process_block(_ramp(0, 30))

	numpy.testing.assert_array_equal(buffer.snapshot(), _ramp(22, 30))


def test_stereo_is_averaged () -> None:

	buffer = _buffer(8)
	buffer.start()
	buffer.process_block(numpy.array([[1.0, 3.0], [0.0, -2.0], [0.5, 0.5]], dtype=numpy.float32))

	numpy.testing.assert_allclose(buffer.snapshot(), [2.0, -1.0, 0.5])


def test_start_clears_previous_capture () -> None:

	buffer = _buffer(8)
	buffer.start()
	buffer.process_block(_ramp(1, 4))
	buffer.start()

	assert buffer.length_samples == 0
	assert buffer.is_capturing


def test_stop_freezes_length_and_playhead () -> None:

	buffer = _buffer(20)
	buffer.start()
	buffer.process_block(_ramp(0, 15))

	assert buffer.position_seconds == pytest.approx(1.5)

	buffer.stop()
	buffer.process_block(_ramp(0, 4))

	assert not buffer.is_capturing
	assert buffer.length_seconds == pytest.approx(1.5)
	assert buffer.position_seconds == pytest.approx(1.5)

	# A second stop does nothing.
	buffer.stop()
	assert buffer.length_samples == 15


def test_seek_is_clamped () -> None:

	buffer = _buffer(20)
	buffer.start()
	buffer.process_block(_ramp(0, 10))
	buffer.stop()

	buffer.seek(0.4)
	assert buffer.position_seconds == pytest.approx(0.4)

	buffer.seek(99.0)
	assert buffer.position_seconds == pytest.approx(1.0)

	buffer.seek(-3.0)
	assert buffer.position_seconds == 0.0


def test_prepare_resizes_and_clears () -> None:

	buffer = _buffer(8)
	buffer.start()
	buffer.process_block(_ramp(0, 4))

	buffer.prepare(20)

	assert buffer.capacity == 16
	assert buffer.length_samples == 0
	assert not buffer.is_capturing
