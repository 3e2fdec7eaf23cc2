"""Fixed-capacity mono ring buffer for recording incoming audio.

The buffer has two sides:

- The **producer** is the audio callback. It calls :meth:`CaptureBuffer.process_block`
  with each incoming block. The call never allocates after :meth:`prepare`,
  never blocks, takes no locks and never logs. Every shared field is updated
  with a single attribute assignment.
- The **consumer** is the control side. It starts and stops captures and
  reads :meth:`CaptureBuffer.snapshot` once the capture has been stopped. It
  can also poll ``length_seconds`` while recording, for a meter, and accept
  slightly stale values.

Once the ring is full, the oldest audio is overwritten and the valid length
stays at the capacity.
"""

import enum
import logging
import math
import typing

import numpy


logger = logging.getLogger(__name__)

DEFAULT_SAMPLE_RATE = 44100
DEFAULT_CAPTURE_SECONDS = 65.0
DEFAULT_MAX_BLOCK_SIZE = 4096


class CaptureSource (enum.Enum):

	"""Where captured audio comes from."""

	LOOPBACK = "loopback"
	MICROPHONE = "microphone"


class CaptureBuffer:

	"""
	Mono float32 ring of ``seconds × sample_rate`` samples.

	Example:
		```python
		buffer = CaptureBuffer(sample_rate=48000)
		buffer.start(CaptureSource.MICROPHONE)

		# audio thread
		buffer.process_block(block)

		buffer.stop()
		audio = buffer.snapshot()
		```
	"""

	def __init__ (
		self,
		sample_rate: int = DEFAULT_SAMPLE_RATE,
		seconds: float = DEFAULT_CAPTURE_SECONDS,
		max_block_size: int = DEFAULT_MAX_BLOCK_SIZE,
	) -> None:

		self.seconds = max(0.0, float(seconds))
		self.sample_rate = DEFAULT_SAMPLE_RATE
		self.source = CaptureSource.LOOPBACK

		self._ring = numpy.zeros(0, dtype=numpy.float32)
		self._scratch = numpy.zeros(0, dtype=numpy.float32)
		self._cursor = 0
		self._length = 0
		self._playhead = 0
		self._capturing = False

		self.prepare(sample_rate, max_block_size)


	def prepare (self, sample_rate: int, max_block_size: int = DEFAULT_MAX_BLOCK_SIZE) -> None:

		"""
		Allocate or resize storage for a sample rate and block size.

		Called at session start and whenever the host changes sample rate.
		Any capture in progress is stopped and the buffer is cleared.
		"""

		self._capturing = False
		self.sample_rate = int(sample_rate) if sample_rate and sample_rate > 0 else DEFAULT_SAMPLE_RATE

		capacity = int(math.ceil(self.seconds * self.sample_rate))

		if self._ring.shape[0] != capacity:
			self._ring = numpy.zeros(capacity, dtype=numpy.float32)

		block = max(1, int(max_block_size))

		if self._scratch.shape[0] < block:
			self._scratch = numpy.zeros(block, dtype=numpy.float32)

		self._clear()


	def _clear (self) -> None:

		self._ring.fill(0.0)
		self._cursor = 0
		self._length = 0
		self._playhead = 0


	@property
	def capacity (self) -> int:

		"""Number of samples the ring holds."""

		return int(self._ring.shape[0])

	@property
	def is_capturing (self) -> bool:

		return self._capturing

	@property
	def length_samples (self) -> int:

		"""Valid captured samples (never more than the capacity)."""

		return self._length

	@property
	def length_seconds (self) -> float:

		return self._length / float(self.sample_rate)

	@property
	def position_seconds (self) -> float:

		"""
		Current playhead within the captured audio.

		While recording the playhead follows the end of the capture; after
		:meth:`stop` it stays where :meth:`seek` put it.
		"""

		if self._capturing:
			return self.length_seconds

		return self._playhead / float(self.sample_rate)


	def start (self, source: CaptureSource = CaptureSource.LOOPBACK) -> None:

		"""
		Begin a new capture.

		Any previous capture is stopped first. The buffer is cleared and the
		cursor and valid length are reset.
		"""

		self.stop()

		self.source = source
		self._clear()
		self._capturing = True

		logger.info(f"Capture started ({source.value}, {self.capacity / self.sample_rate:.0f}s at {self.sample_rate} Hz)")


	def stop (self) -> None:

		"""Stop capturing and freeze the valid length. Does nothing when idle."""

		if not self._capturing:
			return

		self._capturing = False
		self._playhead = self._length

		logger.info(f"Capture stopped: {self.length_seconds:.2f}s of audio")


	def seek (self, seconds: float) -> None:

		"""Move the playhead, clamped to ``[0, length_seconds]``."""

		sample = int(round(max(0.0, float(seconds)) * self.sample_rate))
		self._playhead = min(sample, self._length)


	def process_block (self, block: typing.Optional[numpy.ndarray]) -> None:

		"""
		Append one block of audio while capturing.

		``block`` is either 1-D (mono) or 2-D ``(frames, channels)``.
		Multi-channel input is averaged to mono. Blocks longer than the
		scratch buffer are written in scratch-sized pieces.
		"""

		if not self._capturing or block is None or self._ring.shape[0] == 0:
			return

		frames = block.shape[0] if block.ndim > 0 else 0
		offset = 0

		while offset < frames:

			n = min(frames - offset, self._scratch.shape[0])
			mono = self._scratch[:n]

			if block.ndim == 1:
				mono[:] = block[offset:offset + n]
			elif block.shape[1] == 0:
				mono.fill(0.0)
			else:
				numpy.mean(block[offset:offset + n], axis=1, out=mono)

			self._write(mono)
			offset += n


	def _write (self, mono: numpy.ndarray) -> None:

		capacity = self._ring.shape[0]
		n = mono.shape[0]

		if n >= capacity:
			# Only the newest ``capacity`` samples survive.
			self._ring[:] = mono[n - capacity:]
			self._cursor = 0
			self._length = capacity
			return

		cursor = self._cursor
		first = min(n, capacity - cursor)

		self._ring[cursor:cursor + first] = mono[:first]

		if first < n:
			self._ring[:n - first] = mono[first:]

		self._cursor = (cursor + n) % capacity
		self._length = min(capacity, self._length + n)


	def snapshot (self) -> numpy.ndarray:

		"""Return a chronological copy of the valid samples (oldest first)."""

		length = self._length
		capacity = self._ring.shape[0]

		if length < capacity:
			start = (self._cursor - length) % capacity if capacity else 0
			if start + length <= capacity:
				return self._ring[start:start + length].copy()
			return numpy.concatenate((self._ring[start:], self._ring[:start + length - capacity]))

		return numpy.concatenate((self._ring[self._cursor:], self._ring[:self._cursor]))
