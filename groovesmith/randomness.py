"""Seed resolution for the generators.

Every generator is a pure function of its arguments and a ``random.Random``.
The only impure step is turning "no seed" into a concrete seed, which happens
here at the boundary: a process-wide monotonic counter is mixed with the wall
clock and the high-resolution performance counter, so two unseeded calls made
in the same microsecond with identical parameters still differ.
"""

import itertools
import logging
import random
import threading
import time
import typing

import groovesmith.constants


logger = logging.getLogger(__name__)

_nonce = itertools.count(1)
_nonce_lock = threading.Lock()


def _next_nonce () -> int:

	with _nonce_lock:
		return next(_nonce)


def resolve_seed (seed: typing.Optional[int] = groovesmith.constants.AUTO_SEED) -> int:

	"""
	Return a concrete non-negative seed.

	An explicit seed (any value other than ``None`` or ``AUTO_SEED``) is
	returned unchanged, masked to 31 bits. Otherwise a fresh seed is derived.
	"""

	if seed is not None and seed != groovesmith.constants.AUTO_SEED:
		return int(seed) & 0x7FFFFFFF

	nonce = _next_nonce()
	mixed = time.time_ns() ^ time.perf_counter_ns() ^ (nonce * 0x9E3779B97F4A7C15)
	resolved = mixed & 0x7FFFFFFF

	logger.debug(f"Derived seed {resolved} (nonce {nonce})")
	return resolved


def make_rng (seed: typing.Optional[int] = groovesmith.constants.AUTO_SEED, rng: typing.Optional[random.Random] = None) -> random.Random:

	"""
	Return the random source a generator call should use.

	An injected ``rng`` wins over ``seed``; otherwise a new ``random.Random``
	is seeded from :func:`resolve_seed`.
	"""

	if rng is not None:
		return rng

	return random.Random(resolve_seed(seed))


def chance (rng: random.Random, percent: float) -> bool:

	"""Return True with probability ``percent`` / 100 (clamped to 0–100)."""

	return rng.random() * 100.0 < max(0.0, min(100.0, percent))
