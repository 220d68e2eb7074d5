"""Random content and path generators for the conformance suite.

Each scenario gets its own ContentGenerator; nothing here is module-level
mutable state, so scenarios can run in parallel without sharing a random
source.
"""

import io
import random
import threading
from typing import Optional

FILENAME_CHARS = "abcdefghijklmnopqrstuvwxyz0123456789"
SEPARATOR_CHARS = "._-"

# Size of the repeating block RandReader cycles through
POOL_SIZE = 1024 * 1024


class ContentGenerator:
    """Seeded source of random paths and content."""

    def __init__(self, seed: Optional[int] = None):
        if seed is None:
            seed = random.SystemRandom().getrandbits(64)
        self.seed = seed
        self._random = random.Random(seed)
        self._lock = threading.Lock()

    def contents(self, length: int) -> bytes:
        """``length`` random bytes."""
        if length <= 0:
            return b""
        with self._lock:
            return self._random.randbytes(length)

    def filename(self, length: int) -> str:
        """
        Random single path segment of exactly ``length`` characters.

        Alphanumerics with occasional separators; never starts or ends with a
        separator and never has two in a row.
        """
        chars = []
        was_separator = True
        with self._lock:
            for i in range(length):
                if not was_separator and i < length - 1 and self._random.randrange(4) == 0:
                    chars.append(self._random.choice(SEPARATOR_CHARS))
                    was_separator = True
                else:
                    chars.append(self._random.choice(FILENAME_CHARS))
                    was_separator = False
        return "".join(chars)

    def path(self, length: int) -> str:
        """Random valid content path of exactly ``length`` characters (min 2)."""
        length = max(length, 2)
        path = "/"
        while len(path) < length:
            with self._lock:
                chunk_length = self._random.randrange(length - len(path)) + 1
            path += self.filename(chunk_length)
            remaining = length - len(path)
            if remaining == 1:
                path += self.filename(1)
            elif remaining > 1:
                path += "/"
        return path

    def randint(self, low: int, high: int) -> int:
        """Random integer in [low, high]."""
        with self._lock:
            return self._random.randint(low, high)

    def offset(self, size: int) -> int:
        """Random offset in [0, size)."""
        with self._lock:
            return self._random.randrange(size)

    def reader(self, size: int) -> "RandReader":
        """Bounded random stream drawing from a pool made by this generator."""
        return RandReader(size, self.contents(min(size, POOL_SIZE)) or b"\x00")


class RandReader(io.RawIOBase):
    """
    Readable stream of exactly ``size`` pseudo-random bytes.

    Cycles through ``pool`` so arbitrarily large payloads cost no more memory
    than the pool. Safe to read from several threads.
    """

    def __init__(self, size: int, pool: bytes):
        super().__init__()
        if not pool:
            raise ValueError("pool must not be empty")
        self.remaining = size
        self._pool = memoryview(pool)
        self._position = 0
        self._lock = threading.Lock()

    def readable(self) -> bool:
        return True

    def readinto(self, buffer) -> int:
        with self._lock:
            want = min(len(buffer), self.remaining)
            filled = 0
            while filled < want:
                n = min(want - filled, len(self._pool) - self._position)
                buffer[filled:filled + n] = self._pool[self._position:self._position + n]
                filled += n
                self._position = (self._position + n) % len(self._pool)
            self.remaining -= filled
            return filled


class HashingReader:
    """Pass-through reader that feeds every byte it returns into ``hasher``."""

    def __init__(self, reader, hasher):
        self._reader = reader
        self.hasher = hasher
        self.bytes_read = 0

    def read(self, size: int = -1) -> bytes:
        data = self._reader.read(size)
        if data:
            self.hasher.update(data)
            self.bytes_read += len(data)
        return data
