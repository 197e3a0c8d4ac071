"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/hasher.py
Streaming content digester with pluggable hash algorithms.

The Digester owns one incremental hash state. It is reset between files so a
single instance can hash a whole scan sequentially; concurrent workers each
create their own instance.
"""

import hashlib
from typing import Callable, Dict

import xxhash

from dupscan.core.errors import ConfigError, HashError
from dupscan.core.interfaces import HashAlgorithm

# Files are read in chunks of CHUNK_BLOCKS * algorithm block size (64KiB for SHA-1)
CHUNK_BLOCKS = 1024


# Use the same way to implement and use any other hashing algorithm
class HashlibAlgorithmImpl(HashAlgorithm):
    """Any algorithm available through hashlib.new()."""

    def __init__(self, name: str):
        self.name = name
        hashlib.new(name)  # fail early on unsupported names

    def new(self):
        return hashlib.new(self.name)


class XXHashAlgorithmImpl(HashAlgorithm):
    """xxHash64: much faster, but not cryptographic."""
    name = "xxh64"

    def new(self):
        return xxhash.xxh64()


ALGORITHMS: Dict[str, Callable[[], HashAlgorithm]] = {
    "sha1": lambda: HashlibAlgorithmImpl("sha1"),
    "md5": lambda: HashlibAlgorithmImpl("md5"),
    "sha256": lambda: HashlibAlgorithmImpl("sha256"),
    "xxh64": XXHashAlgorithmImpl,
}

DEFAULT_ALGORITHM = "sha1"


def get_algorithm(name: str) -> HashAlgorithm:
    """Look up an algorithm by name, raising ConfigError for unknown ones."""
    factory = ALGORITHMS.get(name.strip().lower())
    if factory is None:
        raise ConfigError(
            f"Unknown hash algorithm: '{name}'. "
            f"Supported: {', '.join(sorted(ALGORITHMS))}"
        )
    return factory()


class Digester:
    """
    Incremental hash computation: reset() / update() / finalize().
    digest_file() is the convenience path used by the scanner.
    """

    def __init__(self, algorithm: HashAlgorithm = None):
        self.algorithm = algorithm or get_algorithm(DEFAULT_ALGORITHM)
        self._state = self.algorithm.new()
        self._buffer = bytearray(self.chunk_size)

    @property
    def digest_size(self) -> int:
        return self._state.digest_size

    @property
    def chunk_size(self) -> int:
        return CHUNK_BLOCKS * self._state.block_size

    def reset(self) -> None:
        """Discard everything fed so far."""
        self._state = self.algorithm.new()

    def update(self, data: bytes) -> None:
        self._state.update(data)

    def finalize(self) -> bytes:
        """Return the digest of all data since the last reset and reset for the next input."""
        result = self._state.digest()
        self.reset()
        return result

    def digest_file(self, path: str) -> bytes:
        """
        Hash a whole file in fixed-size chunks.
        Raises:
            HashError: If the file cannot be opened or a read fails midway
        """
        self.reset()
        view = memoryview(self._buffer)
        try:
            with open(path, 'rb') as f:
                while True:
                    n = f.readinto(self._buffer)
                    if not n:
                        break
                    self._state.update(view[:n])
        except OSError as e:
            self.reset()
            raise HashError(path, e.strerror or str(e)) from e
        return self.finalize()
