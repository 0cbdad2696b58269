"""Content hashes as immutable values, and streaming file hashing.

A HashValue pairs digest bytes with the name of the algorithm that produced
them (e.g. MD5, SHA-1, SHA-256). Values compare by content: two hashes are
equal only when both the algorithm name and every digest byte match. The hex
string and hash() value are computed once at construction, so values are
cheap to use as dict keys or set members when comparing local and remote
content.

Algorithm names resolve against hashlib, case-insensitively and ignoring
separators, so "SHA-256", "sha256" and "Sha_256" all name the same digest.
"""

import functools
import hashlib
import logging
import os
from typing import Dict, List, Optional, Tuple, Union

log = logging.getLogger(__name__)

PathLike = Union[str, "os.PathLike[str]"]
BytesLike = Union[bytes, bytearray, memoryview]

DEFAULT_CHUNK_SIZE = 4 * 1024

# Conventional registry spelling for the common hashlib names; others are shown uppercased.
_CANONICAL_NAMES: Dict[str, str] = {
    "md5": "MD5",
    "sha1": "SHA-1",
    "sha224": "SHA-224",
    "sha256": "SHA-256",
    "sha384": "SHA-384",
    "sha512": "SHA-512",
    "sha512_224": "SHA-512/224",
    "sha512_256": "SHA-512/256",
    "sha3_224": "SHA3-224",
    "sha3_256": "SHA3-256",
    "sha3_384": "SHA3-384",
    "sha3_512": "SHA3-512",
    "blake2b": "BLAKE2B",
    "blake2s": "BLAKE2S",
}


class UnsupportedAlgorithmError(ValueError):
    """The named digest algorithm is not available in hashlib."""

    def __init__(self, algorithm_name: str) -> None:
        super().__init__(f"Unsupported digest algorithm: {algorithm_name}")
        self.algorithm_name = algorithm_name


def _lookup_key(name: str) -> str:
    return name.lower().replace("-", "").replace("_", "").replace("/", "")


@functools.lru_cache(maxsize=None)
def _registry() -> Dict[str, Tuple[str, str]]:
    """Lookup key -> (hashlib name, canonical name). shake_* needs an output length, so it is left out."""
    out: Dict[str, Tuple[str, str]] = {}
    for name in hashlib.algorithms_available:
        lowered = name.lower()
        if lowered.startswith("shake"):
            continue
        key = _lookup_key(lowered)
        # OpenSSL spellings (e.g. sha512-256) must not shadow the hashlib name with a canonical entry
        if lowered in _CANONICAL_NAMES:
            out[key] = (lowered, _CANONICAL_NAMES[lowered])
        else:
            out.setdefault(key, (lowered, lowered.upper()))
    return out


def resolve_algorithm(algorithm_name: str) -> Tuple[str, str]:
    """Return (hashlib name, canonical name) for algorithm_name or raise UnsupportedAlgorithmError."""
    if algorithm_name is None:
        raise TypeError("algorithm_name must not be None")
    found = _registry().get(_lookup_key(algorithm_name.strip()))
    if found is None:
        log.warning("Unsupported digest algorithm requested: %s", algorithm_name)
        raise UnsupportedAlgorithmError(algorithm_name)
    return found


def _new_digest(hashlib_name: str, algorithm_name: str):
    try:
        return hashlib.new(hashlib_name)
    except ValueError as e:
        # Listed by hashlib but not loadable (e.g. OpenSSL legacy provider missing)
        raise UnsupportedAlgorithmError(algorithm_name) from e


def _parse_hex(hex_digest: str) -> bytes:
    try:
        return bytes.fromhex(hex_digest.strip())
    except (AttributeError, ValueError) as e:
        raise ValueError(f"Invalid hex digest: {hex_digest!r}") from e


def available_algorithms() -> List[str]:
    """Canonical names of every supported digest algorithm, sorted."""
    return sorted({canonical for _, canonical in _registry().values()})


class HashValue:
    """
    Result of a hashing function: algorithm name plus digest bytes.

    The algorithm name is stored uppercased; the bytes are copied on the way in
    and handed out as copies, so no caller ever shares a buffer with the value.
    Instances cannot be modified after construction.
    """

    __slots__ = ("_algorithm_name", "_digest", "_hex_digest", "_hash")

    def __init__(
        self,
        algorithm_name: str,
        data: BytesLike,
        start: int = 0,
        end: Optional[int] = None,
    ) -> None:
        if algorithm_name is None:
            raise TypeError("algorithm_name must not be None")
        view = memoryview(data).cast("B")
        if end is None:
            end = len(view)
        # No negative indices or clamping: the range must lie inside the data
        if not 0 <= start <= end <= len(view):
            raise ValueError(f"Byte range [{start}, {end}) out of bounds for length {len(view)}")
        digest = view[start:end].tobytes()
        name = algorithm_name.upper()
        object.__setattr__(self, "_algorithm_name", name)
        object.__setattr__(self, "_digest", digest)
        object.__setattr__(self, "_hex_digest", digest.hex())
        object.__setattr__(self, "_hash", hash((digest, name)))

    def __setattr__(self, name: str, value: object) -> None:
        raise AttributeError(f"{type(self).__name__} is immutable")

    def __delattr__(self, name: str) -> None:
        raise AttributeError(f"{type(self).__name__} is immutable")

    @property
    def algorithm_name(self) -> str:
        """Uppercased algorithm name, e.g. 'SHA-256'."""
        return self._algorithm_name

    @property
    def digest(self) -> bytes:
        """Digest bytes (immutable bytes object)."""
        return self._digest

    @property
    def hex_digest(self) -> str:
        """Lowercase hex digest, two characters per byte."""
        return self._hex_digest

    def raw_bytes(self) -> bytearray:
        """A fresh mutable copy of the digest bytes."""
        return bytearray(self._digest)

    def matches_hex(self, hex_digest: str) -> bool:
        """True if hex_digest (any case) renders the same bytes as this value. Malformed hex raises ValueError."""
        return _parse_hex(hex_digest) == self._digest

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, HashValue):
            return NotImplemented
        return self._algorithm_name == other._algorithm_name and self._digest == other._digest

    def __hash__(self) -> int:
        return self._hash

    def __str__(self) -> str:
        return f"{self._algorithm_name}({self._hex_digest})"

    def __repr__(self) -> str:
        return f"HashValue({self._algorithm_name!r}, {self._hex_digest!r})"

    def __reduce__(self):
        return (type(self), (self._algorithm_name, self._digest))

    @classmethod
    def for_bytes(cls, algorithm_name: str, data: BytesLike) -> "HashValue":
        """Hash an in-memory body (e.g. an upload) with the named algorithm."""
        hashlib_name, canonical = resolve_algorithm(algorithm_name)
        md = _new_digest(hashlib_name, algorithm_name)
        md.update(data)
        return cls(canonical, md.digest())

    @classmethod
    def from_hex(cls, algorithm_name: str, hex_digest: str) -> "HashValue":
        """Rebuild a value from a hex digest (as stored in sync state or sent by a server)."""
        return cls(algorithm_name, _parse_hex(hex_digest))

    @classmethod
    def for_file(cls, algorithm_name: str, path: PathLike, chunk_size: int = DEFAULT_CHUNK_SIZE) -> "HashValue":
        """Same as compute_file_hash()."""
        return compute_file_hash(algorithm_name, path, chunk_size=chunk_size)


def compute_file_hash(algorithm_name: str, path: PathLike, chunk_size: int = DEFAULT_CHUNK_SIZE) -> HashValue:
    """
    Hash the contents of the file at path with the named algorithm.

    The file is read in chunks (chunk_size, default 4 KiB), so
    files of any size are hashed without loading them into memory. The
    returned value is tagged with the algorithm's canonical name.

    Raises UnsupportedAlgorithmError before touching the file if the algorithm
    is unknown; OSError from opening or reading the file propagates. The file
    is closed on every path out of this function.
    """
    hashlib_name, canonical = resolve_algorithm(algorithm_name)
    if chunk_size <= 0:
        raise ValueError("chunk_size must be positive")
    md = _new_digest(hashlib_name, algorithm_name)
    total = 0
    log.debug("Hashing %s with %s", path, canonical)
    with open(path, "rb") as f:
        for chunk in iter(lambda: f.read(chunk_size), b""):
            md.update(chunk)
            total += len(chunk)
    value = HashValue(canonical, md.digest())
    log.debug("Hashed %s (%d bytes): %s", path, total, value)
    return value


def default_file_hash(path: PathLike) -> HashValue:
    """Hash path with the configured default algorithm (SALAMI_HASH_ALGORITHM)."""
    # config imports this module to validate the algorithm name
    from salami.config import get_settings

    settings = get_settings()
    return compute_file_hash(settings.hash_algorithm, path, chunk_size=settings.hash_chunk_size)
