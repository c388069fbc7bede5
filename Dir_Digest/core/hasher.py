from pathlib import Path
import hashlib

from Dir_Digest.core.errors import ConfigError


DEFAULT_ALGORITHM = "md5"
DEFAULT_CHUNK_SIZE = 1 << 20


def new_digest(algorithm: str = DEFAULT_ALGORITHM):
    """
    Fresh hashlib object for `algorithm`.

    Variable-length algorithms (shake_*) are rejected because every
    digest must have a fixed length.
    """
    try:
        h = hashlib.new(algorithm)
    except (ValueError, TypeError) as e:
        raise ConfigError(f"Unknown digest algorithm: {algorithm!r}") from e

    if h.digest_size == 0:
        raise ConfigError(f"Digest algorithm has no fixed length: {algorithm!r}")
    return h


def file_digest(
    path: Path,
    *,
    algorithm: str = DEFAULT_ALGORITHM,
    chunk_size: int = DEFAULT_CHUNK_SIZE,
) -> bytes:
    """
    Stream one file through `algorithm` and return the raw digest.

    At most `chunk_size` bytes of the file are held at a time.
    OSError from open or read propagates to the caller.
    """
    if chunk_size < 1:
        raise ValueError(f"chunk_size must be positive, got {chunk_size}")

    h = new_digest(algorithm)
    with open(path, "rb") as f:
        for chunk in iter(lambda: f.read(chunk_size), b""):
            h.update(chunk)
    return h.digest()
