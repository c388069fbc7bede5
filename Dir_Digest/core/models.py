from dataclasses import dataclass, field
from enum import Enum
import os
from pathlib import Path
from typing import Optional, List, Tuple, Iterator, Dict, Any

from Dir_Digest.core.errors import ConfigError
from Dir_Digest.core.hasher import DEFAULT_ALGORITHM, DEFAULT_CHUNK_SIZE, new_digest


def default_workers() -> int:
    return os.cpu_count() or 1


def _section(settings: Dict[str, Any], name: str) -> Dict[str, Any]:
    section = settings.get(name, {})
    if not isinstance(section, dict):
        raise ConfigError(f"Settings section {name!r} must be an object")
    return section


class RunState(Enum):
    ENUMERATING = "enumerating"
    SCHEDULING = "scheduling"
    AGGREGATING = "aggregating"
    FINALIZED = "finalized"
    FAILED = "failed"


@dataclass
class HashSettings:
    """
    Validated knobs for one digest run.

    None of these change what a file contributes except `algorithm`
    and the scan options (`follow_symlinks`, `ignore`), which decide
    which files are included.
    """
    algorithm: str = DEFAULT_ALGORITHM
    chunk_size: int = DEFAULT_CHUNK_SIZE
    workers: Optional[int] = None
    follow_symlinks: bool = False
    ignore: List[str] = field(default_factory=list)

    def __post_init__(self):
        self.algorithm = self.algorithm.lower()
        if self.workers is None:
            self.workers = default_workers()
        if self.workers < 1:
            raise ConfigError(f"workers must be >= 1, got {self.workers}")
        if self.chunk_size < 1:
            raise ConfigError(f"chunk_size must be >= 1, got {self.chunk_size}")
        # Fails fast on unknown or variable-length algorithms
        new_digest(self.algorithm)

    @classmethod
    def from_dict(cls, settings: Dict[str, Any]) -> "HashSettings":
        hashing = _section(settings, "hashing")
        scan = _section(settings, "scan")

        ignore = scan.get("ignore") or []
        if not isinstance(ignore, list) or not all(isinstance(p, str) for p in ignore):
            raise ConfigError(f"Settings scan.ignore must be a list of strings, got {ignore!r}")

        try:
            return cls(
                algorithm=str(hashing.get("algorithm", DEFAULT_ALGORITHM)),
                chunk_size=int(hashing.get("chunk_size", DEFAULT_CHUNK_SIZE)),
                workers=None if hashing.get("workers") is None else int(hashing["workers"]),
                follow_symlinks=bool(scan.get("follow_symlinks", False)),
                ignore=list(ignore),
            )
        except (TypeError, ValueError, AttributeError) as e:
            raise ConfigError(f"Invalid settings: {e}") from e


@dataclass(frozen=True)
class FileSet:
    """
    Canonically ordered regular files found under `root`.

    Created once per run by the scanner and read-only afterwards.
    """
    root: Path
    paths: Tuple[Path, ...] = ()

    def __len__(self) -> int:
        return len(self.paths)

    def __iter__(self) -> Iterator[Path]:
        return iter(self.paths)

    def __getitem__(self, index: int) -> Path:
        return self.paths[index]


@dataclass(frozen=True)
class WorkResult:
    index: int
    path: Path
    digest: Optional[bytes] = None
    error: Optional[OSError] = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass(frozen=True)
class TreeDigest:
    digest: bytes
    algorithm: str
    file_count: int
    elapsed: float = 0.0

    @property
    def label(self) -> str:
        return self.algorithm.upper()

    def hexdigest(self) -> str:
        return self.digest.hex()
