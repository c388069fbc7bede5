from pathlib import Path


class DigestError(Exception):
    """Base class for every failure a digest run can report."""


class ConfigError(DigestError):
    pass


class EnumerationError(DigestError):
    """
    Root path is missing or is not a directory.

    Raised before any file is scheduled.
    """

    def __init__(self, root: Path, reason: str):
        self.root = root
        self.reason = reason
        super().__init__(f"Cannot enumerate {root}: {reason}")


class PerFileReadError(DigestError):
    """
    An enumerated file could not be opened or fully read.

    Always fatal to the run: a missing contribution would silently
    change what the aggregate digest means.
    """

    def __init__(self, path: Path, cause: OSError):
        self.path = path
        self.cause = cause
        reason = cause.strerror or str(cause)
        super().__init__(f"Failed to read {path}: {reason}")


class SchedulingError(DigestError):
    """Permit or aggregation invariant was violated."""
