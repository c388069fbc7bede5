# Auto-generated __init__.py

from . import aggregator
from .aggregator import Aggregator
from .aggregator import fold_digests
from . import errors
from .errors import ConfigError
from .errors import DigestError
from .errors import EnumerationError
from .errors import PerFileReadError
from .errors import SchedulingError
from . import hasher
from .hasher import file_digest
from .hasher import new_digest
from . import logger
from .logger import RunLogger
from . import models
from .models import FileSet
from .models import HashSettings
from .models import RunState
from .models import TreeDigest
from .models import WorkResult
from . import pipeline
from .pipeline import DigestRun
from .pipeline import compute_tree_digest
from .pipeline import compute_tree_digest_async
from .pipeline import run
from .pipeline import run_async
from . import progress
from .progress import ClickProgress
from .progress import CountingProgress
from .progress import NullProgress
from . import scanner
from .scanner import IgnoreRules
from .scanner import enumerate_files
from . import scheduler
from .scheduler import schedule_digests

__all__ = [
    "aggregator",
    "errors",
    "hasher",
    "logger",
    "models",
    "pipeline",
    "progress",
    "scanner",
    "scheduler",
    "Aggregator",
    "ClickProgress",
    "ConfigError",
    "CountingProgress",
    "DigestError",
    "DigestRun",
    "EnumerationError",
    "FileSet",
    "HashSettings",
    "IgnoreRules",
    "NullProgress",
    "PerFileReadError",
    "RunLogger",
    "RunState",
    "SchedulingError",
    "TreeDigest",
    "WorkResult",
    "compute_tree_digest",
    "compute_tree_digest_async",
    "enumerate_files",
    "file_digest",
    "fold_digests",
    "new_digest",
    "run",
    "run_async",
    "schedule_digests",
]
