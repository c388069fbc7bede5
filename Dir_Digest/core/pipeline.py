import asyncio
import time
from contextlib import aclosing
from pathlib import Path
from typing import Callable, Optional

from Dir_Digest.core.aggregator import Aggregator
from Dir_Digest.core.errors import DigestError, PerFileReadError
from Dir_Digest.core.hasher import DEFAULT_ALGORITHM, DEFAULT_CHUNK_SIZE
from Dir_Digest.core.logger import RunLogger
from Dir_Digest.core.models import FileSet, HashSettings, RunState, TreeDigest
from Dir_Digest.core.progress import NullProgress, ProgressSink
from Dir_Digest.core.scanner import IgnoreRules, enumerate_files
from Dir_Digest.core.scheduler import schedule_digests


# ============================================================
# Run object
# ============================================================

class DigestRun:
    """
    One pass over a directory tree.

    State moves ENUMERATING -> SCHEDULING -> AGGREGATING -> FINALIZED,
    or ends in FAILED. A DigestRun digests exactly one FileSet, once.
    """

    def __init__(
        self,
        settings: Optional[HashSettings] = None,
        *,
        logger: Optional[RunLogger] = None,
        progress: Optional[ProgressSink] = None,
    ):
        self.settings = settings or HashSettings()
        self.logger = logger or RunLogger()
        self.progress = progress or NullProgress()
        self.state: Optional[RunState] = None
        self.file_set: Optional[FileSet] = None

    def _enter(self, state: RunState):
        self.state = state
        self.logger.log("DEBUG", "pipeline", f"Run state: {state.value}")

    def enumerate(self, root: Path) -> FileSet:
        self._enter(RunState.ENUMERATING)
        try:
            self.file_set = enumerate_files(
                root,
                follow_symlinks=self.settings.follow_symlinks,
                ignore=IgnoreRules(self.settings.ignore),
                logger=self.logger,
            )
        except DigestError:
            self._enter(RunState.FAILED)
            raise
        return self.file_set

    async def digest(
        self,
        file_set: FileSet,
        *,
        on_file_done: Optional[Callable[[Path], None]] = None,
    ) -> bytes:
        if self.state not in (None, RunState.ENUMERATING):
            raise RuntimeError(f"DigestRun already {self.state.value}")

        self._enter(RunState.SCHEDULING)
        aggregator = Aggregator(len(file_set), self.settings.algorithm)

        def file_done(path: Path):
            self.progress.tick()
            if on_file_done is not None:
                on_file_done(path)

        self.progress.start(len(file_set))
        try:
            results = schedule_digests(
                file_set,
                workers=self.settings.workers,
                algorithm=self.settings.algorithm,
                chunk_size=self.settings.chunk_size,
                on_file_done=file_done,
                logger=self.logger,
            )
            async with aclosing(results):
                async for result in results:
                    if not result.ok:
                        raise PerFileReadError(result.path, result.error) from result.error
                    if self.state is RunState.SCHEDULING:
                        self._enter(RunState.AGGREGATING)
                    aggregator.fold(result.index, result.digest)

            if self.state is RunState.SCHEDULING:
                self._enter(RunState.AGGREGATING)
            digest = aggregator.finalize()
        except DigestError as e:
            self._enter(RunState.FAILED)
            self.logger.log("DEBUG", "pipeline", f"Run failed: {e}")
            raise
        finally:
            self.progress.finish()

        self._enter(RunState.FINALIZED)
        return digest

    async def execute(self, root: Path) -> TreeDigest:
        self.logger.log("INFO", "pipeline", "Getting files list...")
        file_set = self.enumerate(root)
        self.logger.log("INFO", "pipeline", f"{len(file_set)} files found.")

        started = time.perf_counter()
        digest = await self.digest(file_set)
        elapsed = time.perf_counter() - started

        self.logger.log(
            "INFO",
            "pipeline",
            f"{len(file_set)} files in {int(elapsed * 1000)} ms",
        )
        return TreeDigest(
            digest=digest,
            algorithm=self.settings.algorithm,
            file_count=len(file_set),
            elapsed=elapsed,
        )


# ============================================================
# ASYNC IMPLEMENTATION (single source of truth)
# ============================================================

async def run_async(
    file_set: FileSet,
    workers: Optional[int] = None,
    *,
    on_file_done: Optional[Callable[[Path], None]] = None,
    algorithm: str = DEFAULT_ALGORITHM,
    chunk_size: int = DEFAULT_CHUNK_SIZE,
    logger: Optional[RunLogger] = None,
) -> bytes:
    """
    Aggregate digest of an already enumerated FileSet.

    Raises PerFileReadError if any file cannot be read; no partial
    digest is ever returned.
    """
    settings = HashSettings(algorithm=algorithm, chunk_size=chunk_size, workers=workers)
    return await DigestRun(settings, logger=logger).digest(
        file_set,
        on_file_done=on_file_done,
    )


async def compute_tree_digest_async(
    root: Path,
    settings: Optional[HashSettings] = None,
    *,
    logger: Optional[RunLogger] = None,
    progress: Optional[ProgressSink] = None,
) -> TreeDigest:
    return await DigestRun(settings, logger=logger, progress=progress).execute(root)


# ============================================================
# SYNC WRAPPERS
# ============================================================

def _run_blocking(coro):
    try:
        loop = asyncio.get_running_loop()
    except RuntimeError:
        # No running loop → safe to create one
        return asyncio.run(coro)
    else:
        # Running loop → must create a task
        return loop.create_task(coro)


def run(
    file_set: FileSet,
    workers: Optional[int] = None,
    *,
    on_file_done: Optional[Callable[[Path], None]] = None,
    algorithm: str = DEFAULT_ALGORITHM,
    chunk_size: int = DEFAULT_CHUNK_SIZE,
    logger: Optional[RunLogger] = None,
):
    """
    Sync wrapper for run_async.
    Safe under pytest-asyncio: inside a running loop a task is returned.
    """
    return _run_blocking(
        run_async(
            file_set,
            workers,
            on_file_done=on_file_done,
            algorithm=algorithm,
            chunk_size=chunk_size,
            logger=logger,
        )
    )


def compute_tree_digest(
    root: Path,
    settings: Optional[HashSettings] = None,
    *,
    logger: Optional[RunLogger] = None,
    progress: Optional[ProgressSink] = None,
):
    """Sync wrapper for compute_tree_digest_async."""
    return _run_blocking(
        compute_tree_digest_async(
            root,
            settings,
            logger=logger,
            progress=progress,
        )
    )
