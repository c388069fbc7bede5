import asyncio
from concurrent.futures import ThreadPoolExecutor
from functools import partial
from pathlib import Path
from typing import AsyncIterator, Callable, Optional

from Dir_Digest.core.errors import SchedulingError
from Dir_Digest.core.hasher import DEFAULT_ALGORITHM, DEFAULT_CHUNK_SIZE, file_digest
from Dir_Digest.core.logger import RunLogger
from Dir_Digest.core.models import FileSet, WorkResult


DigestFn = Callable[..., bytes]


async def schedule_digests(
    file_set: FileSet,
    *,
    workers: int,
    algorithm: str = DEFAULT_ALGORITHM,
    chunk_size: int = DEFAULT_CHUNK_SIZE,
    on_file_done: Optional[Callable[[Path], None]] = None,
    digest_fn: DigestFn = file_digest,
    logger: Optional[RunLogger] = None,
) -> AsyncIterator[WorkResult]:
    """
    Digest every file in `file_set` with at most `workers` running at once.

    Every file is admitted as a task up front; each task then waits for
    one of `workers` semaphore permits, hashes its file on a thread
    pool, releases the permit and reports. Results are yielded in
    completion order, each tagged with its FileSet position.

    Read failures come back as WorkResult.error, they are not raised
    here. Closing the generator early cancels all unfinished work.
    """
    if workers < 1:
        raise SchedulingError(f"At least one permit is required, got {workers}")

    logger = logger or RunLogger()

    if not file_set:
        return

    loop = asyncio.get_running_loop()
    permits = asyncio.Semaphore(workers)
    pool = ThreadPoolExecutor(max_workers=workers, thread_name_prefix="dir-digest")

    async def work(index: int, path: Path) -> WorkResult:
        async with permits:
            try:
                digest = await loop.run_in_executor(
                    pool,
                    partial(digest_fn, path, algorithm=algorithm, chunk_size=chunk_size),
                )
            except OSError as e:
                return WorkResult(index=index, path=path, error=e)

        if on_file_done is not None:
            on_file_done(path)
        if logger.is_enabled("DEBUG"):
            logger.log("DEBUG", "scheduler", f"{digest.hex()}  {path}")
        return WorkResult(index=index, path=path, digest=digest)

    tasks = [
        asyncio.create_task(work(index, path))
        for index, path in enumerate(file_set)
    ]

    try:
        for next_done in asyncio.as_completed(tasks):
            yield await next_done
    finally:
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
        # Threads already reading finish their file before this returns;
        # waiting happens off the event loop
        await loop.run_in_executor(
            None,
            partial(pool.shutdown, wait=True, cancel_futures=True),
        )
