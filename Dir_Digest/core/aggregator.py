from typing import Dict, Iterable

from Dir_Digest.core.errors import SchedulingError
from Dir_Digest.core.hasher import DEFAULT_ALGORITHM, new_digest


class Aggregator:
    """
    Folds per-file digests into one aggregate digest in FileSet order.

    Digests may be handed over in any order. Each one is held until
    every earlier position has been folded, then drained in order, so
    the result is the digest of the concatenation of all per-file
    digests in canonical order.

    Single-consumer: only the run loop calls fold() and finalize().
    """

    def __init__(self, count: int, algorithm: str = DEFAULT_ALGORITHM):
        if count < 0:
            raise ValueError(f"count must be >= 0, got {count}")
        self.count = count
        self.algorithm = algorithm
        self._context = new_digest(algorithm)
        self._held: Dict[int, bytes] = {}
        self._next = 0
        self._result = None

    @property
    def folded(self) -> int:
        return self._next

    @property
    def pending(self) -> int:
        return len(self._held)

    @property
    def finalized(self) -> bool:
        return self._result is not None

    def fold(self, index: int, digest: bytes):
        if self.finalized:
            raise SchedulingError("Aggregator already finalized")
        if not 0 <= index < self.count:
            raise SchedulingError(f"Position {index} outside FileSet of {self.count}")
        if index < self._next or index in self._held:
            raise SchedulingError(f"Position {index} delivered twice")

        self._held[index] = digest

        while self._next in self._held:
            self._context.update(self._held.pop(self._next))
            self._next += 1

    def finalize(self) -> bytes:
        if self.finalized:
            raise SchedulingError("Aggregator already finalized")
        if self._next != self.count:
            raise SchedulingError(
                f"Cannot finalize: {self._next} of {self.count} positions folded"
            )
        self._result = self._context.digest()
        return self._result


def fold_digests(digests: Iterable[bytes], algorithm: str = DEFAULT_ALGORITHM) -> bytes:
    """Sequential reference fold, no concurrency involved."""
    h = new_digest(algorithm)
    for digest in digests:
        h.update(digest)
    return h.digest()
