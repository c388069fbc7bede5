import threading
from typing import Protocol

import click


class ProgressSink(Protocol):
    def start(self, total: int) -> None: ...

    def tick(self) -> None: ...

    def finish(self) -> None: ...


class NullProgress:
    def start(self, total: int) -> None:
        pass

    def tick(self) -> None:
        pass

    def finish(self) -> None:
        pass


class CountingProgress:
    """
    Thread-safe completed-file counter.

    tick() may be called from any worker; the count never affects
    the digest.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self.total = 0
        self.completed = 0
        self.finished = False

    def start(self, total: int) -> None:
        with self._lock:
            self.total = total
            self.completed = 0
            self.finished = False

    def tick(self) -> None:
        with self._lock:
            self.completed += 1
            self._advance(1)

    def finish(self) -> None:
        with self._lock:
            self.finished = True

    def _advance(self, steps: int) -> None:
        pass


class ClickProgress(CountingProgress):
    """
    Terminal progress bar built on click.progressbar.
    """

    def __init__(self, *, label: str = "Hashing files", file=None):
        super().__init__()
        self.label = label
        self.file = file
        self._bar = None

    def start(self, total: int) -> None:
        super().start(total)
        self._bar = click.progressbar(
            length=total,
            label=self.label,
            fill_char="#",
            empty_char="-",
            show_pos=True,
            show_eta=True,
            file=self.file,
        )
        self._bar.__enter__()

    def _advance(self, steps: int) -> None:
        if self._bar is not None:
            self._bar.update(steps)

    def finish(self) -> None:
        super().finish()
        if self._bar is not None:
            self._bar.__exit__(None, None, None)
            self._bar = None
