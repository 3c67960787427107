from __future__ import annotations

import threading
from typing import Callable, Generic, Protocol, Sequence, TypeVar

R = TypeVar("R")
R_contra = TypeVar("R_contra", contravariant=True)


class RenderSink(Protocol[R_contra]):
    """Anything that can take a full replacement of its displayed rows."""

    def replace_rows(self, rows: Sequence[R_contra]) -> None: ...


class RowBuffer(Generic[R]):
    """In-memory sink; table widgets subscribe with :meth:`subscribe`."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._rows: tuple[R, ...] = ()
        self._listeners: list[Callable[[tuple[R, ...]], None]] = []
        self.replacements = 0

    @property
    def rows(self) -> tuple[R, ...]:
        return self._rows

    def subscribe(self, listener: Callable[[tuple[R, ...]], None]) -> None:
        self._listeners.append(listener)

    def replace_rows(self, rows: Sequence[R]) -> None:
        snapshot = tuple(rows)
        with self._lock:
            self._rows = snapshot
            self.replacements += 1
        for listener in list(self._listeners):
            listener(snapshot)
