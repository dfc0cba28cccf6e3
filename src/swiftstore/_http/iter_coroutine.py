"""Drive non-suspending coroutines from synchronous code."""

from __future__ import annotations

import typing

_T = typing.TypeVar("_T")


def iter_coroutine(coro: typing.Coroutine[typing.Any, None, _T]) -> _T:
    """Finish ``coro`` with a single ``send(None)`` and return its result.

    ``Connection`` runs the same coroutines as ``AsyncConnection``, but over
    ``BlockingTransport`` and ``ThreadLock``, which block instead of
    awaiting. Exceptions raised by the coroutine propagate unchanged.

    Raises:
        RuntimeError: If the coroutine awaits something that needs an event
            loop. The coroutine is closed first.
    """
    try:
        awaited = coro.send(None)
    except StopIteration as done:
        return done.value  # type: ignore [no-any-return]
    coro.close()
    raise RuntimeError(f"{coro.__qualname__}() awaited {awaited!r}; it needs an event loop")


__all__ = ["iter_coroutine"]
