import asyncio

import pytest

from swiftstore._http.iter_coroutine import iter_coroutine
from swiftstore._internal.session import ThreadLock


class TestIterCoroutine:
    def test_runs_code_holding_a_thread_lock(self) -> None:
        lock = ThreadLock()

        async def locked_sum(values: list[int]) -> int:
            async with lock:
                return sum(values)

        assert iter_coroutine(locked_sum([1, 2, 3])) == 6
        # Released on the way out, so a second run does not deadlock
        assert iter_coroutine(locked_sum([4])) == 4

    def test_lock_released_when_coroutine_raises(self) -> None:
        lock = ThreadLock()

        async def failing() -> None:
            async with lock:
                raise KeyError("missing")

        with pytest.raises(KeyError):
            iter_coroutine(failing())
        with pytest.raises(KeyError):
            iter_coroutine(failing())

    def test_suspending_coroutine_is_closed(self) -> None:
        cleaned_up = False

        async def needs_loop() -> None:
            nonlocal cleaned_up
            try:
                await asyncio.sleep(0)
            finally:
                cleaned_up = True

        with pytest.raises(RuntimeError, match=r"needs_loop\(\) awaited None; it needs an event loop"):
            iter_coroutine(needs_loop())

        assert cleaned_up
