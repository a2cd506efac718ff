"""Cancellation Signal - caller-owned, one-shot cancellation token

호출자가 소유하는 취소 신호입니다. live → cancelled 로 한 번만, 되돌릴 수 없게
전이하며 취소 사유(reason)를 함께 가질 수 있습니다.

- 동기 조회: cancelled / is_cancelled() / wait()
- 비동기 대기: await signal.wait_async()
- 콜백 등록: add_callback() / remove_callback()
- 파생 신호: with_cancel(parent), with_timeout(seconds, parent)

실행기(executor)는 신호를 관찰만 하고 절대 취소하지 않습니다.
"""

from __future__ import annotations

import asyncio
import threading
import time
from enum import Enum
from typing import Any, Callable, Optional

from cocktaildb.core.exceptions import CancelledException
from cocktaildb.core.logging import logger


Callback = Callable[[], None]


class CancelReason(str, Enum):
    """기본 취소 사유"""

    CANCELED = "operation canceled"
    DEADLINE_EXCEEDED = "deadline exceeded"

    def __str__(self) -> str:
        return self.value


class CancellationSignal:
    """일회성 취소 신호

    Usage:
        with CancellationSignal.with_timeout(2.0) as signal:
            outcome = search(signal, "margarita")
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._event = threading.Event()
        self._reason: Any = None
        self._callbacks: list[Callback] = []
        self._deadline: Optional[float] = None
        self._timer: Optional[threading.Timer] = None
        self._detach: Optional[Callback] = None

    # ------------------------------------------------------------------
    # 파생 신호
    # ------------------------------------------------------------------

    @classmethod
    def with_cancel(cls, parent: "CancellationSignal") -> "CancellationSignal":
        """부모가 취소되면 같은 사유로 함께 취소되는 자식 신호 생성

        자식을 취소해도 부모에는 영향이 없습니다.
        """
        child = cls()
        child._deadline = parent.deadline

        def _propagate() -> None:
            child.cancel(parent.reason)

        child._detach = lambda: parent.remove_callback(_propagate)
        parent.add_callback(_propagate)
        return child

    @classmethod
    def with_timeout(
        cls, seconds: float, parent: Optional["CancellationSignal"] = None
    ) -> "CancellationSignal":
        """seconds 후 DEADLINE_EXCEEDED 로 스스로 취소되는 신호 생성

        부모의 데드라인이 더 이르면 부모 쪽이 먼저 취소를 전파합니다.
        """
        child = cls.with_cancel(parent) if parent is not None else cls()
        deadline = time.monotonic() + max(0.0, seconds)
        if child._deadline is None or deadline < child._deadline:
            child._deadline = deadline

        if seconds <= 0:
            child.cancel(CancelReason.DEADLINE_EXCEEDED)
            return child

        timer = threading.Timer(seconds, child.cancel, args=(CancelReason.DEADLINE_EXCEEDED,))
        timer.daemon = True
        with child._lock:
            if not child._event.is_set():
                child._timer = timer
                timer.start()
        return child

    # ------------------------------------------------------------------
    # 상태 전이
    # ------------------------------------------------------------------

    def cancel(self, reason: Any = None) -> bool:
        """신호 취소

        Args:
            reason: 취소 사유 (None 이면 CancelReason.CANCELED)

        Returns:
            이번 호출로 전이가 일어났으면 True, 이미 취소된 상태였으면 False
        """
        with self._lock:
            if self._event.is_set():
                return False
            self._reason = CancelReason.CANCELED if reason is None else reason
            self._event.set()
            callbacks, self._callbacks = self._callbacks, []
            timer, self._timer = self._timer, None
            detach, self._detach = self._detach, None

        if timer is not None:
            timer.cancel()
        if detach is not None:
            detach()
        for callback in callbacks:
            self._run_callback(callback)
        return True

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def is_cancelled(self) -> bool:
        return self._event.is_set()

    @property
    def reason(self) -> Any:
        """취소 사유 (live 상태면 None)"""
        if not self._event.is_set():
            return None
        return self._reason

    @property
    def deadline(self) -> Optional[float]:
        """time.monotonic() 기준 데드라인"""
        return self._deadline

    def remaining(self) -> Optional[float]:
        """데드라인까지 남은 시간 (초), 데드라인이 없으면 None"""
        if self._deadline is None:
            return None
        return max(0.0, self._deadline - time.monotonic())

    def raise_if_cancelled(self) -> None:
        if self._event.is_set():
            raise CancelledException(self._reason)

    # ------------------------------------------------------------------
    # 대기 / 통지
    # ------------------------------------------------------------------

    def wait(self, timeout: Optional[float] = None) -> bool:
        """취소될 때까지 블로킹 대기. 취소되었으면 True"""
        return self._event.wait(timeout)

    async def wait_async(self) -> Any:
        """이벤트 루프를 막지 않고 취소를 기다린 뒤 취소 사유를 반환"""
        if self._event.is_set():
            return self._reason

        loop = asyncio.get_running_loop()
        waiter = loop.create_future()

        def _resolve() -> None:
            if not waiter.done():
                waiter.set_result(None)

        def _wake() -> None:
            loop.call_soon_threadsafe(_resolve)

        self.add_callback(_wake)
        try:
            await waiter
        finally:
            self.remove_callback(_wake)
        return self._reason

    def add_callback(self, callback: Callback) -> Callback:
        """취소 시 한 번 호출될 콜백 등록

        이미 취소된 신호라면 즉시(호출자 스레드에서) 실행합니다.
        """
        with self._lock:
            if not self._event.is_set():
                self._callbacks.append(callback)
                return callback
        self._run_callback(callback)
        return callback

    def remove_callback(self, callback: Callback) -> bool:
        with self._lock:
            try:
                self._callbacks.remove(callback)
            except ValueError:
                return False
            return True

    def _run_callback(self, callback: Callback) -> None:
        try:
            callback()
        except Exception as e:
            logger.error(f"[CANCEL] callback failed: {type(e).__name__}: {e}", exc_info=True)

    # ------------------------------------------------------------------

    def __enter__(self) -> "CancellationSignal":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        # 파생 신호의 타이머/부모 연결 해제
        self.cancel()

    def __repr__(self) -> str:
        state = f"cancelled, reason={self._reason!r}" if self._event.is_set() else "live"
        return f"CancellationSignal({state}, deadline={self._deadline})"
