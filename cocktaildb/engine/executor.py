"""Cancellable Executor - race blocking work against a cancellation signal

블로킹 작업(WorkUnit)을 별도 스레드에서 실행하고, 작업 완료와 취소 신호 중
먼저 일어나는 쪽으로 결과를 결정합니다.

- 작업이 먼저 끝나면: 그 결과를 그대로 반환
- 신호가 먼저 오면: 작업이 실제로 끝날 때까지 기다린 뒤(결과는 폐기)
  Cancelled 를 반환

어떤 경로로 나가든 워커 스레드는 반환 전에 join 됩니다. 즉 execute() 가
반환된 시점에는 작업이 건드리던 리소스(응답 본문 등)가 모두 정리되어 있습니다.
"""

from __future__ import annotations

import asyncio
import itertools
import threading
from typing import Any, Callable, Optional, TypeVar

from cocktaildb.core.exceptions import (
    CancelledException,
    CocktailDBException,
    InternalException,
)
from cocktaildb.core.logging import logger

from .cancellation import CancelReason, CancellationSignal
from .outcome import Outcome


T = TypeVar("T")
WorkUnit = Callable[[], T]
WorkFactory = Callable[[CancellationSignal], WorkUnit[T]]

_worker_ids = itertools.count(1)


class CancellableExecutor:
    """취소 신호를 따르는 블로킹 작업 실행기

    상태가 없으므로 여러 스레드에서 동시에 execute() 를 호출해도 됩니다.
    호출마다 워커 스레드 하나를 만들고, 반환 전에 항상 join 합니다.

    Usage:
        executor = CancellableExecutor()
        outcome = executor.execute(signal, lambda: blocking_call())
        if outcome.is_ok:
            ...
    """

    def __init__(self, name: str = "cancellable-work") -> None:
        self.name = name

    def execute(self, signal: CancellationSignal, work: WorkUnit[T]) -> Outcome[T]:
        """작업 실행

        Args:
            signal: 호출자 소유의 취소 신호 (관찰만 함)
            work: 인자 없는 블로킹 작업, 정확히 한 번 호출됨

        Returns:
            Outcome: 작업 결과 또는 Cancelled/Transport/Decode/Internal 오류
        """
        wake = threading.Event()
        result: list[Outcome[T]] = []

        def _run() -> None:
            try:
                outcome = Outcome.ok(work())
            except CocktailDBException as e:
                outcome = Outcome.err(e)
            except BaseException as e:
                logger.error(f"[EXECUTOR] Work raised unexpectedly: {type(e).__name__}: {e}", exc_info=True)
                outcome = Outcome.err(InternalException.from_error(e))
            result.append(outcome)
            wake.set()

        worker = threading.Thread(
            target=_run,
            name=f"{self.name}-{next(_worker_ids)}",
            daemon=True,
        )

        signal.add_callback(wake.set)
        try:
            worker.start()
            wake.wait()
            if result:
                # 작업이 먼저(혹은 취소와 동시에) 끝남: 결과를 뒤집지 않음
                return result[0]

            logger.debug(f"[EXECUTOR] Signal fired first, waiting for {worker.name} to finish")
            worker.join()
            if result and result[0].is_ok:
                logger.debug(f"[EXECUTOR] Discarding result of {worker.name} produced after cancellation")
            return Outcome.err(CancelledException(signal.reason))
        finally:
            signal.remove_callback(wake.set)
            if worker.ident is not None:
                worker.join()

    async def execute_async(self, signal: CancellationSignal, work: WorkUnit[T]) -> Outcome[T]:
        """asyncio 에서 execute() 사용

        work 가 신호를 직접 확인하지 않는 경우에 씁니다. 작업 안에서 취소를
        확인해야 하면 execute_async_with() 를 쓰세요.
        """
        return await self.execute_async_with(signal, lambda _child: work)

    async def execute_async_with(self, signal: CancellationSignal, make_work: WorkFactory[T]) -> Outcome[T]:
        """자식 신호를 받아 작업을 만드는 asyncio 실행

        자식 신호를 만들어 make_work 에 넘기고, 이벤트 루프 밖에서 execute() 를
        실행합니다. 대기 중인 태스크가 취소되면 자식 신호를 취소하고(작업도 이
        신호를 보고 멈춤), 작업이 끝날 때까지 기다린 다음
        asyncio.CancelledError 를 다시 올립니다. 호출자의 signal 은 취소하지
        않습니다.
        """
        loop = asyncio.get_running_loop()
        with CancellationSignal.with_cancel(signal) as child:
            work = make_work(child)
            future = loop.run_in_executor(None, self.execute, child, work)
            try:
                return await asyncio.shield(future)
            except asyncio.CancelledError:
                child.cancel(CancelReason.CANCELED)
                await _drain(future)
                raise


async def _drain(future: "asyncio.Future[Any]") -> None:
    """future 가 끝날 때까지 대기 (대기 중 재취소되어도 계속 기다림)"""
    while not future.done():
        try:
            await asyncio.wait({future})
        except asyncio.CancelledError:
            continue


_default_executor: Optional[CancellableExecutor] = None


def get_executor() -> CancellableExecutor:
    """CancellableExecutor 싱글톤"""
    global _default_executor
    if _default_executor is None:
        _default_executor = CancellableExecutor()
    return _default_executor


def execute(signal: CancellationSignal, work: WorkUnit[T]) -> Outcome[T]:
    return get_executor().execute(signal, work)


async def execute_async(signal: CancellationSignal, work: WorkUnit[T]) -> Outcome[T]:
    return await get_executor().execute_async(signal, work)


async def execute_async_with(signal: CancellationSignal, make_work: WorkFactory[T]) -> Outcome[T]:
    return await get_executor().execute_async_with(signal, make_work)
