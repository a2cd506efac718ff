"""Engine Layer - cancellation-safe execution primitive

- CancellationSignal: caller-owned, one-shot cancellation token
- CancellableExecutor: runs blocking work on a worker thread, races it
  against the signal and always joins the worker before returning
- Outcome / ErrorKind: single success-or-typed-error value per call

이 레이어는 칵테일 검색에 대해 아무것도 모릅니다.
"""

from .cancellation import CancelReason, CancellationSignal
from .executor import (
    CancellableExecutor,
    WorkFactory,
    WorkUnit,
    execute,
    execute_async,
    execute_async_with,
    get_executor,
)
from .outcome import ErrorKind, Outcome

__all__ = [
    "CancellationSignal",
    "CancelReason",
    "CancellableExecutor",
    "WorkUnit",
    "WorkFactory",
    "execute",
    "execute_async",
    "execute_async_with",
    "get_executor",
    "Outcome",
    "ErrorKind",
]
