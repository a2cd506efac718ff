"""Outcome - single success-or-typed-error value per operation

실행기 호출 한 번당 정확히 하나의 Outcome 이 만들어집니다.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Generic, Optional, TypeVar

from cocktaildb.core.exceptions import (
    CancelledException,
    CocktailDBException,
    DecodeException,
    TransportException,
)


T = TypeVar("T")


class ErrorKind(str, Enum):
    """오류 종류

    호출자가 "네트워크 실패"와 "서버가 잘못된 데이터를 보냄"을 구분할 수 있도록
    예외 타입과 1:1 로 대응합니다.
    """

    CANCELLED = "cancelled"  # 작업 완료 전에 취소 신호 발생
    TRANSPORT = "transport"  # 요청 생성/네트워크 교환 실패
    DECODE = "decode"  # 본문이 JSON 이 아니거나 형태가 다름
    INTERNAL = "internal"  # 작업 내부의 예상치 못한 오류

    @classmethod
    def of(cls, error: CocktailDBException) -> "ErrorKind":
        if isinstance(error, CancelledException):
            return cls.CANCELLED
        if isinstance(error, TransportException):
            return cls.TRANSPORT
        if isinstance(error, DecodeException):
            return cls.DECODE
        return cls.INTERNAL


@dataclass(frozen=True)
class Outcome(Generic[T]):
    """Ok(value) | Err(error)

    Attributes:
        value: 성공 시 결과 값
        error: 실패 시 예외 (CocktailDBException 하위 타입)
    """

    value: Optional[T] = None
    error: Optional[CocktailDBException] = None

    def __post_init__(self) -> None:
        if self.error is not None and not isinstance(self.error, CocktailDBException):
            raise TypeError(f"Outcome.error must be a CocktailDBException, got {type(self.error).__name__}")

    @classmethod
    def ok(cls, value: T) -> "Outcome[T]":
        return cls(value=value)

    @classmethod
    def err(cls, error: CocktailDBException) -> "Outcome[Any]":
        return cls(error=error)

    @property
    def is_ok(self) -> bool:
        return self.error is None

    @property
    def is_error(self) -> bool:
        return self.error is not None

    @property
    def kind(self) -> Optional[ErrorKind]:
        """실패 종류 (성공이면 None)"""
        if self.error is None:
            return None
        return ErrorKind.of(self.error)

    @property
    def is_cancelled(self) -> bool:
        return self.kind is ErrorKind.CANCELLED

    def unwrap(self) -> T:
        """성공 값 반환, 실패면 담고 있는 예외를 raise"""
        if self.error is not None:
            raise self.error
        return self.value  # type: ignore[return-value]

    def to_dict(self) -> dict[str, Any]:
        if self.error is None:
            return {"status": "success", "value": self.value}
        return {
            "status": "error",
            "kind": self.kind.value,
            "error_code": self.error.error_code,
            "message": self.error.message,
            "details": self.error.details,
        }

