"""커스텀 예외 정의 (Structured Exception Hierarchy)"""
from typing import Any, Optional


class CocktailDBException(Exception):
    """기본 예외 클래스 - 모든 커스텀 예외의 부모"""
    def __init__(self, message: str, error_code: str = "UNKNOWN_ERROR", details: Optional[dict[str, Any]] = None):
        self.message = message
        self.error_code = error_code
        self.details = details or {}
        super().__init__(self.message)

    def __str__(self) -> str:
        return f"[{self.error_code}] {self.message}"


class CancelledException(CocktailDBException):
    """취소 신호가 작업 완료보다 먼저 발생했을 때"""
    def __init__(self, reason: Any = None, details: Optional[dict[str, Any]] = None):
        self.reason = reason
        message = f"Operation cancelled: {reason}" if reason is not None else "Operation cancelled"
        super().__init__(message, "CANCELLED", details or {"reason": None if reason is None else str(reason)})


class TransportException(CocktailDBException):
    """요청 생성 또는 네트워크 교환 실패 (DNS, 연결 거부, 잘못된 URL 등)"""
    def __init__(self, reason: str, details: Optional[dict[str, Any]] = None):
        message = f"Transport failed: {reason}"
        super().__init__(message, "TRANSPORT_ERROR", details or {"reason": reason})


class DecodeException(CocktailDBException):
    """응답은 받았지만 본문이 JSON이 아니거나 기대한 형태가 아님"""
    def __init__(self, reason: str, details: Optional[dict[str, Any]] = None):
        message = f"Failed to decode response: {reason}"
        super().__init__(message, "DECODE_ERROR", details or {"reason": reason})


class InternalException(CocktailDBException):
    """작업 내부에서 발생한 예상치 못한 오류"""
    def __init__(self, reason: str, details: Optional[dict[str, Any]] = None):
        message = f"Internal error: {reason}"
        super().__init__(message, "INTERNAL_ERROR", details or {"reason": reason})

    @classmethod
    def from_error(cls, error: BaseException) -> "InternalException":
        """임의의 예외를 감싸서 원인(__cause__)을 보존"""
        exc = cls(
            f"{type(error).__name__}: {error}",
            details={"error_type": type(error).__name__},
        )
        exc.__cause__ = error
        return exc
