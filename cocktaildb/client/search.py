"""Cocktail Search Client

검색 요청(RequestDescriptor)과 디코딩 작업(WorkUnit)을 만들어
CancellableExecutor 에 위임합니다. 반환된 Outcome 은 가공 없이 그대로 돌려줍니다.
"""

from __future__ import annotations

import time
from typing import Callable, Optional

from pydantic import ValidationError

from cocktaildb.core.config import settings
from cocktaildb.core.exceptions import CancelledException, DecodeException, TransportException
from cocktaildb.core.logging import logger, sanitize_for_log
from cocktaildb.engine import CancelReason, CancellableExecutor, CancellationSignal, Outcome, get_executor
from cocktaildb.schemas.drink_schema import Recipes

from . import userip
from .http_client import HttpTransport, get_shared_http_client
from .request import IPAddress, RequestDescriptor


def decode_recipes(body: bytes) -> Recipes:
    """응답 본문(JSON)을 Recipes 로 디코딩

    Raises:
        DecodeException: JSON 이 아니거나 기대한 형태가 아닌 경우
    """
    try:
        return Recipes.model_validate_json(body)
    except ValidationError as e:
        first = e.errors()[0] if e.error_count() else {}
        raise DecodeException(
            first.get("msg", str(e)),
            details={"errors": e.error_count(), "type": first.get("type"), "size": len(body)},
        ) from e


class CocktailSearchClient:
    """TheCocktailDB 검색 클라이언트

    Usage:
        client = CocktailSearchClient()
        with CancellationSignal.with_timeout(3.0) as signal:
            outcome = client.search(signal, "margarita")
        for drink in outcome.unwrap().drinks:
            print(drink.name)
    """

    def __init__(
        self,
        transport: Optional[HttpTransport] = None,
        executor: Optional[CancellableExecutor] = None,
        *,
        endpoint: Optional[str] = None,
        timeout_s: Optional[float] = None,
        chunk_size: Optional[int] = None,
    ) -> None:
        """
        Args:
            transport: HTTP 전송 계층 (없으면 프로세스 공유 클라이언트)
            executor: 실행기 (없으면 기본 실행기)
            endpoint: 검색 엔드포인트 (없으면 settings.search_endpoint)
            timeout_s: 요청 타임아웃 (없으면 settings.http_timeout_s)
            chunk_size: 본문 읽기 단위 (없으면 settings.http_chunk_size)
        """
        self._transport = transport
        self._executor = executor
        self.endpoint = endpoint or settings.search_endpoint
        self.timeout_s = timeout_s or settings.http_timeout_s
        self.chunk_size = chunk_size or settings.http_chunk_size

    @property
    def transport(self) -> HttpTransport:
        if self._transport is None:
            return get_shared_http_client()
        return self._transport

    @property
    def executor(self) -> CancellableExecutor:
        if self._executor is None:
            return get_executor()
        return self._executor

    def build_request(self, query: str, forwarded_address: Optional[IPAddress] = None) -> RequestDescriptor:
        """검색 요청 생성

        forwarded_address 가 없으면 요청 컨텍스트(userip)에 담긴 주소를 사용합니다.
        검색어는 검증하지 않습니다 (빈 문자열도 그대로 전송).
        """
        address = forwarded_address if forwarded_address is not None else userip.from_context()
        params = {"s": query}
        if address is not None:
            params["userip"] = str(address)
        return RequestDescriptor(
            method="GET",
            url=self.endpoint,
            params=params,
            forwarded_address=address,
        )

    def make_work(self, signal: CancellationSignal, request: RequestDescriptor) -> Callable[[], Recipes]:
        """요청을 수행하고 응답을 디코딩하는 WorkUnit 생성"""

        def _fetch() -> Recipes:
            # 교환 시작 전에 이미 취소되었으면 요청을 보내지 않음
            signal.raise_if_cancelled()

            timeout_s = self.timeout_s
            remaining = signal.remaining()
            if remaining is not None:
                if remaining <= 0:
                    raise CancelledException(CancelReason.DEADLINE_EXCEEDED)
                timeout_s = min(timeout_s, remaining)

            with self.transport.open(request, timeout_s=timeout_s) as response:
                if response.status_code >= 400:
                    raise TransportException(
                        f"HTTP {response.status_code}",
                        details={"status_code": response.status_code, "url": request.url},
                    )

                body = bytearray()
                for chunk in response.iter_content(self.chunk_size):
                    signal.raise_if_cancelled()
                    body.extend(chunk)

                return decode_recipes(bytes(body))

        return _fetch

    def search(
        self,
        signal: CancellationSignal,
        query: str,
        forwarded_address: Optional[IPAddress] = None,
    ) -> Outcome[Recipes]:
        """칵테일 검색

        Args:
            signal: 호출자 소유의 취소 신호
            query: 검색어
            forwarded_address: 전달할 최종 사용자 IP (선택)

        Returns:
            Outcome[Recipes]: 성공 시 서버 순서 그대로의 칵테일 목록,
            실패 시 Cancelled / Transport / Decode / Internal
        """
        request = self.build_request(query, forwarded_address)
        logger.debug(f"[SEARCH] query='{sanitize_for_log(query)}', url={request.url}")

        start = time.perf_counter()
        outcome = self.executor.execute(signal, self.make_work(signal, request))
        self._log_outcome(query, outcome, start)
        return outcome

    async def search_async(
        self,
        signal: CancellationSignal,
        query: str,
        forwarded_address: Optional[IPAddress] = None,
    ) -> Outcome[Recipes]:
        """search() 의 asyncio 버전 (이벤트 루프를 막지 않음)"""
        request = self.build_request(query, forwarded_address)
        logger.debug(f"[SEARCH] async query='{sanitize_for_log(query)}', url={request.url}")

        start = time.perf_counter()
        # 작업은 실행기가 경합시키는 자식 신호를 확인
        outcome = await self.executor.execute_async_with(
            signal, lambda child: self.make_work(child, request)
        )
        self._log_outcome(query, outcome, start)
        return outcome

    def _log_outcome(self, query: str, outcome: Outcome[Recipes], start: float) -> None:
        elapsed_ms = (time.perf_counter() - start) * 1000
        if outcome.is_ok:
            logger.info(
                f"[SEARCH] Completed: query='{sanitize_for_log(query)}', "
                f"drinks={len(outcome.value.drinks)}, elapsed={elapsed_ms:.1f}ms"
            )
        else:
            logger.warning(
                f"[SEARCH] Failed: query='{sanitize_for_log(query)}', "
                f"kind={outcome.kind.value}, error={outcome.error}, elapsed={elapsed_ms:.1f}ms"
            )


_default_client: Optional[CocktailSearchClient] = None


def get_search_client() -> CocktailSearchClient:
    """CocktailSearchClient 싱글톤"""
    global _default_client
    if _default_client is None:
        _default_client = CocktailSearchClient()
    return _default_client


def search(
    signal: CancellationSignal,
    query: str,
    forwarded_address: Optional[IPAddress] = None,
) -> Outcome[Recipes]:
    return get_search_client().search(signal, query, forwarded_address)


async def search_async(
    signal: CancellationSignal,
    query: str,
    forwarded_address: Optional[IPAddress] = None,
) -> Outcome[Recipes]:
    return await get_search_client().search_async(signal, query, forwarded_address)
