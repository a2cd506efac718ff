"""Search Routes - HTTP layer over CocktailSearchClient

HTTP Layer가 검색 클라이언트로 요청을 위임하는 단순한 Translator 역할만 수행합니다.
요청자의 IP 를 userip 컨텍스트에 담아 검색 API 로 전달하고,
timeout 파라미터는 취소 신호의 데드라인으로 합성합니다.
"""

import time
from contextlib import nullcontext
from typing import Optional

from fastapi import APIRouter, Depends, Query, Request
from fastapi.responses import JSONResponse

from cocktaildb.client import CocktailSearchClient, get_search_client, userip
from cocktaildb.core.config import settings
from cocktaildb.core.logging import logger, sanitize_for_log
from cocktaildb.engine import CancellationSignal, ErrorKind, Outcome
from cocktaildb.schemas.drink_schema import SearchData, SearchResponse

router = APIRouter(prefix="/api/v1", tags=["search"])


_ERROR_STATUS = {
    ErrorKind.CANCELLED: 504,
    ErrorKind.TRANSPORT: 502,
    ErrorKind.DECODE: 502,
    ErrorKind.INTERNAL: 500,
}

_ERROR_MESSAGES = {
    ErrorKind.CANCELLED: "검색 시간이 초과되었거나 요청이 취소되었습니다.",
    ErrorKind.TRANSPORT: "검색 서버에 연결하지 못했습니다. 잠시 후 다시 시도해주세요.",
    ErrorKind.DECODE: "검색 서버가 올바르지 않은 응답을 보냈습니다.",
    ErrorKind.INTERNAL: "검색 중 오류가 발생했습니다.",
}


def _client_address(request: Request) -> Optional[userip.IPAddress]:
    """요청자의 IP (IP 가 아니면 None)"""
    if request.client is None or not request.client.host:
        return None
    try:
        return userip.parse_ip(request.client.host)
    except ValueError:
        logger.debug(f"[API] Client host is not an IP: {sanitize_for_log(request.client.host)}")
        return None


@router.get("/search", response_model=SearchResponse)
async def search_drinks(
    request: Request,
    s: str = Query("", max_length=200, description="검색어"),
    timeout: Optional[float] = Query(None, gt=0, le=60, description="검색 제한 시간 (초)"),
    client: CocktailSearchClient = Depends(get_search_client),
):
    """칵테일 검색 API

    Flow:
        1. 요청자 IP 를 userip 컨텍스트에 바인딩
        2. timeout 으로 데드라인이 있는 취소 신호 생성
        3. 검색 클라이언트에 위임
        4. Outcome 을 HTTP Response 로 변환
    """
    timeout_s = timeout if timeout is not None else settings.api_default_timeout_s
    address = _client_address(request)
    logger.info(f"[API] Search request: query='{sanitize_for_log(s)}', timeout={timeout_s:.2f}s")

    start = time.perf_counter()
    scope = userip.new_context(address) if address is not None else nullcontext()
    with CancellationSignal.with_timeout(timeout_s) as signal, scope:
        outcome = await client.search_async(signal, s)
    elapsed_ms = (time.perf_counter() - start) * 1000

    if outcome.is_ok:
        recipes = outcome.value
        return SearchResponse(
            status="success",
            data=SearchData(query=s, drinks=recipes.drinks, elapsed_ms=elapsed_ms),
            message=f"{len(recipes.drinks)}개의 칵테일을 찾았습니다." if recipes.drinks else "검색 결과가 없습니다.",
            error_code=None,
        )

    return _error_response(outcome)


def _error_response(outcome: Outcome) -> JSONResponse:
    kind = outcome.kind
    body = SearchResponse(
        status="error",
        data=None,
        message=_ERROR_MESSAGES.get(kind, "검색 중 오류가 발생했습니다."),
        error_code=outcome.error.error_code,
    )
    return JSONResponse(status_code=_ERROR_STATUS.get(kind, 500), content=body.model_dump())
