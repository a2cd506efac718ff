"""공유 HTTP 클라이언트 (curl_cffi)

- 요청마다 Session 을 만들면 TLS/커넥션 오버헤드가 커지므로 프로세스 단위로
  세션을 재사용합니다.
- curl_cffi 의 동기 Session 은 한 번에 한 스레드만 써야 하므로, 유휴 세션
  풀에서 하나를 빌려 쓰고 돌려놓습니다.
- 세션은 스레드 로컬 curl 핸들을 쓰지 않습니다 (use_thread_local_curl=False).
  그래야 매번 다른 워커 스레드에서 빌려 써도 같은 핸들의 keep-alive 커넥션이
  재사용됩니다. stream=True 는 핸들을 복제하므로 쓰지 않습니다.
- 본문은 curl 이 받아 둔 것을 chunk_size 단위로 나눠 건네고, with 블록을
  벗어나면 응답을 항상 닫습니다.
- 앱 종료 시 close()로 정리합니다.
"""

from __future__ import annotations

import threading
from contextlib import contextmanager
from typing import ContextManager, Dict, Iterator, List, Optional, Protocol

from curl_cffi import CurlError
from curl_cffi.requests import RequestsError, Session

from cocktaildb.core.config import settings
from cocktaildb.core.exceptions import TransportException
from cocktaildb.core.logging import logger

from .request import RequestDescriptor


class HttpResponse(Protocol):
    """열린 HTTP 응답"""

    status_code: int

    def iter_content(self, chunk_size: int) -> Iterator[bytes]:
        ...


class HttpTransport(Protocol):
    """HTTP 전송 프로토콜

    open() 이 돌려주는 컨텍스트 매니저를 벗어나는 순간 응답 리소스가 해제되어야
    합니다. 실패는 TransportException 으로 올립니다.
    """

    def open(self, request: RequestDescriptor, *, timeout_s: float) -> ContextManager[HttpResponse]:
        ...


class CurlHttpResponse:
    """curl_cffi 응답 래퍼"""

    def __init__(self, response) -> None:
        self._response = response
        self.status_code: int = getattr(response, "status_code", 0) or 0

    def iter_content(self, chunk_size: int) -> Iterator[bytes]:
        content = self._response.content or b""
        for offset in range(0, len(content), chunk_size):
            yield content[offset:offset + chunk_size]


class SharedHttpClient:
    def __init__(self, max_idle: Optional[int] = None) -> None:
        self._lock = threading.Lock()
        self._idle: List[Session] = []
        self._max_idle = max_idle or settings.http_max_clients
        self._closed = False

    def default_headers(self) -> Dict[str, str]:
        return {
            "User-Agent": settings.http_user_agent,
            "Accept": "application/json",
        }

    def _new_session(self) -> Session:
        return Session(
            impersonate=settings.http_impersonate,
            headers=self.default_headers(),
            allow_redirects=True,
            trust_env=False,
            use_thread_local_curl=False,
        )

    def _acquire(self) -> Session:
        with self._lock:
            if self._idle:
                return self._idle.pop()
        return self._new_session()

    def _release(self, session: Session, healthy: bool) -> None:
        with self._lock:
            if healthy and not self._closed and len(self._idle) < self._max_idle:
                self._idle.append(session)
                return
        self._close_session(session)

    @contextmanager
    def open(self, request: RequestDescriptor, *, timeout_s: float) -> Iterator[CurlHttpResponse]:
        url = request.full_url()
        session = self._acquire()
        response = None
        healthy = True
        try:
            try:
                response = session.request(
                    request.method,
                    url,
                    timeout=timeout_s,
                )
            except (RequestsError, CurlError, ValueError) as e:
                healthy = False
                logger.info(f"[HTTP_CLIENT] {request.method} failed: {type(e).__name__}: {repr(e)}")
                raise TransportException(
                    f"{type(e).__name__}: {e}",
                    details={"url": request.url, "method": request.method},
                ) from e

            yield CurlHttpResponse(response)
        finally:
            if response is not None:
                try:
                    response.close()
                except (RequestsError, CurlError) as e:
                    healthy = False
                    logger.debug(f"[HTTP_CLIENT] response close failed: {type(e).__name__}")
            self._release(session, healthy)

    def _close_session(self, session: Session) -> None:
        try:
            session.close()
        except (RequestsError, CurlError) as e:
            logger.debug(f"[HTTP_CLIENT] session close failed: {type(e).__name__}")

    @property
    def idle_sessions(self) -> int:
        with self._lock:
            return len(self._idle)

    def close(self) -> None:
        with self._lock:
            sessions, self._idle = self._idle, []
            self._closed = True
        for session in sessions:
            self._close_session(session)


_shared_http_client = SharedHttpClient()


def get_shared_http_client() -> SharedHttpClient:
    return _shared_http_client


def shutdown_shared_http_client() -> None:
    _shared_http_client.close()
