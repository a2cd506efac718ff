"""전역 테스트 설정

역할:
- 테스트 환경 구성
- 공통 Fake 전송 계층 주입

금지:
- 실제 TheCocktailDB 호출 (integration 테스트는 로컬 서버만 사용)
"""

from __future__ import annotations

import os
import sys
import threading
import time
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Optional, Sequence

import pytest


# 프로젝트 루트를 경로에 추가
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from cocktaildb.client import CocktailSearchClient, RequestDescriptor  # noqa: E402
from cocktaildb.engine import CancellableExecutor  # noqa: E402


@pytest.fixture(scope="session", autouse=True)
def test_env() -> None:
    """테스트 환경 변수 설정 (세션 전역)"""
    os.environ["ENVIRONMENT"] = "test"
    os.environ["LOG_LEVEL"] = "INFO"


MARGARITA_BODY = b'{"drinks":[{"strDrink":"Margarita","strDrinkThumb":"http://x/m.jpg"}]}'


class FakeResponse:
    """청크 단위로 본문을 흘려주는 응답"""

    def __init__(self, status_code: int, chunks: Sequence[bytes], chunk_delay: float = 0.0) -> None:
        self.status_code = status_code
        self._chunks = list(chunks)
        self._chunk_delay = chunk_delay
        self.chunks_read = 0

    def iter_content(self, chunk_size: int) -> Iterator[bytes]:
        for chunk in self._chunks:
            if self._chunk_delay:
                time.sleep(self._chunk_delay)
            self.chunks_read += 1
            yield chunk


class FakeTransport:
    """HttpTransport 테스트 더블

    - requests / timeouts: open() 에 전달된 값 기록
    - opened / closed: 응답 리소스 획득/해제 횟수
    - open_delay: 응답 헤더 도착 전 지연 (네트워크 대기 흉내)
    - error: open() 에서 올릴 예외
    """

    def __init__(
        self,
        body: bytes = MARGARITA_BODY,
        *,
        status_code: int = 200,
        chunks: Optional[Sequence[bytes]] = None,
        chunk_delay: float = 0.0,
        open_delay: float = 0.0,
        error: Optional[Exception] = None,
    ) -> None:
        self.chunks = list(chunks) if chunks is not None else [body]
        self.status_code = status_code
        self.chunk_delay = chunk_delay
        self.open_delay = open_delay
        self.error = error
        self.requests: list[RequestDescriptor] = []
        self.timeouts: list[float] = []
        self.opened = 0
        self.closed = 0
        self.started = threading.Event()
        self.finished = threading.Event()
        self.last_response: Optional[FakeResponse] = None

    @contextmanager
    def open(self, request: RequestDescriptor, *, timeout_s: float) -> Iterator[FakeResponse]:
        self.requests.append(request)
        self.timeouts.append(timeout_s)
        self.started.set()
        try:
            if self.open_delay:
                time.sleep(self.open_delay)
            if self.error is not None:
                raise self.error
            self.opened += 1
            self.last_response = FakeResponse(self.status_code, self.chunks, self.chunk_delay)
            try:
                yield self.last_response
            finally:
                self.closed += 1
        finally:
            self.finished.set()


@pytest.fixture
def executor() -> CancellableExecutor:
    return CancellableExecutor(name="test-work")


@pytest.fixture
def fake_transport() -> FakeTransport:
    return FakeTransport()


@pytest.fixture
def make_transport():
    """FakeTransport 팩토리 (본문/지연/오류 지정용)"""
    return FakeTransport


@pytest.fixture
def make_client(executor: CancellableExecutor):
    """FakeTransport 를 쓰는 검색 클라이언트 팩토리"""

    def _make(transport: FakeTransport, **kwargs) -> CocktailSearchClient:
        kwargs.setdefault("endpoint", "https://cocktails.test/api/json/v1/1/search.php")
        return CocktailSearchClient(transport=transport, executor=executor, **kwargs)

    return _make
