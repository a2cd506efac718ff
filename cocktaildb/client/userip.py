"""User IP context - request-scoped forwarded client address

서버가 최종 사용자 요청을 처리하는 동안 사용자 IP 를 컨텍스트에 담아두면,
검색 클라이언트가 이를 읽어 userip 파라미터로 전달합니다.
검색 API 는 이 값으로 서버발 요청과 사용자발 요청을 구분합니다.
"""

from __future__ import annotations

import ipaddress
from contextlib import contextmanager
from contextvars import ContextVar
from typing import Iterator, Optional

from .request import IPAddress


_user_ip: ContextVar[Optional[IPAddress]] = ContextVar("cocktaildb_user_ip", default=None)


def parse_ip(host: str) -> IPAddress:
    """IP 문자열 파싱 ("[::1]" 처럼 대괄호로 감싼 IPv6 허용)

    Raises:
        ValueError: IP 주소가 아닌 경우
    """
    if host.startswith("[") and host.endswith("]"):
        host = host[1:-1]
    return ipaddress.ip_address(host)


def from_request(remote_addr: str) -> IPAddress:
    """원격 주소("host:port")에서 사용자 IP 추출

    Examples:
        >>> from_request("192.0.2.1:5432")
        IPv4Address('192.0.2.1')
        >>> from_request("[::1]:80")
        IPv6Address('::1')

    Raises:
        ValueError: 포트가 없거나 IP 가 아닌 경우
    """
    if not remote_addr:
        raise ValueError("userip: empty remote address")

    if remote_addr.startswith("["):
        end = remote_addr.find("]")
        if end < 0 or remote_addr[end + 1:end + 2] != ":":
            raise ValueError(f"userip: {remote_addr!r} is not IP:port")
        host = remote_addr[1:end]
    else:
        host, sep, _port = remote_addr.rpartition(":")
        if not sep or ":" in host:
            raise ValueError(f"userip: {remote_addr!r} is not IP:port")

    try:
        return parse_ip(host)
    except ValueError as e:
        raise ValueError(f"userip: {remote_addr!r} is not IP:port") from e


@contextmanager
def new_context(address: IPAddress) -> Iterator[IPAddress]:
    """with 블록 동안 현재 컨텍스트에 사용자 IP 를 바인딩"""
    token = _user_ip.set(address)
    try:
        yield address
    finally:
        _user_ip.reset(token)


def from_context() -> Optional[IPAddress]:
    """현재 컨텍스트의 사용자 IP (없으면 None)"""
    return _user_ip.get()
