"""Request Descriptor

한 번의 아웃바운드 요청을 설명하는 값 객체입니다.
쿼리 파라미터는 키 순으로 인코딩되므로 같은 입력이면 항상 같은 URL 이 나옵니다.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from ipaddress import IPv4Address, IPv6Address
from typing import Dict, Optional, Union
from urllib.parse import urlencode


IPAddress = Union[IPv4Address, IPv6Address]


@dataclass(frozen=True)
class RequestDescriptor:
    """아웃바운드 HTTP 요청 설명

    Attributes:
        method: HTTP 메서드
        url: 쿼리 스트링을 제외한 대상 URL
        params: 쿼리 파라미터 (키 유일)
        forwarded_address: 전달할 최종 사용자 IP (params 의 userip 과 동일)
    """

    method: str
    url: str
    params: Dict[str, str] = field(default_factory=dict)
    forwarded_address: Optional[IPAddress] = None

    def query_string(self) -> str:
        return urlencode(sorted(self.params.items()))

    def full_url(self) -> str:
        query = self.query_string()
        if not query:
            return self.url
        separator = "&" if "?" in self.url else "?"
        return f"{self.url}{separator}{query}"
