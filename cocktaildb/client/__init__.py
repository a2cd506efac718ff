"""TheCocktailDB search client modules.

공개 API는 이 파일에서만 export합니다.
"""

from . import userip
from .http_client import (
    CurlHttpResponse,
    HttpResponse,
    HttpTransport,
    SharedHttpClient,
    get_shared_http_client,
    shutdown_shared_http_client,
)
from .request import IPAddress, RequestDescriptor
from .search import CocktailSearchClient, decode_recipes, get_search_client, search, search_async

__all__ = [
    "userip",
    "CurlHttpResponse",
    "HttpResponse",
    "HttpTransport",
    "SharedHttpClient",
    "get_shared_http_client",
    "shutdown_shared_http_client",
    "IPAddress",
    "RequestDescriptor",
    "CocktailSearchClient",
    "decode_recipes",
    "get_search_client",
    "search",
    "search_async",
]
