"""설정 관리 - 환경 변수 로드 및 검증"""
from pydantic_settings import BaseSettings
from pydantic import field_validator


class Settings(BaseSettings):
    """애플리케이션 설정"""

    # TheCocktailDB 검색 API
    cocktaildb_base_url: str = "https://www.thecocktaildb.com/api/json/v1/1"
    cocktaildb_search_path: str = "/search.php"

    # HTTP 전송 계층
    # - http_timeout_s: 단일 요청(connect + read) 타임아웃
    # - http_max_clients: 풀에 보관하는 유휴 세션 최대 개수
    # - http_chunk_size: 응답 본문을 읽는 단위 (취소 신호 확인 주기)
    http_timeout_s: float = 10.0
    http_user_agent: str = "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36"
    http_impersonate: str = "chrome110"
    http_max_clients: int = 8
    http_chunk_size: int = 16384

    # API
    api_title: str = "Cocktail Search Service"
    api_version: str = "1.0.0"
    api_description: str = "TheCocktailDB 검색을 취소 가능한 방식으로 중계합니다."

    # 요청에 timeout 파라미터가 없을 때 적용되는 서버측 상한
    api_default_timeout_s: float = 10.0

    # 로깅
    log_level: str = "INFO"

    @field_validator("cocktaildb_base_url")
    @classmethod
    def validate_base_url(cls, v: str) -> str:
        if not v.startswith(("http://", "https://")):
            raise ValueError("cocktaildb_base_url must start with http:// or https://")
        return v.rstrip("/")

    @field_validator("cocktaildb_search_path")
    @classmethod
    def validate_search_path(cls, v: str) -> str:
        if not v.startswith("/"):
            return f"/{v}"
        return v

    @field_validator("http_timeout_s", "api_default_timeout_s")
    @classmethod
    def validate_timeouts(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("timeouts must be positive")
        return v

    @field_validator("http_max_clients", "http_chunk_size")
    @classmethod
    def validate_positive_ints(cls, v: int) -> int:
        if v <= 0:
            raise ValueError("http_max_clients and http_chunk_size must be positive")
        return v

    @property
    def search_endpoint(self) -> str:
        return f"{self.cocktaildb_base_url}{self.cocktaildb_search_path}"

    class Config:
        env_file = ".env"
        case_sensitive = False


settings = Settings()
