"""Pydantic 스키마 정의"""
from typing import Any, Optional, List
from pydantic import BaseModel, ConfigDict, Field, field_validator
from datetime import datetime


class Drink(BaseModel):
    """칵테일 레코드

    TheCocktailDB 필드명(strDrink, strDrinkThumb)으로 읽고,
    직렬화는 파이썬 필드명(name, thumbnail_url)으로 합니다.
    """
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    name: str = Field("", validation_alias="strDrink", description="칵테일 이름")
    thumbnail_url: str = Field("", validation_alias="strDrinkThumb", description="썸네일 URL")

    @field_validator("name", "thumbnail_url", mode="before")
    @classmethod
    def _none_to_empty(cls, v: Any) -> Any:
        """누락/null 필드는 빈 문자열"""
        if v is None:
            return ""
        return v


class Recipes(BaseModel):
    """검색 결과 - 서버가 보낸 순서 그대로 유지"""
    model_config = ConfigDict(extra="ignore")

    drinks: List[Drink] = Field(default_factory=list, description="검색된 칵테일 목록")

    @field_validator("drinks", mode="before")
    @classmethod
    def _null_drinks(cls, v: Any) -> Any:
        # 검색 결과가 없으면 API 는 {"drinks": null} 을 돌려줌
        if v is None:
            return []
        return v


class SearchData(BaseModel):
    """검색 API 응답 데이터"""
    query: str = Field(..., description="요청한 검색어")
    drinks: List[Drink] = Field(default_factory=list, description="검색된 칵테일 목록")
    elapsed_ms: float = Field(..., ge=0, description="검색 소요 시간 (밀리초)")


class SearchResponse(BaseModel):
    """검색 API 응답"""
    status: str = Field(..., description="success or error")
    data: Optional[SearchData] = Field(None, description="검색 결과")
    message: str = Field(..., description="응답 메시지")
    error_code: str | None = Field(None, description="에러 코드 (error 시)")


class HealthResponse(BaseModel):
    """헬스 체크 응답"""
    status: str
    timestamp: datetime
    version: str
