"""헬스 체크 엔드포인트"""
from fastapi import APIRouter
from datetime import datetime

from cocktaildb.schemas.drink_schema import HealthResponse
from cocktaildb import __version__

router = APIRouter(tags=["health"])


@router.get("/health", response_model=HealthResponse)
async def health_check():
    """헬스 체크 엔드포인트

    외부 검색 API 는 호출하지 않고 프로세스 상태만 확인합니다.
    """
    return HealthResponse(
        status="ok",
        timestamp=datetime.now(),
        version=__version__
    )


@router.get("/")
async def root():
    """루트 엔드포인트"""
    return {
        "service": "Cocktail Search Service",
        "version": __version__,
        "docs": "/docs"
    }
