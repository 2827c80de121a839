"""地図アプリ向け位置解決HTTPサーバー（FastAPI）"""
from functools import lru_cache
from typing import Any

from fastapi import Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import BaseModel
from starlette.exceptions import HTTPException as StarletteHTTPException

from .features.geocoding.services.geocoding_service import GeocodeClient
from .features.resolution.container import ServiceContainer
from .features.resolution.domain.models import (
    ProviderErrorReason,
    ResolutionResult,
    ResolutionStatus,
)
from .features.resolution.services.resolution_pipeline import ResolutionPipeline
from .infrastructure.config.settings import Settings
from .shared.exceptions.errors import ExtractionServiceError
from .shared.logging.config import get_logger, setup_logging

# 設定を読み込み
settings = Settings()

# ロギングを設定
setup_logging(level=settings.log_level)
logger = get_logger(__name__)

app = FastAPI(
    title="位置解決サービス",
    description="自然文から地名を抽出し、OpenStreetMapで座標に変換する地図アプリ向けAPI",
    version="1.0.0",
)


# 405をJSONで返すため、GET以外のメソッドもルートで受ける
GEOCODE_METHODS = ["GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"]


class ResolveRequest(BaseModel):
    """POST /resolve のリクエストボディ"""

    value: str


@lru_cache(maxsize=1)
def get_container() -> ServiceContainer:
    """プロセス内で共有するサービスコンテナを取得"""
    return ServiceContainer(settings)


def get_pipeline() -> ResolutionPipeline:
    return get_container().pipeline


def get_geocode_client() -> GeocodeClient:
    return get_container().geocode_client


@app.on_event("startup")
async def startup_event() -> None:
    """起動時の処理"""
    logger.info("Application starting up")
    logger.info(f"Environment: {settings.environment}")
    logger.info(f"Project: {settings.project_name}")


@app.on_event("shutdown")
async def shutdown_event() -> None:
    """シャットダウン時の処理"""
    logger.info("Application shutting down")


@app.get("/")
async def root() -> dict[str, Any]:
    """ルートエンドポイント"""
    return {
        "service": "位置解決サービス",
        "version": "1.0.0",
        "status": "running",
        "environment": settings.environment,
    }


@app.get("/health")
async def health() -> dict[str, str]:
    """ヘルスチェックエンドポイント"""
    return {"status": "healthy"}


@app.post("/resolve")
async def resolve_location(
    body: ResolveRequest,
    pipeline: ResolutionPipeline = Depends(get_pipeline),
) -> JSONResponse:
    """
    自然文から地名を抽出し、座標に変換

    Args:
        body: リクエストボディ（value: ユーザーの入力文）
        pipeline: 位置解決パイプライン

    Returns:
        JSONResponse: 座標とタイトル、またはエラー
    """
    try:
        result = await pipeline.resolve(body.value)
    except ExtractionServiceError as e:
        logger.error(f"Location extraction service failed: {e}", exc_info=True)
        return _error(500, "An unexpected error occurred.")
    except Exception as e:
        logger.error(f"Error in processing request: {e}", exc_info=True)
        return _error(500, "An unexpected error occurred.")

    if result.point is not None:
        response_data = {
            "coordinates": [result.point.latitude, result.point.longitude],
            "title": result.point.display_title,
        }
        logger.info(f"Resolved: {response_data}")
        return JSONResponse(status_code=200, content=response_data)

    if result.status is ResolutionStatus.EXTRACTION_FAILED:
        return _error(400, "Could not extract a location from the input.")

    if result.status is ResolutionStatus.NOT_FOUND:
        return _error(404, "Location not found.")

    return JSONResponse(
        status_code=500,
        content={
            "error": "Could not retrieve coordinates for the location.",
            "locationText": result.location_text,
        },
    )


@app.api_route("/geocode", methods=GEOCODE_METHODS)
async def geocode_place(
    request: Request,
    geocode_client: GeocodeClient = Depends(get_geocode_client),
) -> JSONResponse:
    """
    地名を直接ジオコーディング（レート制限あり）

    Args:
        request: リクエスト（クエリパラメータ place: 地名）
        geocode_client: 共有ジオコーディングクライアント

    Returns:
        JSONResponse: 地名と座標、またはエラー
    """
    if request.method != "GET":
        return _error(405, "Method not allowed")

    # 複数指定された場合は文字列ではないため受け付けない
    places = request.query_params.getlist("place")
    if len(places) != 1 or not places[0].strip():
        return _error(400, "Place parameter is required")

    place = places[0]

    try:
        result = await geocode_client.lookup(place)
    except Exception as e:
        logger.error(f"Geocoding error: {e}", exc_info=True)
        return _error(500, "An unexpected error occurred")

    return _geocode_response(place, result)


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """HTTP例外ハンドラー（エラー形式を {"error": ...} に揃える）"""
    if exc.status_code == 405:
        return _error(405, "Method not allowed")
    return _error(exc.status_code, str(exc.detail))


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """リクエスト検証エラーハンドラー"""
    logger.warning(f"Invalid request to {request.url.path}: {exc.errors()}")
    return _error(400, "Could not extract a location from the input.")


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """グローバル例外ハンドラー"""
    logger.error(f"Unhandled exception: {exc}", exc_info=True)
    return _error(500, "An unexpected error occurred.")


def _geocode_response(place: str, result: ResolutionResult) -> JSONResponse:
    """GET /geocode のレスポンスを組み立てる"""
    if result.point is not None:
        return JSONResponse(
            status_code=200,
            content={
                "place": place,
                "latitude": result.point.latitude,
                "longitude": result.point.longitude,
            },
        )

    if result.status is ResolutionStatus.NOT_FOUND:
        return _error(404, "Location not found")

    if result.reason is ProviderErrorReason.TIMEOUT:
        return _error(504, "Timeout error")

    return _error(502, "Service error")


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        app,
        host="0.0.0.0",
        port=settings.port,
        log_level=settings.log_level.lower(),
    )
