"""依存関係の組み立て"""
from functools import cached_property

from ...infrastructure.config.settings import Settings
from ...shared.logging.config import get_logger
from ..extraction.providers.openai_extractor import LocationExtractor
from ..geocoding.services.geocoding_service import GeocodeClient
from .services.resolution_pipeline import ResolutionPipeline

logger = get_logger(__name__)


class ServiceContainer:
    """
    サービスコンテナ

    GeocodeClient（とそのレートリミッター）はプロセス内で1つだけ作成し、
    パイプラインと /geocode エンドポイントで共有する
    """

    def __init__(self, settings: Settings) -> None:
        """
        Args:
            settings: アプリケーション設定
        """
        self.settings = settings

        self.geocode_client = GeocodeClient.from_settings(settings)

        logger.info("ServiceContainer initialized")

    @cached_property
    def extractor(self) -> LocationExtractor:
        """地名抽出器（API Keyが必要なため初回アクセス時に作成）"""
        return LocationExtractor.from_settings(self.settings)

    @cached_property
    def pipeline(self) -> ResolutionPipeline:
        """位置解決パイプライン"""
        return ResolutionPipeline(self.extractor, self.geocode_client)
