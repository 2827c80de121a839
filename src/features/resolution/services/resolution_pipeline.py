"""位置解決パイプライン（地名抽出 → ジオコーディング）"""

from typing import Protocol

from ..domain.models import ResolutionResult
from ...extraction.domain.models import ExtractedLocation
from ....shared.exceptions.errors import ExtractionError
from ....shared.logging.config import get_logger

logger = get_logger(__name__)


class Extractor(Protocol):
    async def extract(self, query: str) -> ExtractedLocation: ...


class Geocoder(Protocol):
    async def lookup(self, phrase: str) -> ResolutionResult: ...


class ResolutionPipeline:
    """
    位置解決パイプライン

    UI層が依存する唯一の窓口。分類済みの失敗は例外ではなく
    ResolutionResultとして返し、想定外の例外のみ呼び出し元に送出する
    """

    def __init__(self, extractor: Extractor, geocoder: Geocoder) -> None:
        """
        Args:
            extractor: 地名抽出器
            geocoder: ジオコーディングクライアント
        """
        self.extractor = extractor
        self.geocoder = geocoder

        logger.info("ResolutionPipeline initialized")

    async def resolve(self, query: str) -> ResolutionResult:
        """
        入力文を座標に解決

        Args:
            query: ユーザーの入力文

        Returns:
            ResolutionResult: 解決結果

        Raises:
            ExtractionServiceError: 言語モデルの呼び出しに失敗した場合（呼び出し元で500として扱う）
        """
        logger.info(f"Resolving query: {query!r}")

        try:
            extracted = await self.extractor.extract(query)
        except ExtractionError as e:
            logger.warning(f"Extraction failed for query {query!r}: {e}")
            return ResolutionResult.extraction_failed(detail=str(e))

        if extracted.is_empty:
            logger.warning(f"No location identified in query: {query!r}")
            return ResolutionResult.extraction_failed(detail="empty phrase")

        phrase = extracted.phrase.strip()
        logger.info(f"Geocoding extracted location: {phrase}")

        result = await self.geocoder.lookup(phrase)

        logger.info(f"Resolution finished: query={query!r}, status={result.status.value}")

        return result
