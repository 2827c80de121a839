"""ジオコーディングサービス"""

import asyncio
from typing import Optional

from ..domain.models import GeoPoint
from ..providers.nominatim_geocoder import NominatimGeocoder
from ...resolution.domain.models import ProviderErrorReason, ResolutionResult
from ....infrastructure.config.settings import Settings
from ....shared.exceptions.errors import (
    ConfigurationError,
    GeocodingError,
    GeocodingTimeoutError,
)
from ....shared.http.rate_limiter import RateLimiter
from ....shared.logging.config import get_logger

logger = get_logger(__name__)

SUPPORTED_PROVIDERS = ("openstreetmap",)


class GeocodeClient:
    """
    レート制限付きジオコーディングクライアント

    プロセス内でプロバイダーを呼び出す経路はすべてこのインスタンスを共有し、
    レート制限を一元的に適用する
    """

    def __init__(
        self,
        geocoder: NominatimGeocoder,
        timeout: float = 10.0,
        min_delay: float = 1.0,
        rate_limiter: Optional[RateLimiter[Optional[GeoPoint]]] = None,
    ) -> None:
        """
        Args:
            geocoder: ベースとなるジオコーダー
            timeout: 1回のプロバイダー呼び出しのタイムアウト（秒）
            min_delay: プロバイダー呼び出し間の最小待機時間（秒）
            rate_limiter: 共有するレートリミッター（Noneの場合は新規作成）
        """
        self.geocoder = geocoder
        self.timeout = timeout
        self.rate_limiter = rate_limiter or RateLimiter(self._geocode_with_timeout, min_delay)

        logger.info(
            f"GeocodeClient initialized: timeout={timeout}s, "
            f"min_delay={self.rate_limiter.min_delay}s"
        )

    @classmethod
    def from_settings(cls, settings: Settings) -> "GeocodeClient":
        """設定からクライアントを作成"""
        provider = settings.geocoding_provider.strip().lower()
        if provider not in SUPPORTED_PROVIDERS:
            raise ConfigurationError(f"Unsupported geocoding provider: {settings.geocoding_provider}")

        geocoder = NominatimGeocoder(
            user_agent=settings.geocoding_user_agent,
            timeout=settings.geocoding_timeout_seconds,
            domain=settings.geocoding_domain,
        )
        return cls(
            geocoder,
            timeout=settings.geocoding_timeout_seconds,
            min_delay=settings.geocoding_min_delay,
        )

    async def lookup(self, phrase: str) -> ResolutionResult:
        """
        地名を座標に変換

        Args:
            phrase: 地名

        Returns:
            ResolutionResult: SUCCESS / NOT_FOUND / PROVIDER_ERROR のいずれか
        """
        if not phrase or not phrase.strip():
            logger.warning("Empty phrase provided for lookup")
            return ResolutionResult.not_found(location_text=phrase)

        phrase = phrase.strip()

        try:
            geo_point = await self.rate_limiter.call(phrase)

        except GeocodingTimeoutError as e:
            logger.error(f"Geocoding timed out for {phrase}: {e}")
            return ResolutionResult.provider_error(
                ProviderErrorReason.TIMEOUT, location_text=phrase, detail=str(e)
            )
        except GeocodingError as e:
            logger.error(f"Geocoding failed for {phrase}: {e}")
            return ResolutionResult.provider_error(
                ProviderErrorReason.SERVICE, location_text=phrase, detail=str(e)
            )

        if geo_point is None:
            return ResolutionResult.not_found(location_text=phrase)

        return ResolutionResult.success(geo_point)

    async def _geocode_with_timeout(self, phrase: str) -> Optional[GeoPoint]:
        """ブロッキングなジオコーダー呼び出しをスレッドで実行し、タイムアウトを適用"""
        try:
            return await asyncio.wait_for(
                asyncio.to_thread(self.geocoder.geocode, phrase),
                timeout=self.timeout,
            )
        except asyncio.TimeoutError as e:
            raise GeocodingTimeoutError(
                f"Geocoding did not complete within {self.timeout}s"
            ) from e
