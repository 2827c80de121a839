"""OpenStreetMap (Nominatim) ジオコーダー実装"""
import math
from typing import Any, Optional

from geopy.adapters import RequestsAdapter
from geopy.exc import GeocoderTimedOut, GeopyError
from geopy.geocoders import Nominatim

from ..domain.models import GeoPoint
from ....shared.exceptions.errors import (
    GeocodingError,
    GeocodingTimeoutError,
    ValidationError,
)
from ....shared.logging.config import get_logger

logger = get_logger(__name__)


class NominatimGeocoder:
    """OpenStreetMap Nominatim API実装（同期）"""

    def __init__(
        self,
        user_agent: str,
        timeout: float = 10.0,
        domain: str = "nominatim.openstreetmap.org",
        geolocator: Optional[Any] = None,
    ) -> None:
        """
        Args:
            user_agent: Nominatimの利用規約で必須のUser-Agent
            timeout: リクエストタイムアウト（秒）
            domain: Nominatimのドメイン
            geolocator: geopyジオコーダー（テスト時の差し替え用）
        """
        self.timeout = timeout

        if geolocator is not None:
            self.geolocator = geolocator
        else:
            self.geolocator = Nominatim(
                user_agent=user_agent,
                timeout=timeout,
                domain=domain,
                adapter_factory=RequestsAdapter,
            )

        logger.info(f"NominatimGeocoder initialized: domain={domain}, timeout={timeout}s")

    def geocode(self, place: str) -> Optional[GeoPoint]:
        """
        地名をジオコーディング

        最初の（最も一致度の高い）結果のみを使用する

        Args:
            place: 地名

        Returns:
            Optional[GeoPoint]: 地理的位置情報（見つからない場合はNone）

        Raises:
            GeocodingTimeoutError: タイムアウトした場合
            GeocodingError: APIリクエストに失敗した場合
        """
        if not place or not place.strip():
            logger.warning("Empty place provided for geocoding")
            return None

        try:
            logger.debug(f"Geocoding place: {place}")

            results = self.geolocator.geocode(place, exactly_one=False)

        except GeocoderTimedOut as e:
            raise GeocodingTimeoutError(f"Nominatim timeout: {e}") from e
        except GeopyError as e:
            raise GeocodingError(f"Nominatim service error: {e}") from e
        except Exception as e:
            raise GeocodingError(f"Unexpected error during geocoding: {e}") from e

        if not results:
            logger.warning(f"No geocoding results for place: {place}")
            return None

        result = results[0]
        latitude = _to_float(getattr(result, "latitude", None))
        longitude = _to_float(getattr(result, "longitude", None))

        if latitude is None or longitude is None:
            logger.warning(f"Invalid geocoding result (missing lat/lng): {place}")
            return None

        try:
            geo_point = GeoPoint(latitude=latitude, longitude=longitude, display_title=place)
        except ValidationError as e:
            logger.warning(f"Invalid geocoding result for {place}: {e}")
            return None

        logger.debug(f"Geocoded: {place} -> ({latitude}, {longitude})")

        return geo_point


def _to_float(value: Any) -> Optional[float]:
    """座標値をfloatに変換（変換できない・有限でない場合はNone）"""
    if value is None or isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    return number if math.isfinite(number) else None
