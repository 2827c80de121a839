"""ジオコーディング機能のドメインモデル"""
import math
from dataclasses import dataclass
from typing import Any

from ....shared.exceptions.errors import ValidationError


@dataclass(frozen=True)
class GeoPoint:
    """地理的位置情報"""

    latitude: float  # 緯度
    longitude: float  # 経度
    display_title: str  # 利用者に表示する地名

    def __post_init__(self) -> None:
        if not _is_finite_number(self.latitude) or not _is_finite_number(self.longitude):
            raise ValidationError(
                f"Coordinates must be finite numbers: ({self.latitude}, {self.longitude})"
            )
        if not -90.0 <= self.latitude <= 90.0:
            raise ValidationError(f"Latitude out of range: {self.latitude}")
        if not -180.0 <= self.longitude <= 180.0:
            raise ValidationError(f"Longitude out of range: {self.longitude}")

    def __repr__(self) -> str:
        return f"GeoPoint(lat={self.latitude}, lng={self.longitude}, title={self.display_title!r})"

    def to_tuple(self) -> tuple[float, float]:
        """(緯度, 経度)のタプルとして返す"""
        return (self.latitude, self.longitude)


def _is_finite_number(value: Any) -> bool:
    # boolはintのサブクラスなので除外
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return math.isfinite(value)
