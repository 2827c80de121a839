"""位置解決機能のドメインモデル"""
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from ...geocoding.domain.models import GeoPoint


class ResolutionStatus(str, Enum):
    """位置解決の結果種別"""

    SUCCESS = "success"
    NOT_FOUND = "not_found"
    EXTRACTION_FAILED = "extraction_failed"
    PROVIDER_ERROR = "provider_error"


class ProviderErrorReason(str, Enum):
    """プロバイダーエラーの分類"""

    TIMEOUT = "timeout"
    SERVICE = "service"


@dataclass(frozen=True)
class ResolutionResult:
    """
    位置解決の結果

    SUCCESS / NOT_FOUND / EXTRACTION_FAILED / PROVIDER_ERROR のいずれか1つを表す。
    インスタンスは各ファクトリメソッドから生成すること
    """

    status: ResolutionStatus
    point: Optional[GeoPoint] = None
    reason: Optional[ProviderErrorReason] = None
    location_text: Optional[str] = None  # ジオコーディングに使用した地名
    detail: Optional[str] = None  # ログ用の詳細

    def __post_init__(self) -> None:
        if (self.status is ResolutionStatus.SUCCESS) != (self.point is not None):
            raise ValueError("point must be set if and only if status is SUCCESS")
        if (self.status is ResolutionStatus.PROVIDER_ERROR) != (self.reason is not None):
            raise ValueError("reason must be set if and only if status is PROVIDER_ERROR")

    @classmethod
    def success(cls, point: GeoPoint) -> "ResolutionResult":
        return cls(
            status=ResolutionStatus.SUCCESS,
            point=point,
            location_text=point.display_title,
        )

    @classmethod
    def not_found(cls, location_text: Optional[str] = None) -> "ResolutionResult":
        return cls(status=ResolutionStatus.NOT_FOUND, location_text=location_text)

    @classmethod
    def extraction_failed(cls, detail: Optional[str] = None) -> "ResolutionResult":
        return cls(status=ResolutionStatus.EXTRACTION_FAILED, detail=detail)

    @classmethod
    def provider_error(
        cls,
        reason: ProviderErrorReason,
        location_text: Optional[str] = None,
        detail: Optional[str] = None,
    ) -> "ResolutionResult":
        return cls(
            status=ResolutionStatus.PROVIDER_ERROR,
            reason=reason,
            location_text=location_text,
            detail=detail,
        )

    @property
    def is_success(self) -> bool:
        """成功したかどうか"""
        return self.status is ResolutionStatus.SUCCESS

    @property
    def user_message(self) -> str:
        """チャット欄に表示するメッセージ"""
        if self.point is not None:
            return f"I've found {self.point.display_title} and marked it on the map."
        if self.status is ResolutionStatus.NOT_FOUND:
            return "I couldn't find that place on the map."
        if self.status is ResolutionStatus.EXTRACTION_FAILED:
            return "I couldn't identify a location in your message."
        if self.reason is ProviderErrorReason.TIMEOUT:
            return "The map service took too long to respond, please try again."
        return "The map service is unavailable right now, please try again."

    def to_dict(self) -> dict[str, object]:
        """ログ・CLI出力用の辞書に変換"""
        data: dict[str, object] = {
            "status": self.status.value,
            "message": self.user_message,
        }
        if self.point is not None:
            data["latitude"] = self.point.latitude
            data["longitude"] = self.point.longitude
            data["title"] = self.point.display_title
        if self.reason is not None:
            data["reason"] = self.reason.value
        if self.location_text is not None:
            data["location_text"] = self.location_text
        return data
