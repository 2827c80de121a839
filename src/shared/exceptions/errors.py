"""カスタム例外定義"""


class LocationServiceError(Exception):
    """位置解決サービス基底例外"""

    pass


class ExtractionError(LocationServiceError):
    """地名抽出エラー"""

    pass


class ExtractionServiceError(LocationServiceError):
    """地名抽出サービス（言語モデル）の呼び出しエラー"""

    pass


class ExtractionTimeoutError(ExtractionServiceError):
    """地名抽出のタイムアウト"""

    pass


class GeocodingError(LocationServiceError):
    """ジオコーディングエラー"""

    pass


class GeocodingTimeoutError(GeocodingError):
    """ジオコーディングのタイムアウト"""

    pass


class ConfigurationError(LocationServiceError):
    """設定エラー"""

    pass


class ValidationError(LocationServiceError):
    """バリデーションエラー"""

    pass
