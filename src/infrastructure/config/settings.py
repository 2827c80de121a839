"""アプリケーション設定（Pydantic Settings）"""
from typing import Optional

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """アプリケーション設定"""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Project
    project_name: str = Field(
        default="map-location-resolver",
        description="プロジェクト名",
    )
    environment: str = Field(
        default="development",
        description="環境 (development, staging, production)",
    )

    # LLM（地名抽出）
    openai_api_key: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("openai_api_key", "llm_api_key"),
        description="OpenAI API Key",
    )
    llm_model: str = Field(
        default="gpt-4o-mini",
        description="地名抽出に使用するモデル名",
    )
    llm_api_base: Optional[str] = Field(
        default=None,
        description="OpenAI互換APIのベースURL（未設定時は公式API）",
    )
    llm_timeout: float = Field(
        default=30.0,
        description="地名抽出リクエストのタイムアウト（秒）",
    )

    # Geocoding
    geocoding_provider: str = Field(
        default="openstreetmap",
        description="ジオコーディングプロバイダー（openstreetmapのみ対応）",
    )
    geocoding_timeout: int = Field(
        default=10000,
        description="ジオコーディングのタイムアウト（ミリ秒）",
    )
    geocoding_min_delay: float = Field(
        default=1.0,
        description="ジオコーディング呼び出し間の最小待機時間（秒）",
    )
    geocoding_user_agent: str = Field(
        default="map-location-resolver/1.0",
        description="NominatimへのリクエストのUser-Agent",
    )
    geocoding_domain: str = Field(
        default="nominatim.openstreetmap.org",
        description="Nominatimのドメイン",
    )

    # Logging
    log_level: str = Field(
        default="INFO",
        description="ログレベル (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
    )

    # HTTP server
    port: int = Field(
        default=8080,
        description="HTTPサーバーのポート番号",
    )

    @property
    def geocoding_timeout_seconds(self) -> float:
        """ジオコーディングのタイムアウト（秒）"""
        return self.geocoding_timeout / 1000.0

    @property
    def is_production(self) -> bool:
        """本番環境かどうか"""
        return self.environment.lower() == "production"

    @property
    def is_development(self) -> bool:
        """開発環境かどうか"""
        return self.environment.lower() == "development"
