"""OpenAIを使用した地名抽出"""

from typing import Any, Optional

from openai import APITimeoutError, AsyncOpenAI, OpenAIError

from ..domain.models import ExtractedLocation
from ....infrastructure.config.settings import Settings
from ....shared.exceptions.errors import (
    ConfigurationError,
    ExtractionError,
    ExtractionServiceError,
    ExtractionTimeoutError,
)
from ....shared.logging.config import get_logger

logger = get_logger(__name__)

SYSTEM_PROMPT = (
    "You are a location entity extractor. Your job is to identify and return ONLY "
    "the location mentioned in the user's query. Return just the location name "
    "without any additional text, explanations, or JSON formatting."
)

# モデルが付けがちな囲み文字
_WRAPPING_CHARS = "\"'`“”‘’"


class LocationExtractor:
    """
    言語モデルをエンティティ抽出器として使い、入力文から地名を取り出す

    一時的な失敗に対するリトライは行わない
    """

    def __init__(
        self,
        client: Optional[Any] = None,
        *,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        model: str = "gpt-4o-mini",
        timeout: float = 30.0,
    ) -> None:
        """
        Args:
            client: AsyncOpenAI互換クライアント（テスト時の差し替え用）
            api_key: OpenAI API Key（Settings.openai_api_key）
            base_url: OpenAI互換APIのベースURL
            model: モデル名
            timeout: リクエストタイムアウト（秒）
        """
        self.model = model
        self.timeout = timeout

        if client is not None:
            self.client = client
        else:
            if not api_key:
                raise ConfigurationError(
                    "LLM API key must be provided via settings.openai_api_key "
                    "or the OPENAI_API_KEY environment variable."
                )
            self.client = AsyncOpenAI(
                api_key=api_key,
                base_url=base_url,
                timeout=timeout,
                max_retries=0,
            )

        logger.info(f"LocationExtractor initialized: model={model}, timeout={timeout}s")

    @classmethod
    def from_settings(cls, settings: Settings) -> "LocationExtractor":
        """設定から抽出器を作成"""
        return cls(
            api_key=settings.openai_api_key,
            base_url=settings.llm_api_base,
            model=settings.llm_model,
            timeout=settings.llm_timeout,
        )

    async def extract(self, query: str) -> ExtractedLocation:
        """
        入力文から地名を抽出

        Args:
            query: ユーザーの入力文

        Returns:
            ExtractedLocation: 抽出結果（地名が見つからない場合はphraseが空）

        Raises:
            ExtractionError: 入力が空の場合
            ExtractionServiceError: モデル呼び出しに失敗した場合
            ExtractionTimeoutError: モデル呼び出しがタイムアウトした場合
        """
        if not query or not query.strip():
            raise ExtractionError("Query must not be empty")

        try:
            logger.debug(f"Extracting location from query: {query}")

            completion = await self.client.chat.completions.create(
                model=self.model,
                messages=[
                    {"role": "system", "content": SYSTEM_PROMPT},
                    {"role": "user", "content": query},
                ],
            )

        except APITimeoutError as e:
            raise ExtractionTimeoutError(f"LLM request timed out: {e}") from e
        except OpenAIError as e:
            raise ExtractionServiceError(f"LLM request failed: {e}") from e

        phrase = _clean_phrase(_first_content(completion))

        if not phrase:
            logger.warning(f"No location extracted from query: {query}")
        else:
            logger.info(f"Extracted location: {phrase}")

        return ExtractedLocation(query=query, phrase=phrase)


def _first_content(completion: Any) -> str:
    """最初の選択肢の本文を取り出す（存在しない場合は空文字）"""
    choices = getattr(completion, "choices", None) or []
    if not choices:
        return ""
    message = getattr(choices[0], "message", None)
    content = getattr(message, "content", None)
    return content if isinstance(content, str) else ""


def _clean_phrase(text: str) -> str:
    """モデル出力を地名として使える形に整える"""
    phrase = text.strip()
    phrase = phrase.strip(_WRAPPING_CHARS).strip()
    # 文末のピリオドのみ除去（"Washington D.C." などの略記は残す）
    if phrase.endswith(".") and phrase.count(".") == 1:
        phrase = phrase[:-1].strip()
    return phrase
