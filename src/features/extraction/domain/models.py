"""地名抽出機能のドメインモデル"""
from dataclasses import dataclass


@dataclass(frozen=True)
class ExtractedLocation:
    """ユーザー入力から抽出された地名"""

    query: str  # 抽出元の入力テキスト
    phrase: str  # 抽出された地名（抽出できなかった場合は空文字）

    @property
    def is_empty(self) -> bool:
        """地名が抽出できなかったかどうか"""
        return not self.phrase.strip()
