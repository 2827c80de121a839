"""レート制限ユーティリティ（外部API呼び出し用）"""

import asyncio
import time
from typing import Any, Awaitable, Callable, Generic, Optional, TypeVar

from ..logging.config import get_logger

logger = get_logger(__name__)

T = TypeVar("T")


class RateLimiter(Generic[T]):
    """
    非同期関数をラップし、呼び出し間隔を最小待機時間以上に保つクラス

    最終呼び出し時刻の確認と更新はロック内で行うため、
    同時に到着した複数のリクエストも1ウィンドウにつき1回の呼び出しに直列化される
    """

    def __init__(self, func: Callable[..., Awaitable[T]], min_delay: float = 1.0):
        """
        Args:
            func: ラップ対象の非同期関数
            min_delay: 呼び出し間の最小待機時間（秒）
        """
        if min_delay < 0:
            raise ValueError(f"min_delay must be non-negative: {min_delay}")

        self.func = func
        self.min_delay = min_delay
        self.last_call_time: Optional[float] = None
        self._lock = asyncio.Lock()

        logger.debug(f"RateLimiter initialized: min_delay={self.min_delay:.2f}s")

    async def call(self, *args: Any, **kwargs: Any) -> T:
        """
        待機時間を確保した上でラップ対象の関数を呼び出す

        ラップ対象の例外は変換せずにそのまま送出する

        Returns:
            ラップ対象の関数の戻り値
        """
        async with self._lock:
            if self.last_call_time is not None:
                elapsed = time.monotonic() - self.last_call_time

                if elapsed < self.min_delay:
                    sleep_duration = self.min_delay - elapsed
                    logger.debug(f"Rate limiting: sleeping for {sleep_duration:.2f}s")
                    await asyncio.sleep(sleep_duration)

            # 完了時刻ではなく呼び出し開始時刻を記録する
            self.last_call_time = time.monotonic()

        return await self.func(*args, **kwargs)

    def reset(self) -> None:
        """レート制限をリセット"""
        self.last_call_time = None
        logger.debug("RateLimiter reset")
