"""CLIエントリーポイント"""
import argparse
import asyncio
import json
import sys
from typing import Optional

from .features.resolution.container import ServiceContainer
from .features.resolution.domain.models import ResolutionResult
from .infrastructure.config.settings import Settings
from .shared.logging.config import get_logger, setup_logging

logger = get_logger(__name__)


def build_parser() -> argparse.ArgumentParser:
    """引数パーサーを作成"""
    parser = argparse.ArgumentParser(description="自然文から地名を抽出し、座標に変換するツール")

    parser.add_argument(
        "query",
        type=str,
        help="解決する入力文（例: 'Show me Toronto'）",
    )

    parser.add_argument(
        "--geocode-only",
        action="store_true",
        help="地名抽出を行わず、入力をそのままジオコーディング",
    )

    parser.add_argument(
        "--env-file",
        type=str,
        default=".env",
        help="環境変数ファイルのパス（デフォルト: .env）",
    )

    parser.add_argument(
        "--log-level",
        type=str,
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="ログレベル",
    )

    return parser


async def run(container: ServiceContainer, query: str, geocode_only: bool) -> ResolutionResult:
    """入力文を解決"""
    if geocode_only:
        return await container.geocode_client.lookup(query)
    return await container.pipeline.resolve(query)


def main(argv: Optional[list[str]] = None) -> int:
    """
    メインエントリーポイント

    Returns:
        int: 終了コード（0: 成功, 1: 失敗, 2: 位置を解決できなかった）
    """
    args = build_parser().parse_args(argv)

    try:
        settings = Settings(_env_file=args.env_file)

        if args.log_level:
            settings.log_level = args.log_level

        setup_logging(level=settings.log_level)

        logger.info(f"Environment: {settings.environment}")

        container = ServiceContainer(settings)
        result = asyncio.run(run(container, args.query, args.geocode_only))

        print(json.dumps(result.to_dict(), ensure_ascii=False, indent=2))

        return 0 if result.is_success else 2

    except KeyboardInterrupt:
        logger.warning("Interrupted by user")
        return 130  # SIGINT
    except Exception as e:
        logger.error(f"Application failed: {e}", exc_info=True)
        return 1


if __name__ == "__main__":
    sys.exit(main())
