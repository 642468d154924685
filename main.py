"""
Main entry point for the emoji asset dev console.
"""

import asyncio
import logging
import os
import sys

from emoji_console.adapters.reference_data import ReferenceDataClient
from emoji_console.api.dev_console import EmojiConsoleServer
from emoji_console.config.emoji_system import load_emoji_config
from emoji_console.config.settings import Settings, get_settings
from emoji_console.core.observability import configure_stdlib_json_logging
from emoji_console.core.services.emoji_assets import EmojiAssetService
from emoji_console.core.storage import ArtifactStore


def setup_logging() -> None:
    """Set up structured JSON logging for both stderr and file.

    KISS: write logs to a stable path under `logs/` and stderr.
    """
    settings = get_settings()

    try:
        os.makedirs("logs", exist_ok=True)
        file_target: str | None = os.path.join("logs", "emoji_console.log")
    except OSError:
        file_target = None

    configure_stdlib_json_logging(
        level=settings.app_log_level,
        file_target=file_target,
    )

    # aiohttp access logs are noisy outside debug mode
    if not settings.app_debug:
        logging.getLogger("aiohttp.access").setLevel(logging.WARNING)


def print_startup_banner() -> None:
    """Print a startup banner."""
    banner = """
    ╔══════════════════════════════════════════╗
    ║         Emoji Asset Dev Console          ║
    ╚══════════════════════════════════════════╝
    """
    print(banner)


def build_server(settings: Settings) -> EmojiConsoleServer:
    """Wire config, store, reference client and service into the server."""
    config = load_emoji_config(settings)
    store = ArtifactStore(settings.public_root)
    client = ReferenceDataClient(settings=settings)
    service = EmojiAssetService(store=store, config=config, client=client)
    return EmojiConsoleServer(service)


async def main() -> None:
    """Main async entry point."""
    logger = logging.getLogger(__name__)
    server: EmojiConsoleServer | None = None

    try:
        print_startup_banner()
        setup_logging()

        settings = get_settings()
        logger.info(
            f"Starting {settings.app_name} {settings.app_version} "
            f"(env={settings.app_env}, public_dir={settings.public_root})"
        )

        server = build_server(settings)
        try:
            await server.start(host=settings.http_host, port=settings.http_port)
        except OSError as e:
            if getattr(e, "errno", None) in (48, 98):  # EADDRINUSE (macOS/Linux)
                logger.error(
                    "Port %d is already in use. Set HTTP_PORT to a free port.",
                    settings.http_port,
                )
            raise

        logger.info("Emoji console ready")
        await asyncio.Event().wait()

    except (KeyboardInterrupt, asyncio.CancelledError):
        logger.info("Shutdown requested by user (Ctrl+C)")
    except Exception as e:
        logger.error(f"Fatal error: {e}", exc_info=True)
        sys.exit(1)
    finally:
        logger.info("Shutting down services...")
        if server is not None:
            await server.stop()
        logger.info("All services stopped")


if __name__ == "__main__":
    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        print("\nConsole stopped by user.")
    except Exception as e:
        print(f"Failed to start console: {e}")
        sys.exit(1)
