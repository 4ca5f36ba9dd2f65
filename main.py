"""IIIFNotifications Main Application."""

import asyncio
import signal
import sys

import uvicorn
from pydantic import ValidationError

from src import IIIF_NOTIFICATIONS_HEADER, log
from src.config.database import NotificationsDB
from src.config.settings import get_config
from src.exceptions import IIIFNotificationsError
from src.web.app import create_app


def _setup_signal_handlers(server: uvicorn.Server) -> None:
    """Install SIGINT/SIGTERM handlers that ask the server to exit."""
    loop = asyncio.get_running_loop()

    def _on_signal(sig: int) -> None:
        name = signal.Signals(sig).name
        log.info(
            f"IIIFNotifications: Received {name} signal, initiating graceful "
            "shutdown..."
        )
        server.should_exit = True

    for sig in (signal.SIGINT, signal.SIGTERM):
        try:
            loop.add_signal_handler(sig, _on_signal, sig)
        except NotImplementedError:
            # Fallback for environments that don't support add_signal_handler
            signal.signal(sig, lambda s, f: _on_signal(s))


def validate_configuration() -> bool:
    """Validate the application configuration and log a summary.

    Returns:
        bool: True if configuration is valid, False otherwise
    """
    try:
        config = get_config()
        log.info(f"IIIFNotifications: Configuration: {config!s}")
        if not config.manifests_path.is_dir():
            log.warning(
                f"IIIFNotifications: Manifests directory "
                f"$$'{config.manifests_path}'$$ does not exist, static manifest "
                "files will not be served"
            )
        return True
    except ValidationError as e:
        log.error(f"IIIFNotifications: Configuration validation failed: {e}")
        return False
    except ValueError as e:
        log.error(f"IIIFNotifications: Configuration value error: {e}")
        return False
    except OSError as e:
        log.error(f"IIIFNotifications: File system error during configuration: {e}")
        return False


async def run() -> int:
    """Main application entry point.

    Builds the database and web application and serves it until shutdown.

    Returns:
        int: Exit code (0 for success, 1 for error)
    """
    log.info("\n" + IIIF_NOTIFICATIONS_HEADER)

    if not validate_configuration():
        return 1
    config = get_config()

    try:
        db = NotificationsDB(config.data_path)
        app = create_app(db, config)
        uv_config = uvicorn.Config(
            app,
            host=config.web.host,
            port=config.web.port,
            log_config=None,
            loop="asyncio",
            proxy_headers=True,
            forwarded_allow_ips="*",
        )

        server = uvicorn.Server(uv_config)
        _setup_signal_handlers(server)

        log.success(
            "IIIFNotifications: Listening on "
            f"\033[92mhttp://{config.web.host}:{config.web.port} "
            "(ctrl+c to stop)\033[0m"
        )
        # Use `_serve()` so uvicorn doesn't install its own signal handlers
        await server._serve()
    except IIIFNotificationsError as e:
        log.error(f"IIIFNotifications: {e.__class__.__name__}: {e}")
        return 1
    except OSError as e:
        log.error(f"IIIFNotifications: File system error: {e}")
        return 1
    except asyncio.CancelledError:
        log.info("IIIFNotifications: Application cancelled")
        return 0
    except Exception as e:
        log.error(
            f"IIIFNotifications: Unexpected application error: {e}", exc_info=True
        )
        return 1

    log.success("IIIFNotifications: Application shutdown complete")
    return 0


def main(argv: list[str] | None = None) -> int:
    """Main entry point.

    Args:
        argv (list[str] | None): Command-line arguments (unused).

    Returns:
        int: Exit code (0 for success, 1 for error)
    """
    try:
        return asyncio.run(run())
    except KeyboardInterrupt:
        log.info("IIIFNotifications: Application interrupted")
        return 0
    except Exception as e:
        log.error(f"IIIFNotifications: Fatal error: {e}", exc_info=True)
        return 1


if __name__ == "__main__":
    sys.exit(main())
