"""mljboard client command-line interface.

Logs go to stderr; only --version writes to stdout.
"""

from __future__ import annotations

import asyncio
import logging
import sys
from pathlib import Path
from typing import Any, Dict, Optional

import click
import yaml
from pydantic import ValidationError

from .. import __version__
from ..core.config import (
    LOG_LEVELS,
    ClientConfig,
    PairingContext,
    get_config_dir,
)
from ..core.exceptions import ConfigurationError
from .supervisor import ConnectionSupervisor

# Exit codes following Unix conventions
EXIT_SUCCESS = 0
EXIT_USAGE = 2
EXIT_INTERRUPTED = 130  # 128 + SIGINT(2)


class FlushingStreamHandler(logging.StreamHandler):
    """StreamHandler that flushes after every emit for real-time output."""

    def emit(self, record: logging.LogRecord) -> None:
        super().emit(record)
        self.flush()


def setup_logging(
    level: str = "INFO",
    log_file: Optional[str] = None,
    quiet: bool = False,
) -> logging.Logger:
    """Set up logging with proper flushing and stderr output.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR)
        log_file: Optional file path for persistent logging
        quiet: If True, suppress all log output to stderr

    Returns:
        Configured logger instance
    """
    logger = logging.getLogger("mljboard_client")
    # The file handler captures DEBUG regardless of console level
    logger.setLevel(logging.DEBUG if log_file else level.upper())

    # Clear existing handlers
    logger.handlers.clear()

    if not quiet:
        console = FlushingStreamHandler(sys.stderr)
        console.setLevel(level.upper())
        console.setFormatter(logging.Formatter(
            "%(asctime)s [%(levelname)s] %(message)s",
            datefmt="%H:%M:%S",
        ))
        logger.addHandler(console)

    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(logging.Formatter(
            "%(asctime)s [%(levelname)s] %(name)s: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        ))
        logger.addHandler(file_handler)

    return logger


def echo_stderr(message: str) -> None:
    """Echo to stderr (for status messages)."""
    click.echo(message, err=True)


def echo_stdout(message: str, flush: bool = True) -> None:
    """Echo to stdout (for primary output)."""
    click.echo(message, err=False)
    if flush:
        sys.stdout.flush()


def load_config(
    config_path: Optional[Path], overrides: Dict[str, Any]
) -> ClientConfig:
    """Build the client config: flags over YAML over environment."""
    if config_path is None:
        default_path = get_config_dir() / "config.yml"
        if default_path.exists():
            config_path = default_path

    if config_path is not None:
        config = ClientConfig.from_yaml(config_path)
    else:
        config = ClientConfig()

    update = {k: v for k, v in overrides.items() if v is not None}
    if not update:
        return config
    # Re-validate so flag values go through the same checks
    return ClientConfig(**{**config.model_dump(), **update})


@click.command(context_settings={"help_option_names": ["-h", "--help"]})
@click.option(
    "-a", "--hos-addr", "hos_addr", metavar="HADDR",
    help="HOS address, including `ws://` or `wss://` and the path "
    "(e.g. ws://127.0.0.1:9003/ws)",
)
@click.option(
    "-l", "--local-addr", "local_addr", metavar="LADDR",
    help="Local address to forward (e.g. http://127.0.0.1:42010/)",
)
@click.option(
    "-c", "--pairing-code", "pairing_code", metavar="PAIRING_CODE",
    help="HOS pairing code",
)
@click.option(
    "--config", "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    help="YAML configuration file [default: ~/.mljboard/config.yml]",
)
@click.option(
    "--retry-delay", type=click.FloatRange(min=0), metavar="SECONDS",
    help="Wait after a failed connect [default: 3]",
)
@click.option(
    "--local-timeout", type=click.FloatRange(min=0, min_open=True),
    metavar="SECONDS",
    help="Timeout for each local HTTP call [default: none]",
)
@click.option(
    "--log-level",
    type=click.Choice(LOG_LEVELS, case_sensitive=False),
    default=None, envvar="MLJBOARD_LOG_LEVEL",
    help="Set logging verbosity [default: INFO]",
)
@click.option(
    "--log-file", type=click.Path(dir_okay=False, writable=True),
    envvar="MLJBOARD_LOG_FILE",
    help="Write logs to file in addition to stderr",
)
@click.option(
    "--quiet", "-q", is_flag=True, envvar="MLJBOARD_QUIET",
    help="Suppress all log output to stderr",
)
@click.option("--version", "-V", is_flag=True, help="Show version and exit")
def cli(
    hos_addr: Optional[str],
    local_addr: Optional[str],
    pairing_code: Optional[str],
    config_path: Optional[Path],
    retry_delay: Optional[float],
    local_timeout: Optional[float],
    log_level: Optional[str],
    log_file: Optional[str],
    quiet: bool,
    version: bool,
) -> None:
    """Forward requests from an HOS relay to a local HTTP service.

    \b
    Example:
      mljboard-client -a ws://127.0.0.1:9003/ws \\
                      -l http://127.0.0.1:42010/ -c PAIRING_CODE

    \b
    Environment variables:
      MLJBOARD_HOS_ADDR       HOS address
      MLJBOARD_LOCAL_ADDR     Local address to forward
      MLJBOARD_PAIRING_CODE   HOS pairing code
      MLJBOARD_LOG_LEVEL      Logging level
    """
    if version:
        echo_stdout(f"mljboard-client {__version__}")
        sys.exit(EXIT_SUCCESS)

    try:
        config = load_config(config_path, {
            "hos_addr": hos_addr,
            "local_addr": local_addr,
            "pairing_code": pairing_code,
            "retry_delay": retry_delay,
            "local_timeout": local_timeout,
            "log_level": log_level,
        })
        context = config.pairing_context()
    except FileNotFoundError:
        echo_stderr(f"Error: Config file not found: {config_path}")
        sys.exit(EXIT_USAGE)
    except yaml.YAMLError as e:
        echo_stderr(f"Error: Invalid YAML in {config_path}: {e}")
        sys.exit(EXIT_USAGE)
    except (ConfigurationError, ValidationError) as e:
        echo_stderr(f"Error: {e}")
        sys.exit(EXIT_USAGE)

    setup_logging(config.log_level, log_file, quiet)

    try:
        asyncio.run(_run_tunnel(context))
    except KeyboardInterrupt:
        echo_stderr("\nInterrupted")
        sys.exit(EXIT_INTERRUPTED)


async def _run_tunnel(context: PairingContext) -> None:
    """Keep the tunnel up until the process is killed."""
    logger = logging.getLogger("mljboard_client")
    logger.info(f"Forwarding {context.hos_addr} -> {context.local_target}")

    supervisor = ConnectionSupervisor(context)
    await supervisor.run()


def main() -> None:
    """Entry point for the CLI."""
    cli()


if __name__ == "__main__":
    main()
