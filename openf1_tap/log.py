"""Logging setup using loguru."""

from __future__ import annotations

from pathlib import Path
import sys

from loguru import logger


def setup_logger(log_dir: str | Path | None = None, level: str = "INFO") -> None:
    """Configure loguru with a console sink and an optional rotating file sink."""
    logger.remove()

    logger.add(
        sys.stderr,
        level=level,
        format=(
            "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | "
            "<level>{level: <8}</level> | "
            "<cyan>{name}</cyan>:<cyan>{function}</cyan> - "
            "<level>{message}</level>"
        ),
        colorize=True,
    )

    if log_dir:
        log_path = Path(log_dir)
        log_path.mkdir(parents=True, exist_ok=True)
        logger.add(
            log_path / "openf1_tap.log",
            level=level,
            format="{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{function}:{line} - {message}",
            rotation="1 day",
            retention="7 days",
        )


__all__ = ["setup_logger"]
