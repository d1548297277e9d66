# app/config/logging_config.py
import sys

from loguru import logger


def configure_logger(*, level: str = "INFO", serialize: bool = False) -> None:
    """
    Configura o loguru com um único sink em stdout.

    `serialize=True` emite uma linha JSON por evento (útil atrás de coletores de log).
    """
    logger.remove()  # remove o sink padrão (stderr)

    logger.add(
        sink=sys.stdout,
        level=level.upper(),
        serialize=serialize,
        diagnose=False,
        backtrace=False,
        format=(
            "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | "
            "<level>{level: <8}</level> | "
            "<cyan>{name}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>"
        ),
    )
