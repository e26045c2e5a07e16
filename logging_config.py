import logging
import logging.config

LOG_FORMAT = "%(log_color)s%(asctime)s [%(levelname)s] %(name)s: %(message)s"
LOG_COLORS = {
    "DEBUG": "cyan",
    "INFO": "green",
    "WARNING": "yellow",
    "ERROR": "red",
    "CRITICAL": "bold_red",
}

# RPC and HTTP libraries are noisy at INFO
EXTERNAL_LOGGERS = ("aiohttp", "asyncio", "httpx", "httpcore", "solana")


def setup_logging(level: str = "INFO") -> None:
    logging.config.dictConfig({
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "colored": {
                "()": "colorlog.ColoredFormatter",
                "format": LOG_FORMAT,
                "datefmt": "%Y-%m-%d %H:%M:%S",
                "log_colors": LOG_COLORS,
            }
        },
        "handlers": {
            "console": {"class": "logging.StreamHandler", "formatter": "colored"},
        },
        "loggers": {name: {"level": "WARNING"} for name in EXTERNAL_LOGGERS},
        "root": {"handlers": ["console"], "level": level},
    })
