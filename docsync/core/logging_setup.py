import logging
import logging.config

from docsync.core.config import settings


def setup_logging(level: str = None) -> logging.Logger:
    """Настройка логирования приложения"""
    loglevel = (level or settings.log_level).upper()

    logging_config = {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "standard": {
                "format": "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
                "datefmt": "%Y-%m-%d %H:%M:%S",
            },
        },
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "formatter": "standard",
                "level": loglevel,
                "stream": "ext://sys.stdout",
            },
        },
        "root": {
            "handlers": ["console"],
            "level": loglevel,
        },
    }

    logging.config.dictConfig(logging_config)

    # SQL-логи только в режиме отладки движка
    logging.getLogger("sqlalchemy.engine").setLevel(
        logging.INFO if settings.database_echo else logging.WARNING
    )

    return logging.getLogger("docsync")
