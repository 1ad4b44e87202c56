import logging
import logging.config
from pathlib import Path
from app.core.config import settings

LOGGING_CONFIG = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "default": {
            "format": "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
        },
        "detailed": {
            "format": "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
        }
    },
    "handlers": {
        "console": {
            "class": "logging.StreamHandler",
            "level": settings.LOG_LEVEL,
            "formatter": "detailed",
            "stream": "ext://sys.stdout"
        }
    },
    "root": {
        "level": settings.LOG_LEVEL,
        "handlers": ["console"]
    },
    "loggers": {
        "app": {
            "level": settings.LOG_LEVEL,
            "handlers": ["console"],
            "propagate": False
        },
        "app.middleware.logging": {
            "level": "INFO",
            "handlers": ["console"],
            "propagate": False
        },
        "httpx": {
            "level": "WARNING",
            "handlers": ["console"],
            "propagate": False
        },
        "uvicorn.access": {
            "level": "WARNING",
            "handlers": ["console"],
            "propagate": False
        }
    }
}

def _file_handlers(log_dir: str) -> dict:
    log_path = Path(log_dir)
    log_path.mkdir(parents=True, exist_ok=True)
    return {
        "file": {
            "class": "logging.handlers.RotatingFileHandler",
            "level": settings.LOG_LEVEL,
            "formatter": "detailed",
            "filename": str(log_path / "app.log"),
            "maxBytes": 10485760,
            "backupCount": 5
        },
        "error_file": {
            "class": "logging.handlers.RotatingFileHandler",
            "level": "ERROR",
            "formatter": "detailed",
            "filename": str(log_path / "error.log"),
            "maxBytes": 10485760,
            "backupCount": 5
        }
    }

def configure_logging():
    config = LOGGING_CONFIG
    if settings.LOG_DIR:
        config = {
            **LOGGING_CONFIG,
            "handlers": {**LOGGING_CONFIG["handlers"], **_file_handlers(settings.LOG_DIR)},
            "root": {
                "level": settings.LOG_LEVEL,
                "handlers": ["console", "file", "error_file"]
            },
            "loggers": {
                name: {**logger, "handlers": logger["handlers"] + ["file"]}
                for name, logger in LOGGING_CONFIG["loggers"].items()
            }
        }
    logging.config.dictConfig(config)
