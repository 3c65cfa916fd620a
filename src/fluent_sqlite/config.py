"""Provide global constants and logging setup for the project."""
from pathlib import Path
from dotenv import dotenv_values
import logging

PROJECT_ROOT = Path(__file__).resolve().parents[2]

DOTENV_FILE = Path(".env")
DOTENV_FILE_PATH = (PROJECT_ROOT / DOTENV_FILE).resolve()

_DOTENV = dotenv_values(DOTENV_FILE_PATH)

LOG_LEVEL = (_DOTENV.get("LOG_LEVEL") or "INFO").upper()

# Optional; the rotating file handler is only attached when set
LOG_FILE_PATH = Path(_DOTENV["LOG_FILE"]).expanduser().resolve() if _DOTENV.get("LOG_FILE") else None

# In-memory, volatile database with synchronous writes disabled
DEFAULT_CONNECTION_STRING = "Data Source=:memory:;Version=3;New=True;Synchronous=Off;"

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def configure_logging():
    root = logging.getLogger()
    if root.handlers:
        return

    from logging.handlers import RotatingFileHandler

    # console/basic config
    logging.basicConfig(
        level=LOG_LEVEL,
        format=LOG_FORMAT,
    )

    if LOG_FILE_PATH is None:
        return

    LOG_FILE_PATH.parent.mkdir(parents=True, exist_ok=True)
    file_handler = RotatingFileHandler(
        LOG_FILE_PATH,
        maxBytes=5 * 1024 * 1024,  # 5 MB per file
        backupCount=3,
        encoding="utf-8",
    )
    file_handler.setLevel(LOG_LEVEL)
    file_handler.setFormatter(logging.Formatter(LOG_FORMAT))
    root.addHandler(file_handler)


def main():
    """Print resolved settings."""
    settings = {"PROJECT_ROOT": PROJECT_ROOT,
                "DOTENV_FILE_PATH": DOTENV_FILE_PATH,
                "LOG_LEVEL": LOG_LEVEL,
                "LOG_FILE_PATH": LOG_FILE_PATH,
                "DEFAULT_CONNECTION_STRING": DEFAULT_CONNECTION_STRING,
                }

    print("Current settings:")
    print("-----------------")
    for label, value in settings.items():
        print(f"{label}: {value}")


if __name__ == "__main__":
    main()
