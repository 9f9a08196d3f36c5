import logging
import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

DEFAULT_FRONTEND_URL = "http://localhost:5173"
DEFAULT_PORT = 5000
DEFAULT_UPLOAD_DIR = "uploads"


def is_log_level(name: str) -> bool:
    return isinstance(logging.getLevelName(name), int)


class ConfigError(ValueError):
    """Raised when the environment cannot run the service."""


@dataclass(frozen=True)
class Settings:
    mongodb_uri: str = ""
    frontend_url: str = DEFAULT_FRONTEND_URL
    port: int = DEFAULT_PORT
    upload_dir: Path = Path(DEFAULT_UPLOAD_DIR)
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> "Settings":
        port = os.getenv("PORT") or str(DEFAULT_PORT)
        try:
            port_number = int(port)
        except ValueError:
            raise ConfigError(f"PORT must be a number, got {port!r}")

        return cls(
            mongodb_uri=os.getenv("MONGODB_URI", ""),
            frontend_url=os.getenv("FRONTEND_URL") or DEFAULT_FRONTEND_URL,
            port=port_number,
            upload_dir=Path(os.getenv("UPLOAD_DIR") or DEFAULT_UPLOAD_DIR),
            log_level=(os.getenv("LOG_LEVEL") or "INFO").upper(),
        )

    def validate(self, require_database: bool = True) -> None:
        if require_database and not self.mongodb_uri:
            raise ConfigError("MONGODB_URI is not defined in environment variables")
        if not is_log_level(self.log_level):
            raise ConfigError(f"LOG_LEVEL must be a logging level name, got {self.log_level!r}")
