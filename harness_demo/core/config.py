# harness_demo/core/config.py
"""
Configuration Module
Application settings resolved from the environment, with keyword overrides for tests
"""

import os
from pathlib import Path
from typing import Any, Dict, Optional

PACKAGE_DIR = Path(__file__).resolve().parent.parent
DEFAULT_STATIC_DIR = PACKAGE_DIR / "static"


def _env_bool(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() in ("1", "true", "yes")


class Settings:
    """Application settings read from the environment at construction time"""

    def __init__(self, **overrides: Any):
        # Application metadata (version/commit/build time are injected by the build)
        self.app_name: str = os.getenv("APP_NAME", "Harness Demo App")
        self.version: str = os.getenv("APP_VERSION", "1.0.0")
        self.commit: str = os.getenv("APP_COMMIT", "unknown")
        self.environment: str = os.getenv("APP_ENV", "development")
        self.build_time: str = os.getenv("BUILD_TIME", "")

        # Server
        self.host: str = os.getenv("HOST", "0.0.0.0")
        self.port: int = int(os.getenv("PORT", "8080"))
        self.shutdown_timeout: float = float(os.getenv("SHUTDOWN_TIMEOUT", "10"))
        self.keep_alive_timeout: int = int(os.getenv("KEEP_ALIVE_TIMEOUT", "60"))

        # Probes
        self.ready_after: float = float(os.getenv("READY_AFTER_SECONDS", "2"))

        # Logging
        self.log_level: str = os.getenv("LOG_LEVEL", "INFO")
        self.log_json: bool = _env_bool("LOG_JSON", "true")
        self.log_dir: Optional[str] = os.getenv("LOG_DIR") or None

        # Static assets
        self.static_dir: Path = Path(os.getenv("STATIC_DIR", str(DEFAULT_STATIC_DIR)))

        for key, value in overrides.items():
            if key not in self.__dict__:
                raise AttributeError(
                    f"Settings has no attribute '{key}'. Available settings: {', '.join(sorted(self.__dict__))}"
                )
            setattr(self, key, value)

        # Keep static_dir a Path even when overridden with a string
        self.static_dir = Path(self.static_dir)

    @property
    def index_path(self) -> Path:
        return self.static_dir / "index.html"

    def get_settings_dict(self) -> Dict[str, Any]:
        """Get all settings as dictionary"""
        return {key: value for key, value in self.__dict__.items() if not key.startswith("_")}


# Settings for the running process; tests build their own instances
settings = Settings()
