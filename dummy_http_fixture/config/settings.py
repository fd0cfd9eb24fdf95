import os
import re
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv


@dataclass
class FixtureConfig:
    """Settings shared by every fixture created in a test session."""

    host: str = "127.0.0.1"
    log_level: str = "WARNING"
    access_log: bool = False
    startup_poll_interval: float = 0.01  # seconds
    graceful_shutdown_timeout: Optional[float] = None  # seconds, None waits forever

    @classmethod
    def from_env(cls, env_file: Optional[str] = None) -> "FixtureConfig":
        """Load configuration from environment variables."""
        if env_file:
            load_dotenv(env_file)
        else:
            load_dotenv()

        shutdown_timeout = os.getenv("DUMMY_HTTP_GRACEFUL_SHUTDOWN_TIMEOUT", "")
        return cls(
            host=os.getenv("DUMMY_HTTP_HOST", "127.0.0.1"),
            log_level=os.getenv("DUMMY_HTTP_LOG_LEVEL", "WARNING"),
            access_log=os.getenv("DUMMY_HTTP_ACCESS_LOG", "false").lower() == "true",
            startup_poll_interval=float(
                os.getenv("DUMMY_HTTP_STARTUP_POLL_INTERVAL", "0.01")
            ),
            graceful_shutdown_timeout=(
                float(shutdown_timeout) if shutdown_timeout.strip() else None
            ),
        )

    def validate(self) -> bool:
        """Validate that configuration values are usable."""
        if not self.host or not self.host.strip():
            raise ValueError("Configuration field 'host' is missing or empty")
        if not re.match(r"^[A-Za-z0-9\-\.]+$", self.host):
            raise ValueError(f"Invalid host: {self.host}")

        valid_log_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if self.log_level.upper() not in valid_log_levels:
            raise ValueError(
                f"Invalid log_level: {self.log_level}. Must be one of {valid_log_levels}"
            )

        if self.startup_poll_interval <= 0:
            raise ValueError("startup_poll_interval must be positive")

        if (
            self.graceful_shutdown_timeout is not None
            and self.graceful_shutdown_timeout < 0
        ):
            raise ValueError("graceful_shutdown_timeout cannot be negative")

        return True


# Global config instance
config: Optional[FixtureConfig] = None


def get_config() -> FixtureConfig:
    """Get the global configuration instance."""
    global config
    if config is None:
        config = FixtureConfig()
        config.validate()
    return config
