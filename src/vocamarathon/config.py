"""Configuration settings for the drill application."""
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

# Define base directory
BASE_DIR = Path(__file__).parent.parent.parent

# Load environment variables from .env file
env_file = ".env.test" if os.getenv("ENV") == "test" else ".env"
load_dotenv(env_file)


# Define data directories from environment variables
DATA_DIR = Path(os.getenv("DATA_DIR", "./data"))
DATABASE_FILE = DATA_DIR / "vocamarathon.db"

# Drill settings
DIRECTIONS = ("source-target", "target-source")


def ensure_directories() -> None:
    """Ensure all required directories exist."""
    directories = [
        DATA_DIR,
    ]

    for directory in directories:
        directory.mkdir(parents=True, exist_ok=True)


@dataclass
class PathSettings:
    """Path configuration settings."""
    base_dir: Path = BASE_DIR
    data_dir: Path = DATA_DIR
    database_file: Path = DATABASE_FILE


@dataclass
class DatabaseSettings:
    """Database configuration settings."""
    url: str = os.getenv("DATABASE_URL", f"sqlite:///{DATABASE_FILE}")
    echo: bool = os.getenv("DATABASE_ECHO", "false").lower() == "true"


@dataclass
class LoggingSettings:
    """Logging configuration settings."""
    level: str = os.getenv("LOG_LEVEL", "INFO")
    format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    dir: Optional[str] = os.getenv("LOG_DIR", None)
    rotation: str = os.getenv("LOG_ROTATION", "midnight")
    interval: int = int(os.getenv("LOG_INTERVAL", "1"))
    backup_count: int = int(os.getenv("LOG_BACKUP_COUNT", "7"))


@dataclass
class DrillSettings:
    """Marathon drill settings."""
    mastery_cap: int = int(os.getenv("MASTERY_CAP", "3"))
    mistake_weight: float = float(os.getenv("MISTAKE_WEIGHT", "20"))
    correct_weight: float = float(os.getenv("CORRECT_WEIGHT", "1"))
    repeat_penalty: float = float(os.getenv("REPEAT_PENALTY", "0.1"))
    default_direction: str = os.getenv("DEFAULT_DIRECTION", "target-source")
    default_pool_size: int = int(os.getenv("DEFAULT_POOL_SIZE", "10000"))
    shuffle: bool = os.getenv("SHUFFLE", "true").lower() == "true"


@dataclass
class MonitoringSettings:
    """Prometheus exporter settings."""
    metrics_port: int = int(os.getenv("METRICS_PORT", "0"))


def get_path_settings() -> PathSettings:
    """Get path settings."""
    return PathSettings()


def get_database_settings() -> DatabaseSettings:
    """Get database settings."""
    return DatabaseSettings()


def get_logging_settings() -> LoggingSettings:
    """Get logging settings."""
    return LoggingSettings()


def get_drill_settings() -> DrillSettings:
    """Get drill settings."""
    return DrillSettings()


def get_monitoring_settings() -> MonitoringSettings:
    """Get monitoring settings."""
    return MonitoringSettings()


@dataclass
class Settings:
    """Main settings class that combines all configuration settings."""
    paths: PathSettings = field(default_factory=get_path_settings)
    database: DatabaseSettings = field(default_factory=get_database_settings)
    logging: LoggingSettings = field(default_factory=get_logging_settings)
    drill: DrillSettings = field(default_factory=get_drill_settings)
    monitoring: MonitoringSettings = field(default_factory=get_monitoring_settings)

    def validate(self) -> None:
        """Validate settings and raise ValueError if invalid."""
        if not self.database.url:
            raise ValueError("DATABASE_URL is required")

        if self.drill.mastery_cap < 1:
            raise ValueError("MASTERY_CAP must be positive")

        if self.drill.mistake_weight <= 0 or self.drill.correct_weight <= 0:
            raise ValueError("MISTAKE_WEIGHT and CORRECT_WEIGHT must be positive")

        if self.drill.repeat_penalty <= 0 or self.drill.repeat_penalty > 1:
            raise ValueError("REPEAT_PENALTY must be in (0, 1]")

        if self.drill.default_direction not in DIRECTIONS:
            raise ValueError(f"DEFAULT_DIRECTION must be one of {', '.join(DIRECTIONS)}")

        if self.drill.default_pool_size < 1:
            raise ValueError("DEFAULT_POOL_SIZE must be positive")

        if self.monitoring.metrics_port < 0:
            raise ValueError("METRICS_PORT cannot be negative")


# Create global settings instance
settings = Settings()
settings.validate()
