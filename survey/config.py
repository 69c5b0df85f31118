"""
Application settings.

Values come from environment variables with explicit defaults. Scoring
thresholds are NOT configurable; they live as constants next to the code
that uses them.
"""

import os
import logging
from dataclasses import dataclass

LOG_FORMAT = '%(asctime)s │ %(name)-20s │ %(levelname)-8s │ %(message)s'
LOG_DATEFMT = '%H:%M:%S'


@dataclass
class Settings:
    """
    All configurable settings for the application.

    Every value has an explicit meaning and an environment override.
    """

    default_profile: str = "prehistoric"
    """Weight profile assigned to new sites (LIDAR_DEFAULT_PROFILE)."""

    log_level: str = "INFO"
    """Root logging level (LIDAR_LOG_LEVEL)."""

    export_prefix: str = "lidar_scoring_enhanced"
    """File name prefix for CSV downloads (LIDAR_EXPORT_PREFIX)."""

    @classmethod
    def from_env(cls) -> "Settings":
        """Build settings from the process environment."""
        defaults = cls()
        return cls(
            default_profile=os.environ.get("LIDAR_DEFAULT_PROFILE", defaults.default_profile),
            log_level=os.environ.get("LIDAR_LOG_LEVEL", defaults.log_level).upper(),
            export_prefix=os.environ.get("LIDAR_EXPORT_PREFIX", defaults.export_prefix),
        )


def get_settings() -> Settings:
    """Factory function for settings."""
    return Settings.from_env()


def configure_logging(settings: Settings = None):
    """Configure root logging once for the application process."""
    settings = settings or get_settings()
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format=LOG_FORMAT,
        datefmt=LOG_DATEFMT,
        handlers=[
            logging.StreamHandler()
        ]
    )
