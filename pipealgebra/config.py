"""
Runtime configuration and logging setup.

Defaults for cross-validation and ensemble selection are read from environment
variables prefixed with ``PIPEALGEBRA_`` (or a local ``.env`` file), validated
with Pydantic.
"""

import logging
import os
from functools import lru_cache
from logging import Handler
from logging.handlers import RotatingFileHandler
from typing import Optional

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


def configure_logging(
    log_level: Optional[str] = None,
    log_file: Optional[str] = None,
    max_bytes: int = 10 * 1024 * 1024,
    backup_count: int = 5,
) -> None:
    """
    Configure the ``pipealgebra`` logger hierarchy.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
            Defaults to the LOG_LEVEL setting.
        log_file: Optional path to a rotating log file (directory is created if needed).
            Falls back to the LOG_FILE setting when log_level is also omitted.
    """
    if log_level is None:
        settings = get_settings()
        log_level = settings.LOG_LEVEL
        log_file = log_file or settings.LOG_FILE

    level = getattr(logging, log_level.upper(), logging.INFO)
    package_logger = logging.getLogger("pipealgebra")
    package_logger.setLevel(level)

    # Remove handlers from a previous call to prevent duplicates
    for handler in package_logger.handlers[:]:
        package_logger.removeHandler(handler)

    if log_file:
        log_dir = os.path.dirname(log_file)
        if log_dir:
            os.makedirs(log_dir, exist_ok=True)
        file_handler: Handler = RotatingFileHandler(
            log_file,
            maxBytes=max_bytes,
            backupCount=backup_count,
            encoding="utf-8",
        )
        file_handler.setLevel(level)
        file_handler.setFormatter(
            logging.Formatter(
                "%(asctime)s [%(levelname)8s] %(name)s: %(message)s "
                "[%(filename)s:%(lineno)d in %(funcName)s()]"
            )
        )
        package_logger.addHandler(file_handler)

    console_handler = logging.StreamHandler()
    console_handler.setLevel(level)
    console_handler.setFormatter(logging.Formatter("%(levelname)s: %(name)s: %(message)s"))
    package_logger.addHandler(console_handler)

    package_logger.debug(f"Logging initialized. Level: {log_level}, file: {log_file}")


class Settings(BaseSettings):
    """Library defaults, overridable through ``PIPEALGEBRA_*`` environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="PIPEALGEBRA_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    # === LOGGING ===
    LOG_LEVEL: str = "INFO"
    LOG_FILE: Optional[str] = None

    # === CROSS-VALIDATION ===
    CV_FOLDS: int = 10
    CV_STRATEGY: str = "kfold"  # kfold | stratified_kfold
    CV_SHUFFLE: bool = False  # contiguous blocks unless shuffling is requested
    RANDOM_STATE: int = 42
    N_JOBS: int = 1
    DEFAULT_METRIC: str = "accuracy"

    # === ENSEMBLES ===
    BEST_HOLDOUT_SIZE: float = 0.2
    STACKER_TRAINING_PROPORTION: float = 0.3

    @field_validator("LOG_LEVEL")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        normalized = v.upper()
        if normalized not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Invalid LOG_LEVEL '{v}'")
        return normalized

    @field_validator("CV_STRATEGY")
    @classmethod
    def validate_cv_strategy(cls, v: str) -> str:
        normalized = v.lower()
        if normalized not in {"kfold", "stratified_kfold"}:
            raise ValueError("CV_STRATEGY must be 'kfold' or 'stratified_kfold'")
        return normalized

    @field_validator("CV_FOLDS")
    @classmethod
    def validate_cv_folds(cls, v: int) -> int:
        if v < 2:
            raise ValueError("CV_FOLDS must be at least 2")
        return v

    @field_validator("BEST_HOLDOUT_SIZE", "STACKER_TRAINING_PROPORTION")
    @classmethod
    def validate_fraction(cls, v: float) -> float:
        if not 0.0 < v < 1.0:
            raise ValueError("Fractions must lie strictly between 0 and 1")
        return v

    def setup_logging(self) -> None:
        """Initialize library logging from LOG_LEVEL and LOG_FILE."""
        configure_logging(self.LOG_LEVEL, self.LOG_FILE)


@lru_cache()
def get_settings() -> Settings:
    """
    Get library settings.
    Uses lru_cache to avoid re-reading the environment on every call.
    """
    return Settings()
