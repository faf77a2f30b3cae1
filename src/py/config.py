"""Settings and logging setup for the meal prep server."""
import logging
import os
import sys
from dataclasses import dataclass, field

from dotenv import load_dotenv

load_dotenv()

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


@dataclass(frozen=True)
class Settings:
    log_level: str = field(default_factory=lambda: os.getenv("MEAL_PREP_LOG_LEVEL", "INFO"))
    default_days: int = field(default_factory=lambda: int(os.getenv("MEAL_PREP_DEFAULT_DAYS", "7")))
    default_servings: int = field(default_factory=lambda: int(os.getenv("MEAL_PREP_DEFAULT_SERVINGS", "4")))
    protocol_version: str = field(default_factory=lambda: os.getenv("MEAL_PREP_PROTOCOL_VERSION", "2025-06-18"))


def configure_logging(level: str = "INFO") -> None:
    # stdout carries protocol messages, so logs go to stderr
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format=LOG_FORMAT,
        stream=sys.stderr,
    )
