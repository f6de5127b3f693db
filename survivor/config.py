"""
Skill Engine Configuration and Constants
Contains tuning curves, enumerations and runtime settings for the skill system
"""

from enum import Enum
from functools import lru_cache
import logging
import time

from pydantic_settings import BaseSettings, SettingsConfigDict

# =============================================================================
# TIME CONSTANTS
# =============================================================================

MS_PER_SECOND = 1000
MS_PER_HOUR = 60 * 60 * MS_PER_SECOND
MS_PER_DAY = 24 * MS_PER_HOUR

# =============================================================================
# PRACTICE CONFIGURATION
# =============================================================================

# Experience needed per level before the difficulty multiplier
BASE_EXPERIENCE_PER_LEVEL = 100

# Practice yield falls 10% per level, bottoming out at 20%
PRACTICE_PENALTY_PER_LEVEL = 0.1
PRACTICE_MAX_PENALTY = 0.8
PRACTICE_MIN_MULTIPLIER = 0.2

# Each 100 points of practice experience removes one rust level
RUST_REDUCTION_PER_EXPERIENCE = 100

# Safety bound for repeated level-ups
MAX_AUTO_LEVEL_UPS = 100

# =============================================================================
# THEORY CONFIGURATION
# =============================================================================

# Studying yields half the experience of hands-on practice
THEORY_STUDY_MULTIPLIER = 0.5
MAX_THEORY_LEVEL = 10

# Theory converts into practice at 0.5 exp/hour (divided by difficulty)
THEORY_CONVERSION_RATE = 0.5
THEORY_CONVERSION_MIN_HOURS = 1.0

# Practice level may exceed theory level by at most this much via conversion
THEORY_PRACTICE_CEILING = 2

# =============================================================================
# RUST CONFIGURATION
# =============================================================================

DEFAULT_RUST_RATE = 1.0  # rust levels per day, before resistance
DEFAULT_RUST_RESIST = 0.0
RUST_MIN_DAYS = 1.0

# =============================================================================
# SKILL TIERS
# =============================================================================

NOVICE_MAX_LEVEL = 2
PROFICIENT_MIN_LEVEL = 4
EXPERT_MIN_LEVEL = 7
MASTERED_MIN_LEVEL = 10

# =============================================================================
# BOOK CONFIGURATION
# =============================================================================

BOOK_LEVEL_BONUS = 0.05       # faster reading per level above requirement
BOOK_INT_BASELINE = 8
BOOK_INT_BONUS = 0.03         # faster reading per intelligence above baseline
BOOK_MIN_READING_TIME = 1000  # ms
BOOK_LEVEL_PENALTY = 0.5      # yield lost when reaching a book's max level

MANUAL_READING_TIME = 30000
TEXTBOOK_READING_TIME = 60000
REFERENCE_READING_TIME = 15000
TEXTBOOK_INT_REQUIRED = 8

# =============================================================================
# ENUMERATIONS
# =============================================================================

class SkillCategory(str, Enum):
    """Top-level skill categories"""
    COMBAT = "COMBAT"
    CRAFTING = "CRAFTING"
    SURVIVAL = "SURVIVAL"
    SOCIAL = "SOCIAL"
    MEDICAL = "MEDICAL"
    VEHICLE = "VEHICLE"
    ACADEMIC = "ACADEMIC"
    WEAPON = "WEAPON"
    GENERAL = "GENERAL"


class BookType(str, Enum):
    """Kinds of readable books"""
    MANUAL = "manual"
    TEXTBOOK = "textbook"
    REFERENCE = "reference"
    NOVEL = "novel"
    COMIC = "comic"


# =============================================================================
# RUNTIME SETTINGS
# =============================================================================

class Settings(BaseSettings):
    """Skill engine settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="SURVIVOR_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    log_level: str = "INFO"

    # Default experience handed to practice calls that don't specify one
    default_practice_experience: int = 10
    default_practice_all_experience: int = 1

    # Bound on level-ups applied by a single auto level-up pass
    max_auto_level_ups: int = MAX_AUTO_LEVEL_UPS


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


def configure_logging(level: str | None = None) -> None:
    """Configure root logging for embedding applications and scripts."""
    level_name = (level or get_settings().log_level).upper()
    level_value = getattr(logging, level_name, logging.INFO)
    logging.basicConfig(
        level=level_value,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    # basicConfig leaves the level alone once handlers exist
    logging.getLogger().setLevel(level_value)


def now_ms() -> int:
    """Current wall-clock time in epoch milliseconds"""
    return int(time.time() * MS_PER_SECOND)
