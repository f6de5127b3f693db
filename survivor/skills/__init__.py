"""
Skill System Module
Skill definitions, per-character progression, books and management.
"""

from survivor.skills.taxonomy import (
    SkillDefinition,
    SkillPrerequisite,
)
from survivor.skills.catalog import get_base_skills, get_base_skill_map
from survivor.skills.progression import (
    Skill,
    PracticeData,
    TheoryData,
    RustData,
    SkillLevelUpResult,
)
from survivor.skills.books import (
    BookData,
    BookManager,
    ReadingCheckResult,
    ReadingResult,
)
from survivor.skills.manager import SkillManager

__all__ = [
    "SkillDefinition",
    "SkillPrerequisite",
    "get_base_skills",
    "get_base_skill_map",
    "Skill",
    "PracticeData",
    "TheoryData",
    "RustData",
    "SkillLevelUpResult",
    "BookData",
    "BookManager",
    "ReadingCheckResult",
    "ReadingResult",
    "SkillManager",
]
