"""
Skill Taxonomy
Static skill definitions: categories, prerequisites and experience curves.
"""

from typing import Optional, List, Dict, Any, Iterable, Mapping
import math

from pydantic import BaseModel, ConfigDict, Field

from survivor.config import (
    SkillCategory,
    BASE_EXPERIENCE_PER_LEVEL,
    PRACTICE_PENALTY_PER_LEVEL,
    PRACTICE_MAX_PENALTY,
    PRACTICE_MIN_MULTIPLIER,
    DEFAULT_RUST_RATE,
    DEFAULT_RUST_RESIST,
)


class SkillPrerequisite(BaseModel):
    """A minimum level required in another skill"""
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    skill_id: str
    required_level: int = Field(default=0, ge=0, alias="level")


class SkillDefinition(BaseModel):
    """
    Immutable description of a skill type.

    A single definition is shared by every character's instance of the
    skill; instances hold a reference to it and never copy it.

    Difficulty raises the experience needed per level and lowers the
    yield from practice. Rust rate is measured in levels per day of disuse.
    """
    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    description: str = ""
    category: SkillCategory = SkillCategory.GENERAL

    difficulty_multiplier: float = Field(default=1.0, gt=0)
    is_hidden: bool = False

    related_item_types: frozenset[str] = Field(default_factory=frozenset)
    prerequisites: tuple[SkillPrerequisite, ...] = ()

    rust_rate: float = Field(default=DEFAULT_RUST_RATE, ge=0)
    default_rust_resist: float = Field(default=DEFAULT_RUST_RESIST, ge=0.0, le=1.0)

    # ========== Factories ==========

    @classmethod
    def general(
        cls,
        id: str,
        name: str,
        description: str = "",
        category: SkillCategory = SkillCategory.GENERAL,
        difficulty_multiplier: float = 1.0,
        is_hidden: bool = False,
    ) -> "SkillDefinition":
        """Create a definition in any category"""
        return cls(
            id=id,
            name=name,
            description=description,
            category=category,
            difficulty_multiplier=difficulty_multiplier,
            is_hidden=is_hidden,
        )

    @classmethod
    def combat(
        cls,
        id: str,
        name: str,
        description: str = "",
        difficulty_multiplier: float = 1.0,
    ) -> "SkillDefinition":
        return cls.general(id, name, description, SkillCategory.COMBAT, difficulty_multiplier)

    @classmethod
    def crafting(
        cls,
        id: str,
        name: str,
        description: str = "",
        difficulty_multiplier: float = 1.0,
        related_item_types: Optional[Iterable[str]] = None,
    ) -> "SkillDefinition":
        """Create a crafting skill tied to the tools and items it works with"""
        return cls(
            id=id,
            name=name,
            description=description,
            category=SkillCategory.CRAFTING,
            difficulty_multiplier=difficulty_multiplier,
            related_item_types=frozenset(related_item_types or ()),
        )

    @classmethod
    def survival(
        cls,
        id: str,
        name: str,
        description: str = "",
        difficulty_multiplier: float = 1.0,
    ) -> "SkillDefinition":
        return cls.general(id, name, description, SkillCategory.SURVIVAL, difficulty_multiplier)

    # ========== Category checks ==========

    def is_combat_skill(self) -> bool:
        return self.category == SkillCategory.COMBAT

    def is_crafting_skill(self) -> bool:
        return self.category == SkillCategory.CRAFTING

    def is_survival_skill(self) -> bool:
        return self.category == SkillCategory.SURVIVAL

    def is_weapon_skill(self) -> bool:
        return self.category == SkillCategory.WEAPON

    def has_prerequisites(self) -> bool:
        return len(self.prerequisites) > 0

    # ========== Curves ==========

    def get_experience_for_level(self, level: int) -> int:
        """
        Experience needed to advance from a level.

        Currently flat across levels; the level argument is kept so that
        callers already pass it when the curve becomes level dependent.
        """
        return math.floor(BASE_EXPERIENCE_PER_LEVEL * self.difficulty_multiplier)

    def get_experience_multiplier(self, level: int) -> float:
        """
        Practice yield multiplier at a level.

        100% at level 0, minus 10% per level down to a 20% floor,
        then divided by difficulty.
        """
        penalty = min(level * PRACTICE_PENALTY_PER_LEVEL, PRACTICE_MAX_PENALTY)
        return max(PRACTICE_MIN_MULTIPLIER, 1.0 - penalty) / self.difficulty_multiplier

    def check_prerequisites(self, skill_levels: Mapping[str, int]) -> bool:
        """Check every prerequisite against current levels (missing = 0)"""
        for prereq in self.prerequisites:
            if skill_levels.get(prereq.skill_id, 0) < prereq.required_level:
                return False
        return True

    # ========== Display ==========

    def get_display_name(self) -> str:
        return "??? (Unknown skill)" if self.is_hidden else self.name

    def get_display_description(self) -> str:
        if self.is_hidden:
            return "This is a hidden skill. It unlocks under special conditions."
        return self.description

    # ========== Records ==========

    def to_json(self) -> Dict[str, Any]:
        """Convert to a plain record"""
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "category": self.category.value,
            "difficulty_multiplier": self.difficulty_multiplier,
            "is_hidden": self.is_hidden,
            "related_items": sorted(self.related_item_types),
            "prerequisites": [p.model_dump(by_alias=True) for p in self.prerequisites],
            "rust_rate": self.rust_rate,
            "default_rust_resist": self.default_rust_resist,
        }

    @classmethod
    def from_json(cls, data: Dict[str, Any]) -> "SkillDefinition":
        """Create from a plain record; optional keys fall back to defaults"""
        prerequisites: List[Dict[str, Any]] = data.get("prerequisites") or []
        return cls(
            id=data["id"],
            name=data["name"],
            description=data.get("description") or "",
            category=data.get("category") or SkillCategory.GENERAL,
            difficulty_multiplier=data.get("difficulty_multiplier", 1.0),
            is_hidden=data.get("is_hidden", False),
            related_item_types=frozenset(data.get("related_items") or ()),
            prerequisites=tuple(SkillPrerequisite.model_validate(p) for p in prerequisites),
            rust_rate=data.get("rust_rate", DEFAULT_RUST_RATE),
            default_rust_resist=data.get("default_rust_resist", DEFAULT_RUST_RESIST),
        )
