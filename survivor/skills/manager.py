"""
Skill Manager
Central management of one character's skills.
"""

from typing import Optional, List, Dict, Any, Tuple, Iterable, Mapping
from types import MappingProxyType
import logging

from survivor.config import SkillCategory, get_settings, now_ms
from survivor.skills.taxonomy import SkillDefinition
from survivor.skills.progression import Skill
from survivor.skills.books import BookData, BookManager, ReadingResult
from survivor.skills.catalog import get_base_skills

logger = logging.getLogger(__name__)


class SkillManager:
    """
    Immutable collection of a character's skills.

    Handles:
    - Skill lookup and statistics
    - Practice, study and theory conversion
    - Rust sweeps
    - Save/load records

    Every change returns a new manager; the skill mapping is copied
    shallowly so untouched Skill snapshots are shared between managers.
    Operations on locked or unknown skills are silently skipped.
    """

    def __init__(
        self,
        skills: Mapping[str, Skill],
        definitions: Mapping[str, SkillDefinition],
    ):
        """
        Initialize skill manager.

        Args:
            skills: Skill id -> skill state
            definitions: Skill id -> definition (must cover every skill)
        """
        missing = [sid for sid in skills if sid not in definitions]
        if missing:
            raise ValueError(f"Unknown skill ID: {missing[0]}")

        self._skills: Dict[str, Skill] = dict(skills)
        self._definitions: Dict[str, SkillDefinition] = dict(definitions)

    # ========== Construction ==========

    @classmethod
    def create(cls, definitions: Iterable[SkillDefinition]) -> "SkillManager":
        """Create a manager with every skill unlocked at level 0"""
        definitions = list(definitions)
        return cls(
            skills={d.id: Skill.create(d) for d in definitions},
            definitions={d.id: d for d in definitions},
        )

    @classmethod
    def create_default(cls) -> "SkillManager":
        """Create a manager from the base skill catalog"""
        return cls.create(get_base_skills())

    @classmethod
    def from_json(cls, data: Dict[str, Any]) -> "SkillManager":
        """
        Load a manager from a plain record.

        Raises:
            ValueError: a skill references an id with no definition
        """
        definitions = {
            d.id: d for d in (SkillDefinition.from_json(raw) for raw in data.get("definitions", []))
        }

        skills: Dict[str, Skill] = {}
        for raw in data.get("skills", []):
            definition = definitions.get(raw["id"])
            if definition is None:
                logger.error(f"Cannot load skills: unknown skill ID {raw['id']}")
                raise ValueError(f"Unknown skill ID: {raw['id']}")
            skills[definition.id] = Skill.from_json(raw, definition)

        logger.info(f"Loaded {len(skills)} skills ({len(definitions)} definitions)")
        return cls(skills=skills, definitions=definitions)

    def to_json(self) -> Dict[str, Any]:
        """Convert to a plain record"""
        return {
            "skills": [s.to_json() for s in self._skills.values()],
            "definitions": [d.to_json() for d in self._definitions.values()],
        }

    def _with_skills(self, skills: Dict[str, Skill]) -> "SkillManager":
        return SkillManager(skills=skills, definitions=self._definitions)

    # ========== Queries ==========

    @property
    def skills(self) -> Mapping[str, Skill]:
        return MappingProxyType(self._skills)

    @property
    def definitions(self) -> Mapping[str, SkillDefinition]:
        return MappingProxyType(self._definitions)

    def get_skill(self, skill_id: str) -> Optional[Skill]:
        return self._skills.get(skill_id)

    def get_skill_level(self, skill_id: str) -> int:
        """Practice level of a skill (0 if unknown)"""
        skill = self._skills.get(skill_id)
        return skill.level if skill else 0

    def get_all_skills(self) -> Mapping[str, Skill]:
        return self.skills

    def get_unlocked_skills(self) -> List[Skill]:
        return [s for s in self._skills.values() if s.is_unlocked]

    def get_skills_by_category(self, category: SkillCategory | str) -> List[Skill]:
        """Skills in a category; unknown categories match nothing"""
        return [s for s in self._skills.values() if s.definition.category.value == category]

    def get_skill_count(self) -> int:
        return len(self._skills)

    def get_unlocked_skill_count(self) -> int:
        return len(self.get_unlocked_skills())

    def has_skill(self, skill_id: str) -> bool:
        return skill_id in self._skills

    def get_skill_levels(self) -> Dict[str, int]:
        """Skill id -> practice level, for prerequisite checks"""
        return {sid: s.level for sid, s in self._skills.items()}

    def meets_prerequisites(self, skill_id: str) -> bool:
        """Check a skill's prerequisites against this character's levels"""
        definition = self._definitions.get(skill_id)
        if definition is None:
            return False
        return definition.check_prerequisites(self.get_skill_levels())

    # ========== Practice ==========

    @staticmethod
    def _practice(skill: Skill, base_experience: int, now: int) -> Skill:
        practiced = skill.practice_skill(base_experience, now)
        leveled, result = practiced.auto_level_up()
        if result.leveled_up:
            logger.info(f"{skill.definition.name} reached level {result.new_level}")
        return leveled

    def practice_skill(
        self,
        skill_id: str,
        base_experience: Optional[int] = None,
        now: Optional[int] = None,
    ) -> "SkillManager":
        """Practice one skill, then apply any level-ups"""
        skill = self._skills.get(skill_id)
        if skill is None or not skill.is_unlocked:
            return self

        if base_experience is None:
            base_experience = get_settings().default_practice_experience
        now = now_ms() if now is None else now

        skills = dict(self._skills)
        skills[skill_id] = self._practice(skill, base_experience, now)
        return self._with_skills(skills)

    def practice_multiple(
        self,
        practices: Iterable[Tuple[str, int]],
        now: Optional[int] = None,
    ) -> "SkillManager":
        """
        Practice several skills at once.

        Args:
            practices: (skill id, base experience) pairs
            now: Timestamp (ms) for all practices
        """
        now = now_ms() if now is None else now
        skills = dict(self._skills)

        for skill_id, experience in practices:
            skill = skills.get(skill_id)
            if skill is not None and skill.is_unlocked:
                skills[skill_id] = self._practice(skill, experience, now)

        return self._with_skills(skills)

    def practice_all(
        self,
        base_experience: Optional[int] = None,
        now: Optional[int] = None,
    ) -> "SkillManager":
        """Practice every unlocked skill"""
        if base_experience is None:
            base_experience = get_settings().default_practice_all_experience
        now = now_ms() if now is None else now

        skills = {
            sid: self._practice(s, base_experience, now) if s.is_unlocked else s
            for sid, s in self._skills.items()
        }
        return self._with_skills(skills)

    # ========== Theory ==========

    def study_skill(
        self,
        skill_id: str,
        base_experience: int,
        now: Optional[int] = None,
    ) -> "SkillManager":
        """Study theory for one skill"""
        skill = self._skills.get(skill_id)
        if skill is None or not skill.is_unlocked:
            return self

        studied = skill.study_theory(base_experience, now_ms() if now is None else now)
        if studied is skill:
            return self

        skills = dict(self._skills)
        skills[skill_id] = studied
        return self._with_skills(skills)

    def read_book(
        self,
        book: BookData,
        reader_intelligence: Optional[int] = None,
        now: Optional[int] = None,
    ) -> Tuple["SkillManager", ReadingResult]:
        """
        Read a book that trains one of this character's skills.

        Returns:
            Tuple of (updated manager, reading result)
        """
        skill = self._skills.get(book.skill_id)
        if skill is None or not skill.is_unlocked:
            error = f"Cannot study {book.skill_id}: skill is unknown or locked"
            return (self, ReadingResult(
                success=False,
                theory_experience_gained=0,
                actual_reading_time=0,
                message=error,
                skill=skill,
                error=error,
            ))

        result = BookManager.read_book(
            book, skill, reader_intelligence, now_ms() if now is None else now
        )
        if not result.success:
            return (self, result)

        skills = dict(self._skills)
        skills[book.skill_id] = result.skill
        return (self._with_skills(skills), result)

    def convert_theory(self, now: Optional[int] = None) -> "SkillManager":
        """Convert accumulated theory into practice for every skill"""
        now = now_ms() if now is None else now
        return self._sweep(lambda s: s.convert_theory_to_practice(now))

    # ========== Direct changes ==========

    def set_skill_level(self, skill_id: str, level: int) -> "SkillManager":
        skill = self._skills.get(skill_id)
        if skill is None:
            return self

        skills = dict(self._skills)
        skills[skill_id] = skill.set_level(level)
        return self._with_skills(skills)

    def set_multiple_skills(self, levels: Mapping[str, int]) -> "SkillManager":
        skills = dict(self._skills)
        for skill_id, level in levels.items():
            skill = skills.get(skill_id)
            if skill is not None:
                skills[skill_id] = skill.set_level(level)
        return self._with_skills(skills)

    def unlock_skill(self, skill_id: str) -> "SkillManager":
        skill = self._skills.get(skill_id)
        if skill is None or skill.is_unlocked:
            return self

        skills = dict(self._skills)
        skills[skill_id] = skill.unlock()
        return self._with_skills(skills)

    def add_skill(self, definition: SkillDefinition, locked: bool = False) -> "SkillManager":
        """Add a new skill; no-op if this character already has it"""
        if definition.id in self._skills:
            return self

        skills = dict(self._skills)
        skills[definition.id] = Skill.locked(definition) if locked else Skill.create(definition)
        definitions = dict(self._definitions)
        definitions[definition.id] = definition
        return SkillManager(skills=skills, definitions=definitions)

    # ========== Time ==========

    def _sweep(self, transition) -> "SkillManager":
        """Apply a transition to every skill, keeping unchanged entries"""
        skills = dict(self._skills)
        changed = 0

        for skill_id, skill in self._skills.items():
            updated = transition(skill)
            if updated is not skill:
                skills[skill_id] = updated
                changed += 1

        if not changed:
            return self
        logger.debug(f"Sweep updated {changed} skills")
        return self._with_skills(skills)

    def process_decay(self, now: Optional[int] = None) -> "SkillManager":
        """Apply rust to every skill that has gone unchecked for a day or more"""
        now = now_ms() if now is None else now
        return self._sweep(lambda s: s.process_rust(now))

    # ========== Statistics ==========

    def get_total_skill_level(self) -> int:
        return sum(s.level for s in self._skills.values())

    def get_highest_skill(self) -> Optional[Tuple[Skill, int]]:
        """Highest-level skill as (skill, level), or None with no skills"""
        if not self._skills:
            return None
        highest = max(self._skills.values(), key=lambda s: s.level)
        return (highest, highest.level)

    def get_mastered_skill_count(self) -> int:
        return sum(1 for s in self._skills.values() if s.is_mastered())

    def get_expert_skill_count(self) -> int:
        return sum(1 for s in self._skills.values() if s.is_expert())

    def get_specializations(self, min_level: int = 4) -> List[Tuple[str, int]]:
        """
        Get skills at or above a level.

        Returns:
            List of (skill_id, level) tuples, highest first
        """
        specializations = [
            (sid, s.level) for sid, s in self._skills.items() if s.level >= min_level
        ]
        specializations.sort(key=lambda x: x[1], reverse=True)
        return specializations

    def get_summary(self) -> Dict[str, Any]:
        """
        Get a summary of the character's skills.

        Returns:
            Summary including counts, specializations and highest skill
        """
        highest = self.get_highest_skill()
        return {
            "total_skills": self.get_skill_count(),
            "unlocked_skills": self.get_unlocked_skill_count(),
            "total_levels": self.get_total_skill_level(),
            "mastered": self.get_mastered_skill_count(),
            "expert": self.get_expert_skill_count(),
            "rusted": sum(1 for s in self._skills.values() if s.rust.is_rusted),
            "specializations": [
                {"skill": self._definitions[sid].name, "level": level}
                for sid, level in self.get_specializations()[:5]
            ],
            "highest_skill": highest[0].definition.name if highest else None,
        }
