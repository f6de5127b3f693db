"""
Skill Progression
Per-character skill state: practice, theory and rust tracks.

Every transition returns a new Skill snapshot. Nothing here raises for
locked skills or out-of-range inputs; the skill simply declines to change.
"""

from typing import Optional, Dict, Any, Tuple
from dataclasses import dataclass
import logging
import math

from pydantic import BaseModel, ConfigDict, Field, model_validator

from survivor.config import (
    MS_PER_HOUR,
    MS_PER_DAY,
    RUST_REDUCTION_PER_EXPERIENCE,
    THEORY_STUDY_MULTIPLIER,
    MAX_THEORY_LEVEL,
    THEORY_CONVERSION_RATE,
    THEORY_CONVERSION_MIN_HOURS,
    THEORY_PRACTICE_CEILING,
    RUST_MIN_DAYS,
    NOVICE_MAX_LEVEL,
    PROFICIENT_MIN_LEVEL,
    EXPERT_MIN_LEVEL,
    MASTERED_MIN_LEVEL,
    get_settings,
)
from survivor.skills.taxonomy import SkillDefinition

logger = logging.getLogger(__name__)


LEVEL_DESCRIPTIONS = (
    "Untrained",
    "Novice",
    "Basic",
    "Competent",
    "Professional",
    "Expert",
    "Master",
    "Grandmaster",
    "Legendary",
    "Mythic",
)


class PracticeData(BaseModel):
    """Hands-on practice bookkeeping"""
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    practice_count: int = Field(default=0, ge=0, alias="practiceCount")
    last_practiced: int = Field(default=0, alias="lastPracticed")
    is_decaying: bool = Field(default=False, alias="isDecaying")


class TheoryData(BaseModel):
    """Book-learned knowledge, capped at MAX_THEORY_LEVEL"""
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    theory_level: int = Field(default=0, ge=0, le=MAX_THEORY_LEVEL, alias="theoryLevel")
    theory_experience: int = Field(default=0, ge=0, alias="theoryExperience")
    last_studied: int = Field(default=0, alias="lastStudied")


class RustData(BaseModel):
    """Proficiency temporarily lost to disuse"""
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    is_rusted: bool = Field(default=False, alias="isRusted")
    rust_level: int = Field(default=0, ge=0, alias="rustLevel")
    last_check_time: int = Field(default=0, alias="lastCheckTime")
    rust_resist: float = Field(default=0.0, ge=0.0, le=1.0, alias="rustResist")


@dataclass(frozen=True)
class SkillLevelUpResult:
    """Outcome of a level-up check"""
    leveled_up: bool
    new_level: int
    experience_gained: int
    remaining_experience: int


class Skill(BaseModel):
    """
    One character's state in one skill.

    Practice level is earned by use and reduced in effect by rust.
    Theory level is earned from books, converts slowly into practice
    experience, and caps how far conversion alone can push practice.
    """
    model_config = ConfigDict(frozen=True)

    definition: SkillDefinition
    level: int = Field(default=0, ge=0)
    experience: int = Field(default=0, ge=0)
    practice: PracticeData = Field(default_factory=PracticeData)
    theory: TheoryData = Field(default_factory=TheoryData)
    rust: RustData = Field(default_factory=RustData)
    is_unlocked: bool = True

    @model_validator(mode="before")
    @classmethod
    def _clamp_rust(cls, data: Any) -> Any:
        """Rust never exceeds the practice level"""
        if not isinstance(data, dict) or data.get("rust") is None:
            return data
        rust = data["rust"]
        if not isinstance(rust, RustData):
            rust = RustData.model_validate(rust)
        level = data.get("level", 0)
        if isinstance(level, int) and rust.rust_level > max(level, 0):
            clamped = max(level, 0)
            rust = rust.model_copy(update={"rust_level": clamped, "is_rusted": clamped > 0})
        return {**data, "rust": rust}

    # ========== Factories ==========

    @classmethod
    def create(cls, definition: SkillDefinition) -> "Skill":
        """Create an unlocked level 0 skill"""
        return cls(
            definition=definition,
            rust=RustData(rust_resist=definition.default_rust_resist),
        )

    @classmethod
    def locked(cls, definition: SkillDefinition) -> "Skill":
        """Create a skill that must be unlocked before it can be trained"""
        return cls(
            definition=definition,
            rust=RustData(rust_resist=definition.default_rust_resist),
            is_unlocked=False,
        )

    @classmethod
    def from_level(cls, definition: SkillDefinition, level: int, now: int = 0) -> "Skill":
        """Create a skill already trained to a level at time `now`"""
        return cls(
            definition=definition,
            level=level,
            practice=PracticeData(last_practiced=now),
            theory=TheoryData(last_studied=now),
            rust=RustData(last_check_time=now, rust_resist=definition.default_rust_resist),
        )

    def _evolve(self, **changes: Any) -> "Skill":
        """Copy with changes, re-running construction checks"""
        fields = {name: getattr(self, name) for name in type(self).model_fields}
        fields.update(changes)
        return type(self)(**fields)

    # ========== Levels and experience ==========

    def get_effective_level(self) -> int:
        """Practice level after rust"""
        return max(0, self.level - self.rust.rust_level)

    def get_experience_to_level_up(self) -> int:
        required = self.definition.get_experience_for_level(self.level)
        return max(0, required - self.experience)

    def can_level_up(self) -> bool:
        return self.experience >= self.definition.get_experience_for_level(self.level)

    def practice_skill(self, base_experience: int, now: int) -> "Skill":
        """
        Gain practice experience.

        Yield is based on the effective level, so a rusty skill relearns
        quickly. Practice also scrubs off one rust level per 100 experience
        gained (rounded up). Does not level up; see auto_level_up().
        """
        if not self.is_unlocked:
            return self

        multiplier = self.definition.get_experience_multiplier(self.get_effective_level())
        gained = math.floor(base_experience * multiplier)
        if gained <= 0:
            return self

        rust_removed = min(
            self.rust.rust_level,
            math.ceil(gained / RUST_REDUCTION_PER_EXPERIENCE),
        )
        rust_level = self.rust.rust_level - rust_removed

        return self._evolve(
            experience=self.experience + gained,
            practice=PracticeData(
                practice_count=self.practice.practice_count + 1,
                last_practiced=now,
                is_decaying=False,
            ),
            rust=self.rust.model_copy(update={
                "rust_level": rust_level,
                "is_rusted": rust_level > 0,
            }),
        )

    def study_theory(self, base_experience: int, now: int) -> "Skill":
        """
        Gain theory experience at half the practice rate.

        Reaching the next theory level's requirement raises the theory
        level by one and rolls the excess over. At the theory cap,
        experience keeps accumulating without further level-ups.
        """
        if not self.is_unlocked:
            return self

        gained = math.floor(base_experience * THEORY_STUDY_MULTIPLIER)
        if gained <= 0:
            return self

        theory_level = self.theory.theory_level
        theory_experience = self.theory.theory_experience + gained

        if theory_level < MAX_THEORY_LEVEL:
            required = self.definition.get_experience_for_level(theory_level + 1)
            if theory_experience >= required:
                theory_level += 1
                theory_experience -= required
                logger.debug(f"{self.definition.id}: theory level {theory_level}")

        return self._evolve(theory=TheoryData(
            theory_level=theory_level,
            theory_experience=theory_experience,
            last_studied=now,
        ))

    def get_practice_ceiling(self) -> int:
        """Highest practice level theory conversion may reach"""
        return self.theory.theory_level + THEORY_PRACTICE_CEILING

    def _absorb_theory(self, available: int, ceiling: int) -> Tuple[int, int, int]:
        """Feed experience into practice below a ceiling -> (level, experience, absorbed)"""
        level = self.level
        experience = self.experience
        absorbed = 0

        while available > 0 and level < ceiling:
            required = self.definition.get_experience_for_level(level)
            needed = max(0, required - experience)
            if available < needed:
                experience += available
                absorbed += available
                available = 0
            else:
                available -= needed
                absorbed += needed
                experience = experience + needed - required
                level += 1

        return level, experience, absorbed

    def _drain_theory(self, absorbed: int) -> Tuple[int, int]:
        theory_level = self.theory.theory_level
        theory_experience = self.theory.theory_experience - absorbed
        if theory_level > 0 and theory_experience < self.definition.get_experience_for_level(theory_level):
            theory_level -= 1
        return theory_level, theory_experience

    def convert_theory_to_practice(self, now: int) -> "Skill":
        """
        Move accumulated theory experience into practice experience.

        Converts 0.5 / difficulty experience per hour since the last study,
        limited by the theory experience on hand. Practice may level up
        during conversion but never beyond the practice ceiling; anything
        that doesn't fit below the ceiling stays as theory.

        Theory level is only sustained by its experience reserve: if the
        remaining theory experience drops below the current theory level's
        requirement, the theory level drops by one. When that drop would
        leave practice above the lowered ceiling, conversion stops one
        level short instead.
        """
        if not self.is_unlocked:
            return self

        hours_passed = (now - self.theory.last_studied) / MS_PER_HOUR
        if hours_passed < THEORY_CONVERSION_MIN_HOURS:
            return self

        ceiling = self.get_practice_ceiling()
        if self.level >= ceiling:
            return self

        rate = THEORY_CONVERSION_RATE / self.definition.difficulty_multiplier
        to_convert = min(math.floor(hours_passed * rate), self.theory.theory_experience)
        if to_convert <= 0:
            return self

        level, experience, absorbed = self._absorb_theory(to_convert, ceiling)
        theory_level, theory_experience = self._drain_theory(absorbed)

        # A drained theory level lowers the ceiling; stay under the lowered one
        if level > theory_level + THEORY_PRACTICE_CEILING:
            level, experience, absorbed = self._absorb_theory(to_convert, ceiling - 1)
            if absorbed <= 0:
                return self
            theory_level, theory_experience = self._drain_theory(absorbed)

        if level != self.level:
            logger.debug(f"{self.definition.id}: theory raised practice to level {level}")

        return self._evolve(
            level=level,
            experience=experience,
            theory=TheoryData(
                theory_level=theory_level,
                theory_experience=theory_experience,
                last_studied=now,
            ),
        )

    def try_level_up(self) -> SkillLevelUpResult:
        """Check for a single level-up without applying it"""
        required = self.definition.get_experience_for_level(self.level)

        if self.experience < required:
            return SkillLevelUpResult(
                leveled_up=False,
                new_level=self.level,
                experience_gained=0,
                remaining_experience=self.experience,
            )

        return SkillLevelUpResult(
            leveled_up=True,
            new_level=self.level + 1,
            experience_gained=required,
            remaining_experience=self.experience - required,
        )

    def level_up_to(self, target_level: int, remaining_experience: int) -> "Skill":
        return self._evolve(level=target_level, experience=remaining_experience)

    def auto_level_up(self) -> Tuple["Skill", SkillLevelUpResult]:
        """
        Apply level-ups until the experience requirement is no longer met.

        Returns:
            Tuple of (leveled skill, summary result)
        """
        current = self
        levels_gained = 0
        experience_spent = 0

        for _ in range(get_settings().max_auto_level_ups):
            result = current.try_level_up()
            if not result.leveled_up:
                break
            current = current.level_up_to(result.new_level, result.remaining_experience)
            levels_gained += 1
            experience_spent += result.experience_gained

        if levels_gained:
            logger.debug(f"{self.definition.id}: level {self.level} -> {current.level}")

        return (current, SkillLevelUpResult(
            leveled_up=levels_gained > 0,
            new_level=current.level,
            experience_gained=experience_spent,
            remaining_experience=current.experience,
        ))

    # ========== Rust ==========

    def process_rust(self, now: int) -> "Skill":
        """
        Accumulate rust for whole days since the last check.

        Rust accrues at rust_rate * (1 - rust_resist) levels per day and
        never exceeds the practice level.
        """
        if not self.is_unlocked or self.level == 0:
            return self

        days_passed = (now - self.rust.last_check_time) / MS_PER_DAY
        if days_passed < RUST_MIN_DAYS:
            return self

        effective_rate = self.definition.rust_rate * (1 - self.rust.rust_resist)
        rust_to_add = math.floor(days_passed * effective_rate)
        rust_level = min(self.level, self.rust.rust_level + rust_to_add)

        if rust_level == self.rust.rust_level:
            return self

        return self._evolve(
            rust=self.rust.model_copy(update={
                "rust_level": rust_level,
                "is_rusted": rust_level > 0,
                "last_check_time": now,
            }),
            practice=self.practice.model_copy(update={"is_decaying": True}),
        )

    def process_decay(self, now: int) -> "Skill":
        """Decay from disuse; applied as rust, never as lost practice levels"""
        return self.process_rust(now)

    # ========== Tiers ==========

    def is_mastered(self) -> bool:
        return self.level >= MASTERED_MIN_LEVEL

    def is_expert(self) -> bool:
        return self.level >= EXPERT_MIN_LEVEL

    def is_proficient(self) -> bool:
        return self.level >= PROFICIENT_MIN_LEVEL

    def is_novice(self) -> bool:
        return self.level <= NOVICE_MAX_LEVEL

    def get_level_description(self) -> str:
        return LEVEL_DESCRIPTIONS[min(self.level, len(LEVEL_DESCRIPTIONS) - 1)]

    def get_progress_percent(self) -> int:
        """Progress toward the next level (0-100)"""
        required = self.definition.get_experience_for_level(self.level)
        if required == 0:
            return 100
        return min(100, math.floor(self.experience / required * 100))

    # ========== Direct changes ==========

    def unlock(self) -> "Skill":
        if self.is_unlocked:
            return self
        return self._evolve(is_unlocked=True)

    def set_level(self, level: int) -> "Skill":
        return self._evolve(level=level)

    def set_experience(self, experience: int) -> "Skill":
        return self._evolve(experience=experience)

    def add_experience(self, amount: int) -> "Skill":
        return self._evolve(experience=self.experience + amount)

    # ========== Display ==========

    def get_display_name(self) -> str:
        if not self.is_unlocked:
            return "??? (Locked)"
        return f"{self.definition.name} ({self.get_level_description()} {self.level})"

    def get_display_info(self) -> str:
        if not self.is_unlocked:
            return "??? (Unlock this skill first)"

        required = self.experience + self.get_experience_to_level_up()
        info = (
            f"{self.definition.name} Lv.{self.level} ({self.get_level_description()})"
            f" - {self.get_progress_percent()}% ({self.experience}/{required})"
        )
        if self.rust.is_rusted:
            info += f" [rust -{self.rust.rust_level}]"
        return info

    # ========== Records ==========

    def to_json(self) -> Dict[str, Any]:
        """Convert to a plain record"""
        return {
            "id": self.definition.id,
            "level": self.level,
            "experience": self.experience,
            "isUnlocked": self.is_unlocked,
            "practice": self.practice.model_dump(by_alias=True),
            "theory": self.theory.model_dump(by_alias=True),
            "rust": self.rust.model_dump(by_alias=True),
        }

    @classmethod
    def from_json(cls, data: Dict[str, Any], definition: SkillDefinition) -> "Skill":
        """
        Create from a plain record.

        Older saves have no theory or rust blocks; those start fresh.
        """
        rust: Optional[Dict[str, Any]] = data.get("rust")
        return cls(
            definition=definition,
            level=data.get("level", 0),
            experience=data.get("experience", 0),
            practice=data.get("practice") or PracticeData(),
            theory=data.get("theory") or TheoryData(),
            rust=rust or RustData(rust_resist=definition.default_rust_resist),
            is_unlocked=data.get("isUnlocked", True),
        )
