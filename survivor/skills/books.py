"""
Book Reading
Reading eligibility, reading time and theory experience from books.
"""

from typing import Optional
from dataclasses import dataclass
import logging
import math

from pydantic import BaseModel, ConfigDict, Field, model_validator

from survivor.config import (
    BookType,
    BOOK_LEVEL_BONUS,
    BOOK_INT_BASELINE,
    BOOK_INT_BONUS,
    BOOK_MIN_READING_TIME,
    BOOK_LEVEL_PENALTY,
    MANUAL_READING_TIME,
    TEXTBOOK_READING_TIME,
    REFERENCE_READING_TIME,
    TEXTBOOK_INT_REQUIRED,
)
from survivor.skills.progression import Skill

logger = logging.getLogger(__name__)


class BookData(BaseModel):
    """
    A readable book that trains one skill.

    Trains the skill from required_level up to (not including) max_level.
    """
    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    book_type: BookType
    skill_id: str
    required_level: int = Field(ge=0)
    max_level: int
    base_reading_time: int = Field(gt=0, description="Reading time in ms")
    theory_experience: int = Field(ge=0)
    fun: Optional[int] = None
    int_required: Optional[int] = None
    description: Optional[str] = None

    @model_validator(mode="after")
    def _check_level_range(self) -> "BookData":
        if self.required_level >= self.max_level:
            raise ValueError(
                f"required_level ({self.required_level}) must be below max_level ({self.max_level})"
            )
        return self


@dataclass(frozen=True)
class ReadingCheckResult:
    """Whether a book can be read and on what terms"""
    can_read: bool
    reading_time: int
    experience_multiplier: float
    error: Optional[str] = None


@dataclass(frozen=True)
class ReadingResult:
    """Outcome of reading a book; skill is the reader's skill afterwards"""
    success: bool
    theory_experience_gained: int
    actual_reading_time: int
    message: str
    skill: Optional[Skill] = None
    error: Optional[str] = None


def _rejected(error: str) -> ReadingCheckResult:
    return ReadingCheckResult(
        can_read=False,
        reading_time=0,
        experience_multiplier=0.0,
        error=error,
    )


class BookManager:
    """
    Stateless rules for reading skill books.

    Readers above a book's required level read faster and get more out of
    each reading, but the yield shrinks as they approach the book's max level.
    """

    @staticmethod
    def check_reading_conditions(
        book: BookData,
        current_level: int,
        reader_intelligence: Optional[int] = None,
    ) -> ReadingCheckResult:
        """
        Check whether a reader can learn from a book.

        Args:
            book: Book to read
            current_level: Reader's practice level in the book's skill
            reader_intelligence: Reader's intelligence, if known

        Returns:
            Check result with reading time (ms) and experience multiplier
        """
        if current_level < book.required_level:
            return _rejected(
                f"Skill level too low. Requires level {book.required_level}, "
                f"current level {current_level}"
            )

        if current_level >= book.max_level:
            return _rejected(
                f"Already reached the maximum level this book can teach ({book.max_level})"
            )

        if book.int_required is not None and reader_intelligence is not None:
            if reader_intelligence < book.int_required:
                return _rejected(
                    f"Intelligence too low. Requires {book.int_required}, "
                    f"current intelligence {reader_intelligence}"
                )

        level_bonus = (current_level - book.required_level) * BOOK_LEVEL_BONUS
        reading_time = book.base_reading_time * (1 - level_bonus)

        if reader_intelligence is not None:
            int_bonus = max(0.0, (reader_intelligence - BOOK_INT_BASELINE) * BOOK_INT_BONUS)
            reading_time = reading_time * (1 - int_bonus)

        reading_time = max(reading_time, BOOK_MIN_READING_TIME)

        return ReadingCheckResult(
            can_read=True,
            reading_time=math.floor(reading_time),
            experience_multiplier=1.0 + level_bonus,
        )

    @staticmethod
    def calculate_book_experience(
        book: BookData,
        skill_level: int,
        check_result: ReadingCheckResult,
    ) -> int:
        """Theory experience from one reading (at least 1)"""
        level_penalty = (skill_level - book.required_level) / (book.max_level - book.required_level)
        experience = book.theory_experience * (1 - level_penalty * BOOK_LEVEL_PENALTY)
        experience = experience * check_result.experience_multiplier
        return max(1, math.floor(experience))

    @staticmethod
    def read_book(
        book: BookData,
        skill: Skill,
        reader_intelligence: Optional[int] = None,
        now: int = 0,
    ) -> ReadingResult:
        """
        Read a book and study its theory.

        The returned result carries the reader's updated skill; on failure
        it carries the skill unchanged.
        """
        check = BookManager.check_reading_conditions(book, skill.level, reader_intelligence)

        if not check.can_read:
            logger.debug(f"Cannot read {book.id}: {check.error}")
            return ReadingResult(
                success=False,
                theory_experience_gained=0,
                actual_reading_time=0,
                message=check.error or "Cannot read this book",
                skill=skill,
                error=check.error,
            )

        experience = BookManager.calculate_book_experience(book, skill.level, check)
        updated = skill.study_theory(experience, now)

        return ReadingResult(
            success=True,
            theory_experience_gained=experience,
            actual_reading_time=check.reading_time,
            message=f"You read \"{book.name}\" and gained {experience} theory experience.",
            skill=updated,
        )

    @staticmethod
    def get_reading_progress(book: BookData, current_level: int) -> int:
        """How far through the book's level range the reader is (0-100)"""
        if current_level < book.required_level:
            return 0
        if current_level >= book.max_level:
            return 100

        progress = (current_level - book.required_level) / (book.max_level - book.required_level)
        return min(100, math.floor(progress * 100))

    @staticmethod
    def get_book_description(book: BookData, current_level: int) -> str:
        lines = [
            f"\"{book.name}\"",
            f"Type: {book.book_type.value}",
            f"Trains: {book.skill_id}",
            f"Required level: {book.required_level}",
            f"Max level: {book.max_level}",
            f"Theory experience: {book.theory_experience}",
        ]

        if book.fun is not None:
            lines.append(f"Fun: {book.fun}")
        if book.int_required is not None:
            lines.append(f"Intelligence required: {book.int_required}")

        lines.append(f"Progress: {BookManager.get_reading_progress(book, current_level)}%")

        if book.description:
            lines.append("")
            lines.append(book.description)

        return "\n".join(lines)

    # ========== Book archetypes ==========

    @staticmethod
    def create_manual(
        id: str,
        name: str,
        skill_id: str,
        required_level: int,
        max_level: int,
        experience: int,
        reading_time: int = MANUAL_READING_TIME,
    ) -> BookData:
        """Practical manual: quick read, mildly fun"""
        return BookData(
            id=id,
            name=name,
            book_type=BookType.MANUAL,
            skill_id=skill_id,
            required_level=required_level,
            max_level=max_level,
            base_reading_time=reading_time,
            theory_experience=experience,
            fun=1,
            description=f"A skill manual about {skill_id}",
        )

    @staticmethod
    def create_textbook(
        id: str,
        name: str,
        skill_id: str,
        required_level: int,
        max_level: int,
        experience: int,
        int_required: int = TEXTBOOK_INT_REQUIRED,
        reading_time: int = TEXTBOOK_READING_TIME,
    ) -> BookData:
        """Academic textbook: slow, dull, needs some intelligence"""
        return BookData(
            id=id,
            name=name,
            book_type=BookType.TEXTBOOK,
            skill_id=skill_id,
            required_level=required_level,
            max_level=max_level,
            base_reading_time=reading_time,
            theory_experience=experience,
            int_required=int_required,
            fun=-1,
            description=f"An academic textbook about {skill_id}",
        )

    @staticmethod
    def create_reference(
        id: str,
        name: str,
        skill_id: str,
        max_level: int,
        experience: int,
    ) -> BookData:
        """Reference book: readable from level 0"""
        return BookData(
            id=id,
            name=name,
            book_type=BookType.REFERENCE,
            skill_id=skill_id,
            required_level=0,
            max_level=max_level,
            base_reading_time=REFERENCE_READING_TIME,
            theory_experience=experience,
            fun=0,
            description=f"A reference book about {skill_id}",
        )
