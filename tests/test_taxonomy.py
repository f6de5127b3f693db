"""
Skill Definition Tests
Experience curves, prerequisites and definition records.

Run with: python -m pytest tests/test_taxonomy.py -v
"""

import pytest
import sys
import os

from pydantic import ValidationError

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from survivor.config import SkillCategory
from survivor.skills.taxonomy import SkillDefinition, SkillPrerequisite
from survivor.skills.catalog import get_base_skills, get_base_skill_map


@pytest.fixture
def melee():
    """Standard difficulty combat skill"""
    return SkillDefinition.combat("melee", "Melee", "Close-quarters fighting", 1.0)


class TestFactories:
    """Tests for definition factories and category checks"""

    def test_combat_factory(self, melee):
        """Test combat definitions"""
        assert melee.id == "melee"
        assert melee.category == SkillCategory.COMBAT
        assert melee.is_combat_skill()
        assert not melee.is_crafting_skill()
        assert not melee.is_hidden

    def test_crafting_factory_keeps_related_items(self):
        """Test crafting definitions carry their tools"""
        cooking = SkillDefinition.crafting("cooking", "Cooking", "", 1.0, ["food", "hotplate"])
        assert cooking.is_crafting_skill()
        assert cooking.related_item_types == frozenset({"food", "hotplate"})

    def test_survival_factory(self):
        """Test survival definitions"""
        traps = SkillDefinition.survival("traps", "Traps", difficulty_multiplier=1.1)
        assert traps.is_survival_skill()
        assert traps.difficulty_multiplier == 1.1

    def test_defaults(self, melee):
        """Test rust defaults"""
        assert melee.rust_rate == 1.0
        assert melee.default_rust_resist == 0.0
        assert not melee.has_prerequisites()

    def test_zero_difficulty_rejected(self):
        """Difficulty is a divisor and must be positive"""
        with pytest.raises(ValidationError):
            SkillDefinition.combat("broken", "Broken", difficulty_multiplier=0.0)

    def test_definitions_are_frozen(self, melee):
        """Test definitions can't be mutated"""
        with pytest.raises(ValidationError):
            melee.name = "Brawling"


class TestCurves:
    """Tests for experience curves"""

    def test_experience_for_level_is_flat(self, melee):
        """Test requirement ignores the level"""
        assert melee.get_experience_for_level(0) == 100
        assert melee.get_experience_for_level(7) == 100

    def test_experience_for_level_scales_with_difficulty(self):
        """Test harder skills need more experience"""
        electronics = SkillDefinition.crafting("electronics", "Electronics", "", 1.3)
        assert electronics.get_experience_for_level(0) == 130

    def test_multiplier_decreases_with_level(self, melee):
        """Test practice yield per level"""
        assert melee.get_experience_multiplier(0) == pytest.approx(1.0)
        assert melee.get_experience_multiplier(3) == pytest.approx(0.7)
        assert melee.get_experience_multiplier(8) == pytest.approx(0.2)
        assert melee.get_experience_multiplier(20) == pytest.approx(0.2)

    def test_multiplier_is_monotonic(self, melee):
        """Test yield never rises with level"""
        values = [melee.get_experience_multiplier(level) for level in range(15)]
        assert all(a >= b for a, b in zip(values, values[1:]))

    def test_multiplier_divided_by_difficulty(self):
        """Test difficulty shrinks yield"""
        hard = SkillDefinition.combat("hard", "Hard", difficulty_multiplier=2.0)
        assert hard.get_experience_multiplier(0) == pytest.approx(0.5)
        assert hard.get_experience_multiplier(10) == pytest.approx(0.1)


class TestPrerequisites:
    """Tests for prerequisite checks"""

    @pytest.fixture
    def gunsmith(self):
        return SkillDefinition(
            id="gunsmith",
            name="Gunsmithing",
            category=SkillCategory.CRAFTING,
            prerequisites=(
                SkillPrerequisite(skill_id="mechanics", required_level=3),
                SkillPrerequisite(skill_id="marksmanship", required_level=2),
            ),
        )

    def test_all_met(self, gunsmith):
        assert gunsmith.has_prerequisites()
        assert gunsmith.check_prerequisites({"mechanics": 3, "marksmanship": 5})

    def test_one_unmet(self, gunsmith):
        assert not gunsmith.check_prerequisites({"mechanics": 2, "marksmanship": 5})

    def test_missing_counts_as_zero(self, gunsmith):
        assert not gunsmith.check_prerequisites({"mechanics": 4})

    def test_no_prerequisites(self, melee):
        assert melee.check_prerequisites({})


class TestDisplay:
    """Tests for hidden skill display"""

    def test_hidden_skill_is_masked(self):
        secret = SkillDefinition.general(
            "secret", "Secret Art", "Forbidden knowledge", SkillCategory.ACADEMIC, is_hidden=True
        )
        assert secret.get_display_name() == "??? (Unknown skill)"
        assert "hidden" in secret.get_display_description()

    def test_visible_skill(self, melee):
        assert melee.get_display_name() == "Melee"
        assert melee.get_display_description() == "Close-quarters fighting"


class TestRecords:
    """Tests for definition records"""

    def test_round_trip(self):
        """Test to_json/from_json preserves the definition"""
        original = SkillDefinition(
            id="mechanics",
            name="Mechanics",
            description="Repairing machinery",
            category=SkillCategory.CRAFTING,
            difficulty_multiplier=1.2,
            related_item_types=frozenset({"wrench"}),
            prerequisites=(SkillPrerequisite(skill_id="survival", required_level=1),),
            rust_rate=0.5,
            default_rust_resist=0.25,
        )

        restored = SkillDefinition.from_json(original.to_json())

        assert restored.id == original.id
        assert restored.name == original.name
        assert restored.category == original.category
        assert restored.difficulty_multiplier == original.difficulty_multiplier
        assert restored.description == original.description
        assert restored == original

    def test_record_layout(self, melee):
        """Test record keys"""
        record = melee.to_json()
        assert record["category"] == "COMBAT"
        assert record["difficulty_multiplier"] == 1.0
        assert record["is_hidden"] is False
        assert record["related_items"] == []
        assert record["prerequisites"] == []

    def test_prerequisite_record_uses_level_key(self):
        definition = SkillDefinition.from_json({
            "id": "tailor",
            "name": "Tailoring",
            "category": "CRAFTING",
            "prerequisites": [{"skill_id": "survival", "level": 2}],
        })
        assert definition.prerequisites[0].required_level == 2
        assert definition.to_json()["prerequisites"] == [{"skill_id": "survival", "level": 2}]

    def test_minimal_record_defaults(self):
        """Test older records without optional keys"""
        definition = SkillDefinition.from_json({"id": "barter", "name": "Bartering"})
        assert definition.category == SkillCategory.GENERAL
        assert definition.difficulty_multiplier == 1.0
        assert definition.rust_rate == 1.0


class TestCatalog:
    """Tests for the base skill catalog"""

    def test_ids_are_unique(self):
        skills = get_base_skills()
        assert len(skills) == len(get_base_skill_map())

    def test_covers_categories(self):
        categories = {d.category for d in get_base_skills()}
        assert {
            SkillCategory.COMBAT,
            SkillCategory.SURVIVAL,
            SkillCategory.CRAFTING,
            SkillCategory.SOCIAL,
            SkillCategory.ACADEMIC,
        } <= categories

    def test_known_entries(self):
        catalog = get_base_skill_map()
        assert catalog["unarmed"].difficulty_multiplier == 1.2
        assert "soldering_iron" in catalog["electronics"].related_item_types
