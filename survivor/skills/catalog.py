"""
Base Skill Catalog
Predefined skill definitions for a survivor character.
"""

from typing import Dict, List

from survivor.config import SkillCategory
from survivor.skills.taxonomy import SkillDefinition


def get_base_skills() -> List[SkillDefinition]:
    """
    Get the base skill catalog.

    Returns one definition per trainable skill, grouped by category.
    """
    skills = []

    # =========================================================================
    # MELEE
    # =========================================================================
    for skill_id, name, desc, difficulty in [
        ("melee", "Melee", "Close-quarters fighting", 1.0),
        ("bashing", "Bashing", "Fighting with blunt weapons", 1.0),
        ("cutting", "Cutting", "Fighting with bladed weapons", 1.0),
        ("stabbing", "Stabbing", "Fighting with piercing weapons", 1.0),
        ("unarmed", "Unarmed", "Fighting without weapons", 1.2),
    ]:
        skills.append(SkillDefinition.combat(skill_id, name, desc, difficulty))

    # =========================================================================
    # RANGED
    # =========================================================================
    for skill_id, name, desc, difficulty in [
        ("marksmanship", "Marksmanship", "Aiming and firing guns", 1.0),
        ("archery", "Archery", "Shooting bows and crossbows", 1.1),
        ("throw", "Throwing", "Throwing objects accurately", 1.0),
    ]:
        skills.append(SkillDefinition.combat(skill_id, name, desc, difficulty))

    # =========================================================================
    # SURVIVAL
    # =========================================================================
    for skill_id, name, desc, difficulty in [
        ("survival", "Survival", "Living off the land", 1.0),
        ("traps", "Traps", "Setting and disarming traps", 1.1),
        ("dodge", "Dodging", "Avoiding incoming attacks", 1.1),
        ("firstaid", "First Aid", "Treating wounds and illness", 1.2),
    ]:
        skills.append(SkillDefinition.survival(skill_id, name, desc, difficulty))

    # =========================================================================
    # CRAFTING
    # =========================================================================
    for skill_id, name, desc, difficulty, items in [
        ("cooking", "Cooking", "Preparing food", 1.0, ["food", "hotplate"]),
        ("tailor", "Tailoring", "Making and mending clothing", 1.0, ["needle", "thread"]),
        ("electronics", "Electronics", "Building and repairing devices", 1.3, ["soldering_iron"]),
        ("mechanics", "Mechanics", "Repairing machinery", 1.2, ["wrench", "screwdriver"]),
        ("construction", "Construction", "Building structures", 1.1, []),
    ]:
        skills.append(SkillDefinition.crafting(skill_id, name, desc, difficulty, items))

    # =========================================================================
    # SOCIAL AND ACADEMIC
    # =========================================================================
    skills.append(SkillDefinition.general(
        "speech", "Speech", "Persuasion and negotiation", SkillCategory.SOCIAL,
    ))
    skills.append(SkillDefinition.general(
        "barter", "Bartering", "Haggling over prices", SkillCategory.SOCIAL,
    ))
    skills.append(SkillDefinition.general(
        "computer", "Computers", "Operating computers", SkillCategory.ACADEMIC, 1.1,
    ))

    return skills


def get_base_skill_map() -> Dict[str, SkillDefinition]:
    """Base catalog keyed by skill id"""
    return {d.id: d for d in get_base_skills()}
