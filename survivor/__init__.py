"""
Survivor - Character Skill Progression
Skill engine for a survival simulation, modelled on the Cataclysm-DDA skill system.

This package provides:
- Static skill definitions with experience and rust curves
- Immutable per-character skill state (practice, theory and rust tracks)
- Book reading rules that feed the theory track
- A per-character skill manager for batch operations and save/load records
"""

from survivor.skills import Skill, SkillDefinition, SkillManager, BookManager

__version__ = "0.1.0"
__all__ = ["Skill", "SkillDefinition", "SkillManager", "BookManager"]
