"""Core business logic layer.

Subpackages:
- compliance: dietary/allergen narrowing of candidate pools
- selection: favorites/novelties/others recipe cycling
- assembly: component-based meal building
- generation: weekly plan generation (auto and express)
- lifecycle: plan/meal state machine and permission rules
"""
__all__ = ["compliance", "selection", "assembly", "generation", "lifecycle"]
