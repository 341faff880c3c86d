"""FrameLab application package — problem-formulation study backend.

Invariants:
    - Package root contains no executable code (no import side effects)
"""
