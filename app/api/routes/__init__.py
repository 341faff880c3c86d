"""Route Modules — one file per resource: ai, problems, participants, health.

Invariants:
    - Each module defines its own APIRouter with prefix and tags
    - Routes hold no lifecycle rules; they call services and core functions
"""
