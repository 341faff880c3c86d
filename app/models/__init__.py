"""ORM Models — SQLAlchemy declarative models for all domain entities.

Invariants:
    - All models inherit from Base (db/base.py)
    - Problem is the aggregate root for interactions; Participant owns Problems

Design Decisions:
    - One file per entity for locality
    - All models imported here so Base.metadata is complete before create_all / autogenerate
"""

from app.models.participant import Participant  # noqa: F401
from app.models.problem import Problem  # noqa: F401
