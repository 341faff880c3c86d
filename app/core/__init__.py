"""Core Layer — pure domain logic, no IO, no async, no DB.

Invariants:
    - No module in core/ imports from services/, api/, infrastructure/, or models/
    - Functions receive `now` instead of reading the clock; they return new values
      and never mutate their inputs
"""
