"""Services Layer — persistence and generation shells around the pure core.

Invariants:
    - Services load rows, ask core/ what to change, then write with an optimistic
      version check (services/concurrency.py)
    - Services raise FrameLabError subclasses; routes never translate errors
"""
