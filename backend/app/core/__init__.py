"""Core Layer — pure calculator and migration-planning logic, no IO, no async, no DB.

Invariants:
    - No module in core/ imports from services/, api/, infrastructure/, or db/
    - All functions are pure and deterministic (randomness and clocks injected by callers)

Design Decisions:
    - Functional core separated from imperative shell: routes and the migration
      runner do the IO around these functions
"""
