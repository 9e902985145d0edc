"""API Schemas — Pydantic request/response models.

Invariants:
    - Schemas validate shape and type; domain rules live in core/
"""
