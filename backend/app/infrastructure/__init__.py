"""Infrastructure Layer — database engine, sessions and logging setup.

Invariants:
    - Infrastructure never imports calculator logic from core/
    - All SQLAlchemy failures surface as DatabaseError
"""
