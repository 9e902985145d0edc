"""Database Schema — SQLAlchemy Base and standalone session factories.

Invariants:
    - Alembic owns the application tables; the SQL migration runner owns its tracking tables
"""
