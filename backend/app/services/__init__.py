"""Services Layer — IO shells around the pure core: migration runner and reporter.

Invariants:
    - Decisions live in core/; services read files and talk to the database
"""
