"""Database Infrastructure — SQLAlchemy Base and standalone session factory.

Invariants:
    - Single declarative Base for every table
    - All sessions are async (AsyncSession)
"""
