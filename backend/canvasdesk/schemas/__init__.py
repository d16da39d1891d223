"""API Schemas — Pydantic models validated at the HTTP boundary.

Invariants:
    - The core never sees unvalidated input: every body passes through a schema
    - Response models read ORM rows via from_attributes
"""
