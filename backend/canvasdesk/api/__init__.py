"""API Layer — FastAPI routes, request dependencies and error handlers.

Invariants:
    - Routes registered explicitly in main.py (no auto-discovery)
    - All endpoints return structured JSON responses
    - The acting user reaches services as an explicit user_id argument

Design Decisions:
    - Thin routes delegate to services (ADR: ExMA impureim sandwich)
"""
