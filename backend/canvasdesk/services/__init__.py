"""Services Layer — imperative shell: async DB IO around the pure core.

Invariants:
    - Services call core/ for every policy decision; no rule is re-implemented here
    - Acting user is an explicit user_id parameter on every call (no ambient session)
    - Each mutating operation ends with exactly one commit

Design Decisions:
    - One class per resource, constructed per request with the request's AsyncSession
      (ADR: ExMA impureim sandwich)
"""
