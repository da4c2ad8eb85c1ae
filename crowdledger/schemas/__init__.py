"""API Schemas — Pydantic request/response models at the HTTP boundary.

Invariants:
    - Schemas shape and bound input; funding rules are enforced by the ledger
"""
