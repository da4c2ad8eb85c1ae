"""Services Layer — imperative shell around the pure ledger rules.

Invariants:
    - Services own transactions and locking; rules live in core/
    - Collaborators (clock, payment rail) are injected, never imported directly
"""
