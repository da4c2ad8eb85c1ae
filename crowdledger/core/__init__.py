"""Core Layer — pure ledger rules, no IO, no async, no DB.

Invariants:
    - No module in core/ imports from services/, api/, infrastructure/, models/ or db/
    - All functions are pure and deterministic (time is always passed in)

Design Decisions:
    - Functional core separated from imperative shell: services/campaign_ledger.py
      loads state, calls the checks here, then commits and transfers
"""
