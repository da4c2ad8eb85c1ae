"""Infrastructure Layer — IO adapters for the ledger shell.

Invariants:
    - Implements core/repository_protocols.py contracts (Clock, PaymentRail)
    - Owns the database engine, logging setup and outbound HTTP

Design Decisions:
    - Adapters chosen from settings at startup (see api/deps.py), never imported by core/
"""
