"""API Layer — FastAPI routers, dependencies and global error handlers.

Invariants:
    - Routes translate HTTP <-> ledger calls; no funding rules live here
    - Every ledger error reaches the client through api/error_handlers.py
"""
