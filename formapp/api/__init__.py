"""API Layer — FastAPI routes and error handlers for the server variant.

Invariants:
    - Routes registered explicitly in main.py (no auto-discovery)
    - Routes delegate persistence to services/submission_store.py
"""
