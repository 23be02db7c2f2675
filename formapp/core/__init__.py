"""Core — pure domain logic shared by the server and the gateway handler.

Invariants:
    - No I/O, no framework imports (FastAPI, SQLAlchemy stay out of core/)
"""
