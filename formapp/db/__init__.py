"""Database Declarations — SQLAlchemy Base and schema bootstrap helpers.

Invariants:
    - The submissions table is provisioned outside the request path
"""
