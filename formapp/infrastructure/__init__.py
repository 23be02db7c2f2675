"""Infrastructure — database access and logging setup.

Invariants:
    - All database access is async (AsyncSession over an async driver)
"""
