"""ORM Models — SQLAlchemy declarative models.

All models imported here so Base.metadata is complete before create_all runs.
"""

from formapp.models.submission import Submission  # noqa: F401
