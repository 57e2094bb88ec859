"""Database utilities and models."""

from braindump.db.base import Base
from braindump.db import models  # noqa: F401  (imported for side effects)

__all__ = ["Base"]
