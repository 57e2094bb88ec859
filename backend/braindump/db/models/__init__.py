"""ORM models exposed for metadata discovery."""
from braindump.db.models.brain_dump import BrainDump

__all__ = ["BrainDump"]
