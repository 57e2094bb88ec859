from braindump.db import Base
from braindump.db.models.brain_dump import BrainDump


def test_metadata_contains_brain_dumps_table() -> None:
    assert set(Base.metadata.tables.keys()) == {"brain_dumps"}


def test_owner_listing_index_covers_user_and_creation_time() -> None:
    indexes = {index.name: [column.name for column in index.columns] for index in BrainDump.__table__.indexes}

    assert indexes["ix_brain_dumps_user_id_created_at"] == ["user_id", "created_at"]


def test_new_record_defaults_are_unprocessed(session_factory) -> None:
    from uuid import uuid4

    with session_factory() as db:
        dump = BrainDump(user_id=uuid4(), original_text="hello")
        db.add(dump)
        db.commit()
        db.refresh(dump)

        assert dump.summary == ""
        assert dump.what_matters == []
        assert dump.what_doesnt == []
        assert dump.actionable_focus == ""
        assert dump.processed is False
        assert dump.processed_at is None
        assert dump.created_at is not None
