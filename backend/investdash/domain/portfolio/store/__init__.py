from investdash.domain.portfolio.store.base import RecordStore
from investdash.domain.portfolio.store.sqlalchemy_store import SqlAlchemyRecordStore

__all__ = ["RecordStore", "SqlAlchemyRecordStore"]
