"""SQLAlchemy ORM models backing the key-value store"""

from sqlalchemy import Column, DateTime, Integer, Text, JSON
from sqlalchemy.orm import declarative_base
from sqlalchemy.sql import func

Base = declarative_base()


class StorageEntry(Base):
    """
    One persisted contract value addressed by an encoded storage key.

    `version` is bumped on every UPDATE and checked in its WHERE clause, so
    a session writing a value it read before another session committed a
    change fails instead of overwriting it.
    """

    __tablename__ = "storage_entry"

    key = Column(Text, primary_key=True)
    value = Column(JSON, nullable=False)
    version = Column(Integer, nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(DateTime(timezone=True), nullable=True, onupdate=func.now())

    __mapper_args__ = {"version_id_col": version}
