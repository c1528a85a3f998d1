"""
Database models for the backing document store
SQLAlchemy ORM model holding every collection as JSON documents
"""
from datetime import datetime
from sqlalchemy import (
    Column, Integer, String, DateTime, JSON, UniqueConstraint
)
from sqlalchemy.orm import declarative_base

Base = declarative_base()


class Document(Base):
    """
    One record of a collection (fixtures, teams, tournaments, players, news, ...)
    Identified by (collection, doc_id); the record body lives in `data`
    """
    __tablename__ = "documents"

    id = Column(Integer, primary_key=True, autoincrement=True)
    collection = Column(String, nullable=False, index=True)
    doc_id = Column(String, nullable=False, index=True)
    data = Column(JSON, nullable=False, default=dict)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Constraints - one record per id per collection
    __table_args__ = (
        UniqueConstraint("collection", "doc_id", name="uix_collection_doc"),
    )

    def to_record(self) -> dict:
        """Record as the rest of the system sees it: data plus string id."""
        record = dict(self.data or {})
        record["id"] = self.doc_id
        return record

    def __repr__(self):
        return f"<Document(collection='{self.collection}', doc_id='{self.doc_id}')>"
