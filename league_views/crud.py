"""
CRUD operations (Create, Read, Update, Delete)
SQLAlchemy implementation of the DocumentStore interface
"""
import logging
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from league_views.errors import StoreError
from league_views.models import Document
from league_views.store import Filter, OrderBy, apply_query

logger = logging.getLogger("store")


def _sql_condition(flt: Filter):
    """
    SQL form of a filter, or None if it must run in Python.

    Only string equality and string membership are translated.
    """
    if flt.field == "id":
        column = Document.doc_id
    else:
        column = Document.data[flt.field].as_string()

    if flt.op == "==" and isinstance(flt.value, str):
        return column == flt.value
    if flt.op == "in" and isinstance(flt.value, (list, tuple, set, frozenset)):
        values = list(flt.value)
        if all(isinstance(v, str) for v in values):
            return column.in_(values)
    return None


def split_filters(filters: Sequence[Filter]) -> Tuple[list, List[Filter]]:
    """Partition filters into SQL conditions and the ones left for apply_query."""
    conditions = []
    residual: List[Filter] = []
    for flt in filters:
        condition = _sql_condition(flt)
        if condition is None:
            residual.append(flt)
        else:
            conditions.append(condition)
    return conditions, residual


class SqlDocumentStore:
    """
    Document store backed by one SQL table of JSON bodies.

    Collection selection and string equality/membership filters run in SQL,
    along with the limit when nothing else is left to do. Remaining filters
    and ordering are applied in Python (see store.apply_query).
    """

    def __init__(self, session_factory: Callable[[], Session]):
        self._session_factory = session_factory

    # ===== READS =====

    def get(self, collection: str, doc_id: str) -> Optional[Dict[str, Any]]:
        """
        Get a specific record by id
        """
        session = self._session_factory()
        try:
            doc = (
                session.query(Document)
                .filter(Document.collection == collection, Document.doc_id == str(doc_id))
                .first()
            )
            return doc.to_record() if doc else None
        except SQLAlchemyError as e:
            raise StoreError(f"get {collection}/{doc_id} failed: {e}") from e
        finally:
            session.close()

    def query(
        self,
        collection: str,
        filters: Sequence[Filter] = (),
        order_by: Sequence[OrderBy] = (),
        limit: Optional[int] = None,
    ) -> List[Dict[str, Any]]:
        """
        Get records of a collection matching every filter
        """
        conditions, residual = split_filters(filters)
        limit_in_sql = limit is not None and not residual and not order_by

        session = self._session_factory()
        try:
            q = (
                session.query(Document)
                .filter(Document.collection == collection, *conditions)
                .order_by(Document.id)
            )
            if limit_in_sql:
                q = q.limit(max(limit, 0))
            records = [doc.to_record() for doc in q.all()]
        except SQLAlchemyError as e:
            raise StoreError(f"query {collection} failed: {e}") from e
        finally:
            session.close()

        return apply_query(records, residual, order_by, limit)

    # ===== WRITES =====

    def put(self, collection: str, doc_id: str, data: Dict[str, Any]) -> Dict[str, Any]:
        """
        Create a record or replace its whole body
        """
        body = {k: v for k, v in data.items() if k != "id"}
        session = self._session_factory()
        try:
            doc = (
                session.query(Document)
                .filter(Document.collection == collection, Document.doc_id == str(doc_id))
                .first()
            )
            if doc is None:
                doc = Document(collection=collection, doc_id=str(doc_id), data=body)
                session.add(doc)
            else:
                doc.data = body
            session.commit()
            return doc.to_record()
        except SQLAlchemyError as e:
            session.rollback()
            raise StoreError(f"put {collection}/{doc_id} failed: {e}") from e
        finally:
            session.close()

    def delete(self, collection: str, doc_id: str) -> bool:
        """
        Delete a record; returns True if it existed
        """
        session = self._session_factory()
        try:
            deleted = (
                session.query(Document)
                .filter(Document.collection == collection, Document.doc_id == str(doc_id))
                .delete()
            )
            session.commit()
            return deleted > 0
        except SQLAlchemyError as e:
            session.rollback()
            raise StoreError(f"delete {collection}/{doc_id} failed: {e}") from e
        finally:
            session.close()
