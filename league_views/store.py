"""
Backing document store interface.

Records are plain dicts with a string "id" plus arbitrary nested fields,
queried by collection name, equality/range filters, ordering and a limit.
"""
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Protocol, Sequence, Tuple

from league_views.errors import StoreError  # noqa: F401  (re-exported)


@dataclass(frozen=True)
class Filter:
    """A single field condition, e.g. Filter("status", "in", ["live", "in-progress"])."""
    field: str
    op: str
    value: Any

    OPS = ("==", "!=", "in", "<", "<=", ">", ">=")

    def __post_init__(self):
        if self.op not in self.OPS:
            raise ValueError(f"Unsupported filter op: {self.op}")

    def matches(self, record: Dict[str, Any]) -> bool:
        actual = record.get(self.field)
        if self.op == "==":
            return actual == self.value
        if self.op == "!=":
            return actual is not None and actual != self.value
        if self.op == "in":
            return actual in self.value
        if actual is None:
            return False
        try:
            if self.op == "<":
                return actual < self.value
            if self.op == "<=":
                return actual <= self.value
            if self.op == ">":
                return actual > self.value
            return actual >= self.value
        except TypeError:
            return False


# (field, "asc" | "desc")
OrderBy = Tuple[str, str]


class DocumentStore(Protocol):
    """
    Interface for the backing document store.

    Implementations:
    - SqlDocumentStore: JSON documents in a SQL table via SQLAlchemy
    """

    def get(self, collection: str, doc_id: str) -> Optional[Dict[str, Any]]:
        """Fetch one record, or None if it does not exist."""
        ...

    def query(
        self,
        collection: str,
        filters: Sequence[Filter] = (),
        order_by: Sequence[OrderBy] = (),
        limit: Optional[int] = None,
    ) -> List[Dict[str, Any]]:
        """Fetch records matching every filter, ordered and limited."""
        ...

    def put(self, collection: str, doc_id: str, data: Dict[str, Any]) -> Dict[str, Any]:
        """Create or wholesale replace a record."""
        ...

    def delete(self, collection: str, doc_id: str) -> bool:
        """Delete a record. Returns True if it existed."""
        ...


def apply_query(
    records: List[Dict[str, Any]],
    filters: Sequence[Filter] = (),
    order_by: Sequence[OrderBy] = (),
    limit: Optional[int] = None,
) -> List[Dict[str, Any]]:
    """
    Filter, order and limit a list of records in memory.

    Ordering is applied last-key-first so the first order_by entry wins;
    records missing an order field sort after the ones that have it.
    """
    result = [r for r in records if all(f.matches(r) for f in filters)]

    for field_name, direction in reversed(list(order_by)):
        descending = direction.lower() == "desc"
        present = [r for r in result if r.get(field_name) is not None]
        missing = [r for r in result if r.get(field_name) is None]
        try:
            present.sort(key=lambda r: r[field_name], reverse=descending)
        except TypeError:
            present.sort(key=lambda r: str(r[field_name]), reverse=descending)
        result = present + missing

    if limit is not None:
        result = result[:max(limit, 0)]
    return result
