"""
Exception types shared across the store, orchestrator and HTTP layers.
"""


class StoreError(Exception):
    """A backing-store read or write failed (timeout, connection, bad query)."""


class BackingStoreError(Exception):
    """
    Raised by the orchestrator when a store read fails.

    Endpoints translate this into an HTTP 500; nothing is cached for the
    failed query and no retry is attempted.
    """

    def __init__(self, query: str, cause: Exception):
        self.query = query
        self.cause = cause
        super().__init__(f"Backing store failure during {query}: {cause}")
