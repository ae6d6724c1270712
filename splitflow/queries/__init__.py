"""Query execution package."""

from splitflow.queries.executor import LedgerQueryExecutor, QueryExecutionError

__all__ = ["LedgerQueryExecutor", "QueryExecutionError"]
