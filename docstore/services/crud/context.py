"""
Per-operation configuration.
"""

from dataclasses import dataclass
from typing import Any, Mapping, Sequence


@dataclass
class OperationContext:
    """
    Who is acting, why, and the query state of one logical operation.

    One instance belongs to one call chain; do not share it between
    concurrent callers.

    Usage:
        ctx = OperationContext(operator="alice", reason="typo fix")
        repo.save_with_log(article, ctx)

        ctx = OperationContext(filter={"author": "bob"}, sort=["title"], limit=10)
        articles = repo.find_all(ctx)
    """

    operator: str = ""
    reason: str = ""

    # Query state. skip/limit of 0 mean no skip / no limit.
    filter: Mapping[str, Any] | None = None
    sort: Sequence[str] | None = None
    skip: int = 0
    limit: int = 0

