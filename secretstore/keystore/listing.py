"""Prefix listing with limit and continuation cursor."""

from typing import Iterable, List, Tuple


def list_names(
    names: Iterable[str],
    prefix: str = "",
    n: int = -1,
    cursor: str = "",
) -> Tuple[List[str], str]:
    """
    Select the names starting with `prefix`, in lexicographic order.

    Args:
        names: All names held by the store, in any order
        prefix: Only names starting with prefix are returned ("" matches all)
        n: Maximum number of names to return; all matches if negative
        cursor: Continuation cursor from a previous call ("" starts at the beginning)

    Returns:
        (names, next_cursor) where next_cursor is the first matching name
        not returned, or "" when no more matches remain.

    Example:
        >>> list_names(["db-b", "db-a", "web", "db-c"], "db-", 2)
        (['db-a', 'db-b'], 'db-c')
        >>> list_names(["db-b", "db-a", "web", "db-c"], "db-", 2, cursor="db-c")
        (['db-c'], '')
    """
    matches = sorted({name for name in names if name.startswith(prefix) and name >= cursor})

    if n < 0 or n >= len(matches):
        return matches, ""
    return matches[:n], matches[n]
