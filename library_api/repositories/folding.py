"""
Fold flat join rows into parents holding child collections.

A join of a parent table with a child table returns the parent once per
child. `fold_rows` groups those rows by parent key, keeps parents in the
order they were first seen and hands every row to `attach` so its child
can be appended to the parent built from the first row.
"""

from typing import Callable, Hashable, Iterable, TypeVar

RowT = TypeVar("RowT")
ParentT = TypeVar("ParentT")


def fold_rows(
    rows: Iterable[RowT],
    key: Callable[[RowT], Hashable],
    make_parent: Callable[[RowT], ParentT],
    attach: Callable[[ParentT, RowT], None],
) -> list[ParentT]:
    """
    Group join rows by parent key.

    Args:
        rows: Flat rows, one per (parent, child) pair.
        key: Returns the parent key of a row.
        make_parent: Builds the parent from the first row seen for a key.
        attach: Adds the child carried by a row to its parent; must ignore
            rows without a child (outer joins).

    Returns:
        Parents in first-seen order.

    Example:
        >>> rows = [(1, "a"), (1, "b"), (2, None)]
        >>> fold_rows(
        ...     rows,
        ...     key=lambda row: row[0],
        ...     make_parent=lambda row: {"id": row[0], "children": []},
        ...     attach=lambda parent, row: row[1] and parent["children"].append(row[1]),
        ... )
        [{'id': 1, 'children': ['a', 'b']}, {'id': 2, 'children': []}]
    """
    folded: dict[Hashable, ParentT] = {}
    for row in rows:
        row_key = key(row)
        parent = folded.get(row_key)
        if parent is None:
            parent = folded[row_key] = make_parent(row)
        attach(parent, row)
    return list(folded.values())
