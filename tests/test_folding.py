"""Tests for folding join rows into parents with children."""

from library_api.repositories.folding import fold_rows


def _fold(rows):
    return fold_rows(
        rows,
        key=lambda row: row[0],
        make_parent=lambda row: {"id": row[0], "children": []},
        attach=lambda parent, row: (
            parent["children"].append(row[1]) if row[1] is not None else None
        ),
    )


def test_groups_children_under_their_parent():
    rows = [(1, "a"), (1, "b"), (2, "c")]

    assert _fold(rows) == [
        {"id": 1, "children": ["a", "b"]},
        {"id": 2, "children": ["c"]},
    ]


def test_parent_without_children_has_empty_collection():
    assert _fold([(7, None)]) == [{"id": 7, "children": []}]


def test_preserves_first_seen_parent_order():
    rows = [(3, "x"), (1, "y"), (3, "z")]

    folded = _fold(rows)

    assert [parent["id"] for parent in folded] == [3, 1]
    assert folded[0]["children"] == ["x", "z"]


def test_empty_rows():
    assert _fold([]) == []


def test_parent_built_once_from_first_row():
    built = []

    def make_parent(row):
        built.append(row)
        return {"id": row[0], "children": []}

    fold_rows(
        iter([(1, "a"), (1, "b")]),
        key=lambda row: row[0],
        make_parent=make_parent,
        attach=lambda parent, row: None,
    )

    assert built == [(1, "a")]
