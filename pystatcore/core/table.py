"""
ResultTable: the output contract of every analysis.

A table is a tree of column headers and a tree of rows. Column headers nest
to group statistics ("95% Confidence Interval" over "Lower Bound" and
"Upper Bound"); rows nest to group cases ("Model 1" over its collinearity
dimensions). Rows address their cells by leaf column key.

The shape is validated when the table is built. A malformed table is an
engine bug, so construction raises TableStructureError, which the dispatcher
reports as an internal error.
"""

import math
from dataclasses import dataclass, field
from typing import Any, Iterator, Mapping, Sequence

import numpy as np

from pystatcore.core.exceptions import TableStructureError


@dataclass(frozen=True)
class ColumnNode:
    """
    One column header.

    A node with children is a group header and holds no cells itself.
    A leaf is addressed by its key, which defaults to its header text.
    """
    header: str
    key: str | None = None
    children: tuple['ColumnNode', ...] = ()

    def __post_init__(self):
        object.__setattr__(self, 'children', tuple(self.children))

    @property
    def is_leaf(self) -> bool:
        return not self.children

    @property
    def leaf_key(self) -> str:
        return self.key if self.key is not None else self.header

    def leaves(self) -> Iterator['ColumnNode']:
        if self.is_leaf:
            yield self
        else:
            for child in self.children:
                yield from child.leaves()

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {'header': self.header}
        if self.key is not None:
            out['key'] = self.key
        if self.children:
            out['children'] = [c.to_dict() for c in self.children]
        return out


@dataclass(frozen=True)
class RowNode:
    """
    One row.

    row_header is the ordered list of header cells shown left of the data
    (None for an empty header cell). A parent row may carry cells of its
    own (model-level values) in addition to children.
    """
    row_header: tuple[str | None, ...]
    cells: Mapping[str, Any] = field(default_factory=dict)
    children: tuple['RowNode', ...] = ()

    def __post_init__(self):
        header = self.row_header
        if isinstance(header, str) or header is None:
            header = (header,)
        object.__setattr__(self, 'row_header', tuple(header))
        object.__setattr__(self, 'cells', dict(self.cells))
        object.__setattr__(self, 'children', tuple(self.children))

    @property
    def is_leaf(self) -> bool:
        return not self.children

    def walk(self) -> Iterator['RowNode']:
        """Depth-first iteration over this row and all descendants."""
        yield self
        for child in self.children:
            yield from child.walk()

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {'rowHeader': list(self.row_header)}
        if self.children:
            out['children'] = [c.to_dict() for c in self.children]
        for key, value in self.cells.items():
            out[key] = _plain(value)
        return out


def leaf_keys(columns: Sequence[ColumnNode]) -> list[str]:
    """Flattened leaf column keys, left to right."""
    return [leaf.leaf_key for node in columns for leaf in node.leaves()]


def _plain(value: Any) -> Any:
    """numpy scalars to Python, non-finite floats to None."""
    if isinstance(value, np.generic):
        value = value.item()
    if isinstance(value, float) and not math.isfinite(value):
        return None
    return value


@dataclass(frozen=True)
class ResultTable:
    """
    A validated, immutable result table.

    Attributes:
        title: Table title
        column_headers: Top-level column nodes
        rows: Top-level row nodes
        footnote: Optional note printed under the table

    Raises:
        TableStructureError: If leaf column keys repeat, or a row references a
            cell key that is not a leaf column key
    """
    title: str
    column_headers: tuple[ColumnNode, ...]
    rows: tuple[RowNode, ...]
    footnote: str | None = None

    def __post_init__(self):
        object.__setattr__(self, 'column_headers', tuple(self.column_headers))
        object.__setattr__(self, 'rows', tuple(self.rows))

        if not self.column_headers:
            raise TableStructureError(f"{self.title}: table has no columns")

        keys = leaf_keys(self.column_headers)
        duplicated = sorted({k for k in keys if keys.count(k) > 1})
        if duplicated:
            raise TableStructureError(
                f"{self.title}: duplicate leaf column keys {duplicated}"
            )

        allowed = set(keys)
        for top in self.rows:
            for row in top.walk():
                unknown = [k for k in row.cells if k not in allowed]
                if unknown:
                    raise TableStructureError(
                        f"{self.title}: row {list(row.row_header)} references "
                        f"unknown column keys {unknown}"
                    )

    def leaf_keys(self) -> list[str]:
        return leaf_keys(self.column_headers)

    def iter_rows(self) -> Iterator[RowNode]:
        """All rows depth-first, parents before children."""
        for top in self.rows:
            yield from top.walk()

    def row(self, *header: str | None) -> RowNode:
        """
        First row (at any depth) whose row_header starts with `header`.

        Raises:
            KeyError: If no such row exists
        """
        for candidate in self.iter_rows():
            if candidate.row_header[:len(header)] == tuple(header):
                return candidate
        raise KeyError(f"{self.title}: no row with header {list(header)}")

    def to_dict(self) -> dict[str, Any]:
        """JSON-ready {title, columnHeaders, rows} structure."""
        out: dict[str, Any] = {
            'title': self.title,
            'columnHeaders': [c.to_dict() for c in self.column_headers],
            'rows': [r.to_dict() for r in self.rows],
        }
        if self.footnote is not None:
            out['footnote'] = self.footnote
        return out
