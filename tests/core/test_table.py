"""
Tests for ResultTable construction, validation and serialization.
"""

import math

import numpy as np
import pytest

from pystatcore.core.exceptions import TableStructureError, ValidationError
from pystatcore.core.table import ColumnNode, RowNode, ResultTable, leaf_keys


@pytest.fixture
def coefficient_columns():
    return (
        ColumnNode("B"),
        ColumnNode("Std. Error", key="StdError"),
        ColumnNode("95% Confidence Interval", children=(
            ColumnNode("Lower Bound", key="LowerBound"),
            ColumnNode("Upper Bound", key="UpperBound"),
        )),
    )


class TestColumns:

    def test_leaf_key_defaults_to_header(self):
        assert ColumnNode("B").leaf_key == "B"
        assert ColumnNode("Std. Error", key="StdError").leaf_key == "StdError"

    def test_flattened_leaf_keys(self, coefficient_columns):
        assert leaf_keys(coefficient_columns) == ["B", "StdError", "LowerBound", "UpperBound"]

    def test_duplicate_leaf_keys_rejected(self):
        with pytest.raises(TableStructureError, match="duplicate"):
            ResultTable("T", (ColumnNode("A"), ColumnNode("B", key="A")), ())

    def test_no_columns_rejected(self):
        with pytest.raises(TableStructureError, match="no columns"):
            ResultTable("T", (), ())

    def test_not_a_validation_error(self):
        with pytest.raises(TableStructureError) as info:
            ResultTable("T", (), ())
        assert not isinstance(info.value, ValidationError)


class TestRows:

    def test_string_header_normalized(self):
        assert RowNode("Total").row_header == ("Total",)

    def test_unknown_cell_key_rejected(self, coefficient_columns):
        with pytest.raises(TableStructureError, match="unknown column keys"):
            ResultTable("Coefficients", coefficient_columns,
                        (RowNode(("x",), {"Beta": 1.0}),))

    def test_unknown_key_in_child_rejected(self, coefficient_columns):
        parent = RowNode(("1",), children=(RowNode(("x",), {"Nope": 1.0}),))
        with pytest.raises(TableStructureError):
            ResultTable("Coefficients", coefficient_columns, (parent,))

    def test_parent_rows_may_carry_cells(self, coefficient_columns):
        parent = RowNode(("1",), {"B": 2.0}, children=(RowNode(("x",), {"B": 1.0}),))
        table = ResultTable("Coefficients", coefficient_columns, (parent,))
        assert [r.row_header for r in table.iter_rows()] == [("1",), ("x",)]

    def test_row_lookup_by_prefix(self, coefficient_columns):
        rows = (
            RowNode(("1", "(Constant)"), {"B": 0.5}),
            RowNode(("1", "x"), {"B": 1.5}),
        )
        table = ResultTable("Coefficients", coefficient_columns, rows)
        assert table.row("1", "x").cells["B"] == 1.5
        with pytest.raises(KeyError):
            table.row("2")


class TestSerialization:

    def test_to_dict_shape(self, coefficient_columns):
        rows = (RowNode(("x",), {"B": np.float64(1.5), "StdError": float('nan')}),)
        out = ResultTable("Coefficients", coefficient_columns, rows, footnote="a. note").to_dict()
        assert out["title"] == "Coefficients"
        assert out["footnote"] == "a. note"
        assert out["columnHeaders"][1] == {"header": "Std. Error", "key": "StdError"}
        assert len(out["columnHeaders"][2]["children"]) == 2
        row = out["rows"][0]
        assert row["rowHeader"] == ["x"]
        assert row["B"] == 1.5 and type(row["B"]) is float
        assert row["StdError"] is None

    def test_nested_rows_serialized(self, coefficient_columns):
        parent = RowNode(("1",), children=(RowNode(("a",), {"B": 1}),))
        out = ResultTable("T", coefficient_columns, (parent,)).to_dict()
        assert out["rows"][0]["children"][0]["rowHeader"] == ["a"]
        assert "footnote" not in out

    def test_infinite_cells_become_none(self, coefficient_columns):
        out = ResultTable("T", coefficient_columns, (RowNode(("x",), {"B": math.inf}),)).to_dict()
        assert out["rows"][0]["B"] is None
