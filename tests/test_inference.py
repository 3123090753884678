"""Tests for column semantic type inference."""

import datetime

import numpy as np
import pytest

from kumorfm.core.inference import (
    analyze_column,
    count_unique,
    infer_column_type,
    is_null,
    is_temporal_value,
)


def test_date_strings_are_temporal_not_categorical():
    """Test low-cardinality date strings still infer as temporal."""
    assert infer_column_type(["2024-01-01", "2024-01-02"]) == "temporal"
    assert infer_column_type(["2024-01-01", "2024-01-01", "2024-01-01"]) == "temporal"


def test_numeric_strings_are_numerical_not_categorical():
    """Test the numerical check runs before the categorical one."""
    assert infer_column_type(["1", "2", "1", "2"]) == "numerical"
    assert infer_column_type([1, 2, 1, 2]) == "numerical"
    assert infer_column_type([1.5, "2.25", None]) == "numerical"


def test_native_dates_are_temporal():
    values = [datetime.date(2024, 1, 1), datetime.datetime(2024, 2, 1, 12, 30)]
    assert infer_column_type(values) == "temporal"


def test_numbers_are_never_temporal():
    """Test numbers and numeric strings do not parse as dates."""
    assert not is_temporal_value(2024)
    assert not is_temporal_value("2024")
    assert not is_temporal_value("1")
    assert not is_temporal_value("today")


def test_categorical_ratio_is_strict():
    """Test categorical needs a distinct/present ratio strictly below 0.5."""
    assert infer_column_type(["a", "b", "a", "b", "a"]) == "categorical"  # 0.4
    assert infer_column_type(["a", "b", "a", "b"]) == "text"  # exactly 0.5


def test_high_cardinality_strings_are_text():
    assert infer_column_type(["alice", "bob", "carol"]) == "text"


def test_booleans_are_not_numerical():
    assert infer_column_type([True, False, True, True, False]) == "categorical"


def test_all_null_column():
    """Test a column with no present values degenerates to text."""
    meta = analyze_column([None, float("nan"), None], "empty")

    assert meta.semantic_type == "text"
    assert meta.unique_value_count == 0
    assert meta.null_count == 3
    assert meta.nullable is True


def test_empty_input():
    meta = analyze_column([], "nothing")

    assert meta.semantic_type == "text"
    assert meta.null_count == 0
    assert meta.nullable is False


def test_analyze_column_statistics():
    """Test null and distinct counts ignore nulls."""
    meta = analyze_column(["a", None, "b", "a"], "code")

    assert meta.name == "code"
    assert meta.nullable is True
    assert meta.null_count == 1
    assert meta.unique_value_count == 2
    assert meta.is_primary_key_candidate is False


@pytest.mark.parametrize("value", [None, float("nan"), np.nan])
def test_is_null(value):
    assert is_null(value)


def test_is_null_ignores_containers():
    assert not is_null([1, 2])
    assert not is_null({"a": 1})
    assert not is_null(0)
    assert not is_null("")


def test_booleans_distinct_from_integers():
    """Test True/False are not counted as duplicates of 1/0."""
    assert count_unique([1, True, 0, False]) == 4
    assert count_unique([1, 1.0]) == 1

    meta = analyze_column([1, True], "flag")
    assert meta.unique_value_count == 2
