"""Unit tests for column specs (NestGroup, SeqRange, normalization, spec_columns)."""

import pytest

from modelgrid.errors import InvalidArgument
from modelgrid.grid.column_spec import NestGroup, SeqRange, nest, normalize_specs, seq_range, spec_columns


def test_spec_columns_flattens_in_order():
    """spec_columns lists grid columns in spec order without reading data."""
    specs = ["a", nest("b", "c"), seq_range("d", 3), ["e", "f"]]
    assert spec_columns(specs) == ["a", "b", "c", "d", "e", "f"]


def test_spec_columns_empty():
    assert spec_columns([]) == []


def test_normalize_specs_turns_lists_into_nest_groups():
    specs = normalize_specs(["a", ("b", "c")])
    assert specs == ["a", NestGroup(("b", "c"))]


def test_single_string_instead_of_list_raises():
    """A bare column name is not a spec list."""
    with pytest.raises(InvalidArgument):
        normalize_specs("day")


def test_empty_nest_group_raises():
    with pytest.raises(InvalidArgument):
        nest()


def test_nest_group_repeated_column_raises():
    with pytest.raises(InvalidArgument):
        nest("a", "a")


def test_nest_group_non_string_member_raises():
    with pytest.raises(InvalidArgument):
        NestGroup(("a", 1))


def test_seq_range_defaults():
    spec = seq_range("x", 10)
    assert spec == SeqRange("x", 10, 0.0)


def test_seq_range_non_integer_n_raises():
    with pytest.raises(InvalidArgument):
        SeqRange("x", 2.5)


@pytest.mark.parametrize("trim", [-0.1, 0.5, 0.9])
def test_seq_range_bad_trim_raises(trim):
    with pytest.raises(InvalidArgument):
        SeqRange("x", 5, trim=trim)


def test_duplicate_column_across_specs_raises():
    with pytest.raises(InvalidArgument) as exc_info:
        normalize_specs([nest("a", "b"), seq_range("b", 4)])
    assert "'b'" in str(exc_info.value)
