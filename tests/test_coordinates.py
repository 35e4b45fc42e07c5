import pytest

from xlsxkit.coordinates import (
    col_index_to_letters,
    col_letters_to_index,
    digits_only,
    get_cell_id_from_coords,
    get_cell_id_from_coords_with_fixed,
    get_coords_from_cell_id,
    get_max_min_from_dimension_ref,
    get_range_from_string,
    letters_only,
    row_index_to_string,
)


@pytest.mark.parametrize(
    "letters, index",
    [
        ("A", 0),
        ("G", 6),
        ("z", 25),
        ("AA", 26),
        ("Az", 51),
        ("BA", 52),
        ("BZ", 77),
        ("ZA", 26 * 26 + 0),
        ("ZZ", 26 * 26 + 25),
        ("AAA", 26 * 26 + 26 + 0),
        ("AMI", 1022),
    ],
)
def test_letters_to_numeric(letters, index):
    assert col_letters_to_index(letters) == index


@pytest.mark.parametrize(
    "letters, index",
    [
        ("A", 0),
        ("G", 6),
        ("Z", 25),
        ("AA", 26),
        ("AZ", 51),
        ("BA", 52),
        ("BZ", 77),
        ("ZA", 26 * 26),
        ("ZB", 26 * 26 + 1),
        ("ZZ", 26 * 26 + 25),
        ("AAA", 26 * 26 + 26 + 0),
        ("AMI", 1022),
    ],
)
def test_numeric_to_letters(letters, index):
    assert col_index_to_letters(index) == letters


@pytest.mark.parametrize("index", [0, 1, 25, 26, 701, 702, 16383])
def test_column_round_trip(index):
    assert col_letters_to_index(col_index_to_letters(index)) == index


def test_letters_only():
    assert letters_only("ABC123") == "ABC"
    assert letters_only("abc123") == "ABC"


def test_digits_only():
    assert digits_only("ABC123") == "123"


def test_row_index_to_string():
    assert row_index_to_string(0) == "1"
    assert row_index_to_string(41) == "42"


def test_get_coords_from_cell_id():
    assert get_coords_from_cell_id("A3") == (0, 2)
    assert get_coords_from_cell_id("B3") == (1, 2)
    assert get_coords_from_cell_id("$C$4") == (2, 3)


def test_get_coords_from_cell_id_without_row_fails():
    with pytest.raises(ValueError):
        get_coords_from_cell_id("ABC")


def test_get_cell_id_from_coords():
    assert get_cell_id_from_coords(0, 0) == "A1"
    assert get_cell_id_from_coords(2, 2) == "C3"


def test_get_cell_id_from_coords_with_fixed():
    assert get_cell_id_from_coords_with_fixed(0, 0, True, False) == "$A1"
    assert get_cell_id_from_coords_with_fixed(0, 0, False, True) == "A$1"
    assert get_cell_id_from_coords_with_fixed(1, 1, True, True) == "$B$2"


def test_get_max_min_from_dimension_ref():
    assert get_max_min_from_dimension_ref("A1:B2") == (0, 0, 1, 1)


def test_get_max_min_from_dimension_ref_without_range_fails():
    with pytest.raises(ValueError):
        get_max_min_from_dimension_ref("A1")


def test_get_range_from_string():
    assert get_range_from_string("1:3") == (1, 3)


@pytest.mark.parametrize("bad", ["13", ":3", "1:", "x:3", "1:y"])
def test_get_range_from_string_invalid(bad):
    with pytest.raises(ValueError):
        get_range_from_string(bad)