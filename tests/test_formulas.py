import pytest

from xlsxkit.coordinates import get_coords_from_cell_id
from xlsxkit.formulas import CellFormula, SharedFormula, formula_for_cell, shift_cell

FORMULAS = [
    "A1",
    "$A1",
    "A$1",
    "$A$1",
    "A1+B1",
    "$A1+B1",
    "$A$1+B1",
    "A1+$B1",
    "A1+B$1",
    "A1+$B$1",
    "$A$1+$B$1",
    'IF(C23>=E$12,"Q4",IF(C23>=$D$12,"Q3",IF(C23>=C$12,"Q2","Q1")))',
    "SUM(D44:H44)*IM_A_DEFINED_NAME",
    "IM_A_DEFINED_NAME+SUM(D44:H44)*IM_A_DEFINED_NAME_ALSO",
    "SUM(D44:H44)*IM_A_DEFINED_NAME+A1",
    "AA1",
    "$AA1",
    "AA$1",
    "$AA$1",
]

EXPECTED = [
    "B2",
    "$A2",
    "B$1",
    "$A$1",
    "B2+C2",
    "$A2+C2",
    "$A$1+C2",
    "B2+$B2",
    "B2+C$1",
    "B2+$B$1",
    "$A$1+$B$1",
    'IF(D24>=F$12,"Q4",IF(D24>=$D$12,"Q3",IF(D24>=D$12,"Q2","Q1")))',
    "SUM(E45:I45)*IM_A_DEFINED_NAME",
    "IM_A_DEFINED_NAME+SUM(E45:I45)*IM_A_DEFINED_NAME_ALSO",
    "SUM(E45:I45)*IM_A_DEFINED_NAME+B2",
    "AB2",
    "$AA2",
    "AB$1",
    "$AA$1",
]


@pytest.mark.parametrize("index", range(len(FORMULAS)))
def test_shared_formulas_with_absolute_references(index):
    x, y = get_coords_from_cell_id("C4")
    shared = {i: SharedFormula(x, y, f) for i, f in enumerate(FORMULAS)}
    formula = CellFormula(content=FORMULAS[index], kind="shared", si=index)
    assert formula_for_cell("D5", formula, shared) == EXPECTED[index]


def test_cell_without_formula_gives_empty_string():
    assert formula_for_cell("A1", None, {}) == ""


def test_shared_formula_definition_and_use():
    shared: dict[int, SharedFormula] = {}
    anchor = CellFormula(content="2*A1", kind="shared", ref="A2:C2", si=0)
    assert formula_for_cell("A2", anchor, shared) == "2*A1"
    assert shared[0] == SharedFormula(0, 1, "2*A1")
    follower = CellFormula(kind="shared", si=0)
    assert formula_for_cell("B2", follower, shared) == "2*B1"
    assert formula_for_cell("C2", follower, shared) == "2*C1"


def test_plain_formula_is_trimmed():
    formula = CellFormula(content="  10+20\n")
    assert formula_for_cell("E1", formula, {}) == "10+20"


def test_shared_formula_with_bad_reference_keeps_content():
    formula = CellFormula(content=" SUM(A1:A3) ", kind="shared", si=3)
    shared: dict[int, SharedFormula] = {}
    assert formula_for_cell("", formula, shared) == "SUM(A1:A3)"
    assert shared == {}


def test_string_literals_are_not_shifted():
    shared = {0: SharedFormula(0, 0, 'CONCAT("A1",A1)')}
    formula = CellFormula(kind="shared", si=0)
    assert formula_for_cell("B2", formula, shared) == 'CONCAT("A1",B2)'


@pytest.mark.parametrize(
    "cell_id, dx, dy, expected",
    [
        ("A1", 1, 1, "B2"),
        ("$A1", 1, 1, "$A2"),
        ("A$1", 1, 1, "B$1"),
        ("$A$1", 3, 3, "$A$1"),
        ("C3", -2, -2, "A1"),
        ("Z10", 1, 0, "AA10"),
    ],
)
def test_shift_cell(cell_id, dx, dy, expected):
    assert shift_cell(cell_id, dx, dy) == expected