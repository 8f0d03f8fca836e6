import pytest

from dental_chart.services.tooth_numbering import (
    ALL_TEETH,
    from_fdi,
    quadrant_for,
    row_label,
    to_fdi,
    tooth_type,
)


@pytest.mark.parametrize(
    ("number", "quadrant"),
    [(1, "upper_right"), (8, "upper_right"), (9, "upper_left"), (17, "lower_left"), (32, "lower_right")],
)
def test_quadrant_for(number, quadrant):
    assert quadrant_for(number).key == quadrant


@pytest.mark.parametrize("number", [0, 33, -1])
def test_quadrant_for_rejects_out_of_range(number):
    with pytest.raises(ValueError):
        quadrant_for(number)


@pytest.mark.parametrize(
    ("number", "label", "kind"),
    [
        (1, "M3", "molar"),
        (3, "M1", "molar"),
        (5, "PM1", "premolar"),
        (6, "C", "canine"),
        (8, "CI", "incisor"),
        (17, "M3", "molar"),
        (27, "C", "canine"),
        (30, "M1", "molar"),
    ],
)
def test_row_label_and_tooth_type(number, label, kind):
    assert row_label(number) == label
    assert tooth_type(number) == kind


@pytest.mark.parametrize(("number", "fdi"), [(1, 18), (8, 11), (9, 21), (16, 28), (17, 38), (24, 31), (25, 41), (32, 48)])
def test_fdi_conversion(number, fdi):
    assert to_fdi(number) == fdi
    assert from_fdi(fdi) == number


def test_fdi_mapping_covers_every_tooth_once():
    assert sorted(from_fdi(to_fdi(number)) for number in ALL_TEETH) == list(ALL_TEETH)


def test_from_fdi_rejects_primary_notation():
    with pytest.raises(ValueError):
        from_fdi(55)
