import pytest

from app.core.fusion.units import MAX_DECIMALS, from_base_units, to_base_units


@pytest.mark.parametrize(
    "amount, decimals, expected",
    [
        ("1", 18, 10**18),
        ("1.5", 6, 1_500_000),
        ("0.000001", 6, 1),
        (".25", 2, 25),
        ("100", 0, 100),
        ("1.500000", 6, 1_500_000),
    ],
)
def test_to_base_units(amount, decimals, expected):
    assert to_base_units(amount, decimals) == expected


def test_to_base_units_rejects_excess_precision():
    with pytest.raises(ValueError, match="too many decimals"):
        to_base_units("0.0000001", 6)


@pytest.mark.parametrize("amount", ["", "abc", "1e18", "1.2.3", "NaN", "-"])
def test_to_base_units_rejects_non_decimal_strings(amount):
    with pytest.raises(ValueError):
        to_base_units(amount, 18)


def test_decimals_are_bounded():
    with pytest.raises(ValueError):
        to_base_units("1", MAX_DECIMALS + 1)
    with pytest.raises(ValueError):
        from_base_units(1, -1)


def test_from_base_units_formats_with_fraction():
    assert from_base_units(10**18) == "1.0"
    assert from_base_units("1500000", 6) == "1.5"
    assert from_base_units(1, 6) == "0.000001"
    assert from_base_units(0, 6) == "0.0"
    assert from_base_units(42, 0) == "42.0"


@pytest.mark.parametrize("decimals", [6, 18])
@pytest.mark.parametrize("scale", ["zero", "one", "just_under_unit", "unit", "large"])
def test_conversions_are_exact_round_trip(decimals, scale):
    base = {
        "zero": 0,
        "one": 1,
        "just_under_unit": 10**decimals - 1,
        "unit": 10**decimals,
        "large": 123456789012345678901234567890123,
    }[scale]
    assert to_base_units(from_base_units(base, decimals), decimals) == base


def test_from_base_units_rejects_non_integers():
    with pytest.raises(ValueError):
        from_base_units("1.5", 6)
