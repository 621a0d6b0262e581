import re
from typing import (
    Dict,
    Tuple,
)

from eth_utils import (
    ValidationError,
)

from newchain.constants import (
    DISPLAY_UNIT_DECIMALS,
    ETHER_UNIT,
    ISAAC_UNIT,
    NEW_UNIT,
    WEI_UNIT,
)
from newchain.exceptions import (
    IllegalUnit,
    NumericParseError,
    TooManyDecimals,
)

# (display unit, base unit) pairs
ETHER_UNITS = (ETHER_UNIT, WEI_UNIT)
NEWCHAIN_UNITS = (NEW_UNIT, ISAAC_UNIT)

UNIT_DECIMALS: Dict[str, int] = {
    ETHER_UNIT: DISPLAY_UNIT_DECIMALS,
    NEW_UNIT: DISPLAY_UNIT_DECIMALS,
    WEI_UNIT: 0,
    ISAAC_UNIT: 0,
}

DIGITS_PATTERN = re.compile(r"[0-9]+")


def get_unit_decimals(unit: str) -> int:
    try:
        return UNIT_DECIMALS[unit]
    except KeyError:
        raise IllegalUnit(f"Unknown unit {unit!r}, expected one of {sorted(UNIT_DECIMALS)}")


def _parse_digits(text: str, amount_text: str) -> int:
    if DIGITS_PATTERN.fullmatch(text) is None:
        raise NumericParseError(f"Amount {amount_text!r} is not a decimal number")
    return int(text)


def to_base_units(amount_text: str, unit: str) -> int:
    """
    Convert decimal ``amount_text`` denominated in ``unit`` to an integer amount
    of base units. Amounts in a base unit must be plain integers, display unit
    amounts may carry up to 18 fractional digits.
    """
    decimals = get_unit_decimals(unit)
    if decimals == 0:
        return _parse_digits(amount_text, amount_text)

    int_text, dot, fraction_text = amount_text.partition(".")
    if not dot:
        return _parse_digits(int_text, amount_text) * 10 ** decimals

    if len(fraction_text) > decimals:
        raise TooManyDecimals(
            f"Amount {amount_text!r} has {len(fraction_text)} decimals,"
            f" {unit} allows at most {decimals}"
        )

    integer_part = _parse_digits(int_text, amount_text)
    fraction = _parse_digits(fraction_text.ljust(decimals, "0"), amount_text)
    return integer_part * 10 ** decimals + fraction


def to_decimal_string(base_units: int, unit: str) -> str:
    """
    Render an integer amount of base units in ``unit`` without trailing zeros.
    """
    decimals = get_unit_decimals(unit)
    if base_units < 0:
        raise ValidationError(f"Amount cannot be negative: Got: {base_units}")

    digits = str(base_units)
    if decimals == 0:
        return digits

    digits = digits.rjust(decimals + 1, "0")
    integer_text, fraction_text = digits[:-decimals], digits[-decimals:].rstrip("0")
    if not fraction_text:
        return integer_text
    return f"{integer_text}.{fraction_text}"


def format_amount(
    base_units: int,
    unit: str = None,
    units: Tuple[str, str] = ETHER_UNITS,
) -> str:
    """
    Return ``"<amount> <unit>"``. Without an explicit ``unit``, amounts of up to
    18 digits are shown in the base unit of ``units`` and larger ones in its
    display unit.
    """
    if unit is None:
        display_unit, base_unit = units
        if len(str(base_units)) <= DISPLAY_UNIT_DECIMALS:
            unit = base_unit
        else:
            unit = display_unit

    return f"{to_decimal_string(base_units, unit)} {unit}"
