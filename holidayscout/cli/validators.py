"""
Input validators for CLI commands.
Ensures data quality and provides better error messages.
"""

from datetime import date, datetime
from typing import Optional

import typer

from holidayscout.models.search import normalize_origin


def validate_iata_code(value: str) -> str:
    """
    Validate an IATA city or airport code.

    Must be exactly 3 alphabetic characters (case-insensitive).
    Returns uppercase version of the code.

    Raises:
        typer.BadParameter: If code is invalid
    """
    if not value:
        raise typer.BadParameter("IATA code cannot be empty")

    value = value.strip()

    if len(value) != 3:
        raise typer.BadParameter(
            f"IATA code must be exactly 3 characters (got '{value}' with {len(value)} characters)"
        )

    if not value.isalpha():
        raise typer.BadParameter(f"IATA code must contain only letters (got '{value}')")

    return value.upper()


def validate_date_string(value: Optional[str], allow_past: bool = False) -> Optional[date]:
    """
    Validate date string in YYYY-MM-DD format.

    Args:
        value: Date string to validate (can be None)
        allow_past: If False, rejects dates before today

    Returns:
        The parsed date, or None if value is None

    Raises:
        typer.BadParameter: If date is invalid or in the past
    """
    if value is None:
        return None

    try:
        parsed_date = datetime.strptime(value, "%Y-%m-%d").date()
    except ValueError:
        raise typer.BadParameter(
            f"Invalid date format. Expected YYYY-MM-DD (e.g., 2025-12-25), got '{value}'"
        )

    if not allow_past and parsed_date < date.today():
        raise typer.BadParameter(
            f"Date cannot be in the past (got {value}, today is {date.today()})"
        )

    return parsed_date


# Typer callback functions for use with Option/Argument
def iata_code_callback(value: Optional[str]) -> Optional[str]:
    """Callback for validating IATA codes in Typer options."""
    if value is None:
        return None
    return validate_iata_code(value)


def date_callback(value: Optional[str]) -> Optional[str]:
    """Callback for validating dates in Typer options; keeps the string form."""
    if value is None:
        return None
    validate_date_string(value, allow_past=False)
    return value


def origin_callback(value: Optional[str]) -> Optional[str]:
    """Callback for origins: accepts city names and London airports (e.g., 'London', 'LHR')."""
    if value is None:
        return None
    return validate_iata_code(normalize_origin(value))
