"""Utility helpers shared across HolidayScout."""
