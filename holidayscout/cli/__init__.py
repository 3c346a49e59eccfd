"""Command-line interface for HolidayScout."""
