"""HTTP API for HolidayScout."""
