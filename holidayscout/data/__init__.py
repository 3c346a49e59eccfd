"""Static reference data loaded once at import time."""
