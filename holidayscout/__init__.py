"""
HolidayScout - budget holiday package finder.

Searches many destinations in parallel and pairs the cheapest transport
offer with a hotel offer into ranked holiday packages.
"""

__version__ = "0.1.0"
__app_name__ = "HolidayScout"
