"""
Transport and hotel providers.

Providers are interchangeable strategies: given a route, dates and party
size they return a priced offer or None. Estimate providers are pure and
deterministic; the Amadeus provider performs network I/O.
"""

from holidayscout.providers.base import HotelProvider, TransportProvider
from holidayscout.providers.cached import CachedHotelProvider, CachedTransportProvider
from holidayscout.providers.flight_estimator import FlightEstimateProvider
from holidayscout.providers.hotel_estimator import HotelEstimateProvider, estimate_stay_price
from holidayscout.providers.train_estimator import TrainEstimateProvider

__all__ = [
    "CachedHotelProvider",
    "CachedTransportProvider",
    "FlightEstimateProvider",
    "HotelEstimateProvider",
    "HotelProvider",
    "TrainEstimateProvider",
    "TransportProvider",
    "estimate_stay_price",
]
