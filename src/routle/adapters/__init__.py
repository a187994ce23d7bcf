"""City lookup adapters (e.g., GeoNames integration)."""

from .geocoder import Geocoder, GeocoderError, GeoNamesGeocoder, StaticGeocoder

__all__ = [
    "GeoNamesGeocoder",
    "Geocoder",
    "GeocoderError",
    "StaticGeocoder",
]
