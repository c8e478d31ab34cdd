"""Coordinate value object - immutable and validated."""
from dataclasses import dataclass
from typing import Optional, Union

from app.config import settings
from app.constants import COORDINATE_SCALE


@dataclass(frozen=True)
class Coordinates:
    """Immutable coordinate value object in decimal degrees."""
    latitude: float
    longitude: float

    def __post_init__(self):
        """Validate coordinates."""
        if not -90 <= self.latitude <= 90:
            raise ValueError(f"Latitude must be between -90 and 90, got {self.latitude}")
        if not -180 <= self.longitude <= 180:
            raise ValueError(f"Longitude must be between -180 and 180, got {self.longitude}")

    @classmethod
    def from_fixed_point(
        cls,
        mapx: Union[str, int, float, None],
        mapy: Union[str, int, float, None],
    ) -> Optional["Coordinates"]:
        """Convert the upstream integer-encoded pair (mapx=lng, mapy=lat).

        Returns None when either axis is missing, not numeric, or out of the
        global degree range after scaling.
        """
        try:
            lng = float(mapx) / COORDINATE_SCALE
            lat = float(mapy) / COORDINATE_SCALE
        except (TypeError, ValueError):
            return None
        try:
            return cls(latitude=lat, longitude=lng)
        except ValueError:
            return None

    def is_valid(self) -> bool:
        """Check if coordinates are valid."""
        return -90 <= self.latitude <= 90 and -180 <= self.longitude <= 180

    def is_within_korea(self) -> bool:
        """Check the point falls in the bounding box around the Korean peninsula."""
        return (
            settings.KOREA_MIN_LATITUDE <= self.latitude <= settings.KOREA_MAX_LATITUDE
            and settings.KOREA_MIN_LONGITUDE <= self.longitude <= settings.KOREA_MAX_LONGITUDE
        )

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {"latitude": self.latitude, "longitude": self.longitude}
