"""
Great-circle distance helpers used to measure a trip from its GPS samples.
"""

import math
from datetime import datetime
from typing import Iterable, Optional, Protocol

from src.tracking.utils import EPOCH, to_utc

EARTH_RADIUS_KM = 6371.0


class GeoSample(Protocol):
    latitude: float
    longitude: float
    timestamp: Optional[datetime]


def haversine_distance_km(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """
    Distance in kilometers between two coordinates given in degrees.

    No range validation happens here; callers validate on the way in.
    """
    d_lat = math.radians(lat2 - lat1)
    d_lon = math.radians(lon2 - lon1)

    a = (
        math.sin(d_lat / 2) ** 2
        + math.cos(math.radians(lat1))
        * math.cos(math.radians(lat2))
        * math.sin(d_lon / 2) ** 2
    )
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))

    return EARTH_RADIUS_KM * c


def sample_time(sample: GeoSample) -> datetime:
    # Samples without a timestamp sort before everything else.
    if sample.timestamp is None:
        return EPOCH
    return to_utc(sample.timestamp)


def accumulate_distance_km(samples: Iterable[GeoSample]) -> float:
    """
    Sum the distance between consecutive samples in timestamp order.

    The input is re-sorted, so caller ordering does not matter. Fewer than
    two samples yield 0.
    """
    ordered = sorted(samples, key=sample_time)
    if len(ordered) < 2:
        return 0.0

    total_distance = 0.0
    for prev, curr in zip(ordered, ordered[1:]):
        total_distance += haversine_distance_km(
            prev.latitude, prev.longitude, curr.latitude, curr.longitude
        )

    return total_distance
