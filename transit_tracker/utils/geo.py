# path: transit-tracker/transit_tracker/utils/geo.py

from __future__ import annotations

from typing import Iterable, List, Sequence, Tuple
import math


Coordinate = Tuple[float, float]  # (lon, lat)

EARTH_RADIUS_KM = 6371.0


def distance_km(a: Sequence[float], b: Sequence[float]) -> float:
    # Haversine over (lon, lat) pairs. No range checks: garbage in, number out.
    a_lon, a_lat = a[0], a[1]
    b_lon, b_lat = b[0], b[1]
    phi1 = math.radians(a_lat)
    phi2 = math.radians(b_lat)
    dphi = math.radians(b_lat - a_lat)
    dlmb = math.radians(b_lon - a_lon)

    s = math.sin(dphi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(dlmb / 2) ** 2
    s = min(1.0, s)
    return 2 * EARTH_RADIUS_KM * math.atan2(math.sqrt(s), math.sqrt(1 - s))


def path_length_km(coords: Sequence[Sequence[float]]) -> float:
    total = 0.0
    for i in range(1, len(coords)):
        total += distance_km(coords[i - 1], coords[i])
    return total


def dedupe_consecutive(coords: Iterable[Sequence[float]]) -> List[Coordinate]:
    deduped: List[Coordinate] = []
    for c in coords:
        p = (float(c[0]), float(c[1]))
        if not deduped or p != deduped[-1]:
            deduped.append(p)
    return deduped
