"""US jurisdictions used for event placement on the map."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Optional, Tuple


@dataclass(slots=True, frozen=True)
class Jurisdiction:
    name: str
    abbr: str
    # (latitude, longitude) of the centroid
    centroid: Tuple[float, float]


_RAW: Tuple[Tuple[str, str, float, float], ...] = (
    ("Alabama", "AL", 32.8067, -86.9023),
    ("Alaska", "AK", 64.2008, -153.4937),
    ("Arizona", "AZ", 34.0489, -111.4312),
    ("Arkansas", "AR", 34.7465, -92.3731),
    ("California", "CA", 36.7783, -119.4179),
    ("Colorado", "CO", 39.0598, -105.3111),
    ("Connecticut", "CT", 41.5978, -72.7554),
    ("Delaware", "DE", 38.9108, -75.5071),
    ("Florida", "FL", 27.6648, -81.5158),
    ("Georgia", "GA", 32.1656, -83.5002),
    ("Hawaii", "HI", 19.8968, -155.5828),
    ("Idaho", "ID", 44.0682, -114.7420),
    ("Illinois", "IL", 40.6331, -89.3985),
    ("Indiana", "IN", 40.2672, -86.1349),
    ("Iowa", "IA", 41.8780, -93.0977),
    ("Kansas", "KS", 39.0119, -98.4842),
    ("Kentucky", "KY", 37.8393, -84.2700),
    ("Louisiana", "LA", 30.9843, -91.9623),
    ("Maine", "ME", 45.2538, -69.4455),
    ("Maryland", "MD", 39.0458, -76.6413),
    ("Massachusetts", "MA", 42.4072, -71.5314),
    ("Michigan", "MI", 44.3148, -85.6024),
    ("Minnesota", "MN", 46.7296, -94.6859),
    ("Mississippi", "MS", 32.3547, -89.3985),
    ("Missouri", "MO", 37.9643, -91.8318),
    ("Montana", "MT", 46.8797, -110.3626),
    ("Nebraska", "NE", 41.4925, -99.9018),
    ("Nevada", "NV", 38.8026, -116.4194),
    ("New Hampshire", "NH", 43.1939, -71.5724),
    ("New Jersey", "NJ", 40.0583, -74.4057),
    ("New Mexico", "NM", 34.5199, -105.8701),
    ("New York", "NY", 43.2994, -75.4999),
    ("North Carolina", "NC", 35.7596, -79.0193),
    ("North Dakota", "ND", 47.5515, -101.0020),
    ("Ohio", "OH", 40.4173, -82.9071),
    ("Oklahoma", "OK", 35.0078, -97.0929),
    ("Oregon", "OR", 43.8041, -120.5542),
    ("Pennsylvania", "PA", 41.2033, -77.1945),
    ("Rhode Island", "RI", 41.5801, -71.4774),
    ("South Carolina", "SC", 33.8361, -81.1637),
    ("South Dakota", "SD", 43.9695, -99.9018),
    ("Tennessee", "TN", 35.5175, -86.5804),
    ("Texas", "TX", 31.9686, -99.9018),
    ("Utah", "UT", 39.3210, -111.0937),
    ("Vermont", "VT", 44.5588, -72.5778),
    ("Virginia", "VA", 37.4316, -78.6569),
    ("Washington", "WA", 47.7511, -120.7401),
    ("West Virginia", "WV", 38.5976, -80.4549),
    ("Wisconsin", "WI", 43.7844, -89.6165),
    ("Wyoming", "WY", 43.0759, -107.2903),
    ("District of Columbia", "DC", 38.9072, -77.0369),
)

JURISDICTIONS: Dict[str, Jurisdiction] = {
    name: Jurisdiction(name=name, abbr=abbr, centroid=(lat, lon)) for name, abbr, lat, lon in _RAW
}


def lookup(name: str) -> Optional[Jurisdiction]:
    """Return the jurisdiction called ``name`` or ``None`` if it cannot be plotted."""

    return JURISDICTIONS.get(name.strip())


def is_known(name: str) -> bool:
    return lookup(name) is not None


__all__ = ["JURISDICTIONS", "Jurisdiction", "is_known", "lookup"]
