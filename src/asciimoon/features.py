"""Named lunar features projected onto the visible disc."""

import math

from asciimoon.models import Category, Feature

# (id, selenographic latitude, longitude (east positive), category) in label priority order
_SELENOGRAPHIC: tuple[tuple[str, float, float, Category], ...] = (
    ("mare_imbrium", 32.8, -15.6, Category.MARE),
    ("mare_serenitatis", 28.0, 17.5, Category.MARE),
    ("mare_tranquillitatis", 8.5, 31.4, Category.MARE),
    ("mare_crisium", 17.0, 59.1, Category.MARE),
    ("oceanus_procellarum", 18.4, -57.4, Category.MARE),
    ("tycho", -43.3, -11.2, Category.CRATER),
    ("copernicus", 9.6, -20.1, Category.CRATER),
    ("kepler", 8.1, -38.0, Category.CRATER),
    ("aristarchus", 23.7, -47.4, Category.CRATER),
    ("plato", 51.6, -9.3, Category.CRATER),
)


def _project(lat_deg: float, lon_deg: float) -> tuple[float, float]:
    """Orthographic projection as seen from Earth: +x east (right), +y north (up)."""
    lat = math.radians(lat_deg)
    lon = math.radians(lon_deg)
    return math.cos(lat) * math.sin(lon), math.sin(lat)


def _build() -> tuple[Feature, ...]:
    features: list[Feature] = []
    for priority, (feature_id, lat, lon, category) in enumerate(_SELENOGRAPHIC):
        x, y = _project(lat, lon)
        features.append(
            Feature(id=feature_id, x=x, y=y, category=category, priority=priority)
        )
    return tuple(features)


LUNAR_FEATURES: tuple[Feature, ...] = _build()
