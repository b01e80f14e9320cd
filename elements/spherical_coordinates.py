from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache
from typing import Optional, Tuple
import math
import re

from pyproj import CRS, Transformer

from core.errors import Invalid
from elements.element import Element
from utils.xml import first_child, xml_text

# Gazebo truncates latitude and longitude to this many decimals
MAX_DECIMALS = 4

# Northing offset of the southern hemisphere UTM projections
FALSE_NORTHING_SOUTH = 10_000_000.0
WGS84_EPSG = 4326


@dataclass
class UTM:
    """UTM coordinates of a point."""
    easting: float
    northing: float
    zone: int
    zone_north: bool

    @property
    def north(self) -> bool:
        return self.zone_north


def utm_zone_number(latitude_deg: float, longitude_deg: float) -> int:
    """Standard UTM zone of a point, with the Norway and Svalbard exceptions."""
    if 56 <= latitude_deg < 64 and 3 <= longitude_deg < 12:
        return 32
    if 72 <= latitude_deg <= 84 and longitude_deg >= 0:
        for bound, zone in ((9, 31), (21, 33), (33, 35), (42, 37)):
            if longitude_deg < bound:
                return zone
    return int((longitude_deg + 180) // 6) % 60 + 1


@lru_cache(maxsize=None)
def _utm_transformer(zone: int, north: bool) -> Transformer:
    epsg = (32600 if north else 32700) + zone
    return Transformer.from_crs(CRS.from_epsg(WGS84_EPSG), CRS.from_epsg(epsg), always_xy=True)


class SphericalCoordinates(Element):
    """A world's spherical coordinates."""

    xml_tag_name = "spherical_coordinates"

    @property
    def surface_model(self) -> str:
        model = first_child(self.xml, "surface_model")
        return xml_text(model) if model is not None else "WGS-84"

    def _read_float(self, tag: str, default=None) -> float:
        node = first_child(self.xml, tag)
        if node is None:
            if default is None:
                raise Invalid(f"no {tag} defined in {self}")
            return default
        try:
            return float(xml_text(node))
        except ValueError:
            raise Invalid.at(node, f"invalid number '{xml_text(node)}'") from None

    def _read_degrees(self, tag: str) -> float:
        value = self._read_float(tag)
        m = re.search(r"\.(\d+)$", xml_text(first_child(self.xml, tag)))
        if m and len(m.group(1)) > MAX_DECIMALS:
            raise Invalid(
                f"Gazebo truncates spherical_coordinates/latitude_deg and spherical_coordinates/longitude_deg "
                f"to {MAX_DECIMALS} decimals, cannot have {len(m.group(1))}")
        return value

    @property
    def latitude_deg(self) -> float:
        return self._read_degrees("latitude_deg")

    @property
    def longitude_deg(self) -> float:
        return self._read_degrees("longitude_deg")

    @property
    def elevation(self) -> float:
        return self._read_float("elevation", 0.0)

    @property
    def heading(self) -> float:
        """Heading of the local frame w.r.t. the global frame, in radians."""
        return math.radians(self._read_float("heading_deg", 0.0))

    def default_utm_zone(self) -> Tuple[int, bool]:
        """The UTM zone containing these coordinates, as (zone number, north)."""
        return utm_zone_number(self.latitude_deg, self.longitude_deg), self.latitude_deg >= 0

    def utm(self, zone: Optional[int] = None, north: Optional[bool] = None) -> UTM:
        """Convert the coordinates into UTM coordinates.

        zone forces the zone number. north forces the hemisphere: the
        northing is then shifted by the southern false northing so that it
        is expressed in the forced hemisphere, and may be negative or above
        10000km.
        """
        latitude, longitude = self.latitude_deg, self.longitude_deg
        default_zone, is_north = self.default_utm_zone()
        zone_number = zone if zone is not None else default_zone

        easting, northing = _utm_transformer(zone_number, is_north).transform(longitude, latitude)
        zone_north = is_north
        if north is not None and north != is_north:
            northing += -FALSE_NORTHING_SOUTH if north else FALSE_NORTHING_SOUTH
            zone_north = north
        return UTM(easting, northing, zone_number, zone_north)
