"""
lookalike/geo.py

Residency classification for free-text addresses against a target
municipality (Columbia, MD by default), plus the record enrichment that turns
the result into two model-ready fields:

    columbia_resident          "yes" / "no"
    distance_from_columbia_mi  miles outside the border ("0" for residents,
                               "" when the distance is unknown)

Decision order for one address (first match wins):
  1. blank                                  -> Unknown, low
  2. ZIP in the municipality's ZIP set      -> Resident, 0 mi, high
  3. "<name>, <state>" / "<name>" locality  -> Resident, 0 mi, high
  4. geocode via gazetteer (ZIP, then longest city name, then comma split,
     then "<name> ... <state|ZIP>" -> center point)
  5. no coordinates                          -> Non-Resident (state named) or
                                                Unknown, low
  6. coordinates inside the boundary        -> Resident, 0 mi, high
     otherwise                              -> Non-Resident, miles to the
                                                nearest border edge, high
"""

from __future__ import annotations

import logging
import math
import re
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Mapping, Optional, Sequence, Tuple

from lookalike.gazetteer import COLUMBIA_MD, US_STATE_CODES, GeoPoint, Municipality
from lookalike.model import AnalysisCancelled
from lookalike.parsing import round_half_up


logger = logging.getLogger(__name__)

EARTH_RADIUS_MI = 3959.0

RESIDENT = "Resident"
NON_RESIDENT = "Non-Resident"
UNKNOWN = "Unknown"

RESIDENT_FIELD = "columbia_resident"
DISTANCE_FIELD = "distance_from_columbia_mi"
SYNTHETIC_FIELDS = (RESIDENT_FIELD, DISTANCE_FIELD)

# Neighbouring jurisdictions whose places the gazetteer also covers
REGION_STATES = frozenset(["MD", "DC"])

_ZIP_RE = re.compile(r"\b(\d{5})(?:-\d{4})?\b")
_STATE_AFTER_COMMA = re.compile(r",\s*([a-z]{2})\b")
_STATE_BEFORE_ZIP = re.compile(r"\b([a-z]{2})\s+\d{5}\b")

ADDRESS_FIELD_PATTERNS = (
    re.compile(r"^address$", re.I),
    re.compile(r"^street[_\s]?address$", re.I),
    re.compile(r"^mailing[_\s]?address$", re.I),
    re.compile(r"^home[_\s]?address$", re.I),
    re.compile(r"^full[_\s]?address$", re.I),
    re.compile(r"address", re.I),
    re.compile(r"^street$", re.I),
    re.compile(r"^location$", re.I),
)

DISTANCE_BUCKETS = (
    ("0-5 mi", 5.0),
    ("5-10 mi", 10.0),
    ("10-20 mi", 20.0),
    ("20-30 mi", 30.0),
    ("30+ mi", math.inf),
)


@dataclass(frozen=True)
class ColumbiaAnalysis:
    is_resident: bool
    residency_status: str
    distance_from_border: Optional[float]
    confidence: str
    geocoded: bool

    def to_dict(self) -> Dict:
        return {
            "isResident": self.is_resident,
            "residencyStatus": self.residency_status,
            "distanceFromBorder": self.distance_from_border,
            "confidence": self.confidence,
            "geocoded": self.geocoded,
        }


_UNKNOWN = ColumbiaAnalysis(False, UNKNOWN, None, "low", False)
_RESIDENT = ColumbiaAnalysis(True, RESIDENT, 0.0, "high", True)


# ---------------------------------------------------------------------
# Geometry
# ---------------------------------------------------------------------

def haversine_miles(a: GeoPoint, b: GeoPoint) -> float:
    d_lat = math.radians(b.lat - a.lat)
    d_lng = math.radians(b.lng - a.lng)
    h = (
        math.sin(d_lat / 2) ** 2
        + math.cos(math.radians(a.lat)) * math.cos(math.radians(b.lat)) * math.sin(d_lng / 2) ** 2
    )
    return EARTH_RADIUS_MI * 2 * math.atan2(math.sqrt(h), math.sqrt(1 - h))


def point_in_polygon(point: GeoPoint, polygon: Sequence[GeoPoint]) -> bool:
    """Even-odd ray casting; lat plays x and lng plays y."""
    inside = False
    n = len(polygon)
    j = n - 1
    for i in range(n):
        xi, yi = polygon[i]
        xj, yj = polygon[j]
        if (yi > point.lng) != (yj > point.lng):
            x_cross = (xj - xi) * (point.lng - yi) / (yj - yi) + xi
            if point.lat < x_cross:
                inside = not inside
        j = i
    return inside


def distance_to_segment(p: GeoPoint, a: GeoPoint, b: GeoPoint) -> float:
    """Great-circle miles from p to its clamped projection onto segment ab (projected in degrees)."""
    dx = b.lat - a.lat
    dy = b.lng - a.lng
    if dx == 0 and dy == 0:
        return haversine_miles(p, a)
    t = ((p.lat - a.lat) * dx + (p.lng - a.lng) * dy) / (dx * dx + dy * dy)
    t = max(0.0, min(1.0, t))
    return haversine_miles(p, GeoPoint(a.lat + t * dx, a.lng + t * dy))


def distance_to_border(point: GeoPoint, polygon: Sequence[GeoPoint]) -> float:
    n = len(polygon)
    return min(distance_to_segment(point, polygon[i], polygon[(i + 1) % n]) for i in range(n))


# ---------------------------------------------------------------------
# Address text
# ---------------------------------------------------------------------

def extract_zip(address: str) -> Optional[str]:
    match = _ZIP_RE.search(address)
    return match.group(1) if match else None


def _state_pattern(m: Municipality) -> re.Pattern:
    return re.compile(rf"\b(?:{m.state_code.lower()}|{re.escape(m.state_name.lower())})\b")


def _word(text: str) -> re.Pattern:
    return re.compile(rf"\b{re.escape(text)}\b")


def _named_states(lower: str) -> set:
    found = set(_STATE_AFTER_COMMA.findall(lower)) | set(_STATE_BEFORE_ZIP.findall(lower))
    return {s.upper() for s in found if s.upper() in US_STATE_CODES}


def _names_elsewhere(lower: str, m: Municipality) -> bool:
    """True when the text points at a same-named place outside the target state."""
    if f"district of {m.name.lower()}" in lower:
        return True
    return bool(_named_states(lower) - {m.state_code})


def mentions_municipality(address: str, m: Municipality = COLUMBIA_MD) -> bool:
    """
    "Columbia, MD", "Columbia Maryland 21044", or a bare "..., Columbia"
    locality segment when no other state is named.
    """
    lower = address.lower()
    name = re.escape(m.name.lower())
    state = f"(?:{m.state_code.lower()}|{re.escape(m.state_name.lower())})"
    if re.search(rf"\b{name}\b[\s,]+{state}\b", lower):
        return True
    segments = [s.strip() for s in lower.split(",")]
    if any(s == m.name.lower() for s in segments[1:]):
        return not _names_elsewhere(lower, m)
    return False


def _city_lookup(lower: str, m: Municipality) -> Optional[str]:
    skip_own = _names_elsewhere(lower, m)
    foreign = bool(_named_states(lower) - REGION_STATES)
    if foreign:
        return None
    for city in sorted(m.cities, key=len, reverse=True):
        if skip_own and city == m.name.lower():
            continue
        if _word(city).search(lower):
            return city
    return None


def _comma_lookup(lower: str, m: Municipality) -> Optional[str]:
    state = _state_pattern(m)
    skip_own = _names_elsewhere(lower, m)
    for part in lower.split(",")[1:]:
        candidate = _ZIP_RE.sub("", state.sub("", part)).strip()
        if candidate in m.cities and not (skip_own and candidate == m.name.lower()):
            return candidate
    return None


def geocode(address: str, m: Municipality = COLUMBIA_MD) -> Optional[GeoPoint]:
    """Approximate coordinates from the static gazetteer, or None."""
    zip_code = extract_zip(address)
    if zip_code and zip_code in m.zip_coords:
        return m.zip_coords[zip_code]

    lower = address.lower()
    city = _city_lookup(lower, m) or _comma_lookup(lower, m)
    if city:
        return m.cities[city]

    if _word(m.name.lower()).search(lower) and not _names_elsewhere(lower, m):
        if _state_pattern(m).search(lower) or any(z in lower for z in m.zips):
            return m.center
    return None


def analyze_address(address: Optional[str], m: Municipality = COLUMBIA_MD) -> ColumbiaAnalysis:
    if not address or not address.strip():
        return _UNKNOWN

    zip_code = extract_zip(address)
    if zip_code and zip_code in m.zips:
        return _RESIDENT

    if mentions_municipality(address, m):
        return _RESIDENT

    point = geocode(address, m)
    if point is None:
        if _state_pattern(m).search(address.lower()):
            return ColumbiaAnalysis(False, NON_RESIDENT, None, "low", False)
        return _UNKNOWN

    if point_in_polygon(point, m.boundary):
        return _RESIDENT

    distance = round_half_up(distance_to_border(point, m.boundary) * 10) / 10
    return ColumbiaAnalysis(False, NON_RESIDENT, distance, "high", True)


# ---------------------------------------------------------------------
# Dataset helpers
# ---------------------------------------------------------------------

def format_distance(analysis: ColumbiaAnalysis) -> str:
    if analysis.distance_from_border is not None:
        return f"{analysis.distance_from_border:g}"
    return "0" if analysis.is_resident else ""


def enrich_records(
    records: Sequence[Mapping[str, str]],
    address_field: str,
    m: Municipality = COLUMBIA_MD,
    cancel: Optional[Callable[[], bool]] = None,
) -> List[Dict[str, str]]:
    """
    Copy each record and append the two synthetic residency fields.
    Input records are left untouched.
    """
    enriched = []
    for i, row in enumerate(records):
        if cancel is not None and cancel():
            raise AnalysisCancelled(f"geo enrichment cancelled after {i} records")
        analysis = analyze_address(row.get(address_field) or "", m)
        enriched.append({
            **row,
            RESIDENT_FIELD: "yes" if analysis.is_resident else "no",
            DISTANCE_FIELD: format_distance(analysis),
        })
    return enriched


def detect_address_field(headers: Sequence[str]) -> Optional[str]:
    """First header matching the address patterns, trying patterns in priority order."""
    for pattern in ADDRESS_FIELD_PATTERNS:
        for header in headers:
            if pattern.search(header):
                return header
    return None


@dataclass(frozen=True)
class ColumbiaSummary:
    total: int
    residents: int
    non_residents: int
    unknown: int
    geocoded_count: int
    avg_distance: Optional[float]
    min_distance: Optional[float]
    max_distance: Optional[float]
    distance_buckets: Tuple[Tuple[str, int], ...] = field(default=())

    def to_dict(self) -> Dict:
        return {
            "total": self.total,
            "residents": self.residents,
            "nonResidents": self.non_residents,
            "unknown": self.unknown,
            "geocodedCount": self.geocoded_count,
            "avgDistance": self.avg_distance,
            "minDistance": self.min_distance,
            "maxDistance": self.max_distance,
            "distanceBuckets": [{"label": label, "count": n} for label, n in self.distance_buckets],
        }


def summarize_columbia(
    records: Sequence[Mapping[str, str]], address_field: str, m: Municipality = COLUMBIA_MD
) -> ColumbiaSummary:
    """Residency counts and the non-resident distance histogram for a dataset."""
    counts = {RESIDENT: 0, NON_RESIDENT: 0, UNKNOWN: 0}
    geocoded = 0
    distances: List[float] = []
    for row in records:
        analysis = analyze_address(row.get(address_field) or "", m)
        geocoded += analysis.geocoded
        counts[analysis.residency_status] += 1
        if analysis.residency_status == NON_RESIDENT and analysis.distance_from_border is not None:
            distances.append(analysis.distance_from_border)

    buckets = {label: 0 for label, _ in DISTANCE_BUCKETS}
    for d in distances:
        label = next(label for label, upper in DISTANCE_BUCKETS if d <= upper)
        buckets[label] += 1

    avg = round_half_up(sum(distances) / len(distances) * 10) / 10 if distances else None
    logger.debug("Residency summary for %d records: %s", len(records), counts)
    return ColumbiaSummary(
        total=len(records),
        residents=counts[RESIDENT],
        non_residents=counts[NON_RESIDENT],
        unknown=counts[UNKNOWN],
        geocoded_count=geocoded,
        avg_distance=avg,
        min_distance=min(distances) if distances else None,
        max_distance=max(distances) if distances else None,
        distance_buckets=tuple(buckets.items()),
    )
