"""
lookalike/gazetteer.py

Static place data for residency classification: the target municipality
(Columbia, Maryland) and approximate coordinates for surrounding towns and
ZIP codes. Coordinates are rough centroids, good to a mile or so.

Everything here is built once at import time and exposed through read-only
mappings.
"""

from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping, NamedTuple, Tuple


class GeoPoint(NamedTuple):
    lat: float
    lng: float


@dataclass(frozen=True)
class Municipality:
    """
    A residency target.

    boundary  : polygon vertices (lat, lng), in order, not closed
    cities    : lower-case place name -> coordinate, for the broader region
    zip_coords: ZIP -> coordinate, for the broader region
    """
    name: str
    state_code: str
    state_name: str
    zips: frozenset
    center: GeoPoint
    boundary: Tuple[GeoPoint, ...]
    cities: Mapping[str, GeoPoint]
    zip_coords: Mapping[str, GeoPoint]

    @property
    def label(self) -> str:
        return f"{self.name}, {self.state_code}"


US_STATE_CODES = frozenset([
    "AL", "AK", "AZ", "AR", "CA", "CO", "CT", "DE", "FL", "GA", "HI", "ID", "IL",
    "IN", "IA", "KS", "KY", "LA", "ME", "MD", "MA", "MI", "MN", "MS", "MO", "MT",
    "NE", "NV", "NH", "NJ", "NM", "NY", "NC", "ND", "OH", "OK", "OR", "PA", "RI",
    "SC", "SD", "TN", "TX", "UT", "VT", "VA", "WA", "WV", "WI", "WY", "DC", "PR",
])

COLUMBIA_ZIPS = frozenset(["21044", "21045", "21046"])

COLUMBIA_CENTER = GeoPoint(39.2037, -76.8610)

# Approximate outline, clockwise from the north-west corner
COLUMBIA_BOUNDARY = (
    GeoPoint(39.2420, -76.8950),
    GeoPoint(39.2450, -76.8700),
    GeoPoint(39.2400, -76.8400),
    GeoPoint(39.2300, -76.8250),
    GeoPoint(39.2100, -76.8150),
    GeoPoint(39.1900, -76.8200),
    GeoPoint(39.1780, -76.8350),
    GeoPoint(39.1750, -76.8550),
    GeoPoint(39.1800, -76.8800),
    GeoPoint(39.1950, -76.8950),
    GeoPoint(39.2150, -76.9050),
    GeoPoint(39.2300, -76.9000),
)

MD_CITY_COORDS = MappingProxyType({
    "columbia": GeoPoint(39.2037, -76.8610),
    "ellicott city": GeoPoint(39.2674, -76.7983),
    "elkridge": GeoPoint(39.2126, -76.7136),
    "laurel": GeoPoint(39.0993, -76.8483),
    "savage": GeoPoint(39.1379, -76.8236),
    "jessup": GeoPoint(39.1462, -76.7753),
    "hanover": GeoPoint(39.1929, -76.7244),
    "clarksville": GeoPoint(39.2070, -76.9397),
    "dayton": GeoPoint(39.2420, -76.9640),
    "fulton": GeoPoint(39.1520, -76.9230),
    "highland": GeoPoint(39.1751, -76.9569),
    "west friendship": GeoPoint(39.2847, -76.9375),
    "baltimore": GeoPoint(39.2904, -76.6122),
    "towson": GeoPoint(39.4015, -76.6019),
    "catonsville": GeoPoint(39.2721, -76.7319),
    "dundalk": GeoPoint(39.2507, -76.5205),
    "essex": GeoPoint(39.3093, -76.4746),
    "parkville": GeoPoint(39.3771, -76.5397),
    "perry hall": GeoPoint(39.4126, -76.4636),
    "owings mills": GeoPoint(39.4197, -76.7708),
    "pikesville": GeoPoint(39.3743, -76.7225),
    "glen burnie": GeoPoint(39.1626, -76.6247),
    "linthicum": GeoPoint(39.2054, -76.6594),
    "arbutus": GeoPoint(39.2365, -76.6922),
    "halethorpe": GeoPoint(39.2268, -76.6836),
    "rosedale": GeoPoint(39.3204, -76.5155),
    "middle river": GeoPoint(39.3382, -76.4394),
    "randallstown": GeoPoint(39.3676, -76.7953),
    "reisterstown": GeoPoint(39.4693, -76.8294),
    "cockeysville": GeoPoint(39.4790, -76.6438),
    "timonium": GeoPoint(39.4370, -76.6197),
    "lutherville": GeoPoint(39.4215, -76.6264),
    "washington": GeoPoint(38.9072, -77.0369),
    "silver spring": GeoPoint(38.9907, -77.0261),
    "bethesda": GeoPoint(38.9847, -77.0947),
    "rockville": GeoPoint(39.0840, -77.1528),
    "gaithersburg": GeoPoint(39.1434, -77.2014),
    "germantown": GeoPoint(39.1732, -77.2717),
    "bowie": GeoPoint(38.9428, -76.7302),
    "college park": GeoPoint(38.9807, -76.9370),
    "greenbelt": GeoPoint(38.9954, -76.8828),
    "hyattsville": GeoPoint(38.9559, -76.9453),
    "lanham": GeoPoint(38.9687, -76.8633),
    "largo": GeoPoint(38.8976, -76.8303),
    "upper marlboro": GeoPoint(38.8156, -76.7497),
    "annapolis": GeoPoint(38.9784, -76.4922),
    "severna park": GeoPoint(39.0704, -76.5683),
    "severn": GeoPoint(39.1371, -76.6983),
    "odenton": GeoPoint(39.0840, -76.7000),
    "crofton": GeoPoint(39.0018, -76.6872),
    "gambrills": GeoPoint(39.0679, -76.6653),
    "millersville": GeoPoint(39.0573, -76.6392),
    "pasadena": GeoPoint(39.1076, -76.5711),
    "arnold": GeoPoint(39.0329, -76.5025),
    "frederick": GeoPoint(39.4143, -77.4105),
    "mount airy": GeoPoint(39.3762, -77.1547),
    "new market": GeoPoint(39.3901, -77.2767),
    "sykesville": GeoPoint(39.3735, -76.9678),
    "eldersburg": GeoPoint(39.4039, -76.9519),
    "westminster": GeoPoint(39.5754, -76.9958),
    "bel air": GeoPoint(39.5360, -76.3483),
    "aberdeen": GeoPoint(39.5093, -76.1641),
    "havre de grace": GeoPoint(39.5493, -76.0919),
    "edgewood": GeoPoint(39.4187, -76.2944),
    "joppa": GeoPoint(39.4365, -76.3561),
    "olney": GeoPoint(39.1532, -77.0668),
    "burtonsville": GeoPoint(39.1113, -76.9325),
    "north laurel": GeoPoint(39.1337, -76.8586),
    "maple lawn": GeoPoint(39.1680, -76.8886),
    "kings contrivance": GeoPoint(39.1856, -76.8433),
    "dorsey": GeoPoint(39.1604, -76.7853),
    "scaggsville": GeoPoint(39.1446, -76.8825),
    "woodbine": GeoPoint(39.3340, -77.0675),
    "lisbon": GeoPoint(39.3273, -77.0600),
    "cooksville": GeoPoint(39.3273, -76.9956),
    "glenelg": GeoPoint(39.2718, -76.9122),
    "woodstock": GeoPoint(39.3308, -76.8726),
    "marriottsville": GeoPoint(39.2996, -76.8986),
})

MD_ZIP_COORDS = MappingProxyType({
    "21044": GeoPoint(39.2128, -76.8812),
    "21045": GeoPoint(39.2025, -76.8331),
    "21046": GeoPoint(39.1893, -76.8553),
    "21042": GeoPoint(39.2674, -76.7983),  # Ellicott City
    "21043": GeoPoint(39.2501, -76.7711),  # Ellicott City
    "21075": GeoPoint(39.2126, -76.7136),  # Elkridge
    "21076": GeoPoint(39.1929, -76.7244),  # Hanover
    "21029": GeoPoint(39.2070, -76.9397),  # Clarksville
    "21036": GeoPoint(39.2420, -76.9640),  # Dayton
    "21104": GeoPoint(39.2996, -76.8986),  # Marriottsville
    "21163": GeoPoint(39.3308, -76.8726),  # Woodstock
    "21738": GeoPoint(39.2718, -76.9122),  # Glenelg
    "21797": GeoPoint(39.3340, -77.0675),  # Woodbine
    "21794": GeoPoint(39.3273, -77.0600),  # Lisbon
    "20707": GeoPoint(39.0993, -76.8483),  # Laurel
    "20708": GeoPoint(39.0760, -76.8417),  # Laurel
    "20723": GeoPoint(39.1337, -76.8586),  # North Laurel
    "20724": GeoPoint(39.0943, -76.7000),  # Laurel / Ft. Meade
    "20794": GeoPoint(39.1462, -76.7753),  # Jessup
    "20763": GeoPoint(39.1379, -76.8236),  # Savage
    "21201": GeoPoint(39.2904, -76.6177),
    "21202": GeoPoint(39.2960, -76.6005),
    "21206": GeoPoint(39.3271, -76.5397),
    "21207": GeoPoint(39.3176, -76.7225),
    "21208": GeoPoint(39.3743, -76.7225),
    "21209": GeoPoint(39.3649, -76.6686),
    "21210": GeoPoint(39.3490, -76.6397),
    "21211": GeoPoint(39.3260, -76.6397),
    "21212": GeoPoint(39.3665, -76.6122),
    "21213": GeoPoint(39.3065, -76.5794),
    "21214": GeoPoint(39.3493, -76.5622),
    "21215": GeoPoint(39.3443, -76.6833),
    "21216": GeoPoint(39.3082, -76.6622),
    "21217": GeoPoint(39.3082, -76.6394),
    "21218": GeoPoint(39.3260, -76.6028),
    "21227": GeoPoint(39.2268, -76.6836),  # Halethorpe
    "21228": GeoPoint(39.2721, -76.7319),  # Catonsville
    "21229": GeoPoint(39.2718, -76.6922),
    "21230": GeoPoint(39.2632, -76.6247),
    "21234": GeoPoint(39.3771, -76.5397),  # Parkville
    "21236": GeoPoint(39.3382, -76.4394),  # Middle River
    "21237": GeoPoint(39.3204, -76.5155),  # Rosedale
    "21244": GeoPoint(39.3176, -76.7869),  # Windsor Mill
    "21060": GeoPoint(39.1626, -76.6247),
    "21061": GeoPoint(39.1526, -76.6247),
    "21144": GeoPoint(39.1371, -76.6983),  # Severn
    "21401": GeoPoint(38.9784, -76.4922),
    "21403": GeoPoint(38.9584, -76.4722),
    "21108": GeoPoint(39.0573, -76.6392),  # Millersville
    "21113": GeoPoint(39.0840, -76.7000),  # Odenton
    "21114": GeoPoint(39.0018, -76.6872),  # Crofton
    "21012": GeoPoint(39.0329, -76.5025),  # Arnold
    "21122": GeoPoint(39.1076, -76.5711),  # Pasadena
    "21146": GeoPoint(39.0704, -76.5683),  # Severna Park
    "20901": GeoPoint(38.9907, -77.0261),  # Silver Spring
    "20814": GeoPoint(38.9847, -77.0947),  # Bethesda
    "20850": GeoPoint(39.0840, -77.1528),  # Rockville
    "20877": GeoPoint(39.1434, -77.2014),  # Gaithersburg
    "20874": GeoPoint(39.1732, -77.2717),  # Germantown
    "20720": GeoPoint(38.9428, -76.7302),  # Bowie
    "20740": GeoPoint(38.9807, -76.9370),  # College Park
    "20770": GeoPoint(38.9954, -76.8828),  # Greenbelt
    "20783": GeoPoint(38.9559, -76.9453),  # Hyattsville
    "21701": GeoPoint(39.4143, -77.4105),
    "21771": GeoPoint(39.3762, -77.1547),  # Mount Airy
    "21784": GeoPoint(39.3735, -76.9678),  # Sykesville
    "21157": GeoPoint(39.5754, -76.9958),  # Westminster
    "21048": GeoPoint(39.4039, -76.9519),  # Eldersburg
    "21014": GeoPoint(39.5360, -76.3483),  # Bel Air
    "21001": GeoPoint(39.5093, -76.1641),  # Aberdeen
    "21078": GeoPoint(39.5493, -76.0919),  # Havre de Grace
    "21040": GeoPoint(39.4187, -76.2944),  # Edgewood
})

COLUMBIA_MD = Municipality(
    name="Columbia",
    state_code="MD",
    state_name="Maryland",
    zips=COLUMBIA_ZIPS,
    center=COLUMBIA_CENTER,
    boundary=COLUMBIA_BOUNDARY,
    cities=MD_CITY_COORDS,
    zip_coords=MD_ZIP_COORDS,
)
