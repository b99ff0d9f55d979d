"""Rainfall severity tiers.

Classification is a pure function of the rainfall amount:

* ``>= 80`` mm  -> ``extreme``  (historical traces expanded, animated outline)
* ``30..80`` mm -> ``advisory`` (riverside and low-lying areas at risk)
* ``< 30`` mm   -> ``safe``

Each tier carries a description template for the status display and the
styling the map layer applies to the danger region and the rain gauge.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Optional

EXTREME_THRESHOLD_MM = 80
ADVISORY_THRESHOLD_MM = 30


@dataclass(frozen=True)
class SeverityTier:
    level: str
    title: str
    detail: str
    status_color: str
    gauge_class: str
    region_style: Optional[Dict]

    def describe(self, amount: float) -> str:
        return f"{self.title} ({format_amount(amount)}mm): {self.detail}"


EXTREME = SeverityTier(
    level="extreme",
    title="Extreme rainfall",
    detail="danger zone expanded from historical flood traces",
    status_color="#d32f2f",
    gauge_class="gauge-extreme",
    region_style={"color": "#b71c1c", "weight": 2, "fill_color": "#d32f2f",
                  "fill_opacity": 0.6, "class_name": "danger-zone-path"},
)
ADVISORY = SeverityTier(
    level="advisory",
    title="Heavy rain advisory",
    detail="watch for flooding along rivers and in low-lying areas",
    status_color="#e65100",
    gauge_class="gauge-heavy",
    region_style={"color": "#e65100", "weight": 1, "fill_color": "#ff9800",
                  "fill_opacity": 0.6, "class_name": ""},
)
SAFE = SeverityTier(
    level="safe",
    title="Safe",
    detail="nothing unusual at present",
    status_color="green",
    gauge_class="gauge-normal",
    region_style=None,
)


def format_amount(amount: float) -> str:
    """``30`` -> ``"30"``, ``12.5`` -> ``"12.5"``."""
    return f"{float(amount):g}"


def classify_severity(amount: float) -> SeverityTier:
    if amount >= EXTREME_THRESHOLD_MM:
        return EXTREME
    if amount >= ADVISORY_THRESHOLD_MM:
        return ADVISORY
    return SAFE


def describe_rainfall(amount: float) -> str:
    return classify_severity(amount).describe(amount)


def describe_live(amount: float, has_region: bool) -> str:
    """Status text after switching back to the live observation."""
    if has_region:
        return describe_rainfall(amount)
    return f"Safe (live {format_amount(amount)}mm): no flood danger zones at present"


__all__ = ["SeverityTier", "EXTREME", "ADVISORY", "SAFE", "classify_severity",
           "describe_rainfall", "describe_live", "format_amount"]
