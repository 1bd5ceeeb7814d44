"""
Construction cost estimate.

WHAT: Rough cost estimate shown by the public quotation calculator.

HOW: area * rate(project type, quality) * floor multiplier, where every
floor above the first adds 15%. An unknown type/quality pair falls back to
DEFAULT_RATE.
"""

from dataclasses import dataclass
from typing import Dict

# Rates in INR per square foot
BASE_RATES: Dict[str, Dict[str, int]] = {
    "residential": {"standard": 1500, "premium": 2500, "luxury": 4000},
    "commercial": {"standard": 2000, "premium": 3000, "luxury": 5000},
    "industrial": {"standard": 1200, "premium": 2000, "luxury": 3500},
    "infrastructure": {"standard": 1800, "premium": 2800, "luxury": 4500},
}

DEFAULT_RATE = 1500
FLOOR_INCREMENT = 0.15


@dataclass(frozen=True)
class CostEstimate:
    rate_per_sq_ft: int
    floor_multiplier: float
    estimate: float


def rate_for(project_type: str, quality: str) -> int:
    return BASE_RATES.get(project_type, {}).get(quality, DEFAULT_RATE)


def floor_multiplier(floors: int) -> float:
    return 1 + (floors - 1) * FLOOR_INCREMENT


def estimate_cost(project_type: str, quality: str, area: float, floors: int) -> CostEstimate:
    """
    Estimate the construction cost of a project.

    Args:
        project_type: residential, commercial, industrial or infrastructure
        quality: standard, premium or luxury
        area: Built-up area in square feet (> 0)
        floors: Number of floors (>= 1)

    Returns:
        CostEstimate with the rate and multiplier that produced it

    Example:
        estimate_cost("residential", "premium", 1000, 3).estimate == 3250000.0
    """
    rate = rate_for(project_type, quality)
    multiplier = floor_multiplier(floors)
    return CostEstimate(
        rate_per_sq_ft=rate,
        floor_multiplier=multiplier,
        estimate=round(area * rate * multiplier, 2),
    )
