"""
Color matching against theatrical gel filter catalogs.

Distances are plain Euclidean distances in RGB space (0-255 per component),
which is fast and good enough to suggest a gel for a mixed LED color.
"""
import logging
import math
from typing import Optional

import numpy as np
from pydantic import BaseModel, ConfigDict, Field

from config import Color, GelFilter
from color_helpers import hex_to_rgb

logger = logging.getLogger(__name__)

# Distance between black and white
MAX_COLOR_DISTANCE = math.sqrt(255 * 255 * 3)

DEFAULT_SIMILARITY_THRESHOLD = 95.0


class FilterMatch(BaseModel):
    """A gel filter together with how closely it matches a color (0-100%)."""
    model_config = ConfigDict(frozen=True)

    gel: GelFilter
    similarity: float = Field(..., ge=0.0, le=100.0)


def calculate_color_distance(color1: Color, color2: Color) -> float:
    """Euclidean distance between two colors, 0 (identical) to ~441.67."""
    diff = np.subtract(color1.as_tuple(), color2.as_tuple(), dtype=float)
    return float(np.linalg.norm(diff))


def _similarity_from_distance(distance):
    return np.clip((1.0 - distance / MAX_COLOR_DISTANCE) * 100.0, 0.0, 100.0)


def calculate_color_similarity(color1: Color, color2: Color) -> float:
    """
    Similarity of two colors as a percentage.
    100% is identical, 95%+ is a very close match, below 90% a poor one.
    """
    return float(_similarity_from_distance(calculate_color_distance(color1, color2)))


def find_matching_filters(
    target_color: Color,
    filters: list[GelFilter],
    threshold: float = DEFAULT_SIMILARITY_THRESHOLD,
) -> list[FilterMatch]:
    """
    Find the gel filters that look like a color.

    Args:
        target_color: Color to match
        filters: Filter catalog to search
        threshold: Minimum similarity percentage (0-100)

    Returns:
        Filters at or above the threshold, best match first
    """
    if not filters:
        return []

    catalog = np.array([hex_to_rgb(f.rgb_hex).as_tuple() for f in filters], dtype=float)
    target = np.array(target_color.as_tuple(), dtype=float)
    similarities = _similarity_from_distance(np.linalg.norm(catalog - target, axis=1))

    matches = [
        FilterMatch(gel=gel, similarity=float(similarity))
        for gel, similarity in zip(filters, similarities)
        if similarity >= threshold
    ]
    matches.sort(key=lambda m: m.similarity, reverse=True)

    logger.debug(f"{len(matches)} of {len(filters)} filters match "
                 f"{target_color.as_tuple()} at >= {threshold}%")
    return matches


def get_best_matching_filter(
    target_color: Color,
    filters: list[GelFilter],
    threshold: float = DEFAULT_SIMILARITY_THRESHOLD,
) -> Optional[FilterMatch]:
    """Get the single best matching filter, or None if nothing meets the threshold."""
    matches = find_matching_filters(target_color, filters, threshold)
    return matches[0] if matches else None
