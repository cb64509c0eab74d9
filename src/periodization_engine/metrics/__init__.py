"""Volume landmark metrics."""

from .volume import (
    classify,
    classify_volume,
    volume_recommendation,
    target_volume,
    analyze_volume_trend,
    adaptation_response,
    optimal_volume_for_goal,
    recommend_volume,
)
from .defaults import LandmarkDefaults, builtin_landmark_defaults

__all__ = [
    # Classification
    "classify",
    "classify_volume",
    "volume_recommendation",
    "target_volume",
    # Trends and recommendations
    "analyze_volume_trend",
    "adaptation_response",
    "optimal_volume_for_goal",
    "recommend_volume",
    # Defaults
    "LandmarkDefaults",
    "builtin_landmark_defaults",
]
