"""
Volume landmark classification and recommendation rules.

All functions here are pure: they take landmark values and logged volumes
and return classifications, never touching storage.

Boundaries:
    current <  mev          -> below_mev
    mev <= current <= mav   -> optimal
    mav <  current <= mrv   -> approaching_mrv
    current >  mrv          -> exceeding_mrv
"""

from typing import Sequence, Tuple

from ..models.landmarks import (
    AdaptationResponse,
    AdjustmentType,
    VolumeGoal,
    VolumeLandmark,
    VolumeRecommendation,
    VolumeStatus,
    VolumeTrend,
)


def classify_volume(current: float, mev: float, mav: float, mrv: float) -> VolumeStatus:
    """Classify a weekly volume against its landmarks."""
    if current < mev:
        return VolumeStatus.BELOW_MEV
    if current <= mav:
        return VolumeStatus.OPTIMAL
    if current <= mrv:
        return VolumeStatus.APPROACHING_MRV
    return VolumeStatus.EXCEEDING_MRV


def volume_recommendation(
    status: VolumeStatus,
    mev: float,
    mav: float,
    mrv: float,
) -> str:
    """Human-readable recommendation for a status."""
    if status == VolumeStatus.BELOW_MEV:
        return f"Increase volume to at least {_fmt(mev)} sets per week to stimulate adaptation"
    if status == VolumeStatus.OPTIMAL:
        return f"Optimal volume. Keep between {_fmt(mev)}-{_fmt(mav)} sets per week"
    if status == VolumeStatus.APPROACHING_MRV:
        return (
            f"Close to your recoverable limit ({_fmt(mrv)} sets). "
            "Monitor fatigue and consider holding volume"
        )
    return f"Volume exceeds {_fmt(mrv)} sets. Reduce toward {_fmt(mav)} sets or insert a deload"


def classify(current: float, mev: float, mav: float, mrv: float) -> Tuple[VolumeStatus, str]:
    """
    Map a weekly volume and its landmarks to a status and recommendation.

    A degenerate landmark (mev == mav == mrv) has a zero-width optimal
    band: only that exact value is optimal.

    Args:
        current: Current weekly sets
        mev: Minimum effective volume
        mav: Maximum adaptive volume
        mrv: Maximum recoverable volume

    Returns:
        Tuple of (VolumeStatus, recommendation text)
    """
    status = classify_volume(current, mev, mav, mrv)
    return status, volume_recommendation(status, mev, mav, mrv)


def target_volume(mev: float, mav: float) -> float:
    """Midpoint of the adaptive band, used as the weekly target."""
    return float(round((mev + mav) / 2))


def analyze_volume_trend(volumes: Sequence[float]) -> VolumeTrend:
    """
    Determine the direction of logged volumes, oldest first.

    Fewer than two data points is treated as stable.
    """
    if len(volumes) < 2:
        return VolumeTrend.STABLE

    increases = 0
    decreases = 0
    for previous, current in zip(volumes, volumes[1:]):
        if current > previous:
            increases += 1
        elif current < previous:
            decreases += 1

    if increases > decreases:
        return VolumeTrend.INCREASING
    if decreases > increases:
        return VolumeTrend.DECREASING
    if increases == 0 and decreases == 0:
        return VolumeTrend.STABLE
    return VolumeTrend.INCONSISTENT


def adaptation_response(performed: float, target: float, fatigue: float) -> AdaptationResponse:
    """
    Rate how a trainee handled the prescribed sets.

    Args:
        performed: Sets actually performed
        target: Sets prescribed
        fatigue: Reported fatigue 1-10
    """
    if target <= 0:
        return AdaptationResponse.NEUTRAL
    completion = performed / target
    if completion >= 1.0 and fatigue <= 6:
        return AdaptationResponse.POSITIVE
    if completion >= 0.8 and fatigue <= 8:
        return AdaptationResponse.NEUTRAL
    return AdaptationResponse.NEGATIVE


def optimal_volume_for_goal(landmark: VolumeLandmark, goal: VolumeGoal) -> Tuple[int, int, int]:
    """Return (min, optimal, max) weekly sets for a goal within the landmarks."""
    mev, mav, mrv = landmark.mev, landmark.mav, landmark.mrv
    if goal == VolumeGoal.STRENGTH:
        return round(mev), round(mev + (mav - mev) * 0.4), round(mav * 0.8)
    if goal == VolumeGoal.HYPERTROPHY:
        return round(mev + (mav - mev) * 0.3), round(mav), round(mrv * 0.9)
    return round(mav * 0.6), round(mav * 0.8), round(mrv)


def recommend_volume(landmark: VolumeLandmark, trend: VolumeTrend) -> VolumeRecommendation:
    """Combine classification and recent trend into a volume adjustment."""
    current = landmark.current_volume
    mev, mav, mrv = landmark.mev, landmark.mav, landmark.mrv
    status = classify_volume(current, mev, mav, mrv)

    recommended = current
    adjustment = AdjustmentType.MAINTAIN
    confidence = 0.8
    timeline_weeks = 2

    if status == VolumeStatus.BELOW_MEV:
        recommended = min(mev + 2, mav)
        adjustment = AdjustmentType.INCREASE
        reasoning = "Below minimum effective volume. Increase gradually to drive adaptation."
        confidence = 0.9
    elif status == VolumeStatus.OPTIMAL:
        if trend == VolumeTrend.INCREASING and current < mav * 0.8:
            recommended = current + 1
            adjustment = AdjustmentType.INCREASE
            reasoning = "Positive progression. Conservative increase to keep adapting."
        else:
            reasoning = "Optimal volume. Maintain to consolidate adaptations."
    elif status == VolumeStatus.APPROACHING_MRV:
        if trend == VolumeTrend.DECREASING:
            reasoning = "Near the recoverable limit but trending down. Hold current volume."
        else:
            recommended = max(current - 2, mav)
            adjustment = AdjustmentType.DECREASE
            reasoning = "Approaching the recoverable limit. Reduce slightly."
            timeline_weeks = 1
    else:
        recommended = mav
        adjustment = AdjustmentType.DELOAD
        reasoning = "Volume is compromising recovery. Deload needed."
        confidence = 0.95
        timeline_weeks = 1

    return VolumeRecommendation(
        muscle_group=landmark.muscle_group,
        current_volume=current,
        recommended_volume=recommended,
        adjustment_type=adjustment,
        reasoning=reasoning,
        confidence=confidence,
        timeline_weeks=timeline_weeks,
        status=status,
        trend=trend,
    )


def _fmt(value: float) -> str:
    return str(int(value)) if float(value).is_integer() else f"{value:g}"
