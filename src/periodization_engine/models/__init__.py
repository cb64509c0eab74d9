"""Data models for the periodization engine."""

from .landmarks import (
    # Enums
    MuscleGroup,
    TrainingLevel,
    VolumeStatus,
    AdjustmentType,
    VolumeTrend,
    AdaptationResponse,
    VolumeGoal,
    # Dataclasses
    VolumeLandmark,
    MuscleGroupVolumeSummary,
    VolumeLogEntry,
    VolumeRecommendation,
)

from .periodization import (
    # Enums
    PeriodizationType,
    TrainingPhase,
    # Hierarchy
    PeriodizationProgram,
    Mesocycle,
    Microcycle,
    PeriodizedSession,
    PeriodizationTemplate,
    # Tree views
    ProgramTree,
    MesocycleNode,
    MicrocycleNode,
    new_id,
)

from .objectives import (
    EntityType,
    ObjectivePriority,
    TrainingObjective,
    ObjectiveAssociation,
)

from .planning import (
    Readiness,
    SessionPlan,
    MuscleGroupPlan,
)

__all__ = [
    # Landmarks
    "MuscleGroup",
    "TrainingLevel",
    "VolumeStatus",
    "AdjustmentType",
    "VolumeTrend",
    "AdaptationResponse",
    "VolumeGoal",
    "VolumeLandmark",
    "MuscleGroupVolumeSummary",
    "VolumeLogEntry",
    "VolumeRecommendation",
    # Periodization
    "PeriodizationType",
    "TrainingPhase",
    "PeriodizationProgram",
    "Mesocycle",
    "Microcycle",
    "PeriodizedSession",
    "PeriodizationTemplate",
    "ProgramTree",
    "MesocycleNode",
    "MicrocycleNode",
    "new_id",
    # Objectives
    "EntityType",
    "ObjectivePriority",
    "TrainingObjective",
    "ObjectiveAssociation",
    # Planning
    "Readiness",
    "SessionPlan",
    "MuscleGroupPlan",
]
