"""Built-in periodization templates seeded into the record store."""

from typing import Dict, List

from ..models.landmarks import TrainingLevel
from ..models.periodization import PeriodizationTemplate, PeriodizationType


def _exercise(exercise_id: str, name: str, sets: int, reps: str, muscle_group: str) -> Dict:
    return {
        "exercise_id": exercise_id,
        "name": name,
        "sets": sets,
        "reps": reps,
        "muscle_group": muscle_group,
    }


FULL_BODY_SESSIONS = [
    {
        "name": "Full Body A",
        "muscle_groups": ["chest", "back", "legs", "shoulders"],
        "exercises": [
            _exercise("squat", "Back Squat", 3, "8-10", "legs"),
            _exercise("bench", "Bench Press", 3, "8-10", "chest"),
            _exercise("row", "Barbell Row", 3, "8-10", "back"),
        ],
    },
    {
        "name": "Full Body B",
        "muscle_groups": ["legs", "chest", "back", "arms"],
        "exercises": [
            _exercise("deadlift", "Deadlift", 3, "5-6", "back"),
            _exercise("incline_press", "Incline Dumbbell Press", 3, "8-10", "chest"),
            _exercise("curls", "Barbell Curl", 3, "10-12", "biceps"),
        ],
    },
    {
        "name": "Full Body C",
        "muscle_groups": ["back", "legs", "shoulders", "core"],
        "exercises": [
            _exercise("front_squat", "Front Squat", 3, "8-10", "quads"),
            _exercise("ohp", "Overhead Press", 3, "8-10", "shoulders"),
            _exercise("pullups", "Pull-ups", 3, "6-10", "lats"),
        ],
    },
]

UPPER_LOWER_SESSIONS = [
    {
        "name": "Upper Body",
        "muscle_groups": ["chest", "back", "shoulders", "arms"],
        "exercises": [
            _exercise("bench", "Bench Press", 4, "6-8", "chest"),
            _exercise("row", "Barbell Row", 4, "6-8", "back"),
            _exercise("ohp", "Overhead Press", 3, "8-10", "shoulders"),
        ],
    },
    {
        "name": "Lower Body",
        "muscle_groups": ["quads", "hamstrings", "glutes", "calves"],
        "exercises": [
            _exercise("squat", "Back Squat", 4, "6-8", "quads"),
            _exercise("rdl", "Romanian Deadlift", 3, "8-10", "hamstrings"),
            _exercise("calf_raise", "Standing Calf Raise", 3, "12-15", "calves"),
        ],
    },
]

PUSH_PULL_LEGS_SESSIONS = [
    {
        "name": "Push",
        "muscle_groups": ["chest", "shoulders", "triceps"],
        "exercises": [
            _exercise("bench", "Bench Press", 4, "6-8", "chest"),
            _exercise("ohp", "Overhead Press", 3, "8-10", "shoulders"),
            _exercise("dips", "Dips", 3, "10-12", "triceps"),
        ],
    },
    {
        "name": "Pull",
        "muscle_groups": ["back", "biceps", "forearms"],
        "exercises": [
            _exercise("deadlift", "Deadlift", 3, "5-6", "back"),
            _exercise("pullups", "Pull-ups", 3, "8-10", "lats"),
            _exercise("curls", "Barbell Curl", 3, "10-12", "biceps"),
        ],
    },
    {
        "name": "Legs",
        "muscle_groups": ["quads", "hamstrings", "glutes", "calves"],
        "exercises": [
            _exercise("squat", "Back Squat", 4, "6-8", "quads"),
            _exercise("rdl", "Romanian Deadlift", 3, "8-10", "hamstrings"),
            _exercise("lunges", "Walking Lunge", 3, "12-15", "glutes"),
        ],
    },
]


BUILTIN_TEMPLATES: List[PeriodizationTemplate] = [
    PeriodizationTemplate(
        id="beginner-linear-full-body",
        name="Beginner Linear Full Body",
        periodization_type=PeriodizationType.LINEAR,
        training_level=TrainingLevel.BEGINNER,
        goal="general_fitness",
        description="Three full-body days a week, building from adaptation to hypertrophy.",
        structure={
            "frequency": 3,
            "phases": ["anatomical_adaptation", "hypertrophy", "deload"],
            "weeks_per_phase": 3,
            "mesocycle_weeks": 3,
            "deload_strategy": "volume",
            "volume_range": [8, 14],
            "intensity_range": [60, 75],
            "sessions": FULL_BODY_SESSIONS,
        },
    ),
    PeriodizationTemplate(
        id="intermediate-block-hypertrophy",
        name="Intermediate Block Hypertrophy",
        periodization_type=PeriodizationType.BLOCK,
        training_level=TrainingLevel.INTERMEDIATE,
        goal="hypertrophy",
        description="Upper/lower split in accumulation and intensification blocks.",
        structure={
            "frequency": 4,
            "phases": ["accumulation", "intensification"],
            "duration_weeks": 8,
            "mesocycle_weeks": 4,
            "deload_frequency": 4,
            "deload_strategy": "volume",
            "volume_range": [12, 20],
            "intensity_range": [65, 82],
            "sessions": UPPER_LOWER_SESSIONS,
        },
    ),
    PeriodizationTemplate(
        id="intermediate-linear-strength",
        name="Intermediate Linear Strength",
        periodization_type=PeriodizationType.LINEAR,
        training_level=TrainingLevel.INTERMEDIATE,
        goal="strength",
        description="Hypertrophy into strength with a closing deload week.",
        structure={
            "frequency": 4,
            "phases": ["hypertrophy", "strength", "deload"],
            "duration_weeks": 9,
            "weeks_per_phase": 3,
            "deload_strategy": "intensity",
            "volume_range": [10, 16],
            "intensity_range": [70, 88],
            "sessions": UPPER_LOWER_SESSIONS,
        },
    ),
    PeriodizationTemplate(
        id="advanced-undulating-ppl",
        name="Advanced Undulating Push/Pull/Legs",
        periodization_type=PeriodizationType.UNDULATING,
        training_level=TrainingLevel.ADVANCED,
        goal="hypertrophy",
        description="Five days a week rotating push, pull and legs with regular deloads.",
        structure={
            "frequency": 5,
            "phases": ["hypertrophy", "strength", "power"],
            "duration_weeks": 12,
            "mesocycle_weeks": 4,
            "deload_frequency": 4,
            "deload_strategy": "combined",
            "volume_range": [14, 24],
            "intensity_range": [67, 90],
            "sessions": PUSH_PULL_LEGS_SESSIONS,
        },
    ),
    PeriodizationTemplate(
        id="advanced-block-peaking",
        name="Advanced Block Peaking",
        periodization_type=PeriodizationType.BLOCK,
        training_level=TrainingLevel.ADVANCED,
        goal="strength",
        description="Accumulation, intensification and realization ahead of a test week.",
        structure={
            "frequency": 4,
            "phases": ["accumulation", "intensification", "realization", "deload"],
            "weeks_per_phase": 3,
            "mesocycle_weeks": 3,
            "training_days": [0, 1, 3, 5],
            "deload_strategy": "combined",
            "volume_range": [10, 22],
            "intensity_range": [70, 95],
            "sessions": UPPER_LOWER_SESSIONS,
        },
    ),
]
