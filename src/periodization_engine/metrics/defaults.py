"""
Experience-tier default volume landmarks.

Values are weekly working sets (mev, mav, mrv) per muscle group. The table is
passed explicitly to the landmark store when seeding a user, so callers can
substitute their own research-backed defaults.
"""

from dataclasses import dataclass
from typing import Dict, Mapping, Tuple

from ..exceptions import InvalidLandmarksError, ValidationError
from ..models.landmarks import MuscleGroup, TrainingLevel

LandmarkTriple = Tuple[float, float, float]


# (beginner, intermediate, advanced)
_BUILTIN_TABLE: Dict[str, Tuple[LandmarkTriple, LandmarkTriple, LandmarkTriple]] = {
    "chest": ((6, 14, 18), (8, 18, 22), (10, 22, 26)),
    "back": ((8, 16, 20), (10, 20, 25), (12, 25, 30)),
    "legs": ((12, 24, 30), (16, 30, 36), (20, 36, 44)),
    "shoulders": ((6, 12, 16), (8, 16, 20), (10, 20, 24)),
    "arms": ((8, 18, 24), (10, 24, 30), (14, 30, 36)),
    "core": ((6, 12, 16), (8, 16, 20), (10, 20, 24)),
    "quads": ((8, 16, 20), (10, 20, 25), (12, 25, 30)),
    "hamstrings": ((6, 12, 16), (8, 16, 20), (10, 20, 24)),
    "glutes": ((6, 14, 18), (8, 18, 22), (10, 22, 26)),
    "calves": ((6, 12, 16), (8, 16, 20), (10, 20, 24)),
    "biceps": ((4, 10, 14), (6, 14, 18), (8, 18, 22)),
    "triceps": ((4, 10, 14), (6, 14, 18), (8, 18, 22)),
    "forearms": ((2, 8, 12), (4, 10, 14), (6, 14, 18)),
    "traps": ((0, 10, 16), (2, 12, 20), (4, 16, 24)),
    "lats": ((6, 14, 18), (8, 18, 22), (10, 22, 26)),
    "abs": ((6, 12, 16), (8, 16, 20), (10, 20, 24)),
    "lower_back": ((2, 6, 10), (4, 8, 12), (4, 10, 14)),
    "upper_back": ((6, 14, 18), (8, 18, 22), (10, 22, 26)),
}

_LEVEL_ORDER = (TrainingLevel.BEGINNER, TrainingLevel.INTERMEDIATE, TrainingLevel.ADVANCED)


@dataclass(frozen=True)
class LandmarkDefaults:
    """Per-level, per-group default landmarks."""
    table: Mapping[TrainingLevel, Mapping[MuscleGroup, LandmarkTriple]]

    def __post_init__(self):
        for level, groups in self.table.items():
            for group, (mev, mav, mrv) in groups.items():
                if not 0 <= mev <= mav <= mrv:
                    raise InvalidLandmarksError(
                        mev, mav, mrv,
                        details={"training_level": level.value, "muscle_group": group.value},
                    )

    def for_level(self, level: TrainingLevel) -> Mapping[MuscleGroup, LandmarkTriple]:
        """Return the landmarks for one experience tier."""
        try:
            return self.table[level]
        except KeyError:
            raise ValidationError(
                f"No default landmarks for training level '{level.value}'",
                field="training_level",
            ) from None

    @classmethod
    def from_dict(cls, data: Mapping[str, Mapping[str, LandmarkTriple]]) -> "LandmarkDefaults":
        """Build a table from plain strings, e.g. loaded from JSON."""
        table = {
            TrainingLevel.parse(level): {
                MuscleGroup.parse(group): tuple(values) for group, values in groups.items()
            }
            for level, groups in data.items()
        }
        return cls(table=table)


def builtin_landmark_defaults() -> LandmarkDefaults:
    """The built-in defaults covering all muscle groups and tiers."""
    table: Dict[TrainingLevel, Dict[MuscleGroup, LandmarkTriple]] = {
        level: {} for level in _LEVEL_ORDER
    }
    for group, triples in _BUILTIN_TABLE.items():
        for level, triple in zip(_LEVEL_ORDER, triples):
            table[level][MuscleGroup(group)] = triple
    return LandmarkDefaults(table=table)
