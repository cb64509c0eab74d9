"""Database schema for the periodization record store."""

SCHEMA = """
-- Volume landmarks: one row per (user, muscle group); latest value is authoritative
CREATE TABLE IF NOT EXISTS volume_landmarks (
    id TEXT PRIMARY KEY,
    user_id TEXT NOT NULL,
    muscle_group TEXT NOT NULL,
    mev REAL NOT NULL,
    mav REAL NOT NULL,
    mrv REAL NOT NULL,
    current_volume REAL NOT NULL DEFAULT 0,
    updated_at TEXT DEFAULT CURRENT_TIMESTAMP,
    UNIQUE (user_id, muscle_group),
    CHECK (mev >= 0 AND mev <= mav AND mav <= mrv)
);

-- Logged weekly volumes (history used for trend analysis)
CREATE TABLE IF NOT EXISTS volume_logs (
    id TEXT PRIMARY KEY,
    user_id TEXT NOT NULL,
    muscle_group TEXT NOT NULL,
    volume REAL NOT NULL,
    logged_at TEXT NOT NULL
);

CREATE INDEX IF NOT EXISTS idx_volume_logs_user_group
ON volume_logs(user_id, muscle_group, logged_at);

-- Periodization hierarchy: flat tables keyed by id with parent references
CREATE TABLE IF NOT EXISTS programs (
    id TEXT PRIMARY KEY,
    user_id TEXT NOT NULL,
    name TEXT NOT NULL,
    periodization_type TEXT NOT NULL,
    start_date TEXT NOT NULL,
    goal TEXT NOT NULL,
    training_level TEXT NOT NULL,
    frequency INTEGER NOT NULL CHECK (frequency > 0),
    structure TEXT NOT NULL DEFAULT '{}',  -- JSON
    template_id TEXT,
    created_at TEXT DEFAULT CURRENT_TIMESTAMP
);

CREATE INDEX IF NOT EXISTS idx_programs_user ON programs(user_id);

CREATE TABLE IF NOT EXISTS mesocycles (
    id TEXT PRIMARY KEY,
    program_id TEXT NOT NULL REFERENCES programs(id) ON DELETE CASCADE,
    position INTEGER NOT NULL,
    phase TEXT NOT NULL,
    length_in_weeks INTEGER NOT NULL,
    volume_target REAL,
    intensity_target REAL,
    name TEXT,
    UNIQUE (program_id, position)
);

CREATE TABLE IF NOT EXISTS microcycles (
    id TEXT PRIMARY KEY,
    mesocycle_id TEXT NOT NULL REFERENCES mesocycles(id) ON DELETE CASCADE,
    week_number INTEGER NOT NULL,
    is_deload INTEGER NOT NULL DEFAULT 0,
    phase TEXT,
    start_date TEXT,
    UNIQUE (mesocycle_id, week_number)
);

CREATE TABLE IF NOT EXISTS sessions (
    id TEXT PRIMARY KEY,
    microcycle_id TEXT NOT NULL REFERENCES microcycles(id) ON DELETE CASCADE,
    day_of_week INTEGER NOT NULL CHECK (day_of_week BETWEEN 0 AND 6),
    target_intensity REAL NOT NULL,
    target_volume_multiplier REAL NOT NULL DEFAULT 1.0,
    exercises TEXT NOT NULL DEFAULT '[]',  -- JSON
    name TEXT,
    UNIQUE (microcycle_id, day_of_week)
);

-- Objectives and their associations to any hierarchy node
CREATE TABLE IF NOT EXISTS objectives (
    id TEXT PRIMARY KEY,
    user_id TEXT NOT NULL,
    description TEXT NOT NULL,
    metric TEXT NOT NULL,
    target_value REAL NOT NULL,
    created_at TEXT DEFAULT CURRENT_TIMESTAMP
);

CREATE TABLE IF NOT EXISTS objective_associations (
    id TEXT PRIMARY KEY,
    objective_id TEXT NOT NULL REFERENCES objectives(id) ON DELETE CASCADE,
    entity_type TEXT NOT NULL,
    entity_id TEXT NOT NULL,
    priority TEXT NOT NULL DEFAULT 'medium',
    expected_progress REAL,
    UNIQUE (objective_id, entity_type, entity_id)
);

CREATE INDEX IF NOT EXISTS idx_associations_entity
ON objective_associations(entity_type, entity_id);

-- Read-only template catalog
CREATE TABLE IF NOT EXISTS templates (
    id TEXT PRIMARY KEY,
    name TEXT NOT NULL,
    periodization_type TEXT NOT NULL,
    training_level TEXT NOT NULL,
    goal TEXT NOT NULL,
    structure TEXT NOT NULL,  -- JSON
    description TEXT
);
"""
