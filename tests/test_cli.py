"""Tests for the command line interface."""

import pytest

from periodization_engine.cli import main
from periodization_engine.db.repositories.sqlite_store import SQLiteRecordStore


@pytest.fixture
def db_path(tmp_path):
    return str(tmp_path / "cli.db")


def test_no_command_prints_help(db_path, capsys):
    assert main(["--db", db_path]) == 1
    assert "usage" in capsys.readouterr().out.lower()


def test_seed_log_and_summary(db_path, capsys):
    assert main(["--db", db_path, "seed", "athlete-1", "--level", "beginner"]) == 0
    assert main(["--db", db_path, "log", "athlete-1", "chest", "12"]) == 0
    assert main(["--db", db_path, "summary", "athlete-1", "-r"]) == 0

    out = capsys.readouterr().out
    assert "Seeded 18 muscle groups" in out
    assert "chest" in out


def test_seed_twice_reports_error(db_path, capsys):
    main(["--db", db_path, "seed", "athlete-1"])
    assert main(["--db", db_path, "seed", "athlete-1"]) == 2
    assert "Error" in capsys.readouterr().err


def test_plan(db_path, capsys):
    main(["--db", db_path, "seed", "athlete-1"])
    assert main(["--db", db_path, "plan", "athlete-1", "chest", "back", "--fatigued"]) == 0
    assert "70" in capsys.readouterr().out


def test_plan_without_landmarks(db_path):
    assert main(["--db", db_path, "plan", "nobody", "chest", "--ready"]) == 2


def test_instantiate(db_path, capsys):
    code = main([
        "--db", db_path,
        "instantiate", "beginner-linear-full-body", "athlete-1",
        "--name", "First block",
        "--start", "2024-01-01",
    ])
    assert code == 0
    assert "Created program" in capsys.readouterr().out

    programs = SQLiteRecordStore(db_path).query("program", user_id="athlete-1")
    assert len(programs) == 1


def test_templates_listing(db_path, capsys):
    assert main(["--db", db_path, "templates", "--level", "advanced"]) == 0
    out = capsys.readouterr().out
    assert "advanced-block-peaking" in out
    assert "beginner-linear-full-body" not in out
