"""Tests for the SQLite record store."""

import sqlite3
import threading

import pytest

from periodization_engine.db.repositories.sqlite_store import SQLiteRecordStore
from periodization_engine.exceptions import ConflictError, ValidationError


def _program(program_id="prog_1", user_id="u1"):
    return {
        "id": program_id,
        "user_id": user_id,
        "name": "Block",
        "periodization_type": "block",
        "start_date": "2024-01-01",
        "goal": "strength",
        "training_level": "advanced",
        "frequency": 4,
        "structure": {"frequency": 4, "phases": ["accumulation"]},
    }


class TestSchema:
    def test_tables_created(self, tmp_path):
        db_path = tmp_path / "schema.db"
        SQLiteRecordStore(str(db_path))
        with sqlite3.connect(db_path) as conn:
            tables = {
                row[0]
                for row in conn.execute("SELECT name FROM sqlite_master WHERE type='table'")
            }
        assert {
            "volume_landmarks",
            "volume_logs",
            "programs",
            "mesocycles",
            "microcycles",
            "sessions",
            "objectives",
            "objective_associations",
            "templates",
        } <= tables

    def test_reopen_is_idempotent(self, tmp_path):
        db_path = str(tmp_path / "again.db")
        SQLiteRecordStore(db_path).save("program", _program())
        assert SQLiteRecordStore(db_path).load("program", "prog_1")["name"] == "Block"


class TestRecordOperations:
    """Tests for load/save/query/delete."""

    def test_save_and_load_round_trips_json(self, store):
        store.save("program", _program())
        record = store.load("program", "prog_1")
        assert record["structure"] == {"frequency": 4, "phases": ["accumulation"]}
        assert record["frequency"] == 4

    def test_load_missing_returns_none(self, store):
        assert store.load("program", "nope") is None

    def test_save_updates_existing(self, store):
        store.save("program", _program())
        updated = _program()
        updated["name"] = "Renamed"
        store.save("program", updated)
        assert store.load("program", "prog_1")["name"] == "Renamed"
        assert len(store.query("program")) == 1

    def test_save_requires_id(self, store):
        record = _program()
        del record["id"]
        with pytest.raises(ValueError):
            store.save("program", record)

    def test_unknown_entity_type(self, store):
        with pytest.raises(ValueError):
            store.load("workout", "x")

    def test_query_filters_and_order(self, store):
        store.save("program", _program())
        for position in (2, 1, 3):
            store.save("mesocycle", {
                "id": f"meso_{position}",
                "program_id": "prog_1",
                "position": position,
                "phase": "accumulation",
                "length_in_weeks": 4,
            })
        records = store.query("mesocycle", order_by="position", program_id="prog_1")
        assert [r["position"] for r in records] == [1, 2, 3]

    def test_query_in_list(self, store):
        store.save("program", _program("a"))
        store.save("program", _program("b"))
        store.save("program", _program("c"))
        assert {r["id"] for r in store.query("program", id=["a", "c"])} == {"a", "c"}
        assert store.query("program", id=[]) == []

    def test_query_equal_sort_keys_keep_insertion_order(self, store):
        for log_id in ("vlog_b", "vlog_a", "vlog_c"):
            store.save("volume_log", {
                "id": log_id, "user_id": "u1", "muscle_group": "chest",
                "volume": 10.0, "logged_at": "2024-01-01T00:00:00",
            })
        records = store.query("volume_log", order_by="logged_at", user_id="u1")
        assert [r["id"] for r in records] == ["vlog_b", "vlog_a", "vlog_c"]

    def test_query_on_entity_type_column(self, store):
        store.save("objective", {
            "id": "o1", "user_id": "u1", "description": "Squat 200",
            "metric": "squat_1rm_kg", "target_value": 200,
        })
        store.save("objective_association", {
            "id": "a1", "objective_id": "o1", "entity_type": "session", "entity_id": "s1",
        })
        store.save("objective_association", {
            "id": "a2", "objective_id": "o1", "entity_type": "program", "entity_id": "s1",
        })
        records = store.query("objective_association", entity_type="session", entity_id="s1")
        assert [r["id"] for r in records] == ["a1"]

    def test_query_unknown_column(self, store):
        with pytest.raises(ValueError):
            store.query("program", colour="red")

    def test_bool_columns(self, store):
        store.save("program", _program())
        store.save("mesocycle", {
            "id": "m1", "program_id": "prog_1", "position": 1,
            "phase": "deload", "length_in_weeks": 1,
        })
        store.save("microcycle", {"id": "w1", "mesocycle_id": "m1", "week_number": 1, "is_deload": True})
        assert store.load("microcycle", "w1")["is_deload"] is True

    def test_delete(self, store):
        store.save("program", _program())
        assert store.delete("program", "prog_1") is True
        assert store.delete("program", "prog_1") is False


class TestConstraints:
    def test_unique_position_is_conflict(self, store):
        store.save("program", _program())
        store.save("mesocycle", {
            "id": "m1", "program_id": "prog_1", "position": 1,
            "phase": "accumulation", "length_in_weeks": 4,
        })
        with pytest.raises(ConflictError) as exc_info:
            store.save("mesocycle", {
                "id": "m2", "program_id": "prog_1", "position": 1,
                "phase": "intensification", "length_in_weeks": 4,
            })
        assert "mesocycles.position" in exc_info.value.details["field"]

    def test_check_constraint_is_validation_error(self, store):
        with pytest.raises(ValidationError):
            store.save("volume_landmark", {
                "id": "u1:chest", "user_id": "u1", "muscle_group": "chest",
                "mev": 20, "mav": 10, "mrv": 30,
            })


class TestTransactions:
    def test_rollback_on_error(self, store):
        with pytest.raises(RuntimeError):
            with store.transaction():
                store.save("program", _program())
                raise RuntimeError("boom")
        assert store.load("program", "prog_1") is None

    def test_nested_transactions_commit_once(self, store):
        with store.transaction():
            store.save("program", _program("a"))
            with store.transaction():
                store.save("program", _program("b"))
        assert len(store.query("program")) == 2

    def test_reads_do_not_wait_for_writer(self, tmp_path):
        store = SQLiteRecordStore(str(tmp_path / "reads.db"), timeout=0.2)
        store.save("program", _program())
        results, errors = [], []

        def read():
            try:
                results.append(store.load("program", "prog_1"))
                results.append(store.query("program", user_id="u1"))
                with store.transaction(write=False):
                    results.append(store.load("program", "prog_1"))
            except Exception as e:
                errors.append(e)

        with store.transaction():
            store.save("program", _program("prog_2"))
            reader = threading.Thread(target=read)
            reader.start()
            reader.join()

        assert errors == []
        assert results[0]["name"] == "Block"
        assert [r["id"] for r in results[1]] == ["prog_1"]
        assert results[2]["id"] == "prog_1"


def _seed_tree(store):
    """Program with one mesocycle, week and session, plus an objective on the session."""
    store.save("program", _program())
    store.save("mesocycle", {
        "id": "m1", "program_id": "prog_1", "position": 1,
        "phase": "accumulation", "length_in_weeks": 4,
    })
    store.save("microcycle", {"id": "w1", "mesocycle_id": "m1", "week_number": 1})
    store.save("session", {
        "id": "s1", "microcycle_id": "w1", "day_of_week": 0,
        "target_intensity": 75.0, "exercises": [],
    })
    store.save("objective", {
        "id": "o1", "user_id": "u1", "description": "Squat 200",
        "metric": "squat_1rm_kg", "target_value": 200,
    })
    store.save("objective_association", {
        "id": "a1", "objective_id": "o1", "entity_type": "session", "entity_id": "s1",
    })


class TestDeleteCascade:
    def test_removes_descendants_and_associations(self, store):
        _seed_tree(store)

        assert store.delete_cascade("prog_1") is True

        assert store.load("program", "prog_1") is None
        assert store.load("mesocycle", "m1") is None
        assert store.load("microcycle", "w1") is None
        assert store.load("session", "s1") is None
        assert store.load("objective_association", "a1") is None
        assert store.load("objective", "o1") is not None

    def test_missing_program(self, store):
        assert store.delete_cascade("nope") is False

    def test_failure_midway_rolls_back(self, store, monkeypatch):
        _seed_tree(store)
        delete_in = store._delete_in

        def failing_delete_in(conn, table, column, values, extra=None):
            if table == "microcycles":
                raise RuntimeError("disk full")
            return delete_in(conn, table, column, values, extra)

        monkeypatch.setattr(store, "_delete_in", failing_delete_in)

        with pytest.raises(RuntimeError):
            store.delete_cascade("prog_1")

        assert store.load("program", "prog_1") is not None
        assert store.load("mesocycle", "m1") is not None
        assert store.load("microcycle", "w1") is not None
        assert store.load("session", "s1") is not None
        assert store.load("objective_association", "a1") is not None
