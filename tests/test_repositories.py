"""Tests for the SQLModel habit and settings repositories."""

from __future__ import annotations

import pytest
from sqlalchemy.exc import OperationalError

from smarttracker.errors import PersistenceFailure
from smarttracker.infra.repositories import SQLModelHabitRepository, SQLModelSettingsRepository
from smarttracker.models.settings import AppSetting


class TestHabitRepository:
    def test_put_and_load_round_trip(self, habit_repo, habit_factory):
        habit = habit_factory("Read", target=3, tags=("books", "evening"), progress=2)

        habit_repo.put(habit)
        loaded = habit_repo.load_all()

        assert len(loaded) == 1
        row = loaded[0]
        assert row.id == habit.id
        assert row.clean_name == "read"
        assert row.tags == ["books", "evening"]
        assert row.progress == 2
        assert row.period_key == habit.period_key

    def test_load_all_sorted_by_order(self, habit_repo, habit_factory):
        habit_repo.put_bulk(
            [
                habit_factory("Alpha", order=2),
                habit_factory("Bravo", order=0),
                habit_factory("Charlie", order=1),
            ]
        )

        assert [h.name for h in habit_repo.load_all()] == ["Bravo", "Charlie", "Alpha"]

    def test_put_upserts_by_id(self, habit_repo, habit_factory):
        habit = habit_factory("Read")
        habit_repo.put(habit)

        habit.progress = 1
        habit.status = "completed"
        habit_repo.put(habit)

        (row,) = habit_repo.load_all()
        assert (row.progress, row.status) == (1, "completed")

    def test_delete_and_clear(self, habit_repo, habit_factory):
        first, second, third = habit_factory("Alpha"), habit_factory("Bravo"), habit_factory("Charlie")
        habit_repo.put_bulk([first, second, third])

        habit_repo.delete(first.id)
        habit_repo.delete(424242)
        assert {h.id for h in habit_repo.load_all()} == {second.id, third.id}

        habit_repo.clear()
        assert habit_repo.load_all() == []

    def test_replace_all_matches_snapshot(self, habit_repo, habit_factory):
        keep, drop = habit_factory("Alpha"), habit_factory("Bravo")
        habit_repo.put_bulk([keep, drop])
        keep.progress = 1
        added = habit_factory("Charlie")

        habit_repo.replace_all([keep, added])

        rows = {h.id: h for h in habit_repo.load_all()}
        assert set(rows) == {keep.id, added.id}
        assert rows[keep.id].progress == 1

    def test_replace_all_allows_reusing_a_deleted_name(self, habit_repo, habit_factory):
        old = habit_factory("Read")
        habit_repo.put(old)
        new = habit_factory("READ")

        habit_repo.replace_all([new])

        (row,) = habit_repo.load_all()
        assert row.id == new.id

    def test_database_errors_become_persistence_failures(self, db_engine, session_factory, habit_factory):
        repo = SQLModelHabitRepository(session_factory)
        with db_engine.begin() as conn:
            conn.exec_driver_sql("DROP TABLE habit")

        with pytest.raises(PersistenceFailure) as excinfo:
            repo.load_all()
        assert isinstance(excinfo.value.__cause__, OperationalError)

        with pytest.raises(PersistenceFailure):
            repo.replace_all([habit_factory("Read")])


class TestSettingsRepository:
    def test_missing_keys_map_to_none(self, settings_repo):
        assert settings_repo.get_many(["filters", "ui"]) == {"filters": None, "ui": None}

    def test_values_round_trip_as_json(self, settings_repo):
        settings_repo.set_many(
            {
                "filters": {"status": "paused", "q": "run"},
                "lastActiveDate": "2024-03-13",
                "ui": {"theme": "dark", "notifications": False},
            }
        )

        values = settings_repo.get_many(["filters", "lastActiveDate", "ui", "other"])

        assert values == {
            "filters": {"status": "paused", "q": "run"},
            "lastActiveDate": "2024-03-13",
            "ui": {"theme": "dark", "notifications": False},
            "other": None,
        }

    def test_set_many_overwrites(self, settings_repo):
        settings_repo.set_many({"ui": {"theme": "dark"}})
        settings_repo.set_many({"ui": {"theme": "light"}})

        assert settings_repo.get_many(["ui"]) == {"ui": {"theme": "light"}}

    def test_undecodable_value_reads_as_none(self, settings_repo, session_factory):
        with session_factory() as session:
            session.add(AppSetting(key="ui", value="{not json"))

        assert settings_repo.get_many(["ui"]) == {"ui": None}

    def test_database_errors_become_persistence_failures(self, db_engine, session_factory):
        repo = SQLModelSettingsRepository(session_factory)
        with db_engine.begin() as conn:
            conn.exec_driver_sql("DROP TABLE app_setting")

        with pytest.raises(PersistenceFailure):
            repo.set_many({"ui": {}})
        with pytest.raises(PersistenceFailure):
            repo.get_many(["ui"])
