from alembic import command
from sqlalchemy import inspect, text

from rewardapi.database.connection import Database
from rewardapi.database.migrations import alembic_config, upgrade_to_head


def _table_names(engine):
    return set(inspect(engine).get_table_names())


class TestMigrations:
    def test_upgrade_creates_schema(self, settings):
        database = Database.from_settings(settings)
        try:
            upgrade_to_head(database.engine)

            assert {
                "users",
                "login_tokens",
                "spin_events",
                "referrals",
                "withdraw_requests",
                "purchases",
            } <= _table_names(database.engine)
            columns = {c["name"] for c in inspect(database.engine).get_columns("spin_events")}
            assert {"kind", "ref_id", "ledger_day"} <= columns
        finally:
            database.dispose()

    def test_upgrade_twice_is_noop(self, settings):
        database = Database.from_settings(settings)
        try:
            upgrade_to_head(database.engine)
            upgrade_to_head(database.engine)

            with database.engine.connect() as conn:
                versions = conn.execute(text("SELECT version_num FROM alembic_version")).all()
            assert versions == [("20240615_0002",)]
        finally:
            database.dispose()

    def test_existing_debits_backfilled_as_withdrawals(self, settings):
        database = Database.from_settings(settings)
        try:
            cfg = alembic_config()
            with database.engine.begin() as conn:
                cfg.attributes["connection"] = conn
                command.upgrade(cfg, "20240601_0001")
                conn.execute(text("INSERT INTO users (id) VALUES ('u1')"))
                conn.execute(
                    text(
                        "INSERT INTO spin_events (user_id, points, created_at) VALUES "
                        "('u1', 500, '2024-06-01 10:00:00'), "
                        "('u1', -200, '2024-06-02 11:00:00')"
                    )
                )

            upgrade_to_head(database.engine)

            with database.engine.connect() as conn:
                rows = conn.execute(
                    text("SELECT points, kind, ledger_day FROM spin_events ORDER BY id")
                ).all()
            assert [(r[0], r[1], str(r[2])) for r in rows] == [
                (500, "spin", "2024-06-01"),
                (-200, "withdrawal", "2024-06-02"),
            ]
        finally:
            database.dispose()
