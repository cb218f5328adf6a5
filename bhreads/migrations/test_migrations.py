# bhreads/migrations/test_migrations.py
from bhreads.migrations import run_migrations, Migration, MIGRATIONS
from bhreads.migrations.m0001_backfill_user_defaults import backfill_user_defaults
from bhreads.models.user import DEFAULT_BIO, DEFAULT_FAVORITE_ITEM


def _legacy_user(db, user_id, **fields):
    data = {"user_id": user_id, "username": user_id, "email": f"{user_id}@x.com", "password_hash": "x"}
    data.update(fields)
    db.collection('users').document(user_id).set(data)


def test_backfill_fills_missing_fields(db):
    _legacy_user(db, "old")
    _legacy_user(db, "partial", role="admin", bio="keep me")

    result = backfill_user_defaults(db)
    assert result == {"updated": 2, "failed": 0}

    old = db.collection('users').document("old").get().to_dict()
    assert old["role"] == "user"
    assert "seed=old" in old["avatar"]
    assert old["bio"] == DEFAULT_BIO
    assert old["favorite_item"] == DEFAULT_FAVORITE_ITEM
    assert old["last_active"] is not None

    partial = db.collection('users').document("partial").get().to_dict()
    assert partial["role"] == "admin"
    assert partial["bio"] == "keep me"

def test_backfill_is_idempotent(db):
    _legacy_user(db, "old")
    backfill_user_defaults(db)
    snapshot = db.collection('users').document("old").get().to_dict()
    assert backfill_user_defaults(db) == {"updated": 0, "failed": 0}
    assert db.collection('users').document("old").get().to_dict() == snapshot

def test_run_migrations_records_versions_once(db):
    _legacy_user(db, "old")
    assert run_migrations(db) == [m.version for m in MIGRATIONS]
    assert run_migrations(db) == []
    recorded = db.collection('schema_migrations').document("1").get().to_dict()
    assert recorded["result"] == {"updated": 1, "failed": 0}

def test_run_migrations_in_version_order(db):
    calls = []
    migrations = [
        Migration(2, "second", lambda db: calls.append(2)),
        Migration(1, "first", lambda db: calls.append(1)),
    ]
    run_migrations(db, migrations)
    assert calls == [1, 2]

def test_migrate_cli_command(app):
    runner = app.test_cli_runner()
    result = runner.invoke(args=['migrate'])
    assert result.exit_code == 0
    assert app.services['db'].collection('schema_migrations').document("1").get().exists

def test_promote_admin_cli_command(app, register):
    register("baker1", "b@x.com")
    runner = app.test_cli_runner()
    result = runner.invoke(args=['promote-admin', 'b@x.com'])
    assert result.exit_code == 0
    assert app.services['auth'].find_by_email("b@x.com")["role"] == "admin"

    missing = runner.invoke(args=['promote-admin', 'ghost@x.com'])
    assert missing.exit_code != 0
