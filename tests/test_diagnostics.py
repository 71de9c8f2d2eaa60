import json

from click.testing import CliRunner
from sqlalchemy import create_engine, text

from haven.diagnostics import COLLECTIONS, EMPTY, EXISTS, MISSING, main, probe_collection, probe_store
from haven.models import Base


def test_probe_statuses(engine, factory):
    factory.room()

    assert probe_collection(engine, "rooms").status == EXISTS
    assert "capacity" in probe_collection(engine, "rooms").columns
    assert probe_collection(engine, "notices").status == EMPTY
    assert probe_collection(engine, "no_such_table").status == MISSING


def test_probe_store_covers_every_collection(engine):
    results = probe_store(engine)
    assert [r.collection for r in results] == list(COLLECTIONS)
    assert all(r.ok for r in results)


def test_cli_reports_missing_collections(tmp_path):
    url = f"sqlite:///{tmp_path / 'store.db'}"
    store = create_engine(url)
    with store.begin() as conn:
        conn.execute(text("CREATE TABLE rooms (id TEXT, capacity INTEGER)"))
        conn.execute(text("INSERT INTO rooms VALUES ('r1', 2)"))
    store.dispose()

    result = CliRunner().invoke(main, ["--database-url", url, "-c", "rooms", "-c", "fees", "--json"])

    assert result.exit_code == 1
    report = {row["collection"]: row for row in json.loads(result.output)}
    assert report["rooms"]["status"] == EXISTS
    assert report["rooms"]["columns"] == ["id", "capacity"]
    assert report["fees"]["status"] == MISSING


def test_cli_succeeds_on_complete_store(tmp_path):
    url = f"sqlite:///{tmp_path / 'full.db'}"
    store = create_engine(url)
    Base.metadata.create_all(store)
    store.dispose()

    result = CliRunner().invoke(main, ["--database-url", url])

    assert result.exit_code == 0
    assert "EMPTY" in result.output
