import pytest

from climbcoach.config import Settings
from scripts import check_record_store, migrate_leg_spread
from scripts.migrate_leg_spread import parse_leg_spread


@pytest.mark.parametrize("raw,expected", [
    ("1.40 m", 1.4),
    ("1.5m", 1.5),
    (" 2 ", 2.0),
])
def test_parse_leg_spread_text(raw, expected):
    assert parse_leg_spread(raw) == pytest.approx(expected)


@pytest.mark.parametrize("raw", [1.4, None, "", "wide", "1.2 cm"])
def test_parse_leg_spread_nothing_to_migrate(raw):
    assert parse_leg_spread(raw) is None


@pytest.mark.parametrize("module", [migrate_leg_spread, check_record_store])
def test_missing_configuration_exits_1(module, monkeypatch):
    monkeypatch.setattr(module, "load_settings", lambda env_file=None: Settings())
    monkeypatch.setattr("sys.argv", [module.__name__])
    assert module.main() == 1


class _FakeStore:
    def __init__(self, **kwargs):
        self.updates = []

    def fetch_all_raw(self):
        return [
            {"id": "rec1", "fields": {"LEG SPREAD": "1.40 m"}},
            {"id": "rec2", "fields": {"LEG SPREAD": 1.5}},
            {"id": "rec3", "fields": {}},
        ]

    def update_raw_fields(self, record_id, fields):
        self.updates.append((record_id, fields))
        return {"id": record_id, "fields": fields}


def _configured():
    return Settings(airtable_api_key="key", airtable_base_id="app")


def test_migrate_updates_text_values_only(monkeypatch, capsys):
    stores = []

    def make_store(**kwargs):
        stores.append(_FakeStore(**kwargs))
        return stores[-1]

    monkeypatch.setattr(migrate_leg_spread, "load_settings", lambda env_file=None: _configured())
    monkeypatch.setattr(migrate_leg_spread, "AirtableRecordStore", make_store)
    monkeypatch.setattr("sys.argv", ["migrate_leg_spread", "--delay", "0"])

    assert migrate_leg_spread.main() == 0
    assert stores[0].updates == [("rec1", {"LEG SPREAD": 1.4})]
    assert "Updated 1 leg spread value(s)." in capsys.readouterr().out


def test_migrate_dry_run_writes_nothing(monkeypatch, capsys):
    store = _FakeStore()
    monkeypatch.setattr(migrate_leg_spread, "load_settings", lambda env_file=None: _configured())
    monkeypatch.setattr(migrate_leg_spread, "AirtableRecordStore", lambda **kwargs: store)
    monkeypatch.setattr("sys.argv", ["migrate_leg_spread", "--dry-run"])

    assert migrate_leg_spread.main() == 0
    assert store.updates == []
    assert "Would update 1" in capsys.readouterr().out
