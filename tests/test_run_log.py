import json

from conftest import make_filing, make_record
from propublica990.export.aggregator import OrgErr, OrgOk
from propublica990.export.run_log import RunLog, new_run_id


def test_run_log_totals_and_entries(tmp_path):
    log = RunLog(tmp_path, "20260101T000000Z", tmp_path / "out.csv")
    rec = make_record("Alpha", [make_filing("2023-01-01"), make_filing("2022-01-01")])
    log.record(OrgOk("A", rec, overwritten=True))
    log.record(OrgOk("C", rec, stale=True, message="timeout"))
    log.record(OrgErr("B", "404"))
    log.record(OrgErr("B", "404 again"))
    log.set_rows(5)
    path = log.save()

    data = json.loads(path.read_text())
    assert path.name == "export-20260101T000000Z.json"
    assert data["totals"] == {"ok": 2, "error": 1, "overwritten": 1, "stale": 1, "rows": 5}
    assert data["orgs"]["A"]["filings"] == 2
    assert data["orgs"]["A"]["name"] == "Alpha"
    assert data["orgs"]["B"] == {
        "status": "error", "name": None, "filings": 0, "overwritten": False, "stale": False, "message": "404 again",
    }


def test_run_id_shape():
    rid = new_run_id()
    assert len(rid) == 22 and rid.endswith("Z") and "T" in rid


def test_same_run_id_does_not_overwrite(tmp_path):
    first = RunLog(tmp_path, "20260101T000000000000Z").save()
    second = RunLog(tmp_path, "20260101T000000000000Z").save()
    assert first != second
    assert second.name == "export-20260101T000000000000Z-2.json"
    assert first.exists() and second.exists()
