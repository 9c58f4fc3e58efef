import json

from baseproject.services.diagnostics import (
    SAVE_FAILED,
    SECTION_MISSING,
    DiagnosticsLog,
)


def test_record_and_filter():
    log = DiagnosticsLog()
    log.record(SECTION_MISSING, "window_state missing", key="window_state")
    log.record(SAVE_FAILED, "disk full", cause=OSError("ENOSPC"))
    assert len(log) == 2
    assert [e.key for e in log.filter(kind=SECTION_MISSING)] == ["window_state"]
    failed = log.filter(kind=SAVE_FAILED)[0]
    assert failed.cause == "OSError: ENOSPC"
    assert log.filter(key="window_state")[0].kind == SECTION_MISSING


def test_capacity_bound():
    log = DiagnosticsLog(capacity=3)
    for i in range(5):
        log.record(SECTION_MISSING, f"m{i}")
    assert [e.message for e in log.recent()] == ["m2", "m3", "m4"]
    assert [e.message for e in log.recent(limit=1)] == ["m4"]


def test_subscribers_receive_events_and_failures_are_isolated():
    log = DiagnosticsLog()
    seen = []

    def bad(_event):
        raise RuntimeError("subscriber bug")

    log.subscribe(bad)
    cancel = log.subscribe(seen.append)
    log.record(SECTION_MISSING, "first")
    cancel()
    log.record(SECTION_MISSING, "second")
    assert [e.message for e in seen] == ["first"]
    assert len(log) == 2


def test_record_emits_warning_log(caplog):
    log = DiagnosticsLog()
    with caplog.at_level("WARNING", logger="baseproject.services.diagnostics"):
        log.record(SAVE_FAILED, "could not save")
    assert "save_failed: could not save" in caplog.text


def test_export_jsonl(tmp_path):
    log = DiagnosticsLog()
    log.record(SECTION_MISSING, "a", key="project_config")
    log.record(SAVE_FAILED, "b")
    out = tmp_path / "diag.jsonl"
    assert log.export_jsonl(out) == 2
    lines = [json.loads(line) for line in out.read_text(encoding="utf-8").splitlines()]
    assert lines[0]["kind"] == SECTION_MISSING and lines[0]["key"] == "project_config"
    log.clear()
    assert log.recent() == []
