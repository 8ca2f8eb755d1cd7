import io
import json

import nestspec.observability.logging as spec_logging
from nestspec import describe


def test_structured_logging_includes_example_context(caplog, monkeypatch):
    monkeypatch.setattr(spec_logging, "_logging_configured", False)
    spec_logging.configure_logging_once("DEBUG")

    caplog.clear()
    caplog.set_level("DEBUG")

    describe("logged", lambda ctx: ctx.it("passes", lambda e: e.expect(1).to(e.eq(1))), out=io.StringIO())

    structured_records = []
    for record in caplog.records:
        try:
            data = json.loads(record.message)
        except json.JSONDecodeError:
            continue
        if isinstance(data, dict):
            structured_records.append(data)

    events = [r.get("event") for r in structured_records]
    assert "spec.run.started" in events
    assert "spec.run.completed" in events

    completed = [r for r in structured_records if r.get("event") == "spec.example.completed"]
    assert completed, "expected a structured record per example"
    assert completed[-1]["example"] == "logged > it passes"
    assert completed[-1]["outcome"] == "passed"

    summary = [r for r in structured_records if r.get("event") == "spec.run.completed"][-1]
    assert (summary["ok"], summary["failed"], summary["errors"]) == (1, 0, 0)


def test_configure_logging_is_idempotent(monkeypatch):
    monkeypatch.setattr(spec_logging, "_logging_configured", True)
    calls = []
    monkeypatch.setattr(spec_logging.structlog, "configure", lambda **kwargs: calls.append(kwargs))

    spec_logging.configure_logging_once("DEBUG")

    assert calls == []
