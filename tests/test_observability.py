import sys
from pathlib import Path

sys.path.append(str(Path(__file__).resolve().parent.parent))

import json
import logging
import threading

from sortedsearch import observability


def _record(**extra):
    record = logging.LogRecord("sortedsearch.test", logging.INFO, __file__, 1, "hello %s", ("world",), None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


def test_json_formatter_includes_extra_fields():
    record = _record(correlation_id="abc", matches=3)
    data = json.loads(observability.JSONFormatter().format(record))
    assert data["level"] == "INFO"
    assert data["logger"] == "sortedsearch.test"
    assert data["message"] == "hello world"
    assert data["correlation_id"] == "abc"
    assert data["matches"] == 3
    assert "lineno" not in data


def test_correlation_filter_reads_context():
    token = observability.correlation_id_ctx.set("req-42")
    try:
        record = _record()
        assert observability.CorrelationIdFilter().filter(record)
    finally:
        observability.correlation_id_ctx.reset(token)
    assert record.correlation_id == "req-42"


def test_metrics_rendering():
    observability.inc_search()
    observability.inc_search()
    observability.inc_search_miss()
    body = observability.generate_metrics().decode()
    assert "# TYPE searches_total counter" in body
    assert "searches_total 2.0" in body
    assert "search_misses_total 1.0" in body
    assert "http_400_total 0.0" in body


def test_threshold_warning(monkeypatch, caplog):
    monkeypatch.setitem(observability.THRESHOLDS, "search_misses_total", 2)
    caplog.set_level(logging.WARNING, logger="sortedsearch.observability")
    observability.inc_search_miss()
    assert not caplog.records
    observability.inc_search_miss()
    assert "search_misses_total threshold 2 reached" in caplog.text


def test_configure_logging_sets_level(monkeypatch):
    root = logging.getLogger()
    previous_level, previous_handlers = root.level, root.handlers[:]
    monkeypatch.setenv("SORTEDSEARCH_LOG_LEVEL", "debug")
    try:
        observability.configure_logging()
        assert root.level == logging.DEBUG
        assert observability.handler in root.handlers
    finally:
        root.handlers[:] = previous_handlers
        root.setLevel(previous_level)


def test_http_400_threshold_warns_once(monkeypatch, caplog):
    monkeypatch.setitem(observability.THRESHOLDS, "http_400_total", 1)
    caplog.set_level(logging.WARNING, logger="sortedsearch.observability")
    observability.inc_http_400()
    observability.inc_http_400()
    warnings = [r for r in caplog.records if r.name == "sortedsearch.observability"]
    assert len(warnings) == 1
    assert warnings[0].getMessage() == "http_400_total threshold 1 reached"
    assert warnings[0].counter == "http_400_total"


def test_counter_is_exact_across_threads():
    counter = observability.Counter("test_total", "Test counter")

    def work():
        for _ in range(2000):
            counter.inc()

    threads = [threading.Thread(target=work) for _ in range(8)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()
    assert counter.value == 16000
