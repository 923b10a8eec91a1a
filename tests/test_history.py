# Tests for assetsync.sync.history
# Bounded history log

import pytest

from assetsync.sync.history import HistoryEntry, HistoryLog, Severity


def _entry(n: int, severity: Severity = Severity.INFO) -> HistoryEntry:
    return HistoryEntry(message=f"message {n}", timestamp="2024-05-01 12:00:00", severity=severity)


class TestHistoryLog:
    """Tests for HistoryLog."""

    def test_append_keeps_order(self):
        log = HistoryLog()
        for n in range(3):
            log.append(_entry(n))
        assert [e.message for e in log] == ["message 0", "message 1", "message 2"]

    def test_evicts_oldest_past_limit(self):
        log = HistoryLog()
        for n in range(101):
            log.append(_entry(n))

        assert len(log) == 100
        assert log[0].message == "message 1"
        assert log[-1].message == "message 100"

    def test_custom_limit(self):
        log = HistoryLog(limit=2)
        for n in range(5):
            log.append(_entry(n))
        assert [e.message for e in log] == ["message 3", "message 4"]

    def test_invalid_limit(self):
        with pytest.raises(ValueError):
            HistoryLog(limit=0)

    def test_newest_first(self):
        log = HistoryLog()
        for n in range(3):
            log.append(_entry(n))
        assert [e.message for e in log.newest_first()] == ["message 2", "message 1", "message 0"]

    def test_clear(self):
        log = HistoryLog()
        log.append(_entry(1))
        log.clear()
        assert len(log) == 0

    def test_from_list_keeps_newest(self):
        data = [_entry(n).to_dict() for n in range(5)]
        log = HistoryLog.from_list(data, limit=3)
        assert [e.message for e in log] == ["message 2", "message 3", "message 4"]

    def test_from_list_none(self):
        assert len(HistoryLog.from_list(None)) == 0


class TestHistoryEntry:
    """Tests for HistoryEntry."""

    def test_round_trip_fields(self):
        entry = _entry(7, Severity.ERROR)
        data = entry.to_dict()
        assert data == {"message": "message 7", "timestamp": "2024-05-01 12:00:00", "severity": "error"}
        assert HistoryEntry.from_dict(data).is_error

    def test_unknown_severity_defaults_to_info(self):
        entry = HistoryEntry.from_dict({"message": "x", "timestamp": "t", "severity": "loud"})
        assert entry.severity == Severity.INFO

    def test_default_timestamp_format(self):
        entry = HistoryEntry(message="x")
        # YYYY-MM-DD HH:MM:SS
        assert len(entry.timestamp) == 19
        assert entry.timestamp[4] == "-" and entry.timestamp[10] == " "
