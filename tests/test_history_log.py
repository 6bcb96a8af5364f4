from history_log import HistoryLog, format_entry, split_entry


class TestHistoryLog:

    def test_newest_first(self):
        log = HistoryLog()
        log.append("1 + 1 = 2")
        log.append("2 + 2 = 4")
        assert log.entries == ["2 + 2 = 4", "1 + 1 = 2"]

    def test_capacity_evicts_oldest(self):
        log = HistoryLog()
        for i in range(51):
            log.append(f"{i} + 0 = {i}")

        assert len(log) == 50
        assert log.entries[0] == "50 + 0 = 50"
        assert "0 + 0 = 0" not in log.entries

    def test_custom_capacity(self):
        log = HistoryLog(capacity=2)
        for entry in ("a = 1", "b = 2", "c = 3"):
            log.append(entry)
        assert log.entries == ["c = 3", "b = 2"]

    def test_clear(self):
        log = HistoryLog()
        log.append("1 + 1 = 2")
        log.clear()
        assert log.entries == []

    def test_entries_is_a_snapshot(self):
        log = HistoryLog()
        snapshot = log.entries
        log.append("1 + 1 = 2")
        assert snapshot == []


class TestEntries:

    def test_format_entry(self):
        assert format_entry("5 + 3", "8") == "5 + 3 = 8"

    def test_split_uses_last_separator(self):
        assert split_entry("a = b = 20") == ("a = b", "20")

    def test_split_without_separator(self):
        assert split_entry("garbage") is None
