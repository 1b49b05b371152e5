"""Tests for RunResult."""

from abuseio_collectors.collectors.result import SUCCESS_MESSAGE, RunResult


class TestRunResult:
    """Tests for the terminal run outcome."""

    def test_failure_has_no_data(self):
        result = RunResult.failure("boom", warning_count=2)
        assert result.error_status is True
        assert result.error_message == "boom"
        assert result.warning_count == 2
        assert result.data is False
        assert result.records == []

    def test_success_carries_records(self):
        records = [{"ip": "1.2.3.4"}]
        result = RunResult.success(records, warning_count=1)
        assert result.error_status is False
        assert result.error_message == SUCCESS_MESSAGE
        assert result.data == records
        assert result.warning_count == 1

    def test_success_copies_record_list(self):
        records = [{"ip": "1.2.3.4"}]
        result = RunResult.success(records)
        records.append({"ip": "5.6.7.8"})
        assert len(result.data) == 1

    def test_empty_success(self):
        result = RunResult.success([])
        assert result.error_status is False
        assert result.data == []

    def test_to_dict_wire_keys(self):
        d = RunResult.success([{"ip": "1.2.3.4"}], warning_count=3).to_dict()
        assert d == {
            "errorStatus": False,
            "errorMessage": SUCCESS_MESSAGE,
            "warningCount": 3,
            "data": [{"ip": "1.2.3.4"}],
        }

    def test_to_dict_failure(self):
        d = RunResult.failure("Unable to create directory").to_dict()
        assert d["errorStatus"] is True
        assert d["data"] is False
