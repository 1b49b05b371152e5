"""Tests for feed configuration, required fields and filtering."""

import pytest

from abuseio_collectors.collectors.feeds import FeedConfig, apply_filters, has_required_fields


def make_feed(**overrides) -> FeedConfig:
    data = {"enabled": True, "fields": ["ip", "type"], "filters": ["internal_note"]}
    data.update(overrides)
    return FeedConfig.from_mapping("default", data)


class WarningRecorder:
    """Collects warnings the way a collector's warn() would."""

    def __init__(self):
        self.messages = []

    def __call__(self, message):
        self.messages.append(message)


class TestFeedConfig:
    """Tests for FeedConfig.from_mapping."""

    def test_defaults_when_missing(self):
        feed = FeedConfig.from_mapping("spam", None)
        assert feed.enabled is False
        assert feed.required_fields == ()
        assert feed.filter_fields == frozenset()

    def test_enabled_must_be_true(self):
        assert FeedConfig.from_mapping("spam", {"enabled": "yes"}).enabled is False
        assert FeedConfig.from_mapping("spam", {"enabled": True}).enabled is True

    def test_blank_field_names_dropped(self):
        feed = FeedConfig.from_mapping("spam", {"fields": ["ip", "", None, "  ", "type"]})
        assert feed.required_fields == ("ip", "type")

    def test_non_list_fields_ignored(self):
        feed = FeedConfig.from_mapping("spam", {"fields": "ip", "filters": 3})
        assert feed.required_fields == ()
        assert feed.filter_fields == frozenset()


class TestHasRequiredFields:
    """Tests for has_required_fields."""

    def setup_method(self):
        self.warn = WarningRecorder()

    def test_all_present(self):
        record = {"ip": "1.2.3.4", "type": "spam"}
        assert has_required_fields(make_feed(), record, self.warn) is True
        assert self.warn.messages == []

    def test_missing_field_warns_once(self):
        record = {"ip": "1.2.3.4"}
        assert has_required_fields(make_feed(), record, self.warn, "Test") is False
        assert len(self.warn.messages) == 1
        assert "type" in self.warn.messages[0]
        assert "'default'" in self.warn.messages[0]

    def test_short_circuits_on_first_missing(self):
        assert has_required_fields(make_feed(), {}, self.warn) is False
        assert len(self.warn.messages) == 1
        assert "ip" in self.warn.messages[0]

    def test_none_value_counts_as_missing(self):
        assert has_required_fields(make_feed(), {"ip": "1.2.3.4", "type": None}, self.warn) is False

    def test_empty_string_counts_as_present(self):
        assert has_required_fields(make_feed(), {"ip": "1.2.3.4", "type": ""}, self.warn) is True

    def test_no_required_fields(self):
        assert has_required_fields(make_feed(fields=[]), {}, self.warn) is True


class TestApplyFilters:
    """Tests for apply_filters."""

    def test_scenario_filter_and_empty_removal(self):
        record = {"ip": "1.2.3.4", "type": "spam", "internal_note": "x", "extra": ""}
        assert apply_filters(make_feed(), record) == {"ip": "1.2.3.4", "type": "spam"}

    def test_keep_empty_fields(self):
        record = {"ip": "1.2.3.4", "internal_note": "x", "extra": ""}
        assert apply_filters(make_feed(), record, remove_empty=False) == {"ip": "1.2.3.4", "extra": ""}

    def test_does_not_modify_input(self):
        record = {"ip": "1.2.3.4", "internal_note": "x"}
        apply_filters(make_feed(), record)
        assert record == {"ip": "1.2.3.4", "internal_note": "x"}

    def test_idempotent(self):
        feed = make_feed(filters=["a", "b"])
        record = {"a": "1", "b": "", "c": "3", "d": "", "e": None}
        once = apply_filters(feed, record)
        assert apply_filters(feed, once) == once

    @pytest.mark.parametrize("filters", [["a", "b"], ["b", "a"], ["b", "a", "a"]])
    def test_filter_order_irrelevant(self, filters):
        feed = make_feed(filters=filters)
        assert apply_filters(feed, {"a": "1", "b": "2", "c": "3"}) == {"c": "3"}
