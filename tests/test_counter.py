"""Tests for labeled counters"""
import dataclasses
import pytest

from metrics.counter import LabeledCounter, RequestCounter
from metrics.exceptions import InvalidLabelError
from metrics.models import RequestLabels


class TestLabeledCounter:
    """Test counter increments and label validation"""

    def setup_method(self):
        """Setup test fixtures"""
        self.counter = LabeledCounter("jobs_total", "Jobs processed", ["queue", "result"])

    def test_counter_initialization(self):
        """Test declared name, help text and labels"""
        assert self.counter.name == "jobs_total"
        assert self.counter.help_text == "Jobs processed"
        assert self.counter.label_names == ("queue", "result")

    def test_increment_creates_tuple(self):
        """Test first increment creates the label tuple at one"""
        labels = {"queue": "default", "result": "ok"}
        assert self.counter.get(labels) is None

        self.counter.increment(labels)
        assert self.counter.get(labels) == 1

        self.counter.increment(labels, 2.5)
        assert self.counter.get(labels) == 3.5

    def test_get_does_not_create_tuple(self):
        """Test reading an unseen combination leaves it absent"""
        self.counter.get({"queue": "default", "result": "ok"})

        samples = [s for family in self.counter.collector.collect() for s in family.samples]
        assert samples == []

    def test_missing_label_rejected(self):
        """Test omitting a declared label fails"""
        with pytest.raises(InvalidLabelError) as exc_info:
            self.counter.increment({"queue": "default"})

        assert exc_info.value.metric_name == "jobs_total"
        assert set(exc_info.value.received) == {"queue"}

    def test_undeclared_label_rejected(self):
        """Test an extra label fails and nothing is counted"""
        with pytest.raises(InvalidLabelError):
            self.counter.increment({"queue": "default", "result": "ok", "host": "a"})

        assert self.counter.get({"queue": "default", "result": "ok"}) is None

    def test_negative_amount_rejected(self):
        """Test counters never decrease"""
        with pytest.raises(ValueError):
            self.counter.increment({"queue": "default", "result": "ok"}, -1)

    def test_label_values_stringified(self):
        """Test non-string label values are stored as strings"""
        self.counter.increment({"queue": "default", "result": 200})

        assert self.counter.get({"queue": "default", "result": "200"}) == 1

    def test_reset(self):
        """Test reset drops observed tuples"""
        labels = {"queue": "default", "result": "ok"}
        self.counter.increment(labels)
        self.counter.reset()

        assert self.counter.get(labels) is None

    def test_unlabeled_counter(self):
        """Test a counter without labels"""
        counter = LabeledCounter("restarts_total", "Restarts")
        counter.increment()
        counter.increment()

        assert counter.get() == 2

        with pytest.raises(InvalidLabelError):
            counter.increment({"reason": "oom"})


class TestRequestCounter:
    """Test the HTTP request counter"""

    def test_request_counter_shape(self):
        """Test name, help and label names"""
        counter = RequestCounter()

        assert counter.name == "http_requests_total"
        assert counter.help_text == "Total HTTP requests"
        assert counter.label_names == ("method", "status")

    def test_count_by_record(self):
        """Test counting with the label record"""
        counter = RequestCounter()
        ok = RequestLabels(method="GET", status="200")

        for _ in range(3):
            counter.count(ok)

        assert counter.value(ok) == 3
        assert counter.value(RequestLabels(method="GET", status="500")) is None
        assert counter.get({"method": "GET", "status": "200"}) == 3

    def test_labels_record_is_frozen(self):
        """Test label records cannot be mutated"""
        labels = RequestLabels(method="GET", status="200")

        with pytest.raises(dataclasses.FrozenInstanceError):
            labels.status = "500"
