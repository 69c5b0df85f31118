"""Tests for the random sampling protocol."""

import pytest
from survey.models import Probability
from survey.sampling import (
    SamplingTracker, SamplingRecord, Bucket, bucket_for, compute_compliance,
)


def record(tracker, high=0, medium=0, low=0, empty=0):
    for bucket, count in [("high", high), ("medium", medium), ("low", low), ("empty", empty)]:
        for _ in range(count):
            tracker.record_observation(bucket)
    return tracker.record


class TestCompliance:
    """Tests for the compliance ratio."""

    def test_no_observations(self):
        assert SamplingRecord().compliance == 100.0
        assert not SamplingRecord().bias_warning

    def test_target_ratio_is_fully_compliant(self):
        rec = record(SamplingTracker(), high=10, medium=2, low=1, empty=1)
        assert rec.compliance == pytest.approx(100.0)
        assert rec.status == "Good"
        assert not rec.bias_warning

    def test_only_high_sites_triggers_bias(self):
        rec = record(SamplingTracker(), high=20)
        assert rec.compliance == 0
        assert rec.status == "Poor"
        assert rec.bias_warning

    def test_few_high_sites_do_not_trigger_bias(self):
        rec = record(SamplingTracker(), high=5)
        assert rec.compliance == 0
        assert not rec.bias_warning

    def test_compliance_capped(self):
        assert compute_compliance(2, 10, 10, 10) == 100.0

    def test_partial_compliance(self):
        # 20 high requires 8 others; 6 taken
        assert compute_compliance(20, 3, 2, 1) == pytest.approx(75.0)
        assert compute_compliance(20, 2, 2, 1) == pytest.approx(62.5)


class TestSamplingTracker:
    """Tests for recording and recommendations."""

    def test_counts_and_total(self):
        rec = record(SamplingTracker(), high=3, medium=2, empty=1)
        assert (rec.high, rec.medium, rec.low, rec.empty, rec.total) == (3, 2, 0, 1, 6)

    def test_accepts_enum(self):
        tracker = SamplingTracker()
        tracker.record_observation(Bucket.LOW)
        assert tracker.record.low == 1

    def test_unknown_bucket_raises(self):
        with pytest.raises(ValueError):
            SamplingTracker().record_observation("very_high")

    def test_records_are_replaced(self):
        tracker = SamplingTracker()
        before = tracker.record
        tracker.record_observation("high")
        assert before.high == 0
        assert tracker.record.high == 1

    def test_recommend_splits_deficit(self):
        tracker = SamplingTracker()
        record(tracker, high=20)
        # expected 8 others: 4 medium, 2 low, 2 empty
        assert tracker.recommend() == {"medium": 4, "low": 2, "empty": 2}

    def test_recommend_remainder_goes_to_empty(self):
        tracker = SamplingTracker()
        record(tracker, high=10, medium=1)
        # deficit 3: medium 3*2//4 = 1, low 3//4 = 0, empty 2
        assert tracker.recommend() == {"medium": 1, "low": 0, "empty": 2}

    def test_recommend_nothing_when_on_target(self):
        tracker = SamplingTracker()
        record(tracker, high=9)
        assert tracker.recommend() == {"medium": 0, "low": 0, "empty": 0}

    def test_reset(self):
        tracker = SamplingTracker()
        record(tracker, high=3)
        tracker.reset()
        assert tracker.record.total == 0

    def test_to_dict(self):
        data = record(SamplingTracker(), high=20).to_dict()
        assert data["bias_warning"] is True
        assert data["total"] == 20


def test_bucket_for_probability():
    assert bucket_for(Probability.HIGH) == Bucket.HIGH
    assert bucket_for(Probability.MEDIUM) == Bucket.MEDIUM
    assert bucket_for(Probability.LOW) == Bucket.LOW


def test_no_high_sites_is_compliant():
    assert compute_compliance(0, 3, 1, 1) == 100.0
    assert SamplingRecord(medium=3, total=3).status == "Good"
