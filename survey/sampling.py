"""
Random Sampling Protocol - guards against selection bias.

For every 10 high-scoring sites a surveyor should also evaluate 2 medium,
1 low and 1 empty area. The tracker keeps running counts and reports how
close the observed ratio is to that target.
"""

import logging
from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import Dict, Any, Union
from enum import Enum

from survey.models import Probability

log = logging.getLogger(__name__)

TARGET_RATIO = {
    "high": 10,
    "medium": 2,
    "low": 1,
    "empty": 1,
}
OTHERS_TARGET = TARGET_RATIO["medium"] + TARGET_RATIO["low"] + TARGET_RATIO["empty"]
TARGET_RATIO_VALUE = TARGET_RATIO["high"] / OTHERS_TARGET  # 2.5

BIAS_COMPLIANCE_THRESHOLD = 70.0
BIAS_MIN_HIGH_SITES = 5


class Bucket(Enum):
    """Score bucket a sampled location falls into."""
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"
    EMPTY = "empty"


def bucket_for(probability: Probability) -> Bucket:
    """Map a site's probability label onto a sampling bucket."""
    return {
        Probability.HIGH: Bucket.HIGH,
        Probability.MEDIUM: Bucket.MEDIUM,
        Probability.LOW: Bucket.LOW,
    }[probability]


def compute_compliance(high: int, medium: int, low: int, empty: int) -> float:
    """
    Percent adherence to the 10:2:1:1 target, capped at 100.

    Measured as the share of the required non-high observations actually
    taken, so compliance drops as high-scoring sites outrun everything else.
    With no high-scoring sites there is nothing to balance, so it is 100.
    """
    if high == 0:
        return 100.0
    required_others = high / TARGET_RATIO_VALUE
    return min((medium + low + empty) / required_others, 1) * 100


@dataclass(frozen=True)
class SamplingRecord:
    """Running tally of sampled locations by bucket."""
    high: int = 0
    medium: int = 0
    low: int = 0
    empty: int = 0
    total: int = 0
    last_updated: str = field(default_factory=lambda: datetime.now().isoformat())

    @property
    def others(self) -> int:
        return self.medium + self.low + self.empty

    @property
    def compliance(self) -> float:
        return compute_compliance(self.high, self.medium, self.low, self.empty)

    @property
    def bias_warning(self) -> bool:
        """Both conditions required, so a handful of high sites never trips it."""
        return self.compliance < BIAS_COMPLIANCE_THRESHOLD and self.high > BIAS_MIN_HIGH_SITES

    @property
    def status(self) -> str:
        if self.compliance >= 80:
            return "Good"
        if self.compliance >= 60:
            return "Fair"
        return "Poor"

    def to_dict(self) -> Dict[str, Any]:
        return {
            'high': self.high,
            'medium': self.medium,
            'low': self.low,
            'empty': self.empty,
            'total': self.total,
            'compliance': self.compliance,
            'status': self.status,
            'bias_warning': self.bias_warning,
            'last_updated': self.last_updated,
        }


class SamplingTracker:
    """Records observations and recommends the next samples."""

    def __init__(self, record: SamplingRecord = None):
        self.record = record or SamplingRecord()

    def record_observation(self, bucket: Union[str, Bucket]) -> SamplingRecord:
        """
        Count one sampled location.

        Raises:
            ValueError: if bucket is not high/medium/low/empty
        """
        bucket = Bucket(bucket)
        name = bucket.value
        self.record = replace(
            self.record,
            **{name: getattr(self.record, name) + 1},
            total=self.record.total + 1,
            last_updated=datetime.now().isoformat(),
        )
        log.info(f"Recorded {name} observation; compliance now {self.record.compliance:.0f}%")
        if self.record.bias_warning:
            log.warning(
                f"Sampling bias: {self.record.high} high-scoring sites vs "
                f"{self.record.others} others ({self.record.compliance:.0f}% compliance)"
            )
        return self.record

    def recommend(self) -> Dict[str, int]:
        """How many more medium/low/empty locations to sample to restore the ratio."""
        rec = self.record
        expected = (rec.high // TARGET_RATIO["high"]) * OTHERS_TARGET
        if rec.others >= expected:
            return {"medium": 0, "low": 0, "empty": 0}

        deficit = expected - rec.others
        medium = deficit * TARGET_RATIO["medium"] // OTHERS_TARGET
        low = deficit * TARGET_RATIO["low"] // OTHERS_TARGET
        return {
            "medium": max(0, medium),
            "low": max(0, low),
            "empty": max(0, deficit - medium - low),
        }

    def reset(self):
        self.record = SamplingRecord()
