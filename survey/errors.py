"""
Error types for the scoring engine.

Only profile lookups can fail hard. Everything else degrades to a warning
banner in the UI.
"""

from typing import Dict


class UnknownProfile(KeyError):
    """Requested weight profile is not registered."""

    def __init__(self, name: str, available=None):
        self.name = name
        self.available = list(available or [])
        super().__init__(name)

    def __str__(self) -> str:
        return f"Unknown scoring profile '{self.name}'. Available: {self.available}"


class InvalidWeightSum(Exception):
    """
    Custom profile weights do not add up to 1.0.

    Returned as a warning value by validate_weights(); scoring still proceeds
    with the unnormalized weights.
    """

    def __init__(self, total: float, weights: Dict[str, float]):
        self.total = total
        self.weights = dict(weights)
        super().__init__(f"Weights sum to {total:.2f}, expected 1.00")
