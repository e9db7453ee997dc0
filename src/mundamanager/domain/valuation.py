"""Financial deltas produced by gang mutations.

Services describe every change as value entering or leaving a bucket; this
module turns those movements into the three deltas the financials update
understands.
"""

from __future__ import annotations

from dataclasses import dataclass

from mundamanager.domain.enums import ValueBucket


@dataclass(slots=True)
class FinancialDelta:
    """Pending change to a gang's rating, credits and non-rating wealth."""

    rating: int = 0
    credits: int = 0
    stash_value: int = 0

    def add(self, bucket: ValueBucket, amount: int) -> FinancialDelta:
        """Count ``amount`` credits of value entering ``bucket`` (negative to leave)."""

        if bucket is ValueBucket.RATING:
            self.rating += amount
        elif bucket in (ValueBucket.STASH, ValueBucket.UNASSIGNED_VEHICLE):
            self.stash_value += amount
        return self

    def move(self, source: ValueBucket, target: ValueBucket, amount: int) -> FinancialDelta:
        """Move ``amount`` of value from one bucket to another."""

        self.add(source, -amount)
        self.add(target, amount)
        return self

    @property
    def wealth(self) -> int:
        return self.rating + self.credits + self.stash_value

    def is_zero(self) -> bool:
        return self.rating == 0 and self.credits == 0 and self.stash_value == 0

    def __add__(self, other: FinancialDelta) -> FinancialDelta:
        return FinancialDelta(
            rating=self.rating + other.rating,
            credits=self.credits + other.credits,
            stash_value=self.stash_value + other.stash_value,
        )
