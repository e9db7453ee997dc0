"""Gang financial bookkeeping.

``update_gang_financials`` is the only code path that writes a gang's
credits, rating and wealth after creation. Callers describe a mutation as
three deltas:

- ``rating_delta``: value entering or leaving fighters that count toward rating
- ``credits_delta``: credits spent or received
- ``stash_value_delta``: value entering or leaving the stash or unassigned vehicles

Wealth moves by the sum of all three. The caller owns the transaction;
nothing here commits.
"""

import logging
from dataclasses import dataclass

from sqlalchemy import select
from sqlalchemy.orm import Session

from mundamanager.cache import TagCache
from mundamanager.cache.invalidation import invalidate_gang_credits, invalidate_gang_rating
from mundamanager.domain.costs import calculate_gang_rating, calculate_gang_wealth
from mundamanager.domain.valuation import FinancialDelta
from mundamanager.exceptions import NotFoundError
from mundamanager.models import Gang

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class GangFinancials:
    """Snapshot of a gang's money columns."""

    credits: int
    rating: int
    wealth: int

    @classmethod
    def of(cls, gang: Gang) -> "GangFinancials":
        return cls(credits=gang.credits, rating=gang.rating, wealth=gang.wealth)


@dataclass(frozen=True, slots=True)
class FinancialUpdateResult:
    """Outcome of a financial update. Both snapshots are None for a no-op."""

    old_values: GangFinancials | None = None
    new_values: GangFinancials | None = None

    @property
    def changed(self) -> bool:
        return self.new_values is not None


def _lock_gang(session: Session, gang_id: int) -> Gang:
    gang = session.execute(
        select(Gang).where(Gang.id == gang_id).with_for_update()
    ).scalar_one_or_none()
    if gang is None:
        raise NotFoundError(f"Gang {gang_id} not found")
    return gang


def update_gang_financials(
    session: Session,
    cache: TagCache,
    gang_id: int,
    *,
    rating_delta: int = 0,
    credits_delta: int = 0,
    stash_value_delta: int = 0,
    apply_to_rating: bool = True,
) -> FinancialUpdateResult:
    """Apply rating, credits and stash-value deltas to a gang.

    Args:
        session: Database session (the caller commits)
        cache: Tag cache to evict rating and credits tags from
        gang_id: Gang to update
        rating_delta: Change to the rating
        credits_delta: Change to unspent credits
        stash_value_delta: Change to value held outside the rating
        apply_to_rating: When False the rating delta is ignored entirely

    Returns:
        FinancialUpdateResult with old and new credits, rating and wealth

    Note:
        Every resulting value is clamped at zero. Callers that must refuse
        overspending check credits before calling.
    """
    effective_rating_delta = rating_delta if apply_to_rating else 0
    if effective_rating_delta == 0 and credits_delta == 0 and stash_value_delta == 0:
        logger.debug("gang %s financial update skipped: all deltas zero", gang_id)
        return FinancialUpdateResult()

    gang = _lock_gang(session, gang_id)
    old_values = GangFinancials.of(gang)

    wealth_delta = effective_rating_delta + credits_delta + stash_value_delta
    gang.credits = max(0, gang.credits + credits_delta)
    gang.rating = max(0, gang.rating + effective_rating_delta)
    gang.wealth = max(0, gang.wealth + wealth_delta)
    session.flush()

    new_values = GangFinancials.of(gang)
    logger.info(
        "gang %s financials: credits %s->%s rating %s->%s wealth %s->%s",
        gang_id,
        old_values.credits,
        new_values.credits,
        old_values.rating,
        new_values.rating,
        old_values.wealth,
        new_values.wealth,
    )

    invalidate_gang_rating(cache, gang_id)
    if credits_delta:
        invalidate_gang_credits(cache, gang_id)
    return FinancialUpdateResult(old_values=old_values, new_values=new_values)


def update_gang_rating(
    session: Session, cache: TagCache, gang_id: int, rating_delta: int
) -> FinancialUpdateResult:
    """Shortcut for a rating-only change."""
    return update_gang_financials(session, cache, gang_id, rating_delta=rating_delta)


def apply_financial_delta(
    session: Session, cache: TagCache, gang_id: int, delta: FinancialDelta
) -> FinancialUpdateResult:
    """Apply a :class:`FinancialDelta` built up by a service."""
    return update_gang_financials(
        session,
        cache,
        gang_id,
        rating_delta=delta.rating,
        credits_delta=delta.credits,
        stash_value_delta=delta.stash_value,
    )


@dataclass(frozen=True, slots=True)
class RecalculationResult:
    """Stored versus recomputed financials for a gang."""

    stored: GangFinancials
    recalculated: GangFinancials

    @property
    def rating_drift(self) -> int:
        return self.stored.rating - self.recalculated.rating

    @property
    def wealth_drift(self) -> int:
        return self.stored.wealth - self.recalculated.wealth


def recalculate_gang_financials(
    session: Session, cache: TagCache, gang_id: int, *, persist: bool = True
) -> RecalculationResult:
    """Rebuild rating and wealth from the gang's rows.

    Args:
        session: Database session (the caller commits)
        cache: Tag cache
        gang_id: Gang to rebuild
        persist: Write the rebuilt values back to the gang

    Returns:
        RecalculationResult with the stored and recomputed snapshots
    """
    gang = _lock_gang(session, gang_id)
    stored = GangFinancials.of(gang)
    rating = calculate_gang_rating(gang)
    recalculated = GangFinancials(
        credits=gang.credits, rating=rating, wealth=calculate_gang_wealth(gang, rating)
    )
    result = RecalculationResult(stored=stored, recalculated=recalculated)

    if result.rating_drift or result.wealth_drift:
        logger.warning(
            "gang %s financial drift: rating %+d wealth %+d",
            gang_id,
            result.rating_drift,
            result.wealth_drift,
        )
        if persist:
            gang.rating = recalculated.rating
            gang.wealth = recalculated.wealth
            session.flush()
            invalidate_gang_rating(cache, gang_id)
    return result
