"""
Bot-risk heuristic for tracked accounts.

An approximate gate, not a classifier: penalties for youth, lopsided
follower/following ratios and tiny audiences are summed and capped at 1.
"""

from datetime import datetime
from typing import Optional

from credrank.engine.models import TrackedAccount
from credrank.engine.utils.config import MIN_ACCOUNT_AGE_DAYS
from credrank.engine.utils.date_utils import ensure_utc, utc_now

YOUNG_ACCOUNT_PENALTY = 0.3
UNKNOWN_AGE_PENALTY = 0.2
NO_FOLLOWERS_PENALTY = 0.3
VERY_LOW_RATIO_PENALTY = 0.4
LOW_RATIO_PENALTY = 0.2
FEW_FOLLOWERS_PENALTY = 0.2

VERY_LOW_RATIO = 0.1
LOW_RATIO = 0.5
FEW_FOLLOWERS_MAX = 10

SECONDS_PER_DAY = 24 * 60 * 60


def calculate_bot_risk(
    followers_count: int,
    following_count: int,
    account_created_at: Optional[datetime],
    now: Optional[datetime] = None,
    min_account_age_days: int = MIN_ACCOUNT_AGE_DAYS
) -> float:
    """
    Score how likely an account is to be inauthentic.

    Args:
        followers_count: Accounts following this one
        following_count: Accounts this one follows
        account_created_at: Creation time, None when unknown
        now: Reference time for the age check (defaults to current UTC time)
        min_account_age_days: Accounts younger than this are penalized

    Returns:
        float in [0, 1], higher is riskier

    Examples:
        Created 10 days ago, 5 followers, following 200:
        0.3 (age) + 0.4 (ratio < 0.1) + 0.2 (fewer than 10 followers) = 0.9
    """
    followers = max(0, int(followers_count or 0))
    following = max(0, int(following_count or 0))
    risk = 0.0

    # Missing creation date is itself a risk signal
    if account_created_at is None:
        risk += UNKNOWN_AGE_PENALTY
    else:
        reference = ensure_utc(now) if now is not None else utc_now()
        age_days = (reference - ensure_utc(account_created_at)).total_seconds() / SECONDS_PER_DAY
        if age_days < min_account_age_days:
            risk += YOUNG_ACCOUNT_PENALTY

    # No followers and a ratio penalty are mutually exclusive
    if followers == 0:
        risk += NO_FOLLOWERS_PENALTY
    elif following > 0:
        ratio = followers / following
        if ratio < VERY_LOW_RATIO:
            risk += VERY_LOW_RATIO_PENALTY
        elif ratio < LOW_RATIO:
            risk += LOW_RATIO_PENALTY

    if 0 < followers < FEW_FOLLOWERS_MAX:
        risk += FEW_FOLLOWERS_PENALTY

    return min(1.0, round(risk, 6))


def bot_risk_for_account(
    account: TrackedAccount,
    now: Optional[datetime] = None,
    min_account_age_days: int = MIN_ACCOUNT_AGE_DAYS
) -> float:
    """calculate_bot_risk over a TrackedAccount row."""
    return calculate_bot_risk(
        account.followers_count,
        account.following_count,
        account.account_created_at,
        now=now,
        min_account_age_days=min_account_age_days,
    )
