"""
AI usage summary shown in the avatar popup.

Sums the per-call token usage rows recorded for a user. This is a nice-to-have:
any failure returns zeros instead of raising.
"""

import logging
from typing import Optional

from apicius.models import UsageSummary
from apicius.providers.base import UsageSource

logger = logging.getLogger(__name__)


def get_usage(source: UsageSource, user_id: Optional[str]) -> UsageSummary:
    """
    Aggregate token usage for one user.

    Args:
        source: Where usage rows come from
        user_id: Signed-in user, or None

    Returns:
        UsageSummary with totals and the number of calls; all zeros when there
        is no user, no rows, or the source fails.
    """
    if not user_id:
        return UsageSummary()

    try:
        rows = source.usage_rows(user_id)
    except Exception as e:
        logger.warning("Failed to fetch usage data for user %s: %s", user_id, e)
        return UsageSummary()

    summary = UsageSummary()
    for row in rows:
        summary.prompt_tokens += row.get("prompt_tokens") or 0
        summary.completion_tokens += row.get("completion_tokens") or 0
        summary.total_tokens += row.get("total_tokens") or 0
        summary.total_calls += 1
    return summary
