"""Rate budget monitor publishing the remaining GitHub quota as a gauge."""
from __future__ import annotations

import logging
from typing import Optional

from prometheus_client import Gauge

from common.metrics import rate_limit_gauge
from repository.github import HostingAPI
from versioning.errors import BudgetCheckError

logger = logging.getLogger(__name__)

LOW_BUDGET_THRESHOLD = 100


class RateBudgetMonitor:
    """Reads the remaining request quota and overwrites the gauge with it."""

    def __init__(self, api: HostingAPI, gauge: Optional[Gauge] = None):
        self.api = api
        self.gauge = gauge if gauge is not None else rate_limit_gauge()

    def check_budget(self) -> int:
        """Return the remaining core quota after publishing it.

        Raises:
            BudgetCheckError: when the quota could not be read
        """
        try:
            status = self.api.rate_limits()
        except Exception as exc:  # pylint: disable=broad-exception-caught
            raise BudgetCheckError(f"unable to read rate limit status: {exc}") from exc

        logger.debug("rate limit remaining=%d limit=%d", status.remaining, status.limit)
        self.gauge.set(float(status.remaining))

        if status.remaining < LOW_BUDGET_THRESHOLD:
            logger.warning(
                "GitHub API rate limit low: %d/%d remaining, resets in %d minutes",
                status.remaining, status.limit, status.minutes_until_reset,
            )
        return status.remaining
