"""Job aggregator producing the final field report."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from ..errors import PreconditionViolation
from .models import FieldReport

if TYPE_CHECKING:
    from ..categories import JobState
    from ..inference import InferenceGateway

logger = logging.getLogger(__name__)


class JobAggregator:
    """Combines every category of a finished job into one FieldReport."""

    def __init__(self, gateway: InferenceGateway) -> None:
        """Initialize aggregator.

        Args:
            gateway: Inference gateway used for report generation.
        """
        self._gateway = gateway

    async def finish(self, job_state: JobState) -> FieldReport:
        """Generate the report for a job whose required categories are complete.

        Args:
            job_state: Job to aggregate. It is not modified.

        Returns:
            The generated FieldReport.

        Raises:
            PreconditionViolation: If any required category is incomplete.
            InferenceError: If report generation fails.
        """
        incomplete = job_state.incomplete_required()
        if incomplete:
            raise PreconditionViolation(
                "Cannot finish job, incomplete sections: "
                + ", ".join(category_id.value for category_id in incomplete)
            )

        logger.info("Generating final field report")
        report = await self._gateway.aggregate(job_state.categories)
        logger.info(f"Field report generated at {report.generated_at.isoformat()}")
        return report


__all__ = ["JobAggregator"]
