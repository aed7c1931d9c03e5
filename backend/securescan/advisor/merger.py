import asyncio
import logging
from typing import Dict, Optional

from securescan.advisor.llm import RemediationAdvisor
from securescan.core.config import DEFAULT_REMEDIATION_LINK
from securescan.models.schemas import ExtendedReport, Recommendation, Report

logger = logging.getLogger(__name__)

FALLBACK_STEPS = (
    "Consult with your web developer or hosting provider.",
    "Update your server configuration according to industry best practices.",
    "Verify changes with another scan.",
)


def fallback_recommendation(finding_id: str,
                            link: str = DEFAULT_REMEDIATION_LINK) -> Recommendation:
    return Recommendation(finding_id=finding_id, steps=FALLBACK_STEPS, remediation_link=link)


async def merge_recommendations(report: Report, advisor: RemediationAdvisor, *,
                                timeout: Optional[float] = None,
                                fallback_link: str = DEFAULT_REMEDIATION_LINK) -> ExtendedReport:
    """Build an ExtendedReport with one recommendation per failed finding.

    The advisor is asked once. Whatever it fails to cover, or all of it if the
    call fails in any way, gets the generic fallback. Advisor errors never escape.
    """
    failed = report.failed_findings
    matched: Dict[str, Recommendation] = {}

    if failed:
        wanted = {f.id for f in failed}
        try:
            call = advisor.recommend(report.url, report.score, failed)
            returned = list(await (asyncio.wait_for(call, timeout) if timeout else call))
        except Exception as e:
            logger.warning("remediation advisor failed for %s, using fallback: %r", report.url, e)
            returned = []

        for rec in returned:
            if not isinstance(rec, Recommendation):
                continue
            if rec.finding_id in wanted and rec.finding_id not in matched:
                matched[rec.finding_id] = rec
        ignored = len(returned) - len(matched)
        if ignored:
            logger.info("ignored %d advisor entries for unknown or duplicate findings", ignored)

    recommendations = tuple(
        matched.get(f.id) or fallback_recommendation(f.id, fallback_link) for f in failed
    )
    base = dict(report)
    # a fresh merge supersedes any earlier recommendations
    base.pop("recommendations", None)
    return ExtendedReport(**base, recommendations=recommendations)
