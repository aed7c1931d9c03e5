import logging
from typing import Union

from fastapi import APIRouter, Depends, HTTPException, Response

from securescan.advisor.llm import OpenAIAdvisor, RemediationAdvisor
from securescan.advisor.merger import merge_recommendations
from securescan.core.config import Settings, get_settings
from securescan.core.engine import run_scan
from securescan.core.errors import InvalidTarget, ProbeUnavailable, RenderFailure
from securescan.models.schemas import ExtendedReport, Report, ScanRequest, UpgradeRequest
from securescan.probes.base import ProbeProvider
from securescan.probes.factory import build_probe
from securescan.reporting.pdf import render_report

logger = logging.getLogger(__name__)

router = APIRouter(tags=["reports"])


def get_probe(settings: Settings = Depends(get_settings)) -> ProbeProvider:
    return build_probe(settings)


def get_advisor(settings: Settings = Depends(get_settings)) -> RemediationAdvisor:
    return OpenAIAdvisor.from_settings(settings)


@router.post("/scan", response_model=Report)
async def start_scan(req: ScanRequest, probe: ProbeProvider = Depends(get_probe)):
    try:
        return await run_scan(req.url, probe)
    except InvalidTarget as e:
        raise HTTPException(status_code=422, detail=str(e))
    except ProbeUnavailable as e:
        logger.error("scan of %s failed: %s", req.url, e)
        raise HTTPException(status_code=503, detail="Scan failed: the probe service is unavailable. Please retry.")


@router.post("/reports/upgrade", response_model=ExtendedReport)
async def upgrade_report(body: UpgradeRequest,
                         advisor: RemediationAdvisor = Depends(get_advisor),
                         settings: Settings = Depends(get_settings)):
    """Attach remediation steps to a report. Never fails because of the advisor."""
    if not body.unlocked:
        raise HTTPException(status_code=402, detail="Detailed recommendations require an upgrade")
    return await merge_recommendations(
        body.report, advisor,
        timeout=settings.advisor_timeout,
        fallback_link=settings.fallback_link,
    )


@router.post("/reports/pdf")
def download_report(report: Union[ExtendedReport, Report]):
    try:
        document = render_report(report)
    except RenderFailure as e:
        logger.exception("rendering report for %s failed", report.url)
        raise HTTPException(status_code=500, detail=f"Could not render report: {e}")
    return Response(
        content=document.content,
        media_type=document.media_type,
        headers={"Content-Disposition": f'attachment; filename="{document.filename}"'},
    )
