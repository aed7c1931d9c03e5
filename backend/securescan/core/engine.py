import logging
import re
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional, Tuple

from securescan.checks.headers import SecurityHeadersCheck
from securescan.checks.ports import OpenPortsCheck, open_ports_from
from securescan.checks.technology import TechnologyCheck, tech_stack_from
from securescan.checks.transport import TransportCheck, https_status_for
from securescan.core.errors import InvalidTarget
from securescan.core.scoring import score_findings
from securescan.models.schemas import Finding, HttpsStatus, ProbeObservation, Report
from securescan.probes.base import ProbeProvider

logger = logging.getLogger(__name__)

CHECKS = [
    TransportCheck(),
    SecurityHeadersCheck(),
    OpenPortsCheck(),
    TechnologyCheck(),
]

SCHEME_RE = re.compile(r"^[A-Za-z][A-Za-z0-9+.-]*://")


@dataclass(frozen=True)
class ScanFindings:
    findings: Tuple[Finding, ...]
    tech_stack: Tuple[str, ...]
    open_ports: Tuple[int, ...]
    https_status: HttpsStatus


def normalize_url(url: str) -> str:
    url = (url or "").strip()
    if not url:
        raise InvalidTarget("A target URL is required")
    if not SCHEME_RE.match(url):
        url = "https://" + url
    return url


def generate_findings(url: str, observation: ProbeObservation) -> ScanFindings:
    findings = []
    for check in CHECKS:
        findings.extend(check.run(url, observation))
    return ScanFindings(
        findings=tuple(findings),
        tech_stack=tech_stack_from(observation),
        open_ports=open_ports_from(observation),
        https_status=https_status_for(url, observation),
    )


def assemble_report(url: str, scan: ScanFindings, score: int,
                    now: Optional[datetime] = None) -> Report:
    return Report(
        url=url,
        score=score,
        timestamp=now or datetime.now(timezone.utc),
        findings=scan.findings,
        tech_stack=scan.tech_stack,
        open_ports=scan.open_ports,
        https_status=scan.https_status,
    )


async def run_scan(url: str, probe: ProbeProvider) -> Report:
    """Probe, generate findings, score and assemble. ``ProbeUnavailable`` propagates."""
    target = normalize_url(url)
    logger.info("scan started for %s", target)
    observation = await probe.observe(target)
    scan = generate_findings(target, observation)
    score, risk = score_findings(
        scan.findings, scan.open_ports, scan.tech_stack, scan.https_status.enabled,
    )
    report = assemble_report(target, scan, score)
    logger.info("scan finished for %s: score=%d risk=%s failed=%d",
                target, score, risk.value, len(report.failed_findings))
    return report
