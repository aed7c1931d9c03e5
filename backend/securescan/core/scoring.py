from typing import Iterable, Sequence, Tuple

from securescan.models.schemas import OUTDATED_SUFFIX, Finding, RiskLevel

SAFE_PORTS = frozenset({80, 443})

TRANSPORT_PENALTY = 30
MISSING_HEADER_PENALTY = 5
RISKY_PORT_PENALTY = 15
OUTDATED_TECH_PENALTY = 10

HIGH_RISK_BELOW = 50
MEDIUM_RISK_BELOW = 80


def clamp_score(score: int) -> int:
    return max(0, min(100, score))


def risk_level_for(score: int) -> RiskLevel:
    score = clamp_score(score)
    if score < HIGH_RISK_BELOW:
        return RiskLevel.HIGH
    if score < MEDIUM_RISK_BELOW:
        return RiskLevel.MEDIUM
    return RiskLevel.LOW


def score_findings(
    findings: Sequence[Finding],
    open_ports: Iterable[int],
    tech_stack: Iterable[str],
    https_enabled: bool,
    base_score: int = 100,
) -> Tuple[int, RiskLevel]:
    """Deduct per finding from ``base_score`` and map the clamped result to a risk tier.

    Deductions are independent of order: transport once, each missing header,
    each open port outside 80/443, and outdated technology once.
    """
    score = base_score
    if not https_enabled:
        score -= TRANSPORT_PENALTY

    missing_headers = sum(1 for f in findings if f.category == "Headers" and f.status == "Fail")
    score -= missing_headers * MISSING_HEADER_PENALTY

    risky_ports = {p for p in open_ports if p not in SAFE_PORTS}
    score -= len(risky_ports) * RISKY_PORT_PENALTY

    outdated = any(f.category == "Technology" and f.status == "Fail" for f in findings) or any(
        label.endswith(OUTDATED_SUFFIX) for label in tech_stack
    )
    if outdated:
        score -= OUTDATED_TECH_PENALTY

    score = clamp_score(score)
    return score, risk_level_for(score)
