from datetime import datetime
from enum import Enum
from typing import Dict, Literal, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, computed_field, field_validator
from pydantic.alias_generators import to_camel

Category = Literal["Transport", "Headers", "Technology", "Ports"]
Impact = Literal["Critical", "Warning", "Info"]
Status = Literal["Pass", "Fail"]

OUTDATED_SUFFIX = " (Outdated)"


class RiskLevel(str, Enum):
    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"


class _Frozen(BaseModel):
    # camelCase on the wire, snake_case in Python; both accepted on input
    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)


class Finding(_Frozen):
    id: str
    category: Category
    title: str
    description: str
    impact: Impact
    status: Status


class HttpsStatus(_Frozen):
    enabled: bool = False
    redirects: bool = False
    valid_cert: bool = False


class Technology(_Frozen):
    name: str
    outdated: bool = False

    @property
    def label(self) -> str:
        return self.name + OUTDATED_SUFFIX if self.outdated else self.name


class ProbeObservation(_Frozen):
    """What a probe provider saw for one normalized URL."""
    transport: Optional[HttpsStatus] = None
    headers: Dict[str, bool] = Field(default_factory=dict)
    open_ports: Tuple[int, ...] = ()
    technologies: Tuple[Technology, ...] = ()


class Report(_Frozen):
    url: str
    score: int = Field(ge=0, le=100)
    timestamp: datetime
    findings: Tuple[Finding, ...] = ()
    tech_stack: Tuple[str, ...] = ()
    open_ports: Tuple[int, ...] = ()
    https_status: HttpsStatus = Field(default_factory=HttpsStatus)

    @computed_field(alias="riskLevel")
    @property
    def risk_level(self) -> RiskLevel:
        from securescan.core.scoring import risk_level_for
        return risk_level_for(self.score)

    @property
    def failed_findings(self) -> Tuple[Finding, ...]:
        return tuple(f for f in self.findings if f.status == "Fail")


class Recommendation(_Frozen):
    finding_id: str = Field(min_length=1)
    steps: Tuple[str, ...] = Field(min_length=1)
    remediation_link: Optional[str] = None

    @field_validator("steps")
    @classmethod
    def _steps_not_blank(cls, steps: Tuple[str, ...]) -> Tuple[str, ...]:
        cleaned = tuple(s.strip() for s in steps)
        if any(not s for s in cleaned):
            raise ValueError("recommendation steps must not be blank")
        return cleaned

    @field_validator("remediation_link")
    @classmethod
    def _blank_link_is_none(cls, link: Optional[str]) -> Optional[str]:
        if link is None or not link.strip():
            return None
        return link.strip()


class ExtendedReport(Report):
    recommendations: Tuple[Recommendation, ...]

    def recommendation_for(self, finding_id: str) -> Optional[Recommendation]:
        for rec in self.recommendations:
            if rec.finding_id == finding_id:
                return rec
        return None


class ScanRequest(BaseModel):
    url: str = Field(min_length=1)


class UpgradeRequest(BaseModel):
    report: Report
    # set by the caller once payment cleared
    unlocked: bool = False
