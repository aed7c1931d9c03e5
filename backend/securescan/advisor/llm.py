import json
import logging
from typing import Any, List, Optional, Protocol, Sequence

from openai import AsyncOpenAI, OpenAIError
from pydantic import ValidationError

from securescan.core.config import Settings
from securescan.core.errors import AdvisorMalformed, AdvisorUnavailable
from securescan.models.schemas import Finding, Recommendation

logger = logging.getLogger(__name__)


class RemediationAdvisor(Protocol):
    async def recommend(self, url: str, score: int,
                        findings: Sequence[Finding]) -> List[Recommendation]:
        ...


SYSTEM_PROMPT = """You are a friendly, expert *cybersecurity advisor* for website owners.
Constraints:
- Only give *defensive* guidance. Do not provide exploit instructions.
- The audience is non-technical: plain language, short imperative steps.
- Tone: helpful, reassuring and professional.
- Answer with JSON only, in exactly this shape:
  {"recommendations": [{"findingId": "<id from input>", "steps": ["..."], "remediationLink": "<url>"}]}
- Return one entry per finding id you were given, and no others.
"""


def _user_prompt(url: str, score: int, findings: Sequence[Finding]) -> str:
    issues = [f.model_dump(by_alias=True) for f in findings]
    return (
        f"I have performed a security scan on {url} with a score of {score}/100.\n"
        f"The following issues were found: {json.dumps(issues)}\n\n"
        "Please provide clear, step-by-step fix recommendations for each failed issue."
    )


def parse_recommendations(raw: Optional[str]) -> List[Recommendation]:
    """Validate the advisor's JSON at the boundary.

    A broken envelope raises ``AdvisorMalformed``; individual bad entries are dropped.
    """
    try:
        data: Any = json.loads(raw or "")
    except ValueError as e:
        raise AdvisorMalformed(f"Advisor response is not JSON: {e}") from e

    if isinstance(data, dict):
        data = data.get("recommendations")
    if not isinstance(data, list):
        raise AdvisorMalformed("Advisor response has no recommendations list")

    recs = []
    for entry in data:
        try:
            recs.append(Recommendation.model_validate(entry))
        except ValidationError as e:
            logger.warning("dropping malformed advisor entry %r: %s", entry, e.errors()[:1])
    return recs


class OpenAIAdvisor:
    """Asks an OpenAI chat model for structured remediation steps. One attempt, no retries."""

    def __init__(self, api_key: Optional[str], model: str = "gpt-4o-mini",
                 timeout: float = 20.0, client: Optional[AsyncOpenAI] = None):
        self.model = model
        self._client = client
        if self._client is None and api_key:
            self._client = AsyncOpenAI(api_key=api_key, timeout=timeout, max_retries=0)

    @classmethod
    def from_settings(cls, settings: Settings) -> "OpenAIAdvisor":
        return cls(settings.openai_api_key, settings.advisor_model, settings.advisor_timeout)

    async def recommend(self, url: str, score: int,
                        findings: Sequence[Finding]) -> List[Recommendation]:
        if self._client is None:
            raise AdvisorUnavailable("OPENAI_API_KEY not set")
        try:
            resp = await self._client.chat.completions.create(
                model=self.model,
                messages=[
                    {"role": "system", "content": SYSTEM_PROMPT},
                    {"role": "user", "content": _user_prompt(url, score, findings)},
                ],
                response_format={"type": "json_object"},
                temperature=0.3,
            )
        except OpenAIError as e:
            raise AdvisorUnavailable(f"OpenAI error: {e}") from e

        if not resp.choices:
            raise AdvisorMalformed("Advisor returned no choices")
        return parse_recommendations(resp.choices[0].message.content)
