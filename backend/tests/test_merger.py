"""Tests for merging advisor recommendations into extended reports."""
import asyncio

import pytest

from conftest import build_report
from securescan.advisor.merger import FALLBACK_STEPS, merge_recommendations
from securescan.core.config import DEFAULT_REMEDIATION_LINK
from securescan.core.errors import AdvisorMalformed, AdvisorUnavailable
from securescan.models.schemas import ExtendedReport, Recommendation
from securescan.probes.simulated import SimulatedProbe


class FakeAdvisor:
    def __init__(self, recommendations=(), error=None, delay=0.0):
        self.recommendations = list(recommendations)
        self.error = error
        self.delay = delay
        self.calls = []

    async def recommend(self, url, score, findings):
        self.calls.append((url, score, [f.id for f in findings]))
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error is not None:
            raise self.error
        return self.recommendations


def _rec(finding_id, *steps, link=None):
    return Recommendation(finding_id=finding_id, steps=steps or ("Fix it",), remediation_link=link)


@pytest.mark.asyncio
class TestMergeRecommendations:
    async def test_advisor_down_falls_back_for_every_failure(self, scenario_a_report):
        advisor = FakeAdvisor(error=AdvisorUnavailable("timeout"))

        extended = await merge_recommendations(scenario_a_report, advisor)

        assert isinstance(extended, ExtendedReport)
        assert len(extended.recommendations) == 1
        rec = extended.recommendations[0]
        assert rec.finding_id == "https-missing"
        assert rec.steps == FALLBACK_STEPS
        assert len(rec.steps) == 3
        assert rec.remediation_link == DEFAULT_REMEDIATION_LINK

    async def test_unexpected_exception_is_absorbed(self, scenario_a_report):
        advisor = FakeAdvisor(error=RuntimeError("boom"))
        extended = await merge_recommendations(scenario_a_report, advisor)
        assert extended.recommendations[0].steps == FALLBACK_STEPS

    async def test_malformed_response_is_absorbed(self, scenario_c_report):
        advisor = FakeAdvisor(error=AdvisorMalformed("not json"))
        extended = await merge_recommendations(scenario_c_report, advisor)
        assert len(extended.recommendations) == 5
        assert all(r.steps == FALLBACK_STEPS for r in extended.recommendations)

    async def test_slow_advisor_times_out_into_fallback(self, scenario_a_report):
        advisor = FakeAdvisor(recommendations=[_rec("https-missing", "Too late")], delay=1.0)
        extended = await merge_recommendations(scenario_a_report, advisor, timeout=0.01)
        assert extended.recommendations[0].steps == FALLBACK_STEPS

    async def test_submits_only_failed_findings(self, scenario_c_report):
        advisor = FakeAdvisor()
        await merge_recommendations(scenario_c_report, advisor)

        url, score, ids = advisor.calls[0]
        assert (url, score) == ("https://example.com", 60)
        assert "https-ok" not in ids
        assert len(ids) == 5

    async def test_partial_coverage_is_filled_and_unknown_ids_ignored(self, scenario_c_report):
        advisor = FakeAdvisor(recommendations=[
            _rec("ghost-finding", "Should not appear"),
            _rec("port-3306", "Block 3306 at the firewall", link="https://example.org/fw"),
            _rec("port-3306", "Second answer loses"),
        ])

        extended = await merge_recommendations(scenario_c_report, advisor)

        ids = [r.finding_id for r in extended.recommendations]
        assert ids == [f.id for f in scenario_c_report.failed_findings]
        assert "ghost-finding" not in ids
        port = extended.recommendation_for("port-3306")
        assert port.steps == ("Block 3306 at the firewall",)
        assert port.remediation_link == "https://example.org/fw"
        assert extended.recommendation_for("tech-outdated").steps == FALLBACK_STEPS

    async def test_advisor_link_is_optional(self, scenario_a_report):
        advisor = FakeAdvisor(recommendations=[_rec("https-missing", "Enable TLS")])
        extended = await merge_recommendations(scenario_a_report, advisor)
        assert extended.recommendations[0].remediation_link is None

    async def test_nothing_failed_skips_advisor(self, clean_observation):
        report = build_report("https://example.com", clean_observation)
        advisor = FakeAdvisor()

        extended = await merge_recommendations(report, advisor)

        assert extended.recommendations == ()
        assert advisor.calls == []

    async def test_custom_fallback_link(self, scenario_a_report):
        extended = await merge_recommendations(
            scenario_a_report, FakeAdvisor(error=AdvisorUnavailable("down")),
            fallback_link="https://cheatsheetseries.owasp.org/",
        )
        assert extended.recommendations[0].remediation_link == "https://cheatsheetseries.owasp.org/"

    async def test_base_report_carried_over_unchanged(self, scenario_c_report):
        extended = await merge_recommendations(scenario_c_report, FakeAdvisor())

        assert extended.url == scenario_c_report.url
        assert extended.timestamp == scenario_c_report.timestamp
        assert extended.findings == scenario_c_report.findings
        assert extended.risk_level is scenario_c_report.risk_level
        assert extended.https_status == scenario_c_report.https_status

    async def test_every_failure_covered_for_simulated_scans(self):
        probe = SimulatedProbe(seed=11)
        for url in ["https://a.example", "http://b.example"] * 10:
            report = build_report(url, await probe.observe(url))
            extended = await merge_recommendations(report, FakeAdvisor(error=AdvisorUnavailable("x")))
            covered = {r.finding_id for r in extended.recommendations}
            assert covered == {f.id for f in report.failed_findings}

    async def test_remerge_supersedes_previous_recommendations(self, scenario_a_report):
        first = await merge_recommendations(scenario_a_report, FakeAdvisor(error=AdvisorUnavailable("down")))
        second = await merge_recommendations(first, FakeAdvisor(recommendations=[_rec("https-missing", "Enable TLS")]))

        assert len(second.recommendations) == 1
        assert second.recommendations[0].steps == ("Enable TLS",)
