"""
Shared pytest fixtures: probe observations for the reference scenarios and a fixed clock.
"""
from datetime import datetime, timezone

import pytest

from securescan.checks.headers import REFERENCE_HEADERS
from securescan.core.engine import assemble_report, generate_findings
from securescan.core.scoring import score_findings
from securescan.models.schemas import ProbeObservation, Technology
from securescan.probes.simulated import StaticProbe

FIXED_NOW = datetime(2026, 1, 15, 12, 0, tzinfo=timezone.utc)


def all_headers(present: bool):
    return {h: present for h in REFERENCE_HEADERS}


def build_report(url: str, observation: ProbeObservation, now=FIXED_NOW):
    scan = generate_findings(url, observation)
    score, _ = score_findings(scan.findings, scan.open_ports, scan.tech_stack,
                              scan.https_status.enabled)
    return assemble_report(url, scan, score, now=now)


@pytest.fixture
def fixed_now():
    return FIXED_NOW


@pytest.fixture
def clean_observation():
    """All headers present, no extra ports, nothing outdated."""
    return ProbeObservation(headers=all_headers(True), technologies=(Technology(name="Nginx"),))


@pytest.fixture
def bare_observation():
    """All reference headers missing, only 80/443 open."""
    return ProbeObservation(headers=all_headers(False), technologies=(Technology(name="Nginx"),))


@pytest.fixture
def exposed_observation():
    """Headers missing, MySQL exposed, outdated PHP."""
    return ProbeObservation(
        headers=all_headers(False),
        open_ports=(3306,),
        technologies=(Technology(name="Nginx"), Technology(name="PHP 7.4", outdated=True)),
    )


@pytest.fixture
def scenario_a_report(clean_observation):
    return build_report("http://example.com", clean_observation)


@pytest.fixture
def scenario_c_report(exposed_observation):
    return build_report("https://example.com", exposed_observation)


@pytest.fixture
def static_probe(clean_observation):
    return StaticProbe(clean_observation)
