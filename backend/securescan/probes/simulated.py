import random
from typing import Optional
from urllib.parse import urlsplit

from securescan.checks.headers import REFERENCE_HEADERS
from securescan.models.schemas import HttpsStatus, ProbeObservation, Technology


class SimulatedProbe:
    """Demo probe: random but seedable observations, no network traffic."""

    def __init__(self, seed: Optional[int] = None):
        self._rng = random.Random(seed)

    async def observe(self, url: str) -> ProbeObservation:
        rng = self._rng
        https = urlsplit(url).scheme.lower() == "https"

        headers = {h: rng.random() <= 0.5 for h in REFERENCE_HEADERS}

        ports = []
        if rng.random() > 0.7:
            ports.append(22)    # SSH exposed
        if rng.random() > 0.8:
            ports.append(3306)  # MySQL exposed

        tech = [Technology(name="Nginx")]
        if rng.random() > 0.5:
            tech.append(Technology(name="WordPress 6.4"))
        if rng.random() > 0.6:
            tech.append(Technology(name="PHP 7.4", outdated=True))

        return ProbeObservation(
            transport=HttpsStatus(enabled=https, redirects=https, valid_cert=https),
            headers=headers,
            open_ports=tuple(ports),
            technologies=tuple(tech),
        )


class StaticProbe:
    """Always answers with the same observation."""

    def __init__(self, observation: ProbeObservation):
        self.observation = observation

    async def observe(self, url: str) -> ProbeObservation:
        return self.observation
