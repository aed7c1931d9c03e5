from typing import List
from urllib.parse import urlsplit

from securescan.models.schemas import Finding, HttpsStatus, ProbeObservation


def https_status_for(url: str, observation: ProbeObservation) -> HttpsStatus:
    """Transport facts for the report. ``enabled`` always follows the URL scheme."""
    enabled = urlsplit(url).scheme.lower() == "https"
    if observation.transport is None:
        return HttpsStatus(enabled=enabled, redirects=enabled, valid_cert=enabled)
    return HttpsStatus(
        enabled=enabled,
        redirects=observation.transport.redirects,
        valid_cert=observation.transport.valid_cert,
    )


class TransportCheck:
    key = "https"
    title = "HTTPS Encryption"

    def run(self, url: str, observation: ProbeObservation) -> List[Finding]:
        if https_status_for(url, observation).enabled:
            return [Finding(
                id=f"{self.key}-ok",
                category="Transport",
                title="HTTPS Enabled",
                description="Secure connection is active via SSL/TLS.",
                impact="Info",
                status="Pass",
            )]
        return [Finding(
            id=f"{self.key}-missing",
            category="Transport",
            title="Missing HTTPS Encryption",
            description="Your website is communicating over unencrypted HTTP, "
                        "making it vulnerable to data interception.",
            impact="Critical",
            status="Fail",
        )]
