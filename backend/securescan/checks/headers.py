from typing import List

from securescan.models.schemas import Finding, ProbeObservation

REFERENCE_HEADERS = (
    "Content-Security-Policy",
    "X-Frame-Options",
    "Strict-Transport-Security",
)

# what each header protects against, shown in the finding description
_HEADER_PURPOSE = {
    "content-security-policy": "It limits where scripts and styles may load from, reducing XSS/injection risk.",
    "x-frame-options": "It stops other sites from framing your pages (clickjacking).",
    "strict-transport-security": "It tells browsers to always use HTTPS for your domain.",
}


def header_present(observation: ProbeObservation, header: str) -> bool:
    wanted = header.lower()
    return any(present for name, present in observation.headers.items() if name.lower() == wanted)


class SecurityHeadersCheck:
    key = "header"
    title = "Security Headers"

    def run(self, url: str, observation: ProbeObservation) -> List[Finding]:
        findings = []
        for header in REFERENCE_HEADERS:
            if header_present(observation, header):
                continue
            description = f"The security header {header} is missing from your server configuration."
            purpose = _HEADER_PURPOSE.get(header.lower())
            if purpose:
                description = f"{description} {purpose}"
            findings.append(Finding(
                id=f"{self.key}-{header.lower()}",
                category="Headers",
                title=f"Missing {header}",
                description=description,
                impact="Warning",
                status="Fail",
            ))
        return findings
