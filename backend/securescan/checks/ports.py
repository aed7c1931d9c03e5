from typing import List, Tuple

from securescan.core.scoring import SAFE_PORTS
from securescan.models.schemas import Finding, ProbeObservation

BASE_OPEN_PORTS = (80, 443)

KNOWN_SERVICES = {
    21: "FTP",
    22: "SSH",
    23: "Telnet",
    25: "SMTP",
    3306: "MySQL",
    3389: "RDP",
    5432: "PostgreSQL",
    6379: "Redis",
    27017: "MongoDB",
}


def open_ports_from(observation: ProbeObservation) -> Tuple[int, ...]:
    return tuple(sorted(set(BASE_OPEN_PORTS) | set(observation.open_ports)))


class OpenPortsCheck:
    key = "port"
    title = "Open Ports"

    def run(self, url: str, observation: ProbeObservation) -> List[Finding]:
        findings = []
        for port in open_ports_from(observation):
            if port in SAFE_PORTS:
                continue
            service = KNOWN_SERVICES.get(port)
            exposed = f"Port {port} ({service})" if service else f"Port {port}"
            findings.append(Finding(
                id=f"{self.key}-{port}",
                category="Ports",
                title=f"Open Port Detected: {port}",
                description=f"{exposed} is open and accessible from the public internet.",
                impact="Critical",
                status="Fail",
            ))
        return findings
