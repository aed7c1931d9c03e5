from typing import List, Tuple

from securescan.models.schemas import Finding, ProbeObservation


def tech_stack_from(observation: ProbeObservation) -> Tuple[str, ...]:
    labels = []
    for tech in observation.technologies:
        if tech.label not in labels:
            labels.append(tech.label)
    return tuple(labels)


class TechnologyCheck:
    key = "tech"
    title = "Technology Versions"

    def run(self, url: str, observation: ProbeObservation) -> List[Finding]:
        outdated = [t.name for t in observation.technologies if t.outdated]
        if not outdated:
            return []
        return [Finding(
            id=f"{self.key}-outdated",
            category="Technology",
            title="Outdated Technology Detected",
            description="Publicly exposed version information shows you are running outdated software: "
                        + ", ".join(outdated) + ".",
            impact="Warning",
            status="Fail",
        )]
