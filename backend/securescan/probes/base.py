from typing import Protocol, runtime_checkable

from securescan.models.schemas import ProbeObservation


@runtime_checkable
class ProbeProvider(Protocol):
    """Looks at a normalized URL and reports transport, headers, ports and technologies.

    Implementations raise ``ProbeUnavailable`` when they cannot observe the target.
    """

    async def observe(self, url: str) -> ProbeObservation:
        ...
