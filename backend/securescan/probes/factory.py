from securescan.core.config import Settings
from securescan.probes.base import ProbeProvider
from securescan.probes.remote import RemoteProbe
from securescan.probes.simulated import SimulatedProbe


def build_probe(settings: Settings) -> ProbeProvider:
    if settings.probe_url:
        return RemoteProbe(settings.probe_url, timeout=settings.probe_timeout)
    return SimulatedProbe(seed=settings.probe_seed)
