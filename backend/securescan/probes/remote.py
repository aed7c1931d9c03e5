import logging
from typing import Optional

import httpx
from pydantic import ValidationError

from securescan.core.errors import ProbeUnavailable
from securescan.core.http import client_for
from securescan.models.schemas import ProbeObservation

logger = logging.getLogger(__name__)


class RemoteProbe:
    """Delegates observation to an external probe service over HTTP. Single attempt."""

    def __init__(self, base_url: str, timeout: Optional[float] = None,
                 transport: Optional[httpx.AsyncBaseTransport] = None):
        self.endpoint = base_url.rstrip("/") + "/observe"
        self.timeout = timeout
        self._transport = transport

    async def observe(self, url: str) -> ProbeObservation:
        try:
            async with client_for(self.timeout, transport=self._transport) as client:
                resp = await client.post(self.endpoint, json={"url": url})
                resp.raise_for_status()
                payload = resp.json()
        except httpx.HTTPError as e:
            logger.warning("probe service %s failed for %s: %r", self.endpoint, url, e)
            raise ProbeUnavailable(f"Probe service unreachable: {e}") from e
        except ValueError as e:
            raise ProbeUnavailable("Probe service returned a non-JSON body") from e

        try:
            return ProbeObservation.model_validate(payload)
        except ValidationError as e:
            raise ProbeUnavailable(f"Probe service returned an invalid observation: {e}") from e
