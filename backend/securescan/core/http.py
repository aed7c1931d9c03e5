from contextlib import asynccontextmanager
from typing import Optional

import httpx

DEFAULT_UA = "SecureScan/1.0 (+https://securescan.local)"

TIMEOUT = httpx.Timeout(30.0, connect=5.0)
HEADERS = {"User-Agent": DEFAULT_UA, "Accept": "application/json"}


@asynccontextmanager
async def client_for(timeout: Optional[float] = None,
                     transport: Optional[httpx.AsyncBaseTransport] = None):
    async with httpx.AsyncClient(
        timeout=httpx.Timeout(timeout, connect=5.0) if timeout else TIMEOUT,
        headers=HEADERS,
        follow_redirects=True,
        http2=True,
        verify=True,
        transport=transport,
    ) as client:
        yield client
