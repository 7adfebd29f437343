"""
SSL check
TLS handshake against the site's host, followed by an HTTP HEAD request.
"""

from seatfinder.modules.functions.schemas import SslCheckResult
from datetime import datetime, timezone
from typing import Callable, Optional, Tuple
import asyncio
import socket
import ssl
import httpx
import logging

logger = logging.getLogger(__name__)

DEFAULT_PORT = 443

# (negotiated protocol, issuer organisation) for a host and port
Handshake = Callable[[str, int, float], Tuple[Optional[str], Optional[str]]]


def tls_handshake(hostname: str, port: int, timeout: float) -> Tuple[Optional[str], Optional[str]]:
    context = ssl.create_default_context()
    with socket.create_connection((hostname, port), timeout=timeout) as sock:
        with context.wrap_socket(sock, server_hostname=hostname) as ssock:
            return ssock.version(), issuer_organization(ssock.getpeercert())


def issuer_organization(cert: Optional[dict]) -> Optional[str]:
    if not cert:
        return None
    for rdn in cert.get("issuer", ()):
        for key, value in rdn:
            if key == "organizationName":
                return value
    return None


def guess_issuer(hostname: str) -> str:
    if "supabase" in hostname or "lovable" in hostname:
        return "Let's Encrypt"
    if "cloudflare" in hostname:
        return "Cloudflare Inc"
    return "Let's Encrypt / Cloudflare"


def protocol_label(version: Optional[str]) -> Optional[str]:
    """Turn "TLSv1.3" into "TLS 1.3"."""
    if not version:
        return None
    if version.startswith("TLSv"):
        return f"TLS {version[4:]}"
    return version


class SslChecker:
    def __init__(
        self,
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        handshake: Optional[Handshake] = None,
    ):
        self.timeout = timeout
        self.transport = transport
        self.handshake = handshake or tls_handshake

    async def _head(self, url: str) -> httpx.Response:
        async with httpx.AsyncClient(
            transport=self.transport,
            timeout=self.timeout,
            follow_redirects=False,
        ) as client:
            return await client.head(url)

    async def check(self, url: str) -> SslCheckResult:
        parsed = httpx.URL(url)
        hostname = parsed.host
        if not hostname:
            raise ValueError(f"Invalid URL: {url}")
        port = parsed.port or DEFAULT_PORT

        valid = False
        issuer = "Unknown"
        protocol = None
        error = None

        try:
            version, organization = await asyncio.to_thread(self.handshake, hostname, port, self.timeout)
            valid = True
            protocol = protocol_label(version)
            issuer = organization or guess_issuer(hostname)
            response = await self._head(url)
            if response.status_code >= 400:
                logger.info(f"HEAD {url} returned {response.status_code}")
        except (OSError, httpx.HTTPError) as e:
            # ssl.SSLError is an OSError
            error = str(e) or e.__class__.__name__
            logger.warning(f"SSL check for {hostname} failed: {error}")
            try:
                response = await self._head(url)
                valid = response.status_code < 400
                issuer = "Certificate Authority"
            except httpx.HTTPError:
                valid = False

        return SslCheckResult(
            valid=valid,
            hostname=hostname,
            issuer=issuer,
            protocol=protocol,
            checked_at=datetime.now(timezone.utc).isoformat(),
            error=error,
        )
