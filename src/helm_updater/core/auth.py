"""Attach registry credentials to outgoing repository requests."""

from __future__ import annotations

import base64
import logging
from collections.abc import Generator, Iterable

import httpx

from helm_updater.models import AuthType
from helm_updater.models.config import RegistryCredential

logger = logging.getLogger(__name__)


def _normalize(value: str) -> str:
    value = value.strip().lower()
    for scheme in ("oci://", "https://", "http://"):
        if value.startswith(scheme):
            value = value[len(scheme):]
            break
    return value.rstrip("/")


class AuthResolver(httpx.Auth):
    """Pick the first configured credential matching a request URL.

    Works as an ``httpx.Auth`` so every request made by the client,
    classic index or OCI tag listing, goes through the same lookup.
    """

    def __init__(self, credentials: Iterable[RegistryCredential] = ()):
        self.credentials = list(credentials)

    def find_credential(self, url: str | httpx.URL) -> RegistryCredential | None:
        target = httpx.URL(str(url)) if "://" in str(url) else httpx.URL(f"https://{url}")
        host = (target.host or "").lower()
        host_path = f"{host}{target.path}".rstrip("/")
        for cred in self.credentials:
            registry = _normalize(cred.registry)
            if not registry:
                continue
            if registry == host or registry in host or host_path.startswith(registry):
                return cred
        return None

    def authorization_header(self, url: str | httpx.URL) -> str | None:
        cred = self.find_credential(url)
        if cred is None:
            return None
        if cred.auth_type is AuthType.BEARER:
            return f"Bearer {cred.password}"
        token = base64.b64encode(f"{cred.username or ''}:{cred.password}".encode("utf-8")).decode("ascii")
        return f"Basic {token}"

    def auth_flow(self, request: httpx.Request) -> Generator[httpx.Request, httpx.Response, None]:
        header = self.authorization_header(request.url)
        if header:
            logger.debug("Using registry credentials for %s", request.url.host)
            request.headers["Authorization"] = header
        yield request
