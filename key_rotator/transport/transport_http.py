# key_rotator/transport/transport_http.py
from __future__ import annotations
from typing import Optional
import requests

from key_rotator.constants import (
    DEFAULT_TIMEOUT_SECONDS,
    GITHUB_ACCEPT,
    GITHUB_API_URL,
    GITHUB_API_VERSION,
    USER_AGENT,
)
from key_rotator.errors import ExternalServiceFailure
from key_rotator.logger import get_logger
from key_rotator.transport.transport_base import BaseTransport, Headers, TransportResponse

log = get_logger("KeyRotator.Transport.HTTP")


class GitHubHTTPTransport(BaseTransport):
    """
    GitHub REST transport over a single requests.Session.

    Default headers (accept, API version pin, user agent, bearer token) are
    set once on the session and reused for every call of the invocation.
    """
    name = "github-http"

    def __init__(
        self,
        token: str,
        base_url: str = GITHUB_API_URL,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        session: Optional[requests.Session] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers.update({
            "Accept": GITHUB_ACCEPT,
            "X-GitHub-Api-Version": GITHUB_API_VERSION,
            "User-Agent": USER_AGENT,
            "Authorization": f"Bearer {token}",
        })

    def request(
        self,
        method: str,
        path: str,
        payload: Optional[dict] = None,
        headers: Optional[Headers] = None,
    ) -> TransportResponse:
        url = f"{self.base_url}/{path.lstrip('/')}"
        log.debug(f"[GITHUB] {method} {url}")
        try:
            res = self.session.request(
                method,
                url,
                json=payload,
                headers=headers,
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            raise ExternalServiceFailure(f"{method} {path} failed: {e}", service="github") from e

        log.debug(f"[GITHUB] {method} {url} -> {res.status_code} {res.reason}")
        return TransportResponse(status_code=res.status_code, text=res.text or "", reason=res.reason or "")

    def close(self) -> None:
        self.session.close()
