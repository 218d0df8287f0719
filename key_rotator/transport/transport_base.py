from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Dict, Optional
import json

Headers = Dict[str, str]


@dataclass
class TransportResponse:
    status_code: int
    text: str = ""
    reason: str = ""

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 300

    def json(self) -> Any:
        return json.loads(self.text) if self.text else None


class BaseTransport:
    """
    Contract for "perform an HTTP request against the platform API".

    `path` is relative to the API base address. Implementations return a
    TransportResponse for every HTTP status and raise only when no
    response could be obtained at all.
    """
    name: str = "base"

    def request(
        self,
        method: str,
        path: str,
        payload: Optional[dict] = None,
        headers: Optional[Headers] = None,
    ) -> TransportResponse:
        raise NotImplementedError

    def get(self, path: str, headers: Optional[Headers] = None) -> TransportResponse:
        return self.request("GET", path, headers=headers)

    def put(self, path: str, payload: dict, headers: Optional[Headers] = None) -> TransportResponse:
        return self.request("PUT", path, payload=payload, headers=headers)

    def close(self) -> None:
        return
