# key_rotator/transport/__init__.py
from key_rotator.transport.transport_base import BaseTransport, TransportResponse
from key_rotator.transport.transport_http import GitHubHTTPTransport

__all__ = ["BaseTransport", "TransportResponse", "GitHubHTTPTransport"]
