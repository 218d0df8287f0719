# key_rotator/github/auth.py
from __future__ import annotations
from typing import Any, Callable, Optional
import json, os

from botocore.exceptions import BotoCoreError, ClientError

from key_rotator.constants import DEFAULT_TIMEOUT_SECONDS, GITHUB_TOKEN_FIELD, SECRET_VERSION_STAGE
from key_rotator.errors import ConfigurationError, ExternalServiceFailure
from key_rotator.logger import get_logger
from key_rotator.settings import RotationSettings
from key_rotator.transport import BaseTransport, GitHubHTTPTransport

log = get_logger("KeyRotator.GitHub.Auth")


class CredentialAuthProvider:
    """
    Resolves the GitHub bot token from AWS Secrets Manager and hands out a
    single authorized transport for the whole invocation.

    The token is fetched at most once and never refreshed mid-invocation.
    """

    def __init__(
        self,
        settings: RotationSettings,
        secrets_client: Any = None,
        transport_factory: Optional[Callable[[str], BaseTransport]] = None,
    ):
        self.settings = settings
        self._secrets = secrets_client
        self._transport_factory = transport_factory or _default_transport
        self._transport: Optional[BaseTransport] = None

    @property
    def secrets(self):
        if self._secrets is None:
            import boto3

            self._secrets = boto3.client("secretsmanager", region_name=self.settings.secret_region or None)
        return self._secrets

    def get_authorized_client(self) -> BaseTransport:
        if self._transport is None:
            self._transport = self._transport_factory(self.get_access_token())
        return self._transport

    def get_access_token(self) -> str:
        log.info("Retrieving GitHub access token from AWS Secrets Manager")
        try:
            response = self.secrets.get_secret_value(
                SecretId=self.settings.secret_name,
                VersionStage=SECRET_VERSION_STAGE,
            )
        except (ClientError, BotoCoreError) as exc:
            raise ExternalServiceFailure(
                f"Failed to read secret {self.settings.secret_name}: {exc}", service="secretsmanager"
            ) from exc

        try:
            secret_object = json.loads(response.get("SecretString") or "")
        except json.JSONDecodeError as exc:
            raise ConfigurationError(f"Secret {self.settings.secret_name} is not a JSON object") from exc

        token = secret_object.get(GITHUB_TOKEN_FIELD) if isinstance(secret_object, dict) else None
        if not token:
            raise ConfigurationError(
                f"Secret {self.settings.secret_name} has no {GITHUB_TOKEN_FIELD} field"
            )
        return token

    def close(self) -> None:
        if self._transport is not None:
            self._transport.close()
            self._transport = None


def _default_transport(token: str) -> BaseTransport:
    timeout = float(os.getenv("GITHUB_API_TIMEOUT", DEFAULT_TIMEOUT_SECONDS))
    return GitHubHTTPTransport(token, timeout=timeout)
