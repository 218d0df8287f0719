# key_rotator/github/secrets.py
from __future__ import annotations
from urllib.parse import quote

from key_rotator.crypto import seal_secret
from key_rotator.errors import ExternalServiceFailure
from key_rotator.logger import get_logger
from key_rotator.models import PublicKeyPackage, SealedSecretPackage
from key_rotator.transport import BaseTransport

log = get_logger("KeyRotator.GitHub.Secrets")


class SecretPublisher:
    def __init__(self, client: BaseTransport):
        self.client = client

    def create_or_update_environment_secret(
        self,
        organization: str,
        repository_id: int,
        environment: str,
        secret_name: str,
        secret_value: str,
    ) -> None:
        """
        Seal `secret_value` with the environment's current public key and
        upsert it. The key is fetched on every call, each environment has
        its own keypair and GitHub may rotate it.
        """
        public_key = self.get_public_key(repository_id, environment)
        package = seal_secret(secret_value, public_key)
        self.put_environment_secret(repository_id, environment, secret_name, package)
        log.info(
            f"Secret {secret_name} published to repository {repository_id} "
            f"({organization}) environment {environment}"
        )

    def get_public_key(self, repository_id: int, environment: str) -> PublicKeyPackage:
        """
        https://docs.github.com/en/rest/actions/secrets?apiVersion=2022-11-28#get-an-environment-public-key
        """
        uri = f"/repositories/{repository_id}/environments/{quote(environment)}/secrets/public-key"
        response = self.client.get(uri)
        if not response.ok:
            raise ExternalServiceFailure(
                f"Failed to fetch public key :: {response.text}",
                service="github",
                status_code=response.status_code,
                body=response.text,
            )

        package = PublicKeyPackage.from_dict(response.json() or {})
        if not package.key_id or not package.key:
            raise ExternalServiceFailure(
                f"Failed to deserialize public key response: {response.text}",
                service="github",
                status_code=response.status_code,
                body=response.text,
            )
        return package

    def put_environment_secret(
        self,
        repository_id: int,
        environment: str,
        secret_name: str,
        package: SealedSecretPackage,
    ) -> None:
        """
        https://docs.github.com/en/rest/actions/secrets?apiVersion=2022-11-28#create-or-update-an-environment-secret
        """
        uri = f"/repositories/{repository_id}/environments/{quote(environment)}/secrets/{quote(secret_name)}"
        payload = package.to_dict()
        response = self.client.put(uri, payload)
        if not response.ok:
            log.error(f"URI: {uri}")
            log.error(f"Request body: {payload}")
            log.error(f"Response: {response.status_code} {response.reason} {response.text}")
            raise ExternalServiceFailure(
                f"Failed to create secret for {secret_name} in environment {environment}",
                service="github",
                status_code=response.status_code,
                body=response.text,
            )
