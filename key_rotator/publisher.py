# key_rotator/publisher.py
from __future__ import annotations
from typing import List, Optional

from .constants import ACCESS_KEY_ID_SECRET_NAME, SECRET_ACCESS_KEY_SECRET_NAME
from .github import CredentialAuthProvider, RepositoryLocator, SecretPublisher
from .logger import get_logger
from .models import AccessKey, Repository
from .settings import RotationSettings

log = get_logger("KeyRotator.CredentialsPublisher")


class CredentialsPublisher:
    """
    Pushes a new access key to every target repository environment.

    Repositories are processed one after another. The first failure is
    raised; repositories already updated keep the new key.
    """

    def __init__(
        self,
        settings: RotationSettings,
        locator: Optional[RepositoryLocator] = None,
        secrets: Optional[SecretPublisher] = None,
        auth: Optional[CredentialAuthProvider] = None,
    ):
        self.settings = settings
        self.auth = auth
        self._locator = locator
        self._secrets = secrets

    def _components(self):
        # GitHub client is only built (and the token read) once publishing starts
        if self._locator is None or self._secrets is None:
            if self.auth is None:
                self.auth = CredentialAuthProvider(self.settings)
            client = self.auth.get_authorized_client()
            self._locator = self._locator or RepositoryLocator(self.settings, client)
            self._secrets = self._secrets or SecretPublisher(client)
        return self._locator, self._secrets

    def close(self) -> None:
        if self.auth is not None:
            self.auth.close()

    def publish_access_key(self, access_key: AccessKey) -> List[Repository]:
        locator, _ = self._components()
        repositories = locator.get_target_repositories()
        published: List[Repository] = []

        for repository in repositories:
            log.info(f"Publishing key {access_key.id} to repository {repository.name}")
            try:
                self._publish_to(repository, access_key)
            except Exception:
                log.error(
                    f"Publishing key {access_key.id} to repository {repository.name} failed "
                    f"after {len(published)}/{len(repositories)} repositories"
                )
                raise
            published.append(repository)
            log.info(f"Key {access_key.id} published to repository {repository.name}")

        log.info(f"Key {access_key.id} published to {len(published)} repositories")
        return published

    def _publish_to(self, repository: Repository, access_key: AccessKey) -> None:
        for secret_name, secret_value in (
            (ACCESS_KEY_ID_SECRET_NAME, access_key.id),
            (SECRET_ACCESS_KEY_SECRET_NAME, access_key.secret),
        ):
            self._secrets.create_or_update_environment_secret(
                self.settings.organization_name,
                repository.id,
                self.settings.environment,
                secret_name,
                secret_value,
            )
