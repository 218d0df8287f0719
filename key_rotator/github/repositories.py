# key_rotator/github/repositories.py
from __future__ import annotations
from typing import List
from urllib.parse import quote

from key_rotator.constants import REPOSITORY_PAGE_SIZE
from key_rotator.errors import ExternalServiceFailure
from key_rotator.logger import get_logger
from key_rotator.models import Repository
from key_rotator.settings import RotationSettings
from key_rotator.transport import BaseTransport

log = get_logger("KeyRotator.GitHub.Repositories")


class RepositoryLocator:
    """Finds the repositories that deploy to the rotation environment."""

    def __init__(self, settings: RotationSettings, client: BaseTransport, page_size: int = REPOSITORY_PAGE_SIZE):
        self.settings = settings
        self.client = client
        self.page_size = page_size

    def get_target_repositories(self) -> List[Repository]:
        organization = self.settings.organization_name
        environment = self.settings.environment

        repositories = self.get_organization_repositories(organization)
        if self.settings.repository_names:
            allowed = set(self.settings.repository_names)
            repositories = [r for r in repositories if r.name in allowed]
            log.info(f"Repository filter {sorted(allowed)} left {len(repositories)} candidates")

        targets = [
            r for r in repositories
            if self.has_environment(organization, r.name, environment)
        ]

        log.info(
            f"Found {len(targets)} target repositories in organization {organization} "
            f"for environment {environment}: {[r.name for r in targets]}"
        )
        return targets

    def get_organization_repositories(self, organization: str) -> List[Repository]:
        """
        Page through /orgs/{org}/repos until a short or empty page.

        https://docs.github.com/en/rest/repos/repos?apiVersion=2022-11-28#list-organization-repositories
        """
        repositories: List[Repository] = []
        page = 1
        while True:
            uri = f"/orgs/{quote(organization)}/repos?per_page={self.page_size}&page={page}"
            response = self.client.get(uri)
            if not response.ok:
                raise ExternalServiceFailure(
                    f"Failed to fetch repositories :: {response.text}",
                    service="github",
                    status_code=response.status_code,
                    body=response.text,
                )

            batch = response.json() or []
            repositories.extend(Repository.from_dict(item) for item in batch)
            if len(batch) < self.page_size:
                break
            page += 1

        log.info(f"Organization {organization} has {len(repositories)} repositories ({page} pages)")
        return repositories

    def has_environment(self, organization: str, repository: str, environment: str) -> bool:
        """
        Check GET /repos/{org}/{repo}/environments/{env}. 404 means the
        repository does not deploy there; any other failure is raised so a
        rate-limited or unauthorized check never drops a repository.
        """
        uri = f"/repos/{quote(organization)}/{quote(repository)}/environments/{quote(environment)}"
        response = self.client.get(uri)
        if response.ok:
            return True
        if response.status_code == 404:
            log.debug(f"Repository {repository} has no environment {environment}")
            return False
        raise ExternalServiceFailure(
            f"Environment check {uri} failed :: {response.status_code} {response.text}",
            service="github",
            status_code=response.status_code,
            body=response.text,
        )
