# key_rotator/settings.py
from __future__ import annotations
from dataclasses import dataclass, field, replace
from typing import Any, Dict, Mapping, Optional, Tuple
import os

from .constants import DEFAULT_ORGANIZATION_NAME
from .errors import ConfigurationError
from .utils import parse_name_list


@dataclass(frozen=True)
class RotationSettings:
    """Immutable per-invocation configuration."""
    iam_user_name: str
    environment: str
    secret_name: str
    organization_name: str = DEFAULT_ORGANIZATION_NAME
    repository_names: Tuple[str, ...] = field(default_factory=tuple)
    secret_region: str = ""

    def validate(self) -> "RotationSettings":
        missing = [
            env_var
            for env_var, value in (
                ("CICD_BOT_IAM_USER_NAME", self.iam_user_name),
                ("ENVIRONMENT", self.environment),
                ("SECRET_NAME", self.secret_name),
                ("GITHUB_ORGANIZATION_NAME", self.organization_name),
            )
            if not value
        ]
        if missing:
            raise ConfigurationError(f"Missing required settings: {', '.join(missing)}")
        return self


# Invocation event keys that may override the environment
EVENT_OVERRIDES = {
    "Environment": "environment",
    "GitHubOrganizationName": "organization_name",
    "GitHubRepositoryNames": "repository_names",
}


def resolve_settings(
    environ: Optional[Mapping[str, str]] = None,
    event: Optional[Dict[str, Any]] = None,
) -> RotationSettings:
    """
    Build settings from process environment, then apply non-empty
    overrides from the invocation event.
    """
    environ = os.environ if environ is None else environ

    settings = RotationSettings(
        iam_user_name=environ.get("CICD_BOT_IAM_USER_NAME", "").strip(),
        environment=environ.get("ENVIRONMENT", "").strip(),
        secret_name=environ.get("SECRET_NAME", "").strip(),
        secret_region=environ.get("SECRET_REGION", "").strip(),
        organization_name=(
            environ.get("GITHUB_ORGANIZATION_NAME", "").strip() or DEFAULT_ORGANIZATION_NAME
        ),
        repository_names=parse_name_list(environ.get("GITHUB_REPOSITORY_NAMES")),
    )

    if isinstance(event, dict):
        overrides: Dict[str, Any] = {}
        for event_key, attr in EVENT_OVERRIDES.items():
            value = event.get(event_key)
            if not value:
                continue
            if attr == "repository_names":
                overrides[attr] = parse_name_list(value)
            else:
                overrides[attr] = str(value).strip()
        if overrides:
            settings = replace(settings, **overrides)

    return settings.validate()
