"""
CI/CD Key Rotator
=================
Rotates the access key of a CI/CD bot IAM user on a schedule and pushes the
fresh key into GitHub environment secrets of every repository that deploys
to the rotation environment.

Provides:
- Access key lifecycle state machine (create -> deactivate -> delete)
- Repository discovery with environment probing
- Sealed-box encryption and upsert of environment secrets
"""

from .errors import ConfigurationError, ExternalServiceFailure, KeyRotatorError
from .models import AccessKey, AccessKeyRecord, KeyStatus, Repository
from .settings import RotationSettings, resolve_settings

__all__ = [
    "AccessKey",
    "AccessKeyRecord",
    "ConfigurationError",
    "ExternalServiceFailure",
    "KeyRotatorError",
    "KeyStatus",
    "Repository",
    "RotationSettings",
    "resolve_settings",
]
