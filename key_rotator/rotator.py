"""
key_rotator.rotator
-------------------
IAM access key lifecycle for the CI/CD bot user.

The state lives entirely in IAM: each invocation lists the user's keys
and performs exactly one transition.

    0 or 1 keys               -> create a new key (returned)
    2 keys, oldest Active     -> deactivate the oldest
    2 keys, oldest Inactive   -> delete the oldest
    more than 2 keys          -> ConfigurationError
    unknown status on oldest  -> ConfigurationError

A new key always exists before an older one is deactivated or removed, so
consumers are never left without a valid credential. Concurrent runs for
the same user are not safe; the scheduler must not overlap invocations.
"""

from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import Any, List, Optional

from botocore.exceptions import BotoCoreError, ClientError

from .constants import MAX_ACCESS_KEYS
from .errors import ConfigurationError, ExternalServiceFailure
from .logger import get_logger
from .models import AccessKey, AccessKeyRecord, KeyStatus
from .settings import RotationSettings

log = get_logger("KeyRotator.AccessKeyRotator")


class RotationAction(str, Enum):
    CREATED = "created"
    DEACTIVATED = "deactivated"
    DELETED = "deleted"


@dataclass(frozen=True)
class RotationResult:
    action: RotationAction
    key_id: str
    new_key: Optional[AccessKey] = None


class AccessKeyRotator:
    def __init__(self, settings: RotationSettings, iam_client: Any = None):
        self.settings = settings
        self._iam = iam_client

    @property
    def iam(self):
        if self._iam is None:
            import boto3

            self._iam = boto3.client("iam")
        return self._iam

    def rotate_access_key(self) -> Optional[AccessKey]:
        """Run one rotation step. Returns the new key, or None if none was created."""
        return self.rotate().new_key

    def rotate(self) -> RotationResult:
        user_name = self.settings.iam_user_name
        access_keys = self.list_access_keys()

        log.info(f"Access keys count: {len(access_keys)} (user={user_name})")
        for key in access_keys:
            log.info(f"Key: {key.id} status={key.status} created={key.created_at.isoformat()}")

        if len(access_keys) > MAX_ACCESS_KEYS:
            raise ConfigurationError(
                f"Too many keys: {len(access_keys)} found for {user_name}, "
                f"rotation supports at most {MAX_ACCESS_KEYS}"
            )

        if len(access_keys) < MAX_ACCESS_KEYS:
            new_key = self._call("create_access_key", UserName=user_name)
            access_key = AccessKey.from_iam(new_key["AccessKey"])
            log.info(f"New key created: {access_key.id}")
            result = RotationResult(RotationAction.CREATED, access_key.id, access_key)
        else:
            oldest = access_keys[-1]
            log.info(f"Oldest key: {oldest.id}")

            if oldest.is_active:
                self._call(
                    "update_access_key",
                    UserName=user_name,
                    AccessKeyId=oldest.id,
                    Status=KeyStatus.INACTIVE.value,
                )
                log.info(f"Key deactivated: {oldest.id}")
                result = RotationResult(RotationAction.DEACTIVATED, oldest.id)
            elif oldest.is_inactive:
                self._call("delete_access_key", UserName=user_name, AccessKeyId=oldest.id)
                log.info(f"Key deleted: {oldest.id}")
                result = RotationResult(RotationAction.DELETED, oldest.id)
            else:
                raise ConfigurationError(f"Unknown key status {oldest.status!r} on key {oldest.id}")

        log.info(f"Key rotation completed: action={result.action.value}")
        return result

    def list_access_keys(self) -> List[AccessKeyRecord]:
        """Keys of the configured user, newest first."""
        records: List[AccessKeyRecord] = []
        paginator = self.iam.get_paginator("list_access_keys")
        try:
            for page in paginator.paginate(UserName=self.settings.iam_user_name):
                records.extend(AccessKeyRecord.from_iam(m) for m in page.get("AccessKeyMetadata", []))
        except (ClientError, BotoCoreError) as exc:
            raise ExternalServiceFailure(f"iam list_access_keys failed: {exc}", service="iam") from exc
        records.sort(key=lambda r: r.created_at, reverse=True)
        return records

    def _call(self, operation: str, **kwargs) -> dict:
        try:
            return getattr(self.iam, operation)(**kwargs)
        except (ClientError, BotoCoreError) as exc:
            raise ExternalServiceFailure(f"iam {operation} failed: {exc}", service="iam") from exc
