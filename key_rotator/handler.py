"""
key_rotator.handler
-------------------
AWS Lambda entry point, triggered by a daily EventBridge schedule.

One invocation performs one rotation step and, only when a new key was
created, publishes it to the target repositories. Errors propagate to
the scheduler; the next scheduled run re-attempts.
"""

from __future__ import annotations
from typing import Any, Dict, Optional

from .logger import get_logger
from .publisher import CredentialsPublisher
from .rotator import AccessKeyRotator
from .settings import RotationSettings, resolve_settings

log = get_logger("KeyRotator.Handler")


def run_rotation(
    settings: RotationSettings,
    rotator: Optional[AccessKeyRotator] = None,
    publisher: Optional[CredentialsPublisher] = None,
) -> Dict[str, Any]:
    rotator = rotator or AccessKeyRotator(settings)
    result = rotator.rotate()

    summary: Dict[str, Any] = {
        "action": result.action.value,
        "key_id": result.key_id,
        "new_key_id": None,
        "published_repositories": [],
    }

    if result.new_key is not None:
        # No GitHub token is read on non-create steps
        publisher = publisher or CredentialsPublisher(settings)
        try:
            published = publisher.publish_access_key(result.new_key)
        finally:
            publisher.close()
        summary["new_key_id"] = result.new_key.id
        summary["published_repositories"] = [r.name for r in published]

    return summary


def lambda_handler(event: Optional[Dict[str, Any]], context: Any = None) -> Dict[str, Any]:
    try:
        settings = resolve_settings(event=event)
        log.info(
            f"Starting key rotation user={settings.iam_user_name} "
            f"environment={settings.environment} organization={settings.organization_name}"
        )
        summary = run_rotation(settings)
    except Exception:
        log.exception("Key rotation failed")
        raise

    log.info("Key rotations completed")
    return summary
