from __future__ import annotations
from typing import Optional


class KeyRotatorError(Exception):
    pass


class ConfigurationError(KeyRotatorError):
    """
    Unrecoverable setup problem: too many keys, unknown key status,
    missing settings. Needs manual cleanup, never auto-remediated.
    """
    pass


class ExternalServiceFailure(KeyRotatorError):
    """
    A required call to IAM, Secrets Manager or the GitHub API failed.

    Not retried in-process; the next scheduled invocation re-attempts.
    """

    def __init__(
        self,
        message: str,
        service: str = "",
        status_code: Optional[int] = None,
        body: str = "",
    ):
        super().__init__(message)
        self.service = service
        self.status_code = status_code
        self.body = body
