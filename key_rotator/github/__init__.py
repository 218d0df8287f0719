# key_rotator/github/__init__.py
from .auth import CredentialAuthProvider
from .repositories import RepositoryLocator
from .secrets import SecretPublisher

__all__ = ["CredentialAuthProvider", "RepositoryLocator", "SecretPublisher"]
