"""
key_rotator.crypto
------------------
Sealed-box encryption of secret values for GitHub environment secrets.

GitHub expects libsodium `crypto_box_seal` output: an ephemeral X25519
keypair is generated per message, so no sender identity is needed and only
the holder of the environment's private key can open the box.

- seal_secret(): plaintext + base64 public key -> SealedSecretPackage
- seal(): raw sealed box over bytes
"""

from __future__ import annotations
from nacl import exceptions as nacl_exceptions
from nacl import public
from .errors import ExternalServiceFailure
from .models import PublicKeyPackage, SealedSecretPackage
from .utils import b64e, b64d


def seal(public_key_raw: bytes, plaintext: bytes) -> bytes:
    box = public.SealedBox(public.PublicKey(public_key_raw))
    return box.encrypt(plaintext)


def seal_secret(secret_value: str, public_key: PublicKeyPackage) -> SealedSecretPackage:
    """
    Encrypt `secret_value` for the recipient of `public_key`.

    A malformed key from the platform (bad base64, wrong length) is
    reported as an external failure for that environment.
    """
    try:
        key_raw = b64d(public_key.key)
        ciphertext = seal(key_raw, secret_value.encode("utf-8"))
    except (ValueError, TypeError, nacl_exceptions.CryptoError) as exc:
        raise ExternalServiceFailure(
            f"Invalid public key {public_key.key_id}: {exc}", service="github"
        ) from exc
    return SealedSecretPackage(encrypted_value=b64e(ciphertext), key_id=public_key.key_id)
