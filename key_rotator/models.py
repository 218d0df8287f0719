# key_rotator/models.py
from __future__ import annotations
from dataclasses import dataclass, asdict
from datetime import datetime
from enum import Enum
from typing import Any, Dict, Optional


class KeyStatus(str, Enum):
    ACTIVE = "Active"
    INACTIVE = "Inactive"


@dataclass(frozen=True)
class AccessKeyRecord:
    """
    Metadata of one IAM access key as listed by the identity provider.

    `status` is kept as the raw provider string so that an unexpected
    value can be reported instead of failing at parse time.
    """
    id: str
    status: str
    created_at: datetime

    @property
    def is_active(self) -> bool:
        return self.status == KeyStatus.ACTIVE.value

    @property
    def is_inactive(self) -> bool:
        return self.status == KeyStatus.INACTIVE.value

    @classmethod
    def from_iam(cls, data: Dict[str, Any]) -> "AccessKeyRecord":
        return cls(
            id=data["AccessKeyId"],
            status=data.get("Status", ""),
            created_at=data["CreateDate"],
        )


@dataclass(frozen=True)
class AccessKey:
    """Freshly created key pair. The secret is only ever seen once."""
    id: str
    secret: str
    status: str = KeyStatus.ACTIVE.value
    created_at: Optional[datetime] = None

    @classmethod
    def from_iam(cls, data: Dict[str, Any]) -> "AccessKey":
        return cls(
            id=data["AccessKeyId"],
            secret=data["SecretAccessKey"],
            status=data.get("Status", KeyStatus.ACTIVE.value),
            created_at=data.get("CreateDate"),
        )

    def __repr__(self) -> str:
        return f"AccessKey(id={self.id!r}, status={self.status!r})"


@dataclass(frozen=True)
class Repository:
    id: int
    name: str

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Repository":
        return cls(id=int(data["id"]), name=str(data["name"]))


@dataclass(frozen=True)
class PublicKeyPackage:
    key_id: str
    key: str  # base64

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "PublicKeyPackage":
        return cls(key_id=str(data.get("key_id") or ""), key=str(data.get("key") or ""))


@dataclass(frozen=True)
class SealedSecretPackage:
    encrypted_value: str  # base64
    key_id: str

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)
