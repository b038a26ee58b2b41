"""Metadata stored alongside a cook uploaded to cloud storage."""

from __future__ import annotations

import uuid as uuid_lib
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Dict


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class CloudRecord:
    uuid: uuid_lib.UUID = field(default_factory=uuid_lib.uuid4)
    title: str = ""
    cooking_method: str = ""
    cook_details: str = ""
    share_with_combustion: bool = True
    user_id: str = ""
    file_name: str = ""
    updated_at: datetime = field(default_factory=_utcnow)

    @property
    def file_path(self) -> str:
        return f"cooks/uploads/{self.user_id}/{self.uuid}/data.csv"

    def to_dict(self) -> Dict[str, object]:
        return {
            "uuid": str(self.uuid),
            "title": self.title,
            "cookingMethod": self.cooking_method,
            "cookDetails": self.cook_details,
            "shareWithCombustion": self.share_with_combustion,
            "userId": self.user_id,
            "fileName": self.file_name,
            "filePath": self.file_path,
            "updatedAt": self.updated_at.isoformat(),
        }

    @classmethod
    def from_dict(cls, payload: Dict[str, object]) -> "CloudRecord":
        """Build a record from its stored form.

        ``filePath`` is derived and ignored on read. Missing keys raise
        ``KeyError`` and a bad uuid or timestamp raises ``ValueError``.
        """

        return cls(
            uuid=uuid_lib.UUID(str(payload["uuid"])),
            title=str(payload["title"]),
            cooking_method=str(payload["cookingMethod"]),
            cook_details=str(payload["cookDetails"]),
            share_with_combustion=bool(payload["shareWithCombustion"]),
            user_id=str(payload["userId"]),
            file_name=str(payload["fileName"]),
            updated_at=datetime.fromisoformat(str(payload["updatedAt"])),
        )


__all__ = ["CloudRecord"]
