"""Notification domain entity: a per-user message raised by meal-plan events."""
from typing import Dict, Optional, Any


class Notification:
    def __init__(self, user: str, title: str, message: str, type: str = "info",
                 read: bool = False, related_entity: Optional[Dict[str, Any]] = None,
                 priority: str = "medium", id: Optional[str] = None, revision: int = 0,
                 created_at: Optional[str] = None, updated_at: Optional[str] = None):
        self.id = id
        self.user = user
        self.title = title[:100]
        self.message = message[:500]
        self.type = type
        self.read = read
        self.related_entity = related_entity or {}
        self.priority = priority
        self.revision = revision
        self.created_at = created_at
        self.updated_at = updated_at

    def __str__(self) -> str:
        return f"[{self.type}] {self.title}: {self.message}"

    __repr__ = __str__

    @staticmethod
    def from_dict(data):
        d = dict(data) if isinstance(data, dict) else {}
        return Notification(
            id=d.get("_id"),
            user=d.get("user", ""),
            title=d.get("title", ""),
            message=d.get("message", ""),
            type=d.get("type", "info"),
            read=bool(d.get("read", False)),
            related_entity=d.get("relatedEntity"),
            priority=d.get("priority", "medium"),
            revision=d.get("revision", 0),
            created_at=d.get("createdAt"),
            updated_at=d.get("updatedAt"),
        )

    def to_dict(self):
        return {
            "_id": self.id,
            "user": self.user,
            "title": self.title,
            "message": self.message,
            "type": self.type,
            "read": self.read,
            "relatedEntity": self.related_entity,
            "priority": self.priority,
            "revision": self.revision,
            "createdAt": self.created_at,
            "updatedAt": self.updated_at,
        }
