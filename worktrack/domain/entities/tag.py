"""Tag domain entity"""
from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass
class Tag:
    """Tag domain entity"""
    id: str
    name: str
    color: Optional[str] = None
    created_at: Optional[datetime] = None

    def __post_init__(self):
        if self.created_at is None:
            self.created_at = datetime.utcnow()


@dataclass
class TagUsage:
    """How many todos carry a tag, split by todo status"""
    tag: Tag
    usage_count: int = 0
    pending_todo_count: int = 0
    completed_todo_count: int = 0
