from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

from .hashing import new_token


class Phase(str, Enum):
    IDLE = "idle"
    ANALYZING = "analyzing"
    PROCESSING = "processing"
    FINISHED = "finished"
    FAILED = "failed"


class Status(str, Enum):
    PENDING = "pending"
    PROCESSING = "processing"
    SUCCESS = "success"
    ERROR = "error"


@dataclass(frozen=True)
class PaperMetadata:
    """One paper inside the uploaded document, as reported by the analyzer."""

    index: int
    title: str

    @classmethod
    def from_dict(cls, obj: Any) -> "PaperMetadata":
        if not isinstance(obj, dict):
            raise ValueError(f"Paper entry is not an object: {obj!r}")
        index = obj.get("index")
        title = obj.get("title")
        # bool is an int subclass
        if isinstance(index, bool) or not isinstance(index, int) or index < 1:
            raise ValueError(f"Paper entry has an invalid index: {index!r}")
        if not isinstance(title, str):
            raise ValueError(f"Paper entry {index} has no title")
        return cls(index=index, title=title.strip())

    def to_dict(self) -> Dict[str, Any]:
        return {"index": self.index, "title": self.title}


@dataclass
class PaperResult:
    metadata: PaperMetadata
    id: str = field(default_factory=new_token)
    content: Optional[str] = None
    status: Status = Status.PENDING
    error_message: Optional[str] = None

    def copy(self) -> "PaperResult":
        return replace(self)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "index": self.metadata.index,
            "title": self.metadata.title,
            "status": self.status.value,
            "content": self.content,
            "error_message": self.error_message,
        }


@dataclass(frozen=True)
class SessionSnapshot:
    """Immutable view of a session handed to observers after each transition."""

    session_id: str
    phase: Phase
    results: Tuple[PaperResult, ...] = ()
    error_message: Optional[str] = None

    @property
    def processing_count(self) -> int:
        return sum(1 for r in self.results if r.status is Status.PROCESSING)

    @property
    def done_count(self) -> int:
        return sum(
            1 for r in self.results if r.status in (Status.SUCCESS, Status.ERROR)
        )

    def successes(self) -> List[PaperResult]:
        return [r for r in self.results if r.status is Status.SUCCESS]
