# docchat/domain/models.py

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Generic, List, Optional, TypeVar, Union


@dataclass(frozen=True)
class Chunk:
    """
    A bounded, numbered segment of a document's extracted text.
    The atomic unit of indexing and retrieval.
    """
    page_number: int
    text: str


@dataclass
class EmbeddingChunk:
    """A Chunk plus its embedding vector. Owned by the vector store."""
    page_number: int
    text: str
    vector: List[float] = field(default_factory=list, repr=False)


@dataclass(frozen=True)
class SearchHit:
    page_number: int
    score: int
    snippet: str


class IntentKind(Enum):
    HELP = "help"
    SUMMARIZE_DOCUMENT = "summarize_document"
    SUMMARIZE_PAGE = "summarize_page"
    EXTRACT_PAGE = "extract_page"
    FIND = "find"
    GENERAL = "general"


@dataclass(frozen=True)
class QueryIntent:
    """
    Classified purpose of a user turn.
    `page` is set for SUMMARIZE_PAGE / EXTRACT_PAGE, `keyword` for FIND.
    """
    kind: IntentKind
    page: Optional[int] = None
    keyword: Optional[str] = None


@dataclass(frozen=True)
class EnrichedQuery:
    corrected: str
    expanded: str


class Role(str, Enum):
    USER = "user"
    ASSISTANT = "assistant"
    SYSTEM = "system"


@dataclass(frozen=True)
class ChatTurn:
    """One entry of the conversation history forwarded to the completion capability."""
    role: Role
    content: str


@dataclass
class ChatMessage:
    """One line of the display transcript."""
    role: Role
    text: str
    timestamp: datetime = field(default_factory=datetime.now)


class SourceKind(Enum):
    PDF = "pdf"
    WORD = "word"
    WEB = "web"


# ── Capability results ────────────────────────────────────────────────────────

class FailureKind(Enum):
    NETWORK = "network"
    STATUS = "status"
    PARSE = "parse"


T = TypeVar("T")


@dataclass(frozen=True)
class Ok(Generic[T]):
    value: T


@dataclass(frozen=True)
class Err:
    kind: FailureKind
    detail: str = ""


CapabilityResult = Union[Ok[T], Err]


class CapabilityError(RuntimeError):
    """Raised by embedding / completion adapters on transport or status failure."""

    def __init__(self, kind: FailureKind, message: str):
        super().__init__(message)
        self.kind = kind
