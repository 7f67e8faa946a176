"""Data models for Garden Publisher."""

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Optional


class PublishError(Exception):
    """Base class for errors raised while publishing notes."""


class ConfigError(PublishError):
    """Raised when a required setting is missing."""


class DiscoveryError(PublishError):
    """Raised when the vault cannot be scanned."""


class RemoteLookupError(PublishError):
    """Raised when the remote existence check fails and strict lookup is on."""


class RemoteWriteError(PublishError):
    """Raised when the remote store rejects a write."""

    def __init__(self, path: str, status_code: Optional[int], detail: str):
        self.path = path
        self.status_code = status_code
        self.detail = detail
        super().__init__(f"Failed to write {path} ({status_code}): {detail}")


@dataclass
class NoteContext:
    """Cheapest possible file reference - just location.

    Provides lazy content loading to avoid reading every note and asset
    into memory while the vault is indexed.
    """
    path: Path
    vault_path: Path

    @property
    def name(self) -> str:
        """Display name: file name including extension."""
        return self.path.name

    @property
    def extension(self) -> str:
        return self.path.suffix.lstrip('.').lower()

    @property
    def vault_path_str(self) -> str:
        """Vault-relative POSIX path, the identity of the file in the vault."""
        return self.path.relative_to(self.vault_path).as_posix()

    def read_raw(self) -> str:
        """Read file contents on demand."""
        return self.path.read_text(encoding='utf-8')

    def read_binary(self) -> bytes:
        return self.path.read_bytes()


@dataclass
class NoteMetadata:
    """Parsed note header - what we learn from reading the file once.

    Does NOT store content - get it via context.read_raw() when needed.
    The frontmatter may be shared with the discovery cache, so consumers
    must copy it before changing anything.
    """
    context: NoteContext
    title: str
    frontmatter: Dict[str, Any]

    @property
    def path(self) -> Path:
        """Convenience accessor for the note's path."""
        return self.context.path

    @property
    def name(self) -> str:
        return self.context.name


@dataclass
class PublishedNote:
    """Self-contained text ready for the remote store."""
    metadata: NoteMetadata
    content: str
    remote_path: str


class LookupState(Enum):
    FOUND = "found"
    NOT_FOUND = "not_found"
    FAILED = "failed"


@dataclass
class RemoteLookup:
    """Outcome of checking whether a remote record already exists."""
    state: LookupState
    sha: str = ""
    error: Optional[str] = None

    @classmethod
    def found(cls, sha: str) -> "RemoteLookup":
        return cls(LookupState.FOUND, sha=sha)

    @classmethod
    def not_found(cls) -> "RemoteLookup":
        return cls(LookupState.NOT_FOUND)

    @classmethod
    def failed(cls, error: str) -> "RemoteLookup":
        return cls(LookupState.FAILED, error=error)


@dataclass
class NoteError:
    """An error that occurred while processing a note.

    Used for errors at any phase: transformation or upload.
    """
    path: Path
    error: str
    title: Optional[str] = None


@dataclass
class PublishResult:
    """Result of a publish operation."""
    published_titles: List[str] = field(default_factory=list)
    skipped_titles: List[str] = field(default_factory=list)
    failures: List[NoteError] = field(default_factory=list)
    dry_run: bool = False
