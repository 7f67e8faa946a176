"""Core components for Garden Publisher."""

from garden_publisher.core.models import (
    ConfigError,
    DiscoveryError,
    NoteContext,
    NoteError,
    NoteMetadata,
    PublishedNote,
    PublishError,
    PublishResult,
    RemoteLookup,
    RemoteLookupError,
    RemoteWriteError,
)
from garden_publisher.core.config import PublisherConfig
from garden_publisher.core.discovery import VaultDiscovery
from garden_publisher.core.resolver import LinkResolver, get_linkpath
from garden_publisher.core.processor import ContentProcessor
from garden_publisher.core.validator import validate_publish_frontmatter
from garden_publisher.core.github import GitHubContentStore
from garden_publisher.core.publisher import Publisher, create_publisher_from_config

__all__ = [
    "ConfigError",
    "DiscoveryError",
    "NoteContext",
    "NoteError",
    "NoteMetadata",
    "PublishedNote",
    "PublishError",
    "PublishResult",
    "RemoteLookup",
    "RemoteLookupError",
    "RemoteWriteError",
    "PublisherConfig",
    "VaultDiscovery",
    "LinkResolver",
    "get_linkpath",
    "ContentProcessor",
    "validate_publish_frontmatter",
    "GitHubContentStore",
    "Publisher",
    "create_publisher_from_config",
]
