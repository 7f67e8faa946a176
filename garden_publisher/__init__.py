"""
Garden Publisher - Publish vault notes to a digital garden site

Selects notes marked with ``dg-publish: true``, turns each one into
self-contained markdown and commits it to a GitHub repository:
- Frontmatter rewriting (permalinks, home note tagging)
- Transclusion of embedded notes
- Inlining of embedded images as base64 data URIs
- Create-or-update through the GitHub contents API
"""

from garden_publisher.core.models import (
    ConfigError,
    NoteContext,
    NoteMetadata,
    PublishedNote,
    PublishError,
    PublishResult,
)
from garden_publisher.core.config import PublisherConfig
from garden_publisher.core.discovery import VaultDiscovery
from garden_publisher.core.resolver import LinkResolver
from garden_publisher.core.processor import ContentProcessor
from garden_publisher.core.github import GitHubContentStore
from garden_publisher.core.publisher import Publisher, create_publisher_from_config

__version__ = "0.1.0"

__all__ = [
    "ConfigError",
    "NoteContext",
    "NoteMetadata",
    "PublishedNote",
    "PublishError",
    "PublishResult",
    "PublisherConfig",
    "VaultDiscovery",
    "LinkResolver",
    "ContentProcessor",
    "GitHubContentStore",
    "Publisher",
    "create_publisher_from_config",
]
