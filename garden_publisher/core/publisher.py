"""Publisher: selects notes, transforms them and syncs them to GitHub."""

import asyncio
import logging
from typing import Iterable, Optional

from garden_publisher.core.config import PublisherConfig
from garden_publisher.core.discovery import VaultDiscovery
from garden_publisher.core.github import GitHubContentStore
from garden_publisher.core.models import (
    LookupState,
    NoteError,
    NoteMetadata,
    PublishedNote,
    PublishResult,
    RemoteLookupError,
)
from garden_publisher.core.processor import ContentProcessor
from garden_publisher.core.resolver import LinkResolver
from garden_publisher.core.validator import validate_publish_frontmatter

logger = logging.getLogger(__name__)


class Publisher:
    """Publishes vault notes to a digital garden repository.

    Notes are handled one at a time. Transformation reads run in a worker
    thread so the event loop stays free for network calls.
    """

    def __init__(
        self,
        config: PublisherConfig,
        discovery: VaultDiscovery,
        processor: ContentProcessor,
        store: Optional[GitHubContentStore] = None,
    ):
        """Initialize Publisher.

        Args:
            config: Publisher settings
            discovery: Source of notes and their frontmatter
            processor: Transforms note content
            store: Remote store; created from config on first upload if None
        """
        self.config = config
        self.discovery = discovery
        self.processor = processor
        self._store = store

    async def __aenter__(self) -> "Publisher":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._store is not None:
            await self._store.aclose()

    @property
    def store(self) -> GitHubContentStore:
        """Remote store, created lazily once the config has been validated."""
        if self._store is None:
            self.config.validate_settings()
            self._store = GitHubContentStore(
                owner=self.config.github_user_name,
                repo=self.config.github_repo,
                token=self.config.github_token,
                api_url=self.config.api_url,
                timeout=self.config.timeout,
            )
        return self._store

    def remote_path_for(self, note: NoteMetadata) -> str:
        """Repository path of a note: the notes prefix plus its file name."""
        prefix = self.config.notes_prefix.strip('/')
        return f"{prefix}/{note.name}" if prefix else note.name

    async def render(self, note: NoteMetadata) -> PublishedNote:
        """Transform a note without uploading it."""
        content = await asyncio.to_thread(self.processor.generate_markdown, note)
        return PublishedNote(
            metadata=note,
            content=content,
            remote_path=self.remote_path_for(note),
        )

    async def publish(self, note: NoteMetadata) -> Optional[PublishedNote]:
        """Publish a single note.

        Notes failing the frontmatter check are skipped silently.

        Returns:
            The published note, or None if the note was skipped

        Raises:
            ConfigError: If GitHub settings are missing (before any request)
            RemoteLookupError: If the existence check fails under strict lookup
            RemoteWriteError: If the upload fails
        """
        is_pub, reason = validate_publish_frontmatter(note.frontmatter)
        if not is_pub:
            logger.debug("Not publishing %s: %s", note.name, reason)
            return None

        self.config.validate_settings()
        published = await self.render(note)
        await self.upload(published)
        logger.info("Published %s to %s", note.name, published.remote_path)
        return published

    async def upload(self, published: PublishedNote) -> None:
        """Create or update the note's file in the repository."""
        self.config.validate_settings()
        store = self.store
        path = published.remote_path
        name = published.metadata.name

        lookup = await store.lookup(path)
        if lookup.state is LookupState.FAILED:
            if self.config.strict_lookup:
                raise RemoteLookupError(f"Could not check {path}: {lookup.error}")
            logger.warning("Could not check %s, publishing as new note: %s", path, lookup.error)

        if lookup.state is LookupState.FOUND:
            message = f"Update note {name}"
        else:
            message = f"Add note {name}"

        await store.put(path, published.content, message, sha=lookup.sha)

    async def publish_all(
        self,
        names: Optional[Iterable[str]] = None,
        dry_run: bool = False,
    ) -> PublishResult:
        """Publish the named notes, or every note marked for publishing.

        A failing note is recorded and the remaining notes are still
        processed.

        Args:
            names: Note names or paths; None selects all marked notes
            dry_run: Transform notes without uploading them

        Raises:
            ConfigError: If GitHub settings are missing and dry_run is False
        """
        if not dry_run:
            self.config.validate_settings()

        result = PublishResult(dry_run=dry_run)

        if names is None:
            notes = self.discovery.get_files_marked_for_publishing()
        else:
            notes = []
            for name in names:
                note = self.discovery.get_note(name)
                if note is None:
                    result.failures.append(NoteError(path=self.config.vault_path / name,
                                                     error="Note not found"))
                else:
                    notes.append(note)

        for note in notes:
            try:
                if dry_run:
                    is_pub, _ = validate_publish_frontmatter(note.frontmatter)
                    published = await self.render(note) if is_pub else None
                else:
                    published = await self.publish(note)
            except Exception as e:
                logger.error("Failed to publish %s: %s", note.name, e)
                result.failures.append(NoteError(path=note.path, error=str(e), title=note.title))
                continue

            if published is None:
                result.skipped_titles.append(note.title)
            else:
                result.published_titles.append(note.title)

        return result


def create_publisher_from_config(
    config: PublisherConfig,
    store: Optional[GitHubContentStore] = None,
) -> Publisher:
    """Wire discovery, link resolution, processing and upload from settings."""
    discovery = VaultDiscovery(config.vault_path)
    processor = ContentProcessor(
        resolver=LinkResolver(discovery),
        max_transclusion_depth=config.max_transclusion_depth,
    )
    return Publisher(config, discovery, processor, store=store)
