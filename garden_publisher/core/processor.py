"""Content processor for turning vault notes into self-contained markdown."""

import base64
import logging
from pathlib import Path
from typing import Any, Dict, Optional, Set

from garden_publisher.core.models import NoteMetadata
from garden_publisher.core.resolver import LinkResolver, get_linkpath
from garden_publisher.transforms.embeds import (
    ASSET,
    TRANSCLUSION,
    EmbedMarker,
    data_uri_image,
    find_markers,
    substitute_markers,
    transclusion_block,
)
from garden_publisher.transforms.frontmatter import (
    FrontmatterTransform,
    garden_frontmatter,
    replace_frontmatter,
)

logger = logging.getLogger(__name__)

TEXT_EXTENSIONS = ('md', 'txt')


class ContentProcessor:
    """Processes vault note content for publishing.

    Handles, in this order:
    - Frontmatter rewriting
    - Transclusion of embedded notes
    - Inlining of embedded images as base64 data URIs

    A broken embed never fails the note: the marker is kept as written.
    """

    def __init__(
        self,
        resolver: LinkResolver,
        frontmatter_transform: Optional[FrontmatterTransform] = None,
        max_transclusion_depth: int = 1,
    ):
        """Initialize ContentProcessor.

        Args:
            resolver: Resolves embed references to vault files
            frontmatter_transform: Transform applied to the note's frontmatter
                                   (default: garden_frontmatter())
            max_transclusion_depth: How many levels of nested embeds to expand.
                                    1 expands only the note's own embeds.
        """
        if max_transclusion_depth < 0:
            raise ValueError("max_transclusion_depth must not be negative")
        self.resolver = resolver
        self.frontmatter_transform = frontmatter_transform or garden_frontmatter()
        self.max_transclusion_depth = max_transclusion_depth

    def generate_markdown(self, note: NoteMetadata) -> str:
        """Produce the publishable text of a note.

        Reads content lazily via note.context.read_raw().

        Args:
            note: The note to process

        Returns:
            Transformed markdown
        """
        text = note.context.read_raw()
        text = self.convert_frontmatter(text, note.frontmatter)
        text = self.create_transcluded_text(text, note.path)
        text = self.create_base64_images(text, note.path)
        return text

    def convert_frontmatter(self, text: str, frontmatter: Dict[str, Any]) -> str:
        """Rewrite the header block of text from the note's frontmatter."""
        if not frontmatter:
            return text
        return replace_frontmatter(text, self.frontmatter_transform(frontmatter))

    def create_transcluded_text(
        self,
        text: str,
        source_path: Path,
        depth: int = 1,
        visited: Optional[Set[Path]] = None,
    ) -> str:
        """Replace note embeds with the embedded note's content.

        Args:
            text: Note content
            source_path: Path of the note the content belongs to
            depth: Nesting level of text (1 for the published note itself)
            visited: Notes on the current expansion chain

        Returns:
            Content with resolvable note embeds expanded
        """
        if depth > self.max_transclusion_depth:
            return text
        if visited is None:
            visited = {Path(source_path).resolve()}

        def render(marker: EmbedMarker) -> Optional[str]:
            if marker.kind != TRANSCLUSION:
                return None
            try:
                target = self.resolver.resolve(get_linkpath(marker.reference), source_path)
                if target is None:
                    logger.debug("Unresolved embed %s in %s", marker.text, source_path)
                    return None
                if target.extension not in TEXT_EXTENSIONS:
                    return None

                # A single level never recurses, so a note may embed itself once
                target_path = target.path.resolve()
                if self.max_transclusion_depth > 1 and target_path in visited:
                    logger.warning("Skipping recursive embed %s in %s", marker.text, source_path)
                    return None

                body = target.read_raw()
                body = self.create_transcluded_text(
                    body, target.path, depth + 1, visited | {target_path}
                )
                return transclusion_block(marker.reference, body)
            except Exception as e:
                logger.warning("Failed to transclude %s in %s: %s", marker.text, source_path, e)
                return None

        return substitute_markers(text, find_markers(text), render)

    def create_base64_images(self, text: str, source_path: Path) -> str:
        """Replace image embeds with inline base64 images.

        Args:
            text: Note content
            source_path: Path of the note the content belongs to

        Returns:
            Content with resolvable image embeds inlined
        """
        def render(marker: EmbedMarker) -> Optional[str]:
            if marker.kind != ASSET:
                return None
            try:
                target = self.resolver.resolve(get_linkpath(marker.reference), source_path)
                if target is None:
                    logger.debug("Unresolved image %s in %s", marker.text, source_path)
                    return None
                payload = base64.b64encode(target.read_binary()).decode('ascii')
                return data_uri_image(marker.reference, target.extension, payload)
            except Exception as e:
                logger.warning("Failed to inline %s in %s: %s", marker.text, source_path, e)
                return None

        return substitute_markers(text, find_markers(text), render)
