"""Vault discovery module for finding notes marked for publishing."""

import logging
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional
import yaml

from garden_publisher.core.models import DiscoveryError, NoteContext, NoteMetadata

logger = logging.getLogger(__name__)

PUBLISH_KEY = "dg-publish"


class VaultDiscovery:
    """Read-only access to the notes of a vault and their frontmatter."""

    def __init__(self, vault_path: Path):
        """Initialize VaultDiscovery.

        Args:
            vault_path: Path to the vault root
        """
        self.vault_path = Path(vault_path)

    def iter_files(self, pattern: str = "*") -> Iterator[Path]:
        """Yield every file in the vault, skipping hidden directories.

        Args:
            pattern: Glob pattern for file names

        Raises:
            DiscoveryError: If the vault directory does not exist
        """
        if not self.vault_path.is_dir():
            raise DiscoveryError(f"Vault directory not found: {self.vault_path}")

        for path in sorted(self.vault_path.rglob(pattern)):
            rel_parts = path.relative_to(self.vault_path).parts
            if any(part.startswith('.') for part in rel_parts[:-1]):
                continue
            if path.is_file():
                yield path

    def discover_all(self) -> List[NoteMetadata]:
        """Parse every markdown note in the vault.

        Returns:
            List of NoteMetadata; notes that fail to parse are skipped
        """
        notes = []
        for note_path in self.iter_files("*.md"):
            metadata = self._get_note_metadata(note_path)
            if metadata is not None:
                notes.append(metadata)
        return notes

    def get_files_marked_for_publishing(self) -> List[NoteMetadata]:
        """Find all notes whose frontmatter sets the publish flag to true.

        Only the boolean ``true`` counts; ``"true"`` or ``1`` do not.
        """
        return [
            note for note in self.discover_all()
            if note.frontmatter.get(PUBLISH_KEY) is True
        ]

    def get_note(self, name_or_path: str) -> Optional[NoteMetadata]:
        """Get a single note by name or path.

        Args:
            name_or_path: Vault-relative path, filename (with or without .md),
                          note title, or an absolute path

        Returns:
            NoteMetadata if found, None otherwise
        """
        path = Path(name_or_path)
        if path.is_absolute() and path.exists() and path.suffix == '.md':
            return self._get_note_metadata(path)

        candidate = self.vault_path / name_or_path
        if candidate.suffix != '.md':
            candidate = candidate.with_name(candidate.name + '.md')
        if candidate.is_file():
            return self._get_note_metadata(candidate)

        search_name = path.name.lower()
        if search_name.endswith('.md'):
            search_name = search_name[:-3]

        for note in self.discover_all():
            if note.path.stem.lower() == search_name or note.title.lower() == search_name:
                return note

        return None

    def read_frontmatter(self, file_path: Path) -> Dict[str, Any]:
        """Parse YAML frontmatter from a markdown file.

        The returned mapping carries two derived keys describing where the
        block sits in the file: ``position`` (start and end line) and
        ``end`` (line of the closing delimiter).

        Args:
            file_path: Path to the markdown file

        Returns:
            Frontmatter dict (empty if not found or invalid)
        """
        content = Path(file_path).read_text(encoding='utf-8')

        if not content.startswith('---\n'):
            return {}

        lines = content.split('\n')
        try:
            end_line = lines.index('---', 1)
        except ValueError:
            return {}

        try:
            frontmatter = yaml.safe_load('\n'.join(lines[1:end_line]))
        except yaml.YAMLError as e:
            logger.warning("Failed to parse YAML in %s: %s", Path(file_path).name, e)
            return {}

        if not isinstance(frontmatter, dict):
            return {}

        frontmatter['position'] = {
            'start': {'line': 0},
            'end': {'line': end_line},
        }
        frontmatter['end'] = end_line
        return frontmatter

    def _get_note_metadata(self, file_path: Path) -> Optional[NoteMetadata]:
        """Parse a note file and extract metadata.

        Note: Content is NOT stored in NoteMetadata. Use context.read_raw()
        when content is needed during processing.

        Args:
            file_path: Path to the markdown file

        Returns:
            NoteMetadata or None if the file cannot be read
        """
        try:
            context = NoteContext(path=Path(file_path), vault_path=self.vault_path)
            frontmatter = self.read_frontmatter(file_path)
            title = frontmatter.get('title') or context.path.stem

            return NoteMetadata(
                context=context,
                title=str(title),
                frontmatter=frontmatter,
            )
        except (OSError, UnicodeDecodeError) as e:
            logger.warning("Failed to read %s: %s", Path(file_path).name, e)
            return None
