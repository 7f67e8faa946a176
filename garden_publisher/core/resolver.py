"""Resolution of wikilink references to files in the vault."""

import logging
import posixpath
from collections import defaultdict
from pathlib import Path
from typing import Dict, List, Optional

from garden_publisher.core.discovery import VaultDiscovery
from garden_publisher.core.models import NoteContext

logger = logging.getLogger(__name__)


def get_linkpath(reference: str) -> str:
    """Strip the ``#subpath`` and ``|alias`` parts from a link reference.

    >>> get_linkpath("Some Note#Heading|shown text")
    'Some Note'
    """
    for separator in ('|', '#'):
        if separator in reference:
            reference = reference.split(separator, 1)[0]
    return reference.strip()


class LinkResolver:
    """Resolves link references relative to a source note.

    Lookup order:
    1. Exact vault-relative path
    2. Path relative to the source note's folder
    3. File name anywhere in the vault, if unambiguous (a match in the
       source note's own folder breaks ties)

    A reference without an extension is treated as a markdown note.
    """

    def __init__(self, discovery: VaultDiscovery):
        self.discovery = discovery
        self._by_path: Optional[Dict[str, Path]] = None
        self._by_name: Dict[str, List[Path]] = defaultdict(list)

    def refresh(self) -> None:
        """Rebuild the file index from disk."""
        self._by_path = {}
        self._by_name = defaultdict(list)
        vault_path = self.discovery.vault_path
        for path in self.discovery.iter_files():
            rel = path.relative_to(vault_path).as_posix()
            self._by_path[rel.lower()] = path
            self._by_name[path.name.lower()].append(path)

    def resolve(self, linkpath: str, source_path: Path) -> Optional[NoteContext]:
        """Find the file a link points to.

        Args:
            linkpath: Link reference without subpath or alias
            source_path: Path of the note containing the link

        Returns:
            NoteContext for the target, or None if missing or ambiguous
        """
        if self._by_path is None:
            self.refresh()

        linkpath = linkpath.strip().lstrip('/')
        if not linkpath:
            return None

        # "2024.01.05" or "Note v1.2" look like they carry an extension
        if not posixpath.splitext(linkpath)[1]:
            attempts = [linkpath + '.md']
        elif linkpath.lower().endswith('.md'):
            attempts = [linkpath]
        else:
            attempts = [linkpath, linkpath + '.md']

        for attempt in attempts:
            target = self._lookup(attempt, Path(source_path))
            if target is not None:
                return target
        return None

    def _lookup(self, linkpath: str, source_path: Path) -> Optional[NoteContext]:
        vault_path = self.discovery.vault_path
        source_dir = Path(source_path).parent.relative_to(vault_path).as_posix()

        exact = self._by_path.get(linkpath.lower())
        if exact is not None:
            return self._context(exact)

        relative = posixpath.normpath(posixpath.join(source_dir, linkpath))
        match = self._by_path.get(relative.lower())
        if match is not None:
            return self._context(match)

        candidates = self._by_name.get(posixpath.basename(linkpath).lower(), [])
        if len(candidates) == 1:
            return self._context(candidates[0])

        local = [p for p in candidates if p.parent == Path(source_path).parent]
        if len(local) == 1:
            return self._context(local[0])

        if candidates:
            logger.debug("Ambiguous link %r from %s: %d candidates",
                         linkpath, source_path, len(candidates))
        return None

    def _context(self, path: Path) -> NoteContext:
        return NoteContext(path=path, vault_path=self.discovery.vault_path)
