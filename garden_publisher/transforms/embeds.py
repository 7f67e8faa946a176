"""Parsing and substitution of ``![[...]]`` embed markers."""

import re
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional

IMAGE_EXTENSIONS = ('png', 'jpg', 'jpeg', 'gif')

MEDIA_TYPES = {
    'png': 'image/png',
    'jpg': 'image/jpeg',
    'jpeg': 'image/jpeg',
    'gif': 'image/gif',
}

# Pattern for any embed: ![[target]], non-greedy so adjacent embeds stay apart
EMBED_PATTERN = re.compile(r'!\[\[(.*?)\]\]')

ASSET = "asset"
TRANSCLUSION = "transclusion"


@dataclass(frozen=True)
class EmbedMarker:
    """An embed marker found in a note body."""
    start: int
    end: int
    text: str
    reference: str
    kind: str


def reference_name(marker_text: str) -> str:
    """Text between the opening ``[[`` and the first closing bracket."""
    start = marker_text.index('[') + 2
    return marker_text[start:marker_text.index(']', start)]


def is_asset_reference(reference: str) -> bool:
    return reference.lower().endswith(tuple('.' + ext for ext in IMAGE_EXTENSIONS))


def find_markers(text: str) -> List[EmbedMarker]:
    """Find every embed marker in text, in order of occurrence."""
    markers = []
    for match in EMBED_PATTERN.finditer(text):
        reference = reference_name(match.group(0))
        kind = ASSET if is_asset_reference(reference) else TRANSCLUSION
        markers.append(EmbedMarker(
            start=match.start(),
            end=match.end(),
            text=match.group(0),
            reference=reference,
            kind=kind,
        ))
    return markers


def substitute_markers(
    text: str,
    markers: List[EmbedMarker],
    render: Callable[[EmbedMarker], Optional[str]],
) -> str:
    """Rebuild text with markers replaced by their rendered content.

    ``render`` is called once per distinct marker string; every occurrence
    of that exact string gets the same replacement. A ``None`` result keeps
    the marker verbatim. Inserted content is never scanned again.
    """
    rendered: Dict[str, Optional[str]] = {}
    pieces = []
    position = 0
    for marker in markers:
        if marker.text not in rendered:
            rendered[marker.text] = render(marker)
        replacement = rendered[marker.text]
        pieces.append(text[position:marker.start])
        pieces.append(marker.text if replacement is None else replacement)
        position = marker.end
    pieces.append(text[position:])
    return ''.join(pieces)


def transclusion_block(reference: str, body: str) -> str:
    """Wrap a transcluded note in a labelled fenced block."""
    return f"\n```transclusion\n# {reference}\n\n{body}\n```\n"


def data_uri_image(reference: str, extension: str, payload: str) -> str:
    """Inline image markdown carrying a base64 payload."""
    media_type = MEDIA_TYPES.get(extension.lower(), f"image/{extension.lower()}")
    return f"![{reference}](data:{media_type};base64,{payload})"
