"""Checks a note's frontmatter must pass before it is published."""

from typing import Any, Dict, Optional, Tuple

from garden_publisher.core.discovery import PUBLISH_KEY


def validate_publish_frontmatter(frontmatter: Optional[Dict[str, Any]]) -> Tuple[bool, str]:
    """Check if a note's frontmatter allows publishing.

    Args:
        frontmatter: Parsed frontmatter, or None if the note has none

    Returns:
        Tuple of (is_publishable, reason)
    """
    if not frontmatter:
        return False, "Missing frontmatter"

    if frontmatter.get(PUBLISH_KEY) is not True:
        return False, f"{PUBLISH_KEY} is not set to true"

    if 'dg-permalink' in frontmatter:
        permalink = frontmatter['dg-permalink']
        if not isinstance(permalink, str) or not permalink.strip():
            return False, "dg-permalink must be a non-empty string"

    if 'tags' in frontmatter and frontmatter['tags'] is not None:
        tags = frontmatter['tags']
        if not isinstance(tags, str) and not (
            isinstance(tags, list) and all(isinstance(t, str) for t in tags)
        ):
            return False, "tags must be a string or a list of strings"

    return True, "OK"
