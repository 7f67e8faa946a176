"""Frontmatter transform factories for Garden Publisher.

These factories create transform functions that rewrite a note's
frontmatter before it is serialized back into the published text.
Every transform returns a new mapping and leaves its input untouched,
since the input usually comes straight from the discovery cache.
"""

import copy
import json
import re
from typing import Any, Callable, Dict, List, Optional

FrontmatterTransform = Callable[[Dict[str, Any]], Dict[str, Any]]

GARDEN_ENTRY_TAG = "gardenEntry"

# Keys added by the frontmatter parser, never part of the user's header
DERIVED_KEYS = ("position", "end")

FRONTMATTER_PATTERN = re.compile(r'\A---\n(.*?)\n---', re.DOTALL)


def identity() -> FrontmatterTransform:
    """Create a pass-through transform that returns a copy of the frontmatter."""
    def transform(fm: Dict[str, Any]) -> Dict[str, Any]:
        return copy.deepcopy(fm)
    return transform


def prune_and_add(
    keep_keys: Optional[List[str]] = None,
    remove_keys: Optional[List[str]] = None,
    add_fields: Optional[Dict[str, Any]] = None
) -> FrontmatterTransform:
    """Create a transform that prunes keys and/or adds fields.

    If keep_keys is provided, only those keys are kept.
    If remove_keys is provided (and keep_keys is not), those keys are removed.
    add_fields are always added/updated at the end.

    Args:
        keep_keys: List of keys to keep (exclusive with remove_keys)
        remove_keys: List of keys to remove
        add_fields: Dict of fields to add/update

    Returns:
        A transform function
    """
    def transform(fm: Dict[str, Any]) -> Dict[str, Any]:
        if keep_keys is not None:
            result = {k: v for k, v in fm.items() if k in keep_keys}
        elif remove_keys is not None:
            result = {k: v for k, v in fm.items() if k not in remove_keys}
        else:
            result = dict(fm)

        if add_fields:
            result.update(add_fields)

        return copy.deepcopy(result)
    return transform


def permalink_override(
    source_key: str = "dg-permalink",
    target_key: str = "permalink",
) -> FrontmatterTransform:
    """Create a transform that copies a permalink override into place.

    The copied value always ends with exactly one trailing slash.

    Args:
        source_key: Key holding the user's override
        target_key: Canonical permalink key read by the site

    Returns:
        A transform function
    """
    def transform(fm: Dict[str, Any]) -> Dict[str, Any]:
        result = copy.deepcopy(fm)
        override = result.get(source_key)
        if override:
            permalink = str(override)
            if not permalink.endswith('/'):
                permalink += '/'
            result[target_key] = permalink
        return result
    return transform


def home_entry(
    marker_key: str = "dg-home",
    sentinel: str = GARDEN_ENTRY_TAG,
) -> FrontmatterTransform:
    """Create a transform that tags the home note with a sentinel tag.

    - no tags: tags become the sentinel alone
    - a single tag string "x": tags become ["x", sentinel]
    - a tag list: the sentinel is appended

    Args:
        marker_key: Key marking the note as the site's entry point
        sentinel: Tag the site uses to find its entry point

    Returns:
        A transform function
    """
    def transform(fm: Dict[str, Any]) -> Dict[str, Any]:
        result = copy.deepcopy(fm)
        if not result.get(marker_key):
            return result

        tags = result.get('tags')
        if tags is None or tags == "":
            result['tags'] = sentinel
        elif isinstance(tags, str):
            result['tags'] = [tags, sentinel]
        else:
            result['tags'] = [*tags, sentinel]
        return result
    return transform


def compose(*transforms: FrontmatterTransform) -> FrontmatterTransform:
    """Chain transforms left to right."""
    def transform(fm: Dict[str, Any]) -> Dict[str, Any]:
        result = fm
        for t in transforms:
            result = t(result)
        return result
    return transform


def garden_frontmatter() -> FrontmatterTransform:
    """Create the transform used when publishing to a digital garden site.

    Applies the permalink override, tags the home note and drops the
    parser-derived keys.
    """
    return compose(
        permalink_override(),
        home_entry(),
        prune_and_add(remove_keys=list(DERIVED_KEYS)),
    )


def serialize_frontmatter(fm: Dict[str, Any]) -> str:
    """Serialize frontmatter as a single-line JSON object.

    JSON is a subset of YAML, so the result is still a valid header.
    Values YAML produced that JSON cannot represent (dates) become strings.
    """
    return json.dumps(fm, ensure_ascii=False, separators=(',', ':'), default=str)


def replace_frontmatter(text: str, fm: Dict[str, Any]) -> str:
    """Replace the header block at the very start of text.

    Only the first block is touched. Text without a header block is
    returned unchanged.

    Args:
        text: Raw note text
        fm: Frontmatter to write in place of the existing block

    Returns:
        Text with the header block rewritten
    """
    match = FRONTMATTER_PATTERN.match(text)
    if match is None:
        return text
    block = f"---\n{serialize_frontmatter(fm)}\n---"
    return block + text[match.end():]
