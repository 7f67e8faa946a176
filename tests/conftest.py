"""Shared fixtures: a small vault on disk."""

from pathlib import Path

import pytest

# 1x1 transparent PNG
PNG_BYTES = bytes.fromhex(
    "89504e470d0a1a0a0000000d4948445200000001000000010806000000"
    "1f15c4890000000d49444154789c6360000002000154a24f5d0000000049454e44ae426082"
)


def write_note(vault: Path, rel_path: str, content: str) -> Path:
    path = vault / rel_path
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")
    return path


@pytest.fixture
def vault(tmp_path):
    """Create a vault with published, unpublished and embedded notes."""
    vault_path = tmp_path / "vault"
    vault_path.mkdir()

    write_note(vault_path, "Published.md", """---
dg-publish: true
dg-permalink: garden/published
tags:
  - evergreen
---
# Published

![[Snippet]]

![[pic.png]]
""")
    write_note(vault_path, "Home.md", """---
dg-publish: true
dg-home: true
tags: start
---
Welcome home.
""")
    write_note(vault_path, "Draft.md", """---
dg-publish: false
---
Not ready.
""")
    write_note(vault_path, "Quoted.md", """---
dg-publish: "true"
---
String flag only.
""")
    write_note(vault_path, "Plain.md", "No frontmatter here.\n")
    write_note(vault_path, "Snippet.md", "hello")
    write_note(vault_path, "sub/Nested.md", "nested body")
    write_note(vault_path, ".obsidian/Hidden.md", "---\ndg-publish: true\n---\nhidden")
    (vault_path / "pic.png").write_bytes(PNG_BYTES)

    return vault_path
