"""Text transforms applied to notes before publishing."""
