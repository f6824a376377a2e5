"""Title/description extraction from `SKILL.md` manifests."""

from dataclasses import dataclass
from typing import List, Optional, Tuple

FRONTMATTER_DELIMITER = "---"


@dataclass(frozen=True)
class SkillMetadata:
    name: Optional[str] = None
    description: Optional[str] = None


def parse_metadata(markdown: str) -> SkillMetadata:
    """Extract `name`/`description` from a manifest.

    Front matter wins; any field it doesn't provide falls back to the first
    `# ` heading and the first plain line after it. Never raises.
    """
    lines = markdown.splitlines()
    name: Optional[str] = None
    description: Optional[str] = None
    body_start = 0

    if lines and lines[0].strip() == FRONTMATTER_DELIMITER:
        body_start = len(lines)
        for index in range(1, len(lines)):
            line = lines[index]
            if line.strip() == FRONTMATTER_DELIMITER:
                body_start = index + 1
                break
            parsed = _parse_frontmatter_line(line)
            if not parsed:
                continue
            key, value = parsed
            if key == "name":
                name = value
            elif key == "description":
                description = value

    if name is None or description is None:
        fallback = _parse_markdown_fallback(lines[body_start:])
        if name is None:
            name = fallback.name
        if description is None:
            description = fallback.description

    return SkillMetadata(name=name, description=description)


def _parse_frontmatter_line(line: str) -> Optional[Tuple[str, str]]:
    if ":" not in line:
        return None
    key, raw_value = line.split(":", 1)
    value = raw_value.strip().strip("\"'")
    return key.strip(), value


def _parse_markdown_fallback(lines: List[str]) -> SkillMetadata:
    title: Optional[str] = None
    description: Optional[str] = None

    for raw in lines:
        line = raw.strip()
        if title is None and line.startswith("# "):
            title = line[2:].strip()
        elif line and not line.startswith("#"):
            description = line
            break

    return SkillMetadata(name=title, description=description)


def format_title(slug: str) -> str:
    """Turn a slug like `pdf-tools_v2` into `Pdf Tools V2`."""
    normalized = slug.replace("-", " ").replace("_", " ")
    return " ".join(word[:1].upper() + word[1:].lower() for word in normalized.split())


def strip_frontmatter(markdown: str) -> str:
    """Return the manifest body without its leading front-matter block."""
    lines = markdown.splitlines(keepends=True)
    if not lines or lines[0].strip() != FRONTMATTER_DELIMITER:
        return markdown

    for index in range(1, len(lines)):
        if lines[index].strip() == FRONTMATTER_DELIMITER:
            return "".join(lines[index + 1:]).lstrip("\n")

    # Unterminated front matter: show everything.
    return markdown
