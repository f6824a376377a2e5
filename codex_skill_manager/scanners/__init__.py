"""Scanner modules for skill roots and manifests"""

from .metadata import SkillMetadata, format_title, parse_metadata, strip_frontmatter
from .skills import MANIFEST_NAME, SkillScanner

__all__ = [
    "SkillScanner",
    "SkillMetadata",
    "MANIFEST_NAME",
    "parse_metadata",
    "format_title",
    "strip_frontmatter",
]
