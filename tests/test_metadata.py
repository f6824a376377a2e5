from __future__ import annotations

from codex_skill_manager.scanners.metadata import (
    format_title,
    parse_metadata,
    strip_frontmatter,
)


def test_frontmatter_name_and_description() -> None:
    meta = parse_metadata("---\nname: My Skill\ndescription: Does things\n---\n# Other\n\nBody\n")
    assert meta.name == "My Skill"
    assert meta.description == "Does things"


def test_frontmatter_values_strip_quotes_and_split_on_first_colon() -> None:
    meta = parse_metadata(
        "---\nname: 'quoted'\ndescription: \"Use when: you need it\"\n---\n"
    )
    assert meta.name == "quoted"
    assert meta.description == "Use when: you need it"


def test_unknown_frontmatter_keys_are_ignored() -> None:
    meta = parse_metadata("---\nversion: 1.0.0\nlicense: MIT\n---\n")
    assert meta.name is None
    assert meta.description is None


def test_fallback_to_heading_and_first_paragraph() -> None:
    meta = parse_metadata("# PDF Tools\n\n## Usage\n\nExtract text from PDFs.\nMore.\n")
    assert meta.name == "PDF Tools"
    assert meta.description == "Extract text from PDFs."


def test_fallback_fills_only_missing_fields() -> None:
    meta = parse_metadata("---\nname: from-frontmatter\n---\n# Heading Title\n\nFirst line.\n")
    assert meta.name == "from-frontmatter"
    assert meta.description == "First line."


def test_fallback_ignores_frontmatter_lines() -> None:
    meta = parse_metadata("---\nname: x\n---\n")
    assert meta.name == "x"
    assert meta.description is None


def test_malformed_manifest_never_raises() -> None:
    assert parse_metadata("").name is None
    meta = parse_metadata("---\nname without colon\n")
    assert meta.name is None
    assert meta.description is None


def test_format_title() -> None:
    assert format_title("pdf-tools_v2") == "Pdf Tools V2"
    assert format_title("My Skill") == "My Skill"
    assert format_title("already--dashed") == "Already Dashed"
    assert format_title("") == ""


def test_strip_frontmatter() -> None:
    assert strip_frontmatter("---\nname: x\n---\n\n# Title\n") == "# Title\n"
    assert strip_frontmatter("# No front matter\n") == "# No front matter\n"
    assert strip_frontmatter("---\nunterminated\n") == "---\nunterminated\n"
