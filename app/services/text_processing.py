"""
Text processing for RAG: paragraph splitting and context assembly.

Documents are chunked on blank lines, one paragraph per vector. Matched
paragraphs are joined back with blank lines to form the generation context.
"""

import re
import unicodedata

_BLANK_LINES = re.compile(r"\n\s*\n+")


def normalize_text(text: str) -> str:
    """NFKC-normalize, unify line endings and strip trailing spaces on each line."""
    if not text:
        return ""
    text = unicodedata.normalize("NFKC", text).replace("\r\n", "\n").replace("\r", "\n")
    return "\n".join(line.rstrip() for line in text.split("\n"))


def split_paragraphs(text: str) -> list[str]:
    """
    Split a document into paragraphs on one or more blank lines.
    Blank paragraphs are dropped; inner single newlines are kept.
    """
    normalized = normalize_text(text)
    return [p.strip() for p in _BLANK_LINES.split(normalized) if p.strip()]


def build_context(matches: list[dict]) -> str:
    """Join the metadata text of retrieval matches, skipping matches without text."""
    texts = []
    for m in matches:
        text = ((m.get("metadata") or {}).get("text") or "").strip()
        if text:
            texts.append(text)
    return "\n\n".join(texts)
