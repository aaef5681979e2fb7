"""Prompt builder – renders the query and documents into the enrichment prompt.

Pure functions only: the same query and documents always produce the same
prompt.  Documents are never mutated; truncation works on a copy of the
content.
"""

from __future__ import annotations

from collections.abc import Sequence

from docrelay.application.prompts import (
    DOCUMENT_BLOCK_SEPARATOR,
    DOCUMENT_BLOCK_TEMPLATE,
    ENRICHMENT_PROMPT_TEMPLATE,
    MAX_DOCUMENT_CHARS,
    TRUNCATION_MARKER,
)
from docrelay.domain.models import Document


def truncate_content(content: str, max_chars: int = MAX_DOCUMENT_CHARS) -> str:
    """Return the first ``max_chars`` characters, marked if anything was cut."""
    if len(content) <= max_chars:
        return content
    return content[:max_chars] + TRUNCATION_MARKER


def render_document_block(
    index: int,
    document: Document,
    max_chars: int = MAX_DOCUMENT_CHARS,
) -> str:
    """Render one document as a delimited block.

    Parameters
    ----------
    index : int
        1-based position of the document in the request.
    document : Document
        The document to render.
    max_chars : int
        Per-document content cap.
    """
    return DOCUMENT_BLOCK_TEMPLATE.format(
        index=index,
        name=document.name,
        type=document.type,
        content=truncate_content(document.content, max_chars),
    )


def build_prompt(
    query: str,
    documents: Sequence[Document],
    *,
    max_chars: int = MAX_DOCUMENT_CHARS,
) -> str:
    """Embed the query and all documents into the enrichment template.

    Documents keep their input order.  An empty sequence is accepted and
    renders as ``(0 total)`` with no blocks; callers are expected to reject
    empty document sets before getting here.
    """
    if documents is None:
        raise TypeError("documents must be a sequence of Document, not None")

    blocks = [
        render_document_block(idx, doc, max_chars)
        for idx, doc in enumerate(documents, start=1)
    ]
    return ENRICHMENT_PROMPT_TEMPLATE.format(
        query=query,
        document_count=len(blocks),
        documents=DOCUMENT_BLOCK_SEPARATOR.join(blocks),
    )
