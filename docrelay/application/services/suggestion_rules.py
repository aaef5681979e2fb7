"""Suggestion policy table – decides which ENRICHMENT lines are real suggestions.

LLM replies often echo the prompt's own example blocks or pad the
ENRICHMENT section with vague filler.  Each rule below is a named predicate
so that the filter can be tested (and logged) one rule at a time.

A line goes through three stages:

1. **Skip rules** run on the trimmed line.  The first match discards it.
2. **Cleaning** strips bullet / number markers and wrapping quotes.
3. **Accept rules** run on the cleaned line.  All of them must pass.

The ``actionable`` keyword check is deliberately narrower than a plain
substring test: ``department``, ``document`` and ``help`` only count as
whole words, so "More documentation needed" is rejected, at the cost of
also rejecting lines such as "Your HR team can be helpful with the leave
policy".
"""

from __future__ import annotations

import re
from collections.abc import Callable
from dataclasses import dataclass

_HEADER_LABEL_RE = re.compile(
    r"^(EXAMPLE|DOCUMENTS|DATA|ACTIONS|RECOMMENDATIONS?)[:_\s]*$", re.IGNORECASE
)
_SECTION_LABEL_RE = re.compile(r"^(DOCUMENTS|DATA|ACTIONS|ENRICHMENT)", re.IGNORECASE)
_ACTION_VERB_RE = re.compile(
    r"^(Upload|Ask|Contact|Check|Request|Review|Get|Find|Look|Reach|Schedule|Consult|Obtain)",
    re.IGNORECASE,
)

_BULLET_RE = re.compile(r"^[-•*]\s*")
_NUMBERING_RE = re.compile(r"^\d+\.\s*")
_LEADING_QUOTE_RE = re.compile(r"^[\"'“”]")
_TRAILING_QUOTE_RE = re.compile(r"[\"'“”]$")

REJECT_GLYPH = "❌"
EXAMPLE_PHRASES = ("example good", "example bad")
# Whole words only: "documentation" must not count as "document".
_ACTION_KEYWORD_RE = re.compile(r"\b(departments?|documents?|help)\b")
MIN_SUGGESTION_LENGTH = 20


@dataclass(frozen=True)
class LineRule:
    """A named predicate over a single ENRICHMENT line."""

    name: str
    description: str
    predicate: Callable[[str], bool]

    def __call__(self, line: str) -> bool:
        return self.predicate(line)


# ---------------------------------------------------------------------------
# Predicates
# ---------------------------------------------------------------------------
def is_blank(line: str) -> bool:
    return not line


def is_header_label(line: str) -> bool:
    return _HEADER_LABEL_RE.match(line) is not None


def references_example(line: str) -> bool:
    lowered = line.lower()
    return any(phrase in lowered for phrase in EXAMPLE_PHRASES)


def has_reject_glyph(line: str) -> bool:
    return REJECT_GLYPH in line


def is_long_enough(line: str) -> bool:
    return len(line) > MIN_SUGGESTION_LENGTH


def is_not_section_label(line: str) -> bool:
    return _SECTION_LABEL_RE.match(line) is None


def is_actionable(line: str) -> bool:
    """Starts with an action verb or mentions a department, document or help."""
    if _ACTION_VERB_RE.match(line):
        return True
    return _ACTION_KEYWORD_RE.search(line) is not None


# ---------------------------------------------------------------------------
# Policy table (order matters)
# ---------------------------------------------------------------------------
SKIP_RULES: tuple[LineRule, ...] = (
    LineRule("blank_line", "empty after trimming", is_blank),
    LineRule("header_label", "bare header word such as 'DOCUMENTS:'", is_header_label),
    LineRule(
        "example_reference",
        "echo of the prompt's good/bad example headings",
        references_example,
    ),
    LineRule("reject_glyph", "line copied from the bad-example list", has_reject_glyph),
)

ACCEPT_RULES: tuple[LineRule, ...] = (
    LineRule("min_length", f"longer than {MIN_SUGGESTION_LENGTH} characters", is_long_enough),
    LineRule("not_section_label", "does not start with a section label", is_not_section_label),
    LineRule("actionable", "action verb or department/document/help keyword", is_actionable),
)


def clean_suggestion(line: str) -> str:
    """Strip one bullet or number marker and one pair of wrapping quotes."""
    cleaned = _BULLET_RE.sub("", line, count=1)
    cleaned = _NUMBERING_RE.sub("", cleaned, count=1)
    cleaned = _LEADING_QUOTE_RE.sub("", cleaned, count=1)
    cleaned = _TRAILING_QUOTE_RE.sub("", cleaned, count=1)
    return cleaned.strip()


def rejection_reason(line: str) -> str | None:
    """Name of the first rule that rejects *line*, or None if it is kept."""
    trimmed = line.strip()
    for rule in SKIP_RULES:
        if rule(trimmed):
            return rule.name
    cleaned = clean_suggestion(trimmed)
    for rule in ACCEPT_RULES:
        if not rule(cleaned):
            return rule.name
    return None


def evaluate_line(line: str) -> str | None:
    """Return the cleaned suggestion for *line*, or None when it is rejected."""
    if rejection_reason(line) is not None:
        return None
    return clean_suggestion(line.strip())
