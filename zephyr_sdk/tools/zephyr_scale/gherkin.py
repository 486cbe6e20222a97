"""
Conversion between loosely formatted markdown and canonical Given/When/Then text.

Only a constrained subset is understood: one step per line, optionally behind a
markdown bullet (``-``, ``*``) or a numbered-list marker (``1.``), with
following non-keyword lines folded into the previous step. Anything richer
(tables, doc strings, tags, scenario outlines) is out of scope.
"""
import re
from typing import List, NamedTuple, Optional

STEP_KEYWORDS = ("Given", "When", "Then", "And", "But")

# Bullet and numbering markers are stripped before keyword matching,
# repeatedly, so "- 1. given x" still classifies as a Given step.
_LIST_MARKER = re.compile(r"^(?:[-*]|\d+\.)(?:\s+|$)")
_KEYWORD = re.compile(
    r"^(%s)(?=\s|:|$):?\s*(.*)$" % "|".join(STEP_KEYWORDS),
    re.IGNORECASE,
)
_WHITESPACE = re.compile(r"\s+")

_CANONICAL = {keyword.lower(): keyword for keyword in STEP_KEYWORDS}


class BddStep(NamedTuple):
    keyword: str
    text: str

    def render(self) -> str:
        return f"{self.keyword} {self.text}" if self.text else self.keyword


def _strip_list_markers(line: str) -> str:
    line = line.strip()
    while True:
        stripped = _LIST_MARKER.sub("", line, count=1)
        if stripped == line:
            return line
        line = stripped.strip()


def _match_keyword(line: str) -> Optional[BddStep]:
    match = _KEYWORD.match(line)
    if not match:
        return None
    return BddStep(_CANONICAL[match.group(1).lower()], match.group(2))


def _collapse(text: str) -> str:
    return _WHITESPACE.sub(" ", text).strip()


def parse_steps(text: Optional[str]) -> List[BddStep]:
    """Parse markdown-ish scenario text into an ordered list of steps.

    Lines before the first recognised step (titles, ``Scenario:`` headers)
    are ignored. Returns an empty list when no line starts with a step keyword.
    """
    steps: List[BddStep] = []
    for raw_line in (text or "").splitlines():
        line = _strip_list_markers(raw_line)
        if not line:
            continue
        step = _match_keyword(line)
        if step is not None:
            steps.append(BddStep(step.keyword, _collapse(step.text)))
        elif steps:
            previous = steps[-1]
            steps[-1] = BddStep(previous.keyword, _collapse(f"{previous.text} {line}"))
    return steps


def to_canonical_bdd(text: Optional[str]) -> str:
    """Convert markdown scenario text into canonical Given/When/Then lines.

    An empty string means nothing looked like a BDD step; callers should then
    keep the original text as-is.
    """
    return "\n".join(step.render() for step in parse_steps(text))


def bdd_text_or_original(text: str) -> str:
    converted = to_canonical_bdd(text)
    return converted if converted.strip() else text
