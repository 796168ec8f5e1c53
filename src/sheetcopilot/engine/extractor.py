"""Recover a formula from a model's free-text reply."""

import logging
import re
from dataclasses import dataclass
from typing import Callable, Optional, Pattern

logger = logging.getLogger(__name__)

_LABEL_RE = re.compile(r"^formula:\s*", re.IGNORECASE)


def _strip_markers(text: str) -> str:
    """Remove a "Formula:" label and any code fence or backtick markers."""
    text = _LABEL_RE.sub("", text)
    text = text.replace("```", "")
    text = text.replace("`", "")
    return text.strip()


def _balanced_call(text: str) -> str:
    """Cut a function-call formula at the parenthesis that closes its first call.

    Parentheses inside double-quoted strings are ignored. Returns "" when the
    call is never closed.
    """
    depth = 0
    quoted = False
    for i, char in enumerate(text):
        if char == '"':
            quoted = not quoted
        elif quoted:
            continue
        elif char == "(":
            depth += 1
        elif char == ")":
            depth -= 1
            if depth == 0:
                return text[: i + 1]
    return ""


@dataclass(frozen=True)
class FormulaMatcher:
    """A reply format: the pattern that finds it and how to clean the match."""

    name: str
    pattern: Pattern
    cleanup: Callable[[str], str] = _strip_markers

    def extract(self, reply: str) -> Optional[str]:
        match = self.pattern.search(reply)
        if not match:
            return None
        formula = self.cleanup(match.group(0))
        return formula if formula.startswith("=") else None


# Order is precedence; append new formats at the end.
MATCHERS: tuple[FormulaMatcher, ...] = (
    FormulaMatcher("formula_line", re.compile(r"^=.+$", re.MULTILINE)),
    FormulaMatcher("after_newline", re.compile(r"(?:^|\n)=.+$", re.MULTILINE)),
    FormulaMatcher("labelled", re.compile(r"formula:\s*=.+$", re.MULTILINE | re.IGNORECASE)),
    FormulaMatcher("code_block", re.compile(r"```\s*=.+\s*```")),
    FormulaMatcher("inline_code", re.compile(r"`=.+`")),
    FormulaMatcher("inline_call", re.compile(r"=[A-Za-z][A-Za-z0-9_.]*\(.*"), _balanced_call),
)


def extract_formula(reply: Optional[str], matchers: tuple[FormulaMatcher, ...] = MATCHERS) -> Optional[str]:
    """Return the formula in a reply, or None when there is none.

    The first matcher whose cleaned match starts with "=" wins. A reply that
    matches nothing is accepted whole only if it is a single line starting
    with "=".
    """
    if not reply:
        return None

    for matcher in matchers:
        formula = matcher.extract(reply)
        if formula:
            logger.debug(f"Formula found by '{matcher.name}' matcher")
            return formula

    clean = reply.strip()
    if clean.startswith("=") and "\n" not in clean:
        return clean
    return None
