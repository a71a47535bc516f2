import re
from dataclasses import dataclass
from typing import Optional

# Characters that carry meaning in a regular expression: - [ ] { } ( ) * + ? . , \ ^ $ | # and whitespace
REGEX_METACHARACTERS = re.compile(r"[-\[\]{}()*+?.,\\^$|#\s]")

# Inline flag understood by both Python's re and PostgreSQL's regex engine
CASE_INSENSITIVE = "(?i)"


def escape_regex(text):
    """Prefix every regex metacharacter in text with a backslash."""
    return REGEX_METACHARACTERS.sub(lambda m: "\\" + m.group(0), text)


@dataclass(frozen=True)
class SafePattern:
    """A search pattern that only ever matches its query literally."""

    query: str
    escaped: str

    @property
    def pattern(self) -> str:
        return CASE_INSENSITIVE + self.escaped

    def compile(self):
        return re.compile(self.escaped, re.IGNORECASE)

    def matches(self, text: str) -> bool:
        return self.compile().search(text) is not None


def build_search_predicate(raw_query: Optional[str]) -> Optional[SafePattern]:
    """
    Build a SafePattern from raw search input.

    Returns None when no query was supplied, so callers can tell
    "nothing searched" apart from "searched and found nothing".
    """
    if raw_query is None or raw_query == "":
        return None
    return SafePattern(query=raw_query, escaped=escape_regex(raw_query))
