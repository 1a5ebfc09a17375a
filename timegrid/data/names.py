from __future__ import annotations

import re
from typing import Dict, Iterable


# Room codes as they appear in teacher cells: "B110", "A-204", "BIGLAB", "LAB 2", "LAB(3)"
_ROOM_CODE = r"[A-Z]{1,2}-?\d{2,4}[A-Za-z]?"
_LAB = r"(?i:BIG\s?LAB|LAB(?:\s*-?\s*\d+|\s*\([^()]*\))?)"

_ABUTTING_ROOM = re.compile(r"([a-z])(BIGLAB|LAB\b|[A-Z]\d{2,4}\b)")
_TRAILING_PAREN = re.compile(r"\s*\([^()]*\)\s*$")
_TRAILING_CLAUSES = [
    re.compile(r"\s+until\b.*$", re.IGNORECASE),
    re.compile(r"\s+(?:\(?with\)?\s+)?own\b.*$", re.IGNORECASE),
    re.compile(r"\s+make[\s-]?up\b.*$", re.IGNORECASE),
    re.compile(r"\s+at\s+\d{1,2}[:.]\d{2}.*$", re.IGNORECASE),
]
_TRAILING_PLUS = re.compile(r"\s*\+.*$")
_TRAILING_ROOM = re.compile(
    rf"\s+(?:{_ROOM_CODE}|{_LAB}|LINK|WEB)\s*$"
)
_TRAILING_COMMA_ROOM = re.compile(rf"\s*,\s*(?:(?i:room)\s*)?(?:{_ROOM_CODE}|{_LAB})?\s*$")
_TRAILING_PUNCT = re.compile(r"[\s,;:.\-/]+$")
_HONORIFIC = re.compile(r"\b(Mrs|Mr|Ms|Dr|Prof)(?:\.\s*|\s+)(?=[A-Z])", re.IGNORECASE)
_HONORIFIC_SPELLING = {"mrs": "Mrs", "mr": "Mr", "ms": "Ms", "dr": "Dr", "prof": "Prof"}
_BARE_ROOM = re.compile(rf"^(?:{_ROOM_CODE}|{_LAB}|LINK|WEB)$")
_SPACES = re.compile(r"\s+")

NON_PERSON_LABELS = frozenset(
    {
        "computer science",
        "computer science department",
        "department of computer science",
        "applied mathematics",
        "mathematics department",
        "department of mathematics",
        "electrical engineering",
        "industrial engineering",
        "english department",
        "language center",
        "physical education",
        "military department",
        "tba",
        "tbd",
        "vacancy",
        "staff",
    }
)

# case-folded variant -> canonical display spelling
DEFAULT_ALIASES: Dict[str, str] = {
    "dr. ahmad sarosh": "Dr. Ahmad Sarosh",
    "ahmad sarosh": "Dr. Ahmad Sarosh",
    "dr. sarosh": "Dr. Ahmad Sarosh",
    "dr. ahmed sarosh": "Dr. Ahmad Sarosh",
    "sarosh": "Dr. Ahmad Sarosh",
    "dr. remudin mekuria": "Dr. Remudin Mekuria",
    "remudin mekuria": "Dr. Remudin Mekuria",
    "dr. remudin": "Dr. Remudin Mekuria",
    "prof. hasan tahir": "Prof. Hasan Tahir",
    "hasan tahir": "Prof. Hasan Tahir",
    "prof. hassan tahir": "Prof. Hasan Tahir",
    "ms. aizada kasymova": "Ms. Aizada Kasymova",
    "aizada kasymova": "Ms. Aizada Kasymova",
    "aizada": "Ms. Aizada Kasymova",
}

def coerce_text(value: object) -> str:
    # Teacher cells arrive either as plain strings or as {"name"/"label": ...} objects
    if value is None:
        return ""
    if isinstance(value, dict):
        value = value.get("name") or value.get("label") or ""
    return str(value).strip()


class NameNormalizer:
    """Maps raw teacher-cell text onto one canonical spelling per person.

    The cleaning pipeline is re-applied until the text stops changing, so
    ``normalize(normalize(s)) == normalize(s)`` holds for any input.
    """

    def __init__(
        self,
        aliases: Dict[str, str] | None = None,
        non_person_labels: Iterable[str] | None = None,
    ):
        self.aliases: Dict[str, str] = dict(DEFAULT_ALIASES)
        if aliases:
            self.aliases.update({k.casefold(): v for k, v in aliases.items()})
        self.non_person_labels = set(NON_PERSON_LABELS)
        if non_person_labels:
            self.non_person_labels.update(s.casefold() for s in non_person_labels)

    def normalize(self, raw: object) -> str:
        text = coerce_text(raw)
        seen = {text}
        while True:
            cleaned = self._clean_once(text)
            if cleaned == text or cleaned in seen:
                return cleaned
            seen.add(cleaned)
            text = cleaned

    def identity(self, raw: object) -> str:
        return self.normalize(raw).casefold()

    def _clean_once(self, text: str) -> str:
        s = _ABUTTING_ROOM.sub(r"\1 \2", text).strip()

        # Co-teacher cells list the primary teacher first: "Smith/Jones"
        if s.startswith("/"):
            s = s[1:]
        if "/" in s:
            s = s.split("/", 1)[0]

        s = _TRAILING_PAREN.sub("", s)
        for clause in _TRAILING_CLAUSES:
            s = clause.sub("", s)
        s = _TRAILING_PLUS.sub("", s)

        while True:
            stripped = _TRAILING_ROOM.sub("", s)
            if stripped == s:
                break
            s = stripped

        s = _TRAILING_COMMA_ROOM.sub("", s)
        s = _TRAILING_PUNCT.sub("", s)
        s = _HONORIFIC.sub(lambda m: _HONORIFIC_SPELLING[m.group(1).lower()] + ". ", s)
        s = _SPACES.sub(" ", s).strip()

        if not s or _BARE_ROOM.match(s) or s.casefold() in self.non_person_labels:
            return ""
        if not any(ch.isalpha() for ch in s):
            return ""
        return self.aliases.get(s.casefold(), s)


_default = NameNormalizer()


def normalize(raw: object) -> str:
    return _default.normalize(raw)


def identity(raw: object) -> str:
    return _default.identity(raw)
