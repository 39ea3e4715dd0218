"""Recoverable problems found while decoding or validating a document."""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field

PARSE_ERROR = "parse-error"
INVALID_LANGUAGE_TAG = "invalid-language-tag"
DISALLOWED_CHILD = "disallowed-child"
MISSING_ATTRIBUTE = "missing-attribute"
DUPLICATE_ID = "duplicate-id"
UNEXPECTED_TEXT = "unexpected-text"
UNRESOLVED_REFERENCE = "unresolved-reference"


@dataclass(frozen=True)
class Issue:
    code: str
    message: str
    element: str | None = None
    attribute: str | None = None
    position: int | None = None

    def to_dict(self) -> dict:
        return {
            "code": self.code,
            "message": self.message,
            "element": self.element,
            "attribute": self.attribute,
            "position": self.position,
        }


@dataclass
class DecodeReport:
    issues: list[Issue] = field(default_factory=list)

    def add(self, code: str, message: str, **where) -> Issue:
        issue = Issue(code, message, **where)
        self.issues.append(issue)
        return issue

    def extend(self, issues: list[Issue]) -> None:
        self.issues.extend(issues)

    def by_code(self, code: str) -> list[Issue]:
        return [i for i in self.issues if i.code == code]

    @property
    def ok(self) -> bool:
        return not self.issues

    def __iter__(self) -> Iterator[Issue]:
        return iter(self.issues)

    def __len__(self) -> int:
        return len(self.issues)
