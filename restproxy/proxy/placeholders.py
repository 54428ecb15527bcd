"""Header templating against request-scoped attributes.

Each resource may configure extra upstream headers as "name:valueTemplate"
entries. Templates reference request attributes with "{identifier}"
placeholders, e.g. "X-User:{userId}". Resolution never fails the request:
malformed entries are skipped and unresolvable placeholders become empty,
each with a warning on the audit logger.
"""

import re
from collections.abc import Callable, Iterable, Iterator, Mapping
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any

from restproxy.logging.audit import get_audit_logger

PLACEHOLDER_PATTERN = re.compile(r"\{([^{}]*)\}")

PlaceholderLookup = Callable[[str], str | None]


@dataclass(frozen=True)
class Text:
    value: str


@dataclass(frozen=True)
class Other:
    type_name: str


AttributeValue = Text | Other


class RequestAttributes:
    """Read-only snapshot of request-scoped attributes.

    Values are tagged once, when the snapshot is taken: strings become Text,
    anything else becomes Other and can never fill a placeholder.
    """

    __slots__ = ("_values",)

    def __init__(self, values: Mapping[str, AttributeValue] | None = None):
        self._values: Mapping[str, AttributeValue] = MappingProxyType(dict(values or {}))

    @classmethod
    def snapshot(cls, source: Mapping[str, Any]) -> "RequestAttributes":
        tagged: dict[str, AttributeValue] = {}
        for name, value in source.items():
            if isinstance(value, str):
                tagged[name] = Text(value)
            else:
                tagged[name] = Other(type(value).__name__)
        return cls(tagged)

    def get(self, name: str) -> AttributeValue | None:
        return self._values.get(name)

    def __contains__(self, name: object) -> bool:
        return name in self._values

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def __repr__(self) -> str:
        return f"RequestAttributes({dict(self._values)!r})"


def resolve_placeholders(template: str, lookup: PlaceholderLookup) -> str:
    """Replace every {identifier} in template with lookup(identifier).

    A None from lookup substitutes an empty string for that placeholder
    only. Substituted text is not scanned again.
    """

    def _substitute(match: re.Match) -> str:
        value = lookup(match.group(1))
        return value if value is not None else ""

    return PLACEHOLDER_PATTERN.sub(_substitute, template)


def attribute_lookup(attributes: RequestAttributes) -> PlaceholderLookup:
    """Build a placeholder lookup over an attribute snapshot."""
    logger = get_audit_logger()

    def _lookup(name: str) -> str | None:
        value = attributes.get(name)
        if isinstance(value, Text):
            return value.value
        if value is None:
            logger.warning(
                "configuration error: could not resolve placeholder, attribute is missing",
                extra={"audit_data": {"placeholder": name}},
            )
        else:
            logger.warning(
                "configuration error: could not resolve placeholder, attribute is not a string",
                extra={"audit_data": {"placeholder": name, "attribute_type": value.type_name}},
            )
        return None

    return _lookup


def resolve_headers(entries: Iterable[str], attributes: RequestAttributes) -> dict[str, str]:
    """Resolve raw "name:valueTemplate" entries into upstream headers.

    Entries are applied in order, so a header configured twice keeps the
    later value.
    """
    lookup = attribute_lookup(attributes)
    headers: dict[str, str] = {}
    for entry in entries:
        tokens = entry.split(":")
        if len(tokens) != 2 or not tokens[0].strip() or not tokens[1]:
            get_audit_logger().warning(
                "configuration error: proxy header needs a name and a value split on ':', ignoring",
                extra={"audit_data": {"proxy_header": entry}},
            )
            continue
        name, template = tokens
        headers[name] = resolve_placeholders(template, lookup).strip()
    return headers
