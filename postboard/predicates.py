"""
Search predicates over the post document shape.

A :class:`Predicate` has two halves. ``filters`` are ``(field, op, value)``
tuples Firestore evaluates; the date range lives there. ``text`` is a
:class:`TextPattern` evaluated in process against each streamed document,
since Firestore has no case-insensitive substring operator.
"""

import re
from typing import Any, Dict, Iterator, Optional, Sequence, Tuple

from .dates import DayStart, ExclusiveBound
from .firestore_fields import FilterTuple, FirestoreField

TITLE_FIELDS = ("title",)
FULL_TEXT_FIELDS = ("title", "body", "comments.text")

DATE_FIELD = FirestoreField("date")


def iter_field_values(data: Any, path: str) -> Iterator[Any]:
    """
    Yield every value at dotted ``path`` in ``data``, descending into lists.

    ``iter_field_values(post, "comments.text")`` yields the text of each
    comment. Missing keys yield nothing.
    """
    head, _, rest = path.partition(".")
    if isinstance(data, list):
        for item in data:
            yield from iter_field_values(item, path)
        return
    if not isinstance(data, dict) or head not in data:
        return
    value = data[head]
    if rest:
        yield from iter_field_values(value, rest)
    elif isinstance(value, list):
        yield from value
    else:
        yield value


class TextPattern:
    """
    Case-insensitive literal substring match over one or more field paths.

    The text is escaped, so ``"c++"`` or ``"a.b"`` match literally, exactly
    as a "contains, ignoring case" comparison would.
    """

    def __init__(self, text: str, field_paths: Sequence[str]):
        self.text = text
        self.field_paths = tuple(field_paths)
        self._regex = re.compile(re.escape(text), re.IGNORECASE)

    def __repr__(self) -> str:
        return f"TextPattern({self.text!r}, {self.field_paths!r})"

    def __eq__(self, other):
        if not isinstance(other, TextPattern):
            return NotImplemented
        return (self.text, self.field_paths) == (other.text, other.field_paths)

    def __hash__(self):
        return hash((self.text, self.field_paths))

    def search(self, value: Any) -> bool:
        return isinstance(value, str) and self._regex.search(value) is not None

    def matches(self, data: Dict[str, Any]) -> bool:
        return any(
            self.search(value)
            for path in self.field_paths
            for value in iter_field_values(data, path)
        )


class Predicate:
    """Store-side filters ANDed with an optional in-process text pattern."""

    def __init__(self, filters: Sequence[FilterTuple] = (), text: Optional[TextPattern] = None):
        self.filters: Tuple[FilterTuple, ...] = tuple(filters)
        self.text = text

    def __repr__(self) -> str:
        return f"Predicate(filters={list(self.filters)!r}, text={self.text!r})"

    def __eq__(self, other):
        if not isinstance(other, Predicate):
            return NotImplemented
        return (self.filters, self.text) == (other.filters, other.text)

    def __hash__(self):
        return hash((self.filters, self.text))

    def accepts(self, data: Dict[str, Any]) -> bool:
        return self.text is None or self.text.matches(data)


def _text_pattern(text: Optional[str], fields: Sequence[str]) -> Optional[TextPattern]:
    # empty text matches every post
    if not text:
        return None
    return TextPattern(text, fields)


def build_title_predicate(text: Optional[str]) -> Predicate:
    return Predicate(text=_text_pattern(text, TITLE_FIELDS))


def build_full_search_predicate(
    text: Optional[str],
    min_start: DayStart,
    max_exclusive: ExclusiveBound,
) -> Predicate:
    """
    Posts whose title, body or any comment text contains ``text`` (ignoring
    case) and whose ``date`` lies in ``[min_start, max_exclusive)``.
    """
    if not isinstance(min_start, DayStart):
        raise TypeError(f"min_start must be a DayStart, got {type(min_start).__name__}")
    if not isinstance(max_exclusive, ExclusiveBound):
        raise TypeError(
            f"max_exclusive must be an ExclusiveBound, got {type(max_exclusive).__name__}; "
            "use DayStart.next_day()"
        )
    return Predicate(
        filters=[
            DATE_FIELD >= min_start.instant,
            DATE_FIELD < max_exclusive.instant,
        ],
        text=_text_pattern(text, FULL_TEXT_FIELDS),
    )
