from typing import Any, List, Tuple

from .enums import FirestoreOperators

FilterTuple = Tuple[str, FirestoreOperators, Any]


class FirestoreField:
    """
    Class-level handle on a document field, used to build store-side filters.

    Examples
    --------
    >>> Post.date >= cutoff
    ('date', FirestoreOperators.GTE, cutoff)

    Accessed on an **instance** the stored value is returned; accessed on the
    class the descriptor itself is returned so comparison operators can build
    ``(field, operator, value)`` tuples for :meth:`BaseFirestoreModel.find`.
    Dotted names address fields of embedded maps (``"author.id"``).
    """

    def __init__(self, field_name: str):
        self.field_name = field_name

    def __get__(self, instance, owner):
        if instance is None:
            return self
        return getattr(instance, self.field_name, None)

    def __str__(self) -> str:          # noqa: DunderStr
        return str(self.field_name)

    __repr__ = __str__

    def __hash__(self) -> int:         # noqa: DunderHash
        return hash(str(self.field_name))

    # ------------------------------------------------------------------ #
    # Comparison operators build (field, operator, value) tuples         #
    # ------------------------------------------------------------------ #

    def __eq__(self, other) -> FilterTuple:      # type: ignore[override]
        return (self.field_name, FirestoreOperators.EQ, other)

    def __ne__(self, other) -> FilterTuple:      # type: ignore[override]
        return (self.field_name, FirestoreOperators.NE, other)

    def __lt__(self, other) -> FilterTuple:
        return (self.field_name, FirestoreOperators.LT, other)

    def __le__(self, other) -> FilterTuple:
        return (self.field_name, FirestoreOperators.LTE, other)

    def __gt__(self, other) -> FilterTuple:
        return (self.field_name, FirestoreOperators.GT, other)

    def __ge__(self, other) -> FilterTuple:
        return (self.field_name, FirestoreOperators.GTE, other)

    def in_(self, values: List[Any]) -> FilterTuple:
        """Return an ``IN`` filter tuple."""
        return (self.field_name, FirestoreOperators.IN, values)

    def array_contains(self, value: Any) -> FilterTuple:
        """Return an ``ARRAY_CONTAINS`` filter tuple."""
        return (self.field_name, FirestoreOperators.ARRAY_CONTAINS, value)
