"""Visibility checks for query results.

Elements may carry a visibility label in a property; a caller sees the
element only when their data authorisations satisfy the label.

Key Components:
- User: The calling principal and its resolved data authorisations
- is_visible: Check a single element against a set of authorisations
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterable

from .elements import Element
from .exceptions import EvaluationError

DEFAULT_VISIBILITY_PROPERTY = "visibility"
TOKEN_SEPARATOR = "&"


@dataclass(frozen=True)
class User:
    """A calling principal.

    Authorisation tokens are issued elsewhere; this only carries the
    resolved set so it can be passed explicitly through a query.

    Attributes:
        user_id: Identifier of the principal
        data_auths: Data authorisation tokens held by the principal
    """

    user_id: str = "UNKNOWN"
    data_auths: frozenset[str] = field(default_factory=frozenset)

    def __post_init__(self):
        """Validate the user and normalise authorisations."""
        if not isinstance(self.user_id, str) or not self.user_id.strip():
            raise ValueError("user_id cannot be empty")

        if isinstance(self.data_auths, str):
            raise TypeError("data_auths must be a collection of strings, not a string")

        auths = frozenset(self.data_auths)
        for auth in auths:
            if not isinstance(auth, str) or not auth.strip():
                raise ValueError("data_auths must contain non-empty strings")
        object.__setattr__(self, "data_auths", auths)


def parse_label(label: str) -> frozenset[str]:
    """Split a visibility label into the tokens it requires.

    Args:
        label: Label such as ``"basic"`` or ``"basic&private"``

    Returns:
        The required tokens; empty for an empty label
    """
    return frozenset(token.strip() for token in label.split(TOKEN_SEPARATOR) if token.strip())


def is_visible(
    element: Element,
    data_auths: Iterable[str],
    visibility_property: str = DEFAULT_VISIBILITY_PROPERTY,
) -> bool:
    """Check whether *element* may be seen with *data_auths*.

    Args:
        element: Element to check
        data_auths: Authorisation tokens of the caller
        visibility_property: Property holding the visibility label

    Returns:
        True if the element has no label, an empty label, or every
        required token is held

    Raises:
        EvaluationError: If the label is not a string, or is non-empty
            but names no tokens (e.g. ``"&"`` or ``" "``)
    """
    label: Any = element.properties.get(visibility_property)
    if label is None:
        return True
    if not isinstance(label, str):
        raise EvaluationError(
            f"Visibility label on {element.group} element must be a string, "
            f"got {type(label).__name__}"
        )

    if label == "":
        return True

    required = parse_label(label)
    if not required:
        raise EvaluationError(
            f"Visibility label {label!r} on {element.group} element names no tokens"
        )

    return required.issubset(data_auths)


__all__ = ["DEFAULT_VISIBILITY_PROPERTY", "User", "is_visible", "parse_label"]
