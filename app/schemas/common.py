"""Field types shared by several schema modules."""

from typing import Annotated, Any
from pydantic import BeforeValidator, StringConstraints

# Required free-text field: surrounding whitespace stripped, must not be empty
NonEmptyStr = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]


def _normalize_slug(value: Any) -> Any:
    # Lowercase ahead of the pattern check so "Fade-Factory" is accepted as "fade-factory"
    if isinstance(value, str):
        return value.strip().lower()
    return value


Slug = Annotated[
    str,
    BeforeValidator(_normalize_slug),
    StringConstraints(min_length=2, max_length=64, pattern=r"^[a-z0-9]+(?:-[a-z0-9]+)*$"),
]
