"""
Declarative annotations for entity members.

Attach them with typing.Annotated, e.g.::

    name: Annotated[str, Required(), MaxLength(50)]
"""

import dataclasses
from dataclasses import dataclass
from typing import Any, Optional, Tuple

from .constants import ATTRIBUTE_SUFFIX


class Annotation:
    """Base class for member annotations. Subclasses are dataclasses."""

    @classmethod
    def kind(cls) -> str:
        return annotation_kind(cls)

    def parameters(self) -> Tuple[Tuple[str, Any], ...]:
        """Named parameters of this annotation, in declaration order."""
        return tuple((f.name, getattr(self, f.name)) for f in dataclasses.fields(self))


def annotation_kind(annotation_type: type) -> str:
    """Kind name of an annotation class: its name without a trailing 'Attribute'."""
    name = annotation_type.__name__
    if name.endswith(ATTRIBUTE_SUFFIX) and len(name) > len(ATTRIBUTE_SUFFIX):
        name = name[:-len(ATTRIBUTE_SUFFIX)]
    return name


@dataclass(frozen=True)
class Key(Annotation):
    pass


@dataclass(frozen=True)
class PrimaryKey(Annotation):
    pass


@dataclass(frozen=True)
class ConcurrencyCheck(Annotation):
    pass


@dataclass(frozen=True)
class Required(Annotation):
    pass


@dataclass(frozen=True)
class DefaultValue(Annotation):
    value: Any


@dataclass(frozen=True)
class MaxLength(Annotation):
    length: int


@dataclass(frozen=True)
class StringLength(Annotation):
    maximum_length: int
    minimum_length: int = 0


@dataclass(frozen=True)
class DatabaseGenerated(Annotation):
    option: str = "Identity"


@dataclass(frozen=True)
class ForeignKey(Annotation):
    name: str


@dataclass(frozen=True)
class InverseProperty(Annotation):
    property: str


@dataclass(frozen=True)
class Validator(Annotation):
    """Base for client-side validation rules; every parameter is sent to the client."""
    error_message: Optional[str] = None


@dataclass(frozen=True)
class RangeValidator(Validator):
    minimum: Optional[Any] = None
    maximum: Optional[Any] = None


@dataclass(frozen=True)
class RegexValidator(Validator):
    pattern: Optional[str] = None
