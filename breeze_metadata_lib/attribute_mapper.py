"""
Maps declarative member annotations onto data and navigation property fields.
"""

import dataclasses
from typing import Any, Callable, Dict, Iterable, List, Optional

from .attributes import annotation_kind
from .classifier import ClassifiedMember
from .constants import CONCURRENCY_MODE_FIXED
from .errors import AnnotationParameterError, MetadataBuildError

# (annotation, property fields being built, member name) -> None
AnnotationHandler = Callable[[Any, Dict[str, Any], str], None]


def lower_camel(name: str) -> str:
    """'RangeValidator' -> 'rangeValidator', 'error_message' -> 'errorMessage'."""
    parts = [p for p in name.split("_") if p]
    if not parts:
        return name
    head = parts[0][:1].lower() + parts[0][1:]
    return head + "".join(p[:1].upper() + p[1:] for p in parts[1:])


def kind_of(annotation: Any) -> str:
    annotation_type = annotation if isinstance(annotation, type) else type(annotation)
    return annotation_kind(annotation_type)


def get_parameter(annotation: Any, parameter: str, member: str) -> Any:
    """Read a named parameter of an annotation; a missing one is a build defect."""
    try:
        return getattr(annotation, parameter)
    except AttributeError:
        raise AnnotationParameterError(kind_of(annotation), parameter, member) from None


def _set(field: str, value: Any) -> AnnotationHandler:
    def handler(annotation, fields, member):
        fields[field] = value
    return handler


def _copy(field: str, parameter: str) -> AnnotationHandler:
    def handler(annotation, fields, member):
        fields[field] = get_parameter(annotation, parameter, member)
    return handler


def _string_length(annotation, fields, member):
    fields["max_length"] = get_parameter(annotation, "maximum_length", member)
    min_length = get_parameter(annotation, "minimum_length", member)
    if min_length is not None and min_length > 0:
        fields["min_length"] = min_length


DATA_PROPERTY_HANDLERS: Dict[str, AnnotationHandler] = {
    "Key": _set("is_part_of_key", True),
    "PrimaryKey": _set("is_part_of_key", True),
    "ConcurrencyCheck": _set("concurrency_mode", CONCURRENCY_MODE_FIXED),
    "Required": _set("is_nullable", False),
    "DefaultValue": _copy("default_value", "value"),
    "MaxLength": _copy("max_length", "length"),
    "StringLength": _string_length,
    "DatabaseGenerated": _set("is_computed", True),
    "ForeignKey": _copy("foreign_key", "name"),
    "InverseProperty": _copy("inverse_property", "property"),
}

NAVIGATION_PROPERTY_HANDLERS: Dict[str, AnnotationHandler] = {
    "ForeignKey": _copy("foreign_key", "name"),
    "InverseProperty": _copy("inverse_property", "property"),
}


def default_is_validator_kind(kind: str) -> bool:
    return "Validat" in kind


class AttributeMapper:
    """Turns annotations into normalized metadata fields and validator entries.

    Recognized kinds dispatch through a registry of handlers. A kind that is not
    registered but passes the validator test becomes a validator; anything else
    is ignored.
    """

    def __init__(self,
                 data_handlers: Optional[Dict[str, AnnotationHandler]] = None,
                 navigation_handlers: Optional[Dict[str, AnnotationHandler]] = None,
                 validator_kinds: Iterable[str] = (),
                 is_validator_kind: Optional[Callable[[str], bool]] = default_is_validator_kind):
        self.data_handlers = dict(DATA_PROPERTY_HANDLERS if data_handlers is None else data_handlers)
        self.navigation_handlers = dict(
            NAVIGATION_PROPERTY_HANDLERS if navigation_handlers is None else navigation_handlers
        )
        self.validator_kinds = set(validator_kinds)
        self._is_validator_kind = is_validator_kind

    def register(self, kind: str, handler: AnnotationHandler, navigation: bool = False):
        """Add or replace the handler for an annotation kind."""
        if navigation:
            self.navigation_handlers[kind] = handler
        else:
            self.data_handlers[kind] = handler

    def is_validator_kind(self, kind: str) -> bool:
        if kind in self.validator_kinds:
            return True
        return bool(self._is_validator_kind and self._is_validator_kind(kind))

    def map_data_property(self, classified: ClassifiedMember) -> Dict[str, Any]:
        """Fields contributed by the annotations of a data property."""
        fields: Dict[str, Any] = {}
        validators: List[Dict[str, Any]] = []
        for annotation in classified.annotations:
            kind = kind_of(annotation)
            handler = self.data_handlers.get(kind)
            if handler is not None:
                handler(annotation, fields, classified.name)
            elif self.is_validator_kind(kind):
                validators.extend(self.validator_entries(annotation, classified.name))
        if validators:
            fields["validators"] = validators
        return fields

    def map_navigation_property(self, classified: ClassifiedMember) -> Dict[str, Any]:
        """Fields contributed by the annotations of a navigation property."""
        fields: Dict[str, Any] = {}
        for annotation in classified.annotations:
            handler = self.navigation_handlers.get(kind_of(annotation))
            if handler is not None:
                handler(annotation, fields, classified.name)
        return fields

    def validator_entries(self, annotation: Any, member: str) -> List[Dict[str, Any]]:
        """One entry naming the validator, then one per non-None parameter.

        Callable parameters (validation functions, classes) only run on the server
        and are left out.
        """
        kind = kind_of(annotation)
        entries = [{"name": lower_camel(kind)}]
        for name, value in self._parameters(annotation, kind, member):
            if value is None or callable(value):
                continue
            entries.append({lower_camel(name): value})
        return entries

    @staticmethod
    def _parameters(annotation: Any, kind: str, member: str):
        if isinstance(annotation, type):
            return ()
        parameters = getattr(annotation, "parameters", None)
        if callable(parameters):
            return tuple(parameters())
        if dataclasses.is_dataclass(annotation):
            return tuple((f.name, getattr(annotation, f.name)) for f in dataclasses.fields(annotation))
        raise MetadataBuildError(
            f"Validator annotation '{kind}' on member '{member}' does not expose its parameters"
        )
