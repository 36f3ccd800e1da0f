"""
Classification of entity members into data and navigation properties.
"""

import array
import collections
import collections.abc
import dataclasses
import inspect
import sys
import types
import typing
from dataclasses import dataclass
from enum import Enum
from typing import Annotated, Any, ClassVar, Dict, Iterable, List, Optional, Sequence, Tuple, Union

from .constants import DATA_TYPE_NAMES, SCALAR_ITERABLES, VALUE_TYPES
from .errors import MetadataBuildError

# Concrete containers that count as collections even without type parameters
ARRAY_TYPES = (list, tuple, set, frozenset, collections.deque, array.array)


@dataclass(frozen=True)
class MemberInfo:
    """An instance member of an entity class, as declared by its type annotation."""
    name: str
    annotation: Any
    declaring_type: type


@dataclass(frozen=True)
class ClassifiedMember:
    """A member with Annotated metadata and Optional wrappers resolved."""
    member: MemberInfo
    property_type: Any
    annotations: Tuple[Any, ...]
    is_optional: bool
    is_nullable: bool
    is_collection: bool
    element_type: Any

    @property
    def name(self) -> str:
        return self.member.name


def split_annotated(tp: Any) -> Tuple[Any, Tuple[Any, ...]]:
    """Separate Annotated[T, ...] into T and its metadata."""
    if typing.get_origin(tp) is Annotated:
        return tp.__origin__, tuple(tp.__metadata__)
    return tp, ()


def unwrap_optional(tp: Any) -> Tuple[Any, bool]:
    """Strip None from a union. Returns the underlying type and whether it was optional."""
    origin = typing.get_origin(tp)
    if origin is Union or origin is getattr(types, "UnionType", None):
        args = typing.get_args(tp)
        non_none = tuple(a for a in args if a is not type(None))
        if len(non_none) < len(args):
            if len(non_none) == 1:
                return non_none[0], True
            return Union[non_none], True
    return tp, False


def _strip(tp: Any) -> Tuple[Any, Tuple[Any, ...], bool]:
    tp, outer = split_annotated(tp)
    tp, optional = unwrap_optional(tp)
    tp, inner = split_annotated(tp)
    return tp, outer + inner, optional


def is_collection_type(tp: Any) -> bool:
    """True for arrays and parameterized iterables. Strings and bytes are scalars."""
    origin = typing.get_origin(tp) or tp
    if not isinstance(origin, type):
        return False
    if issubclass(origin, SCALAR_ITERABLES):
        return False
    if issubclass(origin, ARRAY_TYPES):
        return True
    if origin.__module__ == collections.abc.__name__ and issubclass(origin, collections.abc.Iterable):
        return True
    return bool(typing.get_args(tp)) and issubclass(origin, collections.abc.Iterable)


def element_type(tp: Any) -> Any:
    """Element type of a collection, or the type itself when it is not a collection."""
    if not is_collection_type(tp):
        return tp
    args = typing.get_args(tp)
    if args:
        return args[0]
    return object


def data_type_name(tp: Any) -> str:
    """Name sent to the client as a data property's dataType."""
    try:
        if tp in DATA_TYPE_NAMES:
            return DATA_TYPE_NAMES[tp]
    except TypeError:
        pass  # unhashable typing construct
    origin = typing.get_origin(tp) or tp
    return getattr(origin, "__name__", str(tp))


def is_enum_type(tp: Any) -> bool:
    return isinstance(tp, type) and issubclass(tp, Enum)


def own_type_hints(klass: type, names: Sequence[str]) -> Dict[str, Any]:
    """Resolve the named annotations declared directly on klass.

    Only the requested names are evaluated, so annotations of library base classes
    that reference type-checking-only imports never get resolved.
    """
    annotations = inspect.get_annotations(klass)
    shim = type(klass.__name__, (), {
        "__annotations__": {name: annotations[name] for name in names},
        "__module__": klass.__module__,
    })
    module = sys.modules.get(klass.__module__)
    globalns = dict(vars(module)) if module is not None else {}
    localns = {klass.__name__: klass}
    try:
        return typing.get_type_hints(shim, globalns=globalns, localns=localns, include_extras=True)
    except (NameError, TypeError) as e:
        raise MetadataBuildError(f"Cannot resolve type annotations of {klass.__name__}: {e}") from e


class PropertyClassifier:
    """Decides whether entity members are data or navigation properties.

    Membership of a member's element type in the type set is the only thing that
    makes it a navigation property.
    """

    def __init__(self, type_set: Sequence[type], value_types: Iterable[type] = VALUE_TYPES):
        self.type_set = tuple(type_set)
        self.value_types = tuple(value_types)

    def in_type_set(self, tp: Any) -> bool:
        return isinstance(tp, type) and tp in self.type_set

    def is_value_type(self, tp: Any) -> bool:
        if not isinstance(tp, type):
            return False
        return is_enum_type(tp) or issubclass(tp, self.value_types)

    def enumerate_members(self, cls: type) -> List[MemberInfo]:
        """Own and inherited instance members of cls.

        Members declared on a base class that is itself in the type set are left out;
        they are described on that base's descriptor.
        """
        members = []
        seen = set()
        for klass in cls.__mro__:
            if klass is object:
                continue
            skip = klass is not cls and klass in self.type_set
            names = [n for n in inspect.get_annotations(klass) if n not in seen]
            seen.update(names)
            if skip:
                continue
            names = [n for n in names if not n.startswith("_")]
            if not names:
                continue
            hints = own_type_hints(klass, names)
            for name in names:
                hint = hints[name]
                if typing.get_origin(hint) is ClassVar or hint is ClassVar:
                    continue
                if isinstance(hint, dataclasses.InitVar):
                    continue
                members.append(MemberInfo(name=name, annotation=hint, declaring_type=klass))
        return members

    def classify(self, member: MemberInfo) -> ClassifiedMember:
        property_type, annotations, optional = _strip(member.annotation)
        collection = is_collection_type(property_type)
        element = element_type(property_type)
        if collection:
            element, _, _ = _strip(element)
        return ClassifiedMember(
            member=member,
            property_type=property_type,
            annotations=annotations,
            is_optional=optional,
            is_nullable=optional or not self.is_value_type(property_type),
            is_collection=collection,
            element_type=element,
        )

    def is_navigation(self, classified: ClassifiedMember) -> bool:
        return self.in_type_set(classified.element_type)

