"""
Builds Breeze metadata from a closed set of entity classes.
"""

import sys
from datetime import datetime
from typing import Any, Callable, Dict, Iterable, List, Optional, Sequence

from .association import association_name
from .attribute_mapper import AttributeMapper
from .classifier import ClassifiedMember, PropertyClassifier, data_type_name
from .constants import AUTO_GENERATED_KEY_TYPES, CONCURRENCY_MODE_FIXED, VALUE_TYPES
from .enum_collector import EnumCollector, EnumDetection
from .errors import MetadataBuildError, NamingPolicyError, ResourceNameConflictError
from .models import (
    AssociationDescriptor,
    MetadataDocument,
    PropertyDescriptor,
    TypeDescriptor,
    make_type_key,
)
from .naming_policy import DefaultNamingPolicy, NamingPolicy


class BuildContext:
    """State accumulated during a single build. Never shared between builds."""

    def __init__(self, types: Sequence[type], policy: NamingPolicy,
                 enum_detection: EnumDetection, value_types: Iterable[type]):
        self.types = list(types)
        self.policy = policy
        self.classifier = PropertyClassifier(self.types, value_types)
        self.enums = EnumCollector(enum_detection)
        self.type_list: List[TypeDescriptor] = []
        self.resource_map: Dict[str, str] = {}
        self.foreign_key_map: Dict[str, str] = {}


class MetadataBuilder:
    """Builds the metadata document the Breeze client uses for data binding and queries.

    The builder holds configuration only. Each call to build() works on its own
    BuildContext, so one builder may be reused for any number of builds.
    """

    def __init__(self, policy: Optional[NamingPolicy] = None,
                 attribute_mapper: Optional[AttributeMapper] = None,
                 enum_detection: EnumDetection = EnumDetection.BOTH,
                 value_types: Iterable[type] = VALUE_TYPES,
                 allow_empty: bool = False, verbose: bool = False):
        self.policy = policy or DefaultNamingPolicy()
        self.attribute_mapper = attribute_mapper or AttributeMapper()
        self.enum_detection = EnumDetection(enum_detection)
        self.value_types = tuple(value_types)
        self.allow_empty = allow_empty
        self.verbose = verbose

    def _log_verbose(self, message: str):
        """Prints message to stderr only if verbose mode is enabled."""
        if self.verbose:
            timestamp = datetime.now().strftime('%Y-%m-%d %H:%M:%S.%f')[:-3]
            print(f"[{timestamp} Builder VERBOSE] {message}", file=sys.stderr)

    def build(self, types: Iterable[type], policy: Optional[NamingPolicy] = None) -> MetadataDocument:
        """Build the metadata for the given entity types.

        Args:
            types: Entity classes to describe, in output order
            policy: Naming policy for this build (defaults to the builder's policy)

        Returns:
            MetadataDocument; convert with to_dict() or to_json() to send to the client
        """
        unique_types = []
        for entity_type in types:
            if not isinstance(entity_type, type):
                raise MetadataBuildError(f"Expected an entity class, got {entity_type!r}")
            if entity_type not in unique_types:
                unique_types.append(entity_type)

        if not unique_types and not self.allow_empty:
            raise MetadataBuildError("No entity types supplied")

        ctx = BuildContext(unique_types, policy or self.policy, self.enum_detection, self.value_types)
        self._log_verbose(f"Building metadata for {len(ctx.types)} entity types...")

        for entity_type in ctx.types:
            ctx.type_list.append(self._add_type(ctx, entity_type))

        self._log_verbose(
            f"Build complete. {len(ctx.type_list)} types, {len(ctx.enums.enum_types)} enums, "
            f"{len(ctx.foreign_key_map)} foreign keys."
        )
        return MetadataDocument(
            structural_types=ctx.type_list,
            resource_entity_type_map=ctx.resource_map,
            enum_types=ctx.enums.enum_types,
            foreign_key_map=ctx.foreign_key_map,
        )

    def _call_policy(self, callback: Callable[..., Any], entity_type: type, *args) -> Any:
        try:
            return callback(entity_type, *args)
        except MetadataBuildError:
            raise
        except Exception as e:
            raise NamingPolicyError(
                f"Naming policy {getattr(callback, '__name__', callback)} failed for {entity_type.__name__}: {e}"
            ) from e

    def _add_type(self, ctx: BuildContext, entity_type: type) -> TypeDescriptor:
        """Describe one entity type and register its resource name."""
        type_key = make_type_key(entity_type.__name__, entity_type.__module__)

        resource_name = self._call_policy(ctx.policy.resource_name, entity_type)
        if not isinstance(resource_name, str) or not resource_name:
            raise NamingPolicyError(
                f"Naming policy returned an invalid resource name for {entity_type.__name__}: {resource_name!r}"
            )
        if resource_name in ctx.resource_map:
            raise ResourceNameConflictError(resource_name, ctx.resource_map[resource_name], type_key)
        ctx.resource_map[resource_name] = type_key

        # Only identify the base type if it is also being described
        base_type_name = None
        base = next((b for b in entity_type.__bases__ if b in ctx.types), None)
        if base is not None:
            base_type_name = make_type_key(base.__name__, base.__module__)

        key_generator = self._call_policy(ctx.policy.auto_generated_key_type, entity_type)
        if key_generator is not None and key_generator not in AUTO_GENERATED_KEY_TYPES:
            raise NamingPolicyError(
                f"Naming policy returned an invalid key generator for {entity_type.__name__}: {key_generator!r}; "
                f"expected one of {', '.join(AUTO_GENERATED_KEY_TYPES)}"
            )

        data_properties, navigation_properties = self._add_class_properties(ctx, entity_type)
        self._log_verbose(
            f"{type_key}: {len(data_properties)} data, {len(navigation_properties)} navigation properties"
        )
        return TypeDescriptor(
            short_name=entity_type.__name__,
            namespace=entity_type.__module__,
            base_type_name=base_type_name,
            auto_generated_key_type=key_generator,
            default_resource_name=resource_name,
            data_properties=data_properties,
            navigation_properties=navigation_properties,
        )

    def _add_class_properties(self, ctx: BuildContext, entity_type: type):
        members = [ctx.classifier.classify(m) for m in ctx.classifier.enumerate_members(entity_type)]

        # First pass: data properties and enums
        data_properties = []
        for classified in members:
            if not ctx.classifier.is_navigation(classified):
                data_properties.append(self._make_data_property(ctx, entity_type, classified))

            enum_type = ctx.enums.detect(classified)
            if enum_type is not None and ctx.enums.collect(enum_type):
                self._log_verbose(f"Collected enum {enum_type.__name__}")

        # Second pass: associations to other entities in the type set
        navigation_properties = []
        for classified in members:
            if ctx.classifier.is_navigation(classified):
                navigation_properties.append(self._make_association_property(ctx, entity_type, classified))

        return data_properties, navigation_properties

    def _make_data_property(self, ctx: BuildContext, entity_type: type,
                            classified: ClassifiedMember) -> PropertyDescriptor:
        fields: Dict[str, Any] = {
            "name_on_server": classified.name,
            "data_type": data_type_name(classified.property_type),
        }
        if not classified.is_nullable:
            fields["is_nullable"] = False

        fields.update(self.attribute_mapper.map_data_property(classified))

        if self._call_policy(ctx.policy.is_key_property, entity_type, classified.member):
            fields["is_part_of_key"] = True
        if self._call_policy(ctx.policy.is_version_property, entity_type, classified.member):
            fields["concurrency_mode"] = CONCURRENCY_MODE_FIXED

        # ForeignKey on a data property names the navigation property it backs
        if fields.get("foreign_key"):
            self._add_foreign_key(ctx, fields["foreign_key"], classified.name)

        return PropertyDescriptor(**fields)

    def _make_association_property(self, ctx: BuildContext, containing_type: type,
                                   classified: ClassifiedMember) -> AssociationDescriptor:
        related_type = classified.element_type
        fields: Dict[str, Any] = {
            "name_on_server": classified.name,
            "entity_type_name": make_type_key(related_type.__name__, related_type.__module__),
            "is_scalar": not classified.is_collection,
            "association_name": association_name(
                containing_type.__name__, related_type.__name__, [classified.name]
            ),
        }
        fields.update(self.attribute_mapper.map_navigation_property(classified))

        if fields.get("foreign_key"):
            self._add_foreign_key(ctx, classified.name, fields["foreign_key"])

        return AssociationDescriptor(**fields)

    def _add_foreign_key(self, ctx: BuildContext, relation: str, key: str):
        # Keyed by relation name only; the last entity to declare a relation wins
        previous = ctx.foreign_key_map.get(relation)
        if previous is not None and previous != key:
            self._log_verbose(
                f"WARNING: foreign key for relation '{relation}' changed from '{previous}' to '{key}'"
            )
        ctx.foreign_key_map[relation] = key


def build_metadata(types: Iterable[type], policy: Optional[NamingPolicy] = None, **options) -> MetadataDocument:
    """Build metadata with a one-off MetadataBuilder."""
    return MetadataBuilder(policy=policy, **options).build(types)
