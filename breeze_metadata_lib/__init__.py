"""
Breeze Metadata Library - builds Breeze client metadata from Python entity classes.
"""

from .models import (
    AssociationDescriptor,
    EnumDescriptor,
    MetadataDocument,
    PropertyDescriptor,
    TypeDescriptor,
    make_type_key
)
from .errors import (
    AnnotationParameterError,
    DiscoveryError,
    MetadataBuildError,
    NamingPolicyError,
    PolicyConfigError,
    ResourceNameConflictError
)
from .association import association_name
from .attribute_mapper import AttributeMapper
from .classifier import MemberInfo, PropertyClassifier, element_type, is_collection_type
from .enum_collector import EnumCollector, EnumDetection
from .naming_policy import DefaultNamingPolicy, NamingPolicy, pluralize
from .policy_overrides import OverrideNamingPolicy, PolicyOverride
from .builder import BuildContext, MetadataBuilder, build_metadata
from .discovery import discover_entity_types

__all__ = [
    'AssociationDescriptor',
    'EnumDescriptor',
    'MetadataDocument',
    'PropertyDescriptor',
    'TypeDescriptor',
    'make_type_key',
    'AnnotationParameterError',
    'DiscoveryError',
    'MetadataBuildError',
    'NamingPolicyError',
    'PolicyConfigError',
    'ResourceNameConflictError',
    'association_name',
    'AttributeMapper',
    'MemberInfo',
    'PropertyClassifier',
    'element_type',
    'is_collection_type',
    'EnumCollector',
    'EnumDetection',
    'DefaultNamingPolicy',
    'NamingPolicy',
    'pluralize',
    'OverrideNamingPolicy',
    'PolicyOverride',
    'BuildContext',
    'MetadataBuilder',
    'build_metadata',
    'discover_entity_types'
]
