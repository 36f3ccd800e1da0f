"""
Naming policies: how entity types are exposed to the client.
"""

from abc import ABC, abstractmethod
from typing import Optional

from .classifier import MemberInfo


class NamingPolicy(ABC):
    """Supplies per-type key generation, resource names and key/version members."""

    @abstractmethod
    def auto_generated_key_type(self, entity_type: type) -> Optional[str]:
        """How keys of entity_type are produced.

        Returns one of:
            "Identity" - generated by the database server, or a Guid
            "KeyGenerator" - generated by code on the app server
            "None" - assigned manually
            None - same as "None"; the field is omitted
        """

    @abstractmethod
    def resource_name(self, entity_type: type) -> str:
        """Server resource name used by the client to query entity_type, e.g. 'Products'."""

    @abstractmethod
    def is_key_property(self, entity_type: type, member: MemberInfo) -> bool:
        """True if member is part of the entity key."""

    @abstractmethod
    def is_version_property(self, entity_type: type, member: MemberInfo) -> bool:
        """True if member holds the version used for optimistic concurrency."""


def pluralize(name: str) -> str:
    """Naive pluralizer: 'Category' -> 'Categories', anything else gets an 's'."""
    if not name:
        return name
    if name[-1] == "y":
        return name[:-1] + "ies"
    return name + "s"


class DefaultNamingPolicy(NamingPolicy):
    """Simple policy suitable for most models; replace it for anything smarter."""

    key_member_name = "EntityKey"

    def auto_generated_key_type(self, entity_type: type) -> Optional[str]:
        return "Identity"

    def resource_name(self, entity_type: type) -> str:
        return pluralize(entity_type.__name__)

    def is_key_property(self, entity_type: type, member: MemberInfo) -> bool:
        return member.name == self.key_member_name

    def is_version_property(self, entity_type: type, member: MemberInfo) -> bool:
        return False
