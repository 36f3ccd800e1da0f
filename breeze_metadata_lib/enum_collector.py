"""
Collects the enumeration types referenced by entity properties.
"""

from enum import Enum
from typing import Any, List, Optional, Type

from .classifier import ClassifiedMember, is_enum_type
from .models import EnumDescriptor


class EnumDetection(str, Enum):
    """Which property shapes count as enum-typed.

    BARE matches `status: Status`, WRAPPED matches `status: Optional[Status]`.
    """
    BARE = "bare"
    WRAPPED = "wrapped"
    BOTH = "both"


class EnumCollector:
    """Keeps one EnumDescriptor per distinct enumeration seen during a build."""

    def __init__(self, detection: EnumDetection = EnumDetection.BOTH):
        self.detection = EnumDetection(detection)
        self.enum_types: List[EnumDescriptor] = []

    def detect(self, classified: ClassifiedMember) -> Optional[Type[Enum]]:
        """Return the enum type of a property if the detection mode accepts its shape."""
        tp: Any = classified.property_type
        if not is_enum_type(tp):
            return None
        if classified.is_optional:
            accepted = self.detection in (EnumDetection.WRAPPED, EnumDetection.BOTH)
        else:
            accepted = self.detection in (EnumDetection.BARE, EnumDetection.BOTH)
        return tp if accepted else None

    def collect(self, enum_type: Type[Enum]) -> bool:
        """Add enum_type unless one with the same short name is already known.

        Returns True if a new descriptor was added.
        """
        if any(e.short_name == enum_type.__name__ for e in self.enum_types):
            return False
        self.enum_types.append(EnumDescriptor(
            short_name=enum_type.__name__,
            namespace=enum_type.__module__,
            values=list(enum_type.__members__),
        ))
        return True
