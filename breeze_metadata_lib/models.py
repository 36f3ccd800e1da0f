"""
Data models for the Breeze metadata document.
"""

from typing import Any, Dict, List, Optional
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel
from pydantic_core import PydanticSerializationError

from .constants import LOCAL_QUERY_COMPARISON_OPTIONS
from .errors import MetadataBuildError


def make_type_key(short_name: str, namespace: str) -> str:
    """Key used by the client to address a structural type, e.g. 'Customer:#app.models'."""
    return f"{short_name}:#{namespace}"


class _Descriptor(BaseModel):
    # Field names are snake_case in Python and camelCase on the wire
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)


class PropertyDescriptor(_Descriptor):
    name_on_server: str
    data_type: str
    is_nullable: Optional[bool] = None
    is_part_of_key: Optional[bool] = None
    concurrency_mode: Optional[str] = None
    default_value: Optional[Any] = None
    max_length: Optional[int] = None
    min_length: Optional[int] = None
    is_computed: Optional[bool] = None
    foreign_key: Optional[str] = None
    inverse_property: Optional[str] = None
    validators: Optional[List[Dict[str, Any]]] = None


class AssociationDescriptor(_Descriptor):
    name_on_server: str
    entity_type_name: str
    is_scalar: bool
    association_name: str
    foreign_key: Optional[str] = None
    inverse_property: Optional[str] = None


class TypeDescriptor(_Descriptor):
    short_name: str
    namespace: str
    base_type_name: Optional[str] = None
    auto_generated_key_type: Optional[str] = None
    default_resource_name: str
    data_properties: List[PropertyDescriptor] = []
    navigation_properties: List[AssociationDescriptor] = []

    @property
    def type_key(self) -> str:
        return make_type_key(self.short_name, self.namespace)

    def get_data_property(self, name: str) -> Optional[PropertyDescriptor]:
        return next((p for p in self.data_properties if p.name_on_server == name), None)

    def get_navigation_property(self, name: str) -> Optional[AssociationDescriptor]:
        return next((p for p in self.navigation_properties if p.name_on_server == name), None)


class EnumDescriptor(_Descriptor):
    short_name: str
    namespace: str
    values: List[str] = []


class MetadataDocument(_Descriptor):
    local_query_comparison_options: str = LOCAL_QUERY_COMPARISON_OPTIONS
    structural_types: List[TypeDescriptor] = []
    resource_entity_type_map: Dict[str, str] = {}
    enum_types: List[EnumDescriptor] = []
    # Relation name -> foreign key property name, used for relationship fixup on save.
    # Never part of the serialized document.
    foreign_key_map: Dict[str, str] = Field(default_factory=dict, exclude=True)

    def get_structural_type(self, short_name: str) -> Optional[TypeDescriptor]:
        return next((t for t in self.structural_types if t.short_name == short_name), None)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the dictionary sent to the Breeze client, omitting unset fields."""
        return self.model_dump(by_alias=True, exclude_none=True)

    def to_json(self, indent: Optional[int] = None) -> str:
        try:
            return self.model_dump_json(by_alias=True, exclude_none=True, indent=indent)
        except PydanticSerializationError as e:
            raise MetadataBuildError(f"Metadata document is not JSON serializable: {e}") from e
