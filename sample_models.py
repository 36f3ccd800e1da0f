"""
Entity classes shared by the test suite.
"""

from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Annotated, ClassVar, List, Optional

from breeze_metadata_lib.attributes import (
    ConcurrencyCheck,
    DatabaseGenerated,
    DefaultValue,
    ForeignKey,
    InverseProperty,
    Key,
    MaxLength,
    RangeValidator,
    RegexValidator,
    Required,
    StringLength
)


class OrderStatus(Enum):
    PENDING = 1
    SHIPPED = 2
    DELIVERED = 3


class Priority(Enum):
    LOW = "low"
    HIGH = "high"


class Auditable:
    """Mixin outside the entity set; its members are flattened into each entity."""
    created_by: Optional[str]


class Person:
    EntityKey: int
    name: Annotated[str, Required(), MaxLength(50)]
    email: Annotated[Optional[str], StringLength(100, 5), RegexValidator(pattern=r"^[^@]+@[^@]+$")]
    _password_hash: str
    registry: ClassVar[str] = "people"


class Customer(Person):
    credit_limit: Annotated[
        Decimal,
        RangeValidator(minimum=0, maximum=10000),
        RegexValidator(error_message="digits only", pattern=r"^\d+$"),
    ]
    priority: Priority
    orders: List["Order"]


class Order(Auditable):
    EntityKey: int
    placed_at: datetime
    status: OrderStatus
    previous_status: Optional[OrderStatus]
    customer_id: Annotated[int, ForeignKey("customer")]
    customer: Annotated[Optional[Customer], InverseProperty("orders")]
    row_version: Annotated[int, ConcurrencyCheck()]
    notes: Optional[str]
    tags: List[str]


class Category:
    EntityKey: Annotated[int, Key(), DatabaseGenerated()]
    title: Annotated[str, DefaultValue("General")]
    parent_id: Optional[int]
    parent: Annotated[Optional["Category"], ForeignKey("parent_id")]


ALL_TYPES = [Person, Customer, Order, Category]
