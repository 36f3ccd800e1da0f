"""
Association naming for navigation properties.
"""

from typing import Sequence

from .constants import ASSOCIATION_PREFIX


def association_name(name1: str, name2: str, column_names: Sequence[str]) -> str:
    """Name an association between two entities.

    The entity names are put in order, so both ends of a relationship compute the
    same name no matter which end asks. The client pairs navigation properties by
    this string alone.

    Args:
        name1: Short name of one entity
        name2: Short name of the other entity
        column_names: Names that make the association unique for the entity pair

    Returns:
        e.g. 'FK_Customer_Order_orders'
    """
    first, second = (name1, name2) if name1 < name2 else (name2, name1)
    return f"{ASSOCIATION_PREFIX}{first}_{second}_{' '.join(column_names)}"
