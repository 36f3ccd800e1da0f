"""
Finds entity classes in Python modules.
"""

import importlib
import inspect
from enum import Enum
from typing import Iterable, List, Optional

from .attributes import Annotation
from .errors import DiscoveryError
from .policy_overrides import matches_pattern


def is_entity_class(obj, module_name: str) -> bool:
    """A class defined in module_name that declares annotated members."""
    if not inspect.isclass(obj) or obj.__module__ != module_name:
        return False
    if issubclass(obj, (Enum, Annotation, BaseException)):
        return False
    return bool(inspect.get_annotations(obj))


def discover_entity_types(module_names: Iterable[str],
                          patterns: Optional[List[str]] = None) -> List[type]:
    """Import the given modules and collect their entity classes in definition order.

    Args:
        module_names: Dotted module names
        patterns: Optional class name patterns with * and ? wildcards

    Returns:
        Entity classes, module by module
    """
    found: List[type] = []
    for module_name in module_names:
        try:
            module = importlib.import_module(module_name)
        except ImportError as e:
            raise DiscoveryError(f"Cannot import entity module '{module_name}': {e}") from e

        # vars() keeps definition order, which becomes the document order
        for obj in vars(module).values():
            if not is_entity_class(obj, module.__name__) or obj in found:
                continue
            if patterns and not any(matches_pattern(p, obj.__name__) for p in patterns):
                continue
            found.append(obj)
    return found
