"""
Naming policy driven by a JSON overrides file.

This module lets a project adjust resource names, key generation and key/version
members per entity type without writing a NamingPolicy subclass.
"""

import json
import re
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

from .classifier import MemberInfo
from .constants import AUTO_GENERATED_KEY_TYPES, DEFAULT_POLICY_FILE
from .errors import PolicyConfigError
from .naming_policy import DefaultNamingPolicy, NamingPolicy


@dataclass
class PolicyOverride:
    """Overrides for entity types whose short name matches a pattern."""
    pattern: str
    priority: int = 0
    resource_name: Optional[str] = None
    auto_generated_key_type: Optional[str] = None
    key_properties: List[str] = field(default_factory=list)
    version_properties: List[str] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'PolicyOverride':
        """Create PolicyOverride from dictionary."""
        if not isinstance(data, dict) or not data.get('pattern'):
            raise PolicyConfigError(f"Override entry needs a 'pattern': {data!r}")

        key_type = data.get('auto_generated_key_type')
        if key_type is not None and key_type not in AUTO_GENERATED_KEY_TYPES:
            raise PolicyConfigError(
                f"Invalid auto_generated_key_type '{key_type}' for pattern '{data['pattern']}'; "
                f"expected one of {', '.join(AUTO_GENERATED_KEY_TYPES)}"
            )

        pattern = data['pattern']
        if not isinstance(pattern, str):
            raise PolicyConfigError(f"Override 'pattern' must be a string: {pattern!r}")

        priority = data.get('priority', 0)
        if not isinstance(priority, int) or isinstance(priority, bool):
            raise PolicyConfigError(f"Override 'priority' must be an integer for pattern '{pattern}': {priority!r}")

        resource_name = data.get('resource_name')
        if resource_name is not None and not isinstance(resource_name, str):
            raise PolicyConfigError(
                f"Override 'resource_name' must be a string for pattern '{pattern}': {resource_name!r}"
            )

        member_lists = {}
        for list_name in ('key_properties', 'version_properties'):
            names = data.get(list_name, [])
            if not isinstance(names, list) or not all(isinstance(n, str) for n in names):
                raise PolicyConfigError(
                    f"Override '{list_name}' must be a list of strings for pattern '{pattern}': {names!r}"
                )
            member_lists[list_name] = list(names)

        return cls(
            pattern=pattern,
            priority=priority,
            resource_name=resource_name,
            auto_generated_key_type=key_type,
            **member_lists
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        result = {
            'pattern': self.pattern,
            'priority': self.priority
        }
        if self.resource_name:
            result['resource_name'] = self.resource_name
        if self.auto_generated_key_type:
            result['auto_generated_key_type'] = self.auto_generated_key_type
        if self.key_properties:
            result['key_properties'] = self.key_properties
        if self.version_properties:
            result['version_properties'] = self.version_properties
        return result


def matches_pattern(pattern: str, name: str) -> bool:
    """Check if a name matches a pattern with * and ? wildcards (case-insensitive)."""
    # Escape special regex characters except * and ?
    regex_pattern = re.escape(pattern)
    regex_pattern = regex_pattern.replace(r'\*', '.*')
    regex_pattern = regex_pattern.replace(r'\?', '.')

    # If pattern doesn't start with *, anchor to beginning
    if not pattern.startswith('*'):
        regex_pattern = '^' + regex_pattern

    # If pattern doesn't end with *, anchor to end
    if not pattern.endswith('*'):
        regex_pattern = regex_pattern + '$'

    return bool(re.match(regex_pattern, name, re.IGNORECASE))


class OverrideNamingPolicy(NamingPolicy):
    """Applies matching overrides on top of a fallback policy.

    For each question the highest-priority matching override that answers it wins;
    the fallback answers anything no override covers.
    """

    def __init__(self, overrides: Optional[List[PolicyOverride]] = None,
                 fallback: Optional[NamingPolicy] = None, verbose: bool = False):
        self.overrides: List[PolicyOverride] = list(overrides or [])
        self.fallback = fallback or DefaultNamingPolicy()
        self.verbose = verbose
        self.policy_file: Optional[str] = None

    def _log_verbose(self, message: str):
        """Log verbose message."""
        if self.verbose:
            print(f"[OverrideNamingPolicy] {message}", file=sys.stderr)

    @classmethod
    def from_dict(cls, data: Dict[str, Any], **kwargs) -> 'OverrideNamingPolicy':
        if not isinstance(data, dict):
            raise PolicyConfigError("Policy file must contain a JSON object")
        overrides = [PolicyOverride.from_dict(o) for o in data.get('overrides', [])]
        return cls(overrides, **kwargs)

    def load_from_file(self, policy_file: Optional[str] = None) -> bool:
        """Load overrides from a JSON file.

        Args:
            policy_file: Path to the file. If None, looks for breeze_policy.json in the
                current working directory.

        Returns:
            True if a file was loaded, False if no default file exists.

        Raises:
            PolicyConfigError: the file is missing (when given explicitly) or malformed.
        """
        path = Path(policy_file) if policy_file else Path.cwd() / DEFAULT_POLICY_FILE
        if not path.exists():
            if policy_file:
                raise PolicyConfigError(f"Policy file not found: {path}")
            self._log_verbose(f"No policy file at {path}")
            return False

        try:
            with open(path, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            raise PolicyConfigError(f"Policy file {path} is not valid JSON: {e}") from e

        loaded = OverrideNamingPolicy.from_dict(data)
        self.overrides = loaded.overrides
        self.policy_file = str(path)
        self._log_verbose(f"Loaded {len(self.overrides)} overrides from {path}")
        return True

    def matching_overrides(self, entity_type: type) -> List[PolicyOverride]:
        """Overrides that apply to entity_type, highest priority first."""
        matches = [o for o in self.overrides if matches_pattern(o.pattern, entity_type.__name__)]
        matches.sort(key=lambda o: o.priority, reverse=True)
        return matches

    def _first(self, entity_type: type, attribute: str) -> Any:
        for override in self.matching_overrides(entity_type):
            value = getattr(override, attribute)
            if value:
                return value
        return None

    def auto_generated_key_type(self, entity_type: type) -> Optional[str]:
        value = self._first(entity_type, 'auto_generated_key_type')
        return value if value is not None else self.fallback.auto_generated_key_type(entity_type)

    def resource_name(self, entity_type: type) -> str:
        value = self._first(entity_type, 'resource_name')
        return value if value is not None else self.fallback.resource_name(entity_type)

    def is_key_property(self, entity_type: type, member: MemberInfo) -> bool:
        keys = self._first(entity_type, 'key_properties')
        if keys is not None:
            return member.name in keys
        return self.fallback.is_key_property(entity_type, member)

    def is_version_property(self, entity_type: type, member: MemberInfo) -> bool:
        versions = self._first(entity_type, 'version_properties')
        if versions is not None:
            return member.name in versions
        return self.fallback.is_version_property(entity_type, member)
