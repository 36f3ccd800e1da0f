"""
Exceptions raised while building Breeze metadata.
"""


class MetadataBuildError(ValueError):
    """Base error for failures during a metadata build. No partial document is returned."""


class ResourceNameConflictError(MetadataBuildError):
    """Two entity types map to the same resource name."""

    def __init__(self, resource_name: str, existing_key: str, new_key: str):
        super().__init__(
            f"Resource name '{resource_name}' for {new_key} is already used by {existing_key}"
        )
        self.resource_name = resource_name
        self.existing_key = existing_key
        self.new_key = new_key


class AnnotationParameterError(MetadataBuildError):
    """An annotation does not carry a parameter its handler expects."""

    def __init__(self, kind: str, parameter: str, member: str):
        super().__init__(
            f"Annotation '{kind}' on member '{member}' has no parameter '{parameter}'"
        )
        self.kind = kind
        self.parameter = parameter
        self.member = member


class NamingPolicyError(MetadataBuildError):
    """A naming policy callback raised while describing a type."""


class PolicyConfigError(ValueError):
    """The naming policy override file is malformed."""


class DiscoveryError(ImportError):
    """An entity module could not be imported."""
