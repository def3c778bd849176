"""
Classifies reflected classes as low-level (Cfn) or high-level resource classes.
"""
from typing import Iterable, Optional

from constructlint.config import DEFAULT_CFN_RESOURCE_BASES, DEFAULT_RESOURCE_BASES
from constructlint.models.reflect import ClassType

CFN_CLASS_PREFIX = "Cfn"
RESOURCE_TAG = "resource"


class CoreTypes:
    def __init__(
        self,
        cfn_resource_bases: Optional[Iterable[str]] = None,
        resource_bases: Optional[Iterable[str]] = None,
    ) -> None:
        if cfn_resource_bases is None:
            cfn_resource_bases = DEFAULT_CFN_RESOURCE_BASES
        if resource_bases is None:
            resource_bases = DEFAULT_RESOURCE_BASES
        self.cfn_resource_bases = list(cfn_resource_bases)
        self.resource_bases = list(resource_bases)

    def is_cfn_resource(self, cls: ClassType) -> bool:
        """True for generated L1 classes: a CfnResource subclass named Cfn*."""
        if not cls.name.startswith(CFN_CLASS_PREFIX):
            return False
        return any(cls.extends(base) for base in self.cfn_resource_bases)

    def is_resource_class(self, cls: ClassType) -> bool:
        """True for hand-written L2 classes."""
        if cls.abstract or self.is_cfn_resource(cls):
            return False
        if cls.docs.has_custom_tag(RESOURCE_TAG):
            return True
        return any(cls.extends(base) for base in self.resource_bases)
