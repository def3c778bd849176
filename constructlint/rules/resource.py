"""
L2 (hand-written) resource class discovery.
"""
from typing import List, Optional

from constructlint.models.reflect import Assembly, ClassType
from constructlint.rules.cfn_resource import CfnResourceIndex, CfnResourceReflection
from constructlint.rules.core_types import RESOURCE_TAG, CoreTypes


class ResourceReflection:
    def __init__(self, cls: ClassType, index: CfnResourceIndex) -> None:
        self.class_type = cls
        self.fullname: Optional[str] = cls.docs.custom_tag(RESOURCE_TAG) or None   # as declared
        self.cfn: Optional[CfnResourceReflection] = None
        if self.fullname and cls.system is not None:
            self.cfn = index.find_by_name(cls.system, self.fullname)

    @property
    def cfn_fullname(self) -> Optional[str]:
        """CloudFormation type with the casing of the Cfn class it resolved to."""
        if self.cfn is not None:
            return self.cfn.fullname
        return self.fullname

    @staticmethod
    def find_all(
        assembly: Assembly,
        index: CfnResourceIndex,
        core: Optional[CoreTypes] = None,
    ) -> List["ResourceReflection"]:
        core = core or CoreTypes()
        return [
            ResourceReflection(c, index)
            for c in assembly.all_classes
            if core.is_resource_class(c)
        ]

    def __repr__(self) -> str:
        return f"ResourceReflection({self.class_type.fqn!r}, {self.fullname!r})"
