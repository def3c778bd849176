"""
L1 (Cfn*) resource reflection and the L2 coverage rule.

Every generated Cfn class must have a hand-written resource class that
declares the same CloudFormation type in its `@resource` docstring tag.
"""
import threading
from typing import Dict, List, Optional, Set, Tuple

from rich.console import Console

from constructlint import naming
from constructlint.errors import ResourceConstructionError
from constructlint.linter import Evaluation, Linter
from constructlint.models.reflect import Assembly, ClassType, TypeSystem
from constructlint.rules.core_types import CFN_CLASS_PREFIX, CoreTypes

CFN_RESOURCE_TAG = "cloudformationResource"
CFN_ATTRIBUTE_TAG = "cloudformationAttribute"

RESOURCE_CLASS_MESSAGE = (
    "every resource must have a resource class (L2), add '@resource %s' to its docstring"
)


class CfnResourceReflection:
    """Derived view of a Cfn class: CloudFormation type, namespace and attributes."""

    def __init__(self, cls: ClassType) -> None:
        self.class_type = cls
        self.basename = cls.name[len(CFN_CLASS_PREFIX):]   # Bucket

        fullname = cls.docs.custom_tag(CFN_RESOURCE_TAG)
        if not fullname:
            raise ResourceConstructionError(
                f"Unable to extract CloudFormation resource name from documentation of {cls}"
            )

        self.fullname: str = fullname                                   # AWS::S3::Bucket
        self.namespace: str = "::".join(fullname.split("::")[:2])       # AWS::S3
        self.attribute_names: List[str] = [                             # Arn, DomainName
            naming.attribute_name(self.basename, self._attribute_tag(cls, prop))
            for prop in cls.own_properties
            if prop.docs.has_custom_tag(CFN_ATTRIBUTE_TAG)
        ]
        self.doc: str = cls.docs.see or ""                              # CloudFormation docs link

    @staticmethod
    def _attribute_tag(cls: ClassType, prop) -> str:
        value = prop.docs.custom_tag(CFN_ATTRIBUTE_TAG)
        if not value:
            raise ResourceConstructionError(
                f"Property '{prop.name}' of {cls} declares @{CFN_ATTRIBUTE_TAG} without a value"
            )
        return value

    @staticmethod
    def find_all(assembly: Assembly, core: Optional[CoreTypes] = None) -> List["CfnResourceReflection"]:
        """All Cfn resource classes reachable from ``assembly``, in enumeration order."""
        core = core or CoreTypes()
        return [
            CfnResourceReflection(c)
            for c in assembly.all_classes
            if core.is_cfn_resource(c)
        ]

    def __repr__(self) -> str:
        return f"CfnResourceReflection({self.fullname!r})"


class CfnResourceIndex:
    """
    Per-type-system lookup table of Cfn classes by lower-cased CloudFormation
    type. Each table is built once, on first use, and kept until clear().
    """

    def __init__(self, console: Optional[Console] = None) -> None:
        self._tables: Dict[str, Dict[str, ClassType]] = {}
        self._lock = threading.Lock()
        self._console = console   # debug output, off unless given

    def __len__(self) -> int:
        return len(self._tables)

    def clear(self) -> None:
        with self._lock:
            self._tables.clear()

    def classes_for(self, system: TypeSystem) -> Dict[str, ClassType]:
        table = self._tables.get(system.key)
        if table is not None:
            return table
        with self._lock:
            table = self._tables.get(system.key)
            if table is None:
                table = self._scan(system)
                self._tables[system.key] = table
        return table

    def _scan(self, system: TypeSystem) -> Dict[str, ClassType]:
        table: Dict[str, ClassType] = {}
        for cls in system.classes:
            tag = cls.docs.custom_tag(CFN_RESOURCE_TAG)
            if tag:
                table[tag.lower()] = cls
        if self._console is not None:
            self._console.print(f"[dim]Indexed {len(table)} Cfn resource class(es).[/dim]", highlight=False)
        return table

    def find_by_name(self, system: TypeSystem, fullname: str) -> Optional[CfnResourceReflection]:
        """
        Find a Cfn resource class by CloudFormation type, e.g. ``AWS::S3::Bucket``.
        Matching ignores case, so ``aws::s3::bucket`` finds the same class.
        """
        cls = self.classes_for(system).get(fullname.lower())
        if cls is None:
            return None
        return CfnResourceReflection(cls)


def build_linter(index: CfnResourceIndex, core: Optional[CoreTypes] = None) -> Linter:
    """The `cfn-resource` linter: one evaluation per Cfn class in the assembly."""
    # deferred: resource imports this module for CfnResourceReflection
    from constructlint.rules.resource import ResourceReflection

    core = core or CoreTypes()
    linter = Linter("cfn-resource", lambda a: CfnResourceReflection.find_all(a, core))

    # (type system key, assembly name) -> wrapped CloudFormation types
    wrapped: Dict[Tuple[str, str], Set[str]] = {}

    def _wrapped_types(assembly: Assembly) -> Set[str]:
        key = (assembly.system.key if assembly.system is not None else "", assembly.name)
        if key not in wrapped:
            wrapped[key] = {
                r.cfn_fullname
                for r in ResourceReflection.find_all(assembly, index, core)
                if r.cfn_fullname
            }
        return wrapped[key]

    def _resource_class(e: Evaluation) -> None:
        ctx: CfnResourceReflection = e.ctx
        has_l2 = ctx.fullname in _wrapped_types(ctx.class_type.assembly)
        e.assert_(has_l2, ctx.fullname, ctx.fullname)

    linter.add(
        code="resource-class",
        message=RESOURCE_CLASS_MESSAGE,
        eval=_resource_class,
        warning=True,
    )
    return linter
