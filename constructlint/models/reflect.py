"""
In-memory reflection of a jsii type system: assemblies, classes, properties
and their documentation tags.
"""
import uuid
from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Optional


@dataclass
class Docs:
    see: str = ""
    custom: Dict[str, str] = field(default_factory=dict)   # @tag -> value

    def custom_tag(self, name: str) -> Optional[str]:
        """Return the value of custom tag ``name`` or None when it is not declared."""
        return self.custom.get(name)

    def has_custom_tag(self, name: str) -> bool:
        return name in self.custom


@dataclass
class Property:
    name: str
    docs: Docs = field(default_factory=Docs)


@dataclass
class ClassType:
    fqn: str                      # e.g. "aws-cdk-lib.aws_s3.CfnBucket"
    name: str                     # e.g. "CfnBucket"
    base: Optional[str] = None    # fqn of the parent class
    abstract: bool = False
    docs: Docs = field(default_factory=Docs)
    own_properties: List[Property] = field(default_factory=list)
    assembly: Optional["Assembly"] = field(default=None, repr=False, compare=False)

    @property
    def system(self) -> Optional["TypeSystem"]:
        return self.assembly.system if self.assembly is not None else None

    @property
    def ancestors(self) -> Iterator["ClassType"]:
        """Yield parent classes nearest first. Bases outside the type system end the walk."""
        seen = {self.fqn}
        base = self.base
        while base and base not in seen and self.system is not None:
            seen.add(base)
            parent = self.system.find_fqn(base)
            if parent is None:
                return
            yield parent
            base = parent.base

    def extends(self, fqn: str) -> bool:
        if self.base == fqn:
            return True
        return any(a.fqn == fqn for a in self.ancestors)

    def __str__(self) -> str:
        return f"class {self.fqn}"


@dataclass
class Assembly:
    name: str
    version: str = "0.0.0"
    dependencies: List[str] = field(default_factory=list)
    classes: List[ClassType] = field(default_factory=list)
    system: Optional["TypeSystem"] = field(default=None, repr=False, compare=False)

    def add_class(self, cls: ClassType) -> ClassType:
        cls.assembly = self
        self.classes.append(cls)
        if self.system is not None:
            self.system.register_class(cls)
        return cls

    @property
    def all_classes(self) -> List[ClassType]:
        """Classes of this assembly followed by those of its transitive dependencies."""
        result: List[ClassType] = []
        seen_fqns = set()
        for asm in self._closure():
            for cls in asm.classes:
                if cls.fqn not in seen_fqns:
                    seen_fqns.add(cls.fqn)
                    result.append(cls)
        return result

    def _closure(self) -> List["Assembly"]:
        order: List[Assembly] = []
        pending = [self]
        visited = set()
        while pending:
            asm = pending.pop(0)
            if asm.name in visited:
                continue
            visited.add(asm.name)
            order.append(asm)
            if asm.system is None:
                continue
            for dep in asm.dependencies:
                dep_asm = asm.system.find_assembly(dep)
                if dep_asm is not None:
                    pending.append(dep_asm)
        return order


class TypeSystem:
    """A set of loaded assemblies. Treated as immutable once loading finishes."""

    def __init__(self) -> None:
        self.key = uuid.uuid4().hex
        self._assemblies: Dict[str, Assembly] = {}
        self._fqn_index: Dict[str, ClassType] = {}

    def add_assembly(self, assembly: Assembly) -> Assembly:
        assembly.system = self
        self._assemblies[assembly.name] = assembly
        for cls in assembly.classes:
            cls.assembly = assembly
            self.register_class(cls)
        return assembly

    def register_class(self, cls: ClassType) -> None:
        self._fqn_index[cls.fqn] = cls

    def includes_assembly(self, name: str) -> bool:
        return name in self._assemblies

    def find_assembly(self, name: str) -> Optional[Assembly]:
        return self._assemblies.get(name)

    def find_fqn(self, fqn: str) -> Optional[ClassType]:
        return self._fqn_index.get(fqn)

    @property
    def assemblies(self) -> List[Assembly]:
        return list(self._assemblies.values())

    @property
    def classes(self) -> List[ClassType]:
        return [cls for asm in self._assemblies.values() for cls in asm.classes]
