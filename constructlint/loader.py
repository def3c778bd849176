"""
jsii assembly loader: reads `.jsii` manifests into a TypeSystem.
"""
import gzip
import json
import os
from typing import Any, Dict, List, Optional

from rich.console import Console

from constructlint.errors import AssemblyLoadError
from constructlint.models.reflect import Assembly, ClassType, Docs, Property, TypeSystem

console = Console(stderr=True)

MANIFEST_FILE = ".jsii"
_REDIRECT_SCHEMA = "jsii/file-redirect"


def is_assembly_file(filepath: str) -> bool:
    """Return True if ``filepath`` looks like a jsii manifest (plain or redirect)."""
    if os.path.basename(filepath) != MANIFEST_FILE and not filepath.endswith(".jsii"):
        return False
    try:
        with open(filepath, encoding="utf-8") as fh:
            data = json.load(fh)
    except (OSError, ValueError):
        return False
    if not isinstance(data, dict):
        return False
    return str(data.get("schema", "")).startswith("jsii/")


def _read_manifest(filepath: str) -> Dict[str, Any]:
    try:
        with open(filepath, encoding="utf-8") as fh:
            data = json.load(fh)
    except (OSError, ValueError) as exc:
        raise AssemblyLoadError(f"failed to read {filepath}: {exc}") from exc

    if not isinstance(data, dict):
        raise AssemblyLoadError(f"{filepath} is not a jsii manifest")

    # Compressed assemblies ship a small redirect manifest next to the payload
    if data.get("schema") == _REDIRECT_SCHEMA:
        if data.get("compression") != "gzip":
            raise AssemblyLoadError(
                f"{filepath}: unsupported compression {data.get('compression')!r}"
            )
        target = os.path.join(os.path.dirname(filepath), data.get("filename", ""))
        try:
            with gzip.open(target, "rt", encoding="utf-8") as fh:
                data = json.load(fh)
        except (OSError, ValueError) as exc:
            raise AssemblyLoadError(f"failed to read {target}: {exc}") from exc

    if "name" not in data or "types" not in data:
        raise AssemblyLoadError(f"{filepath} is missing 'name' or 'types'")
    return data


def _mapping(value: Any, what: str, source: str) -> Dict[str, Any]:
    """Return ``value`` as a dict; None means empty, anything else is malformed."""
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise AssemblyLoadError(f"{source}: {what} must be an object, got {type(value).__name__}")
    return value


def _parse_docs(raw: Any, source: str) -> Docs:
    raw = _mapping(raw, "docs", source)
    custom = _mapping(raw.get("custom"), "docs.custom", source)
    return Docs(
        see=raw.get("see", ""),
        custom={str(k): "" if v is None else str(v) for k, v in custom.items()},
    )


def _parse_class(fqn: str, spec: Dict[str, Any], source: str) -> ClassType:
    raw_properties = spec.get("properties") or []
    if not isinstance(raw_properties, list):
        raise AssemblyLoadError(f"{source}: properties of {fqn} must be a list")
    properties = [
        Property(name=p["name"], docs=_parse_docs(p.get("docs"), source))
        for p in raw_properties
        if isinstance(p, dict) and "name" in p
    ]
    return ClassType(
        fqn=fqn,
        name=spec.get("name") or fqn.rsplit(".", 1)[-1],
        base=spec.get("base"),
        abstract=bool(spec.get("abstract", False)),
        docs=_parse_docs(spec.get("docs"), source),
        own_properties=properties,
    )


def assembly_from_manifest(data: Dict[str, Any], source: str = "<manifest>") -> Assembly:
    """Build an Assembly from an already-decoded manifest dict."""
    asm = Assembly(
        name=data["name"],
        version=str(data.get("version", "0.0.0")),
        dependencies=list(_mapping(data.get("dependencies"), "dependencies", source).keys()),
    )
    types = _mapping(data.get("types"), "types", source)
    for fqn, spec in types.items():
        if isinstance(spec, dict) and spec.get("kind") == "class":
            asm.add_class(_parse_class(fqn, spec, source))
    return asm


def _package_dir(path: str) -> str:
    return path if os.path.isdir(path) else os.path.dirname(os.path.abspath(path))


def manifest_path(path: str) -> str:
    """The manifest file for ``path``, which may be a package directory."""
    if os.path.isdir(path):
        return os.path.join(path, MANIFEST_FILE)
    return path


def _resolve_dependency(name: str, start_dir: str) -> Optional[str]:
    """Find node_modules/<name>/.jsii walking up from ``start_dir``."""
    current = os.path.abspath(start_dir)
    while True:
        candidate = os.path.join(current, "node_modules", name, MANIFEST_FILE)
        if os.path.isfile(candidate):
            return candidate
        parent = os.path.dirname(current)
        if parent == current:
            return None
        current = parent


def load(path: str, system: Optional[TypeSystem] = None) -> Assembly:
    """
    Load the assembly at ``path`` (a manifest file or package directory) and
    every dependency that can be resolved from node_modules into ``system``.
    """
    if system is None:
        system = TypeSystem()

    manifest = manifest_path(path)
    if not os.path.isfile(manifest):
        raise AssemblyLoadError(f"no jsii manifest found at {path}")

    root = assembly_from_manifest(_read_manifest(manifest), manifest)
    if system.includes_assembly(root.name):
        return system.find_assembly(root.name)
    system.add_assembly(root)

    pending: List[tuple] = [(root, _package_dir(manifest))]
    while pending:
        asm, base_dir = pending.pop(0)
        for dep in asm.dependencies:
            if system.includes_assembly(dep):
                continue
            dep_manifest = _resolve_dependency(dep, base_dir)
            if dep_manifest is None:
                console.print(
                    f"[yellow]Warning:[/yellow] dependency '{dep}' of {asm.name} not found, skipping."
                )
                continue
            dep_asm = assembly_from_manifest(_read_manifest(dep_manifest), dep_manifest)
            system.add_assembly(dep_asm)
            pending.append((dep_asm, os.path.dirname(dep_manifest)))

    return root
