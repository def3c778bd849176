"""
Loader tests: jsii manifests, dependency resolution and compressed assemblies.
"""
import json
import os

import pytest

from constructlint import loader
from constructlint.errors import AssemblyLoadError
from constructlint.models.reflect import TypeSystem

FIXTURES = os.path.join(os.path.dirname(__file__), "fixtures")


class TestLoad:
    def test_load_directory(self):
        asm = loader.load(os.path.join(FIXTURES, "aws-cdk-lib"))
        assert asm.name == "aws-cdk-lib"
        assert asm.version == "2.100.0"
        names = [c.name for c in asm.classes]
        assert "CfnBucket" in names
        # interfaces are not classes
        assert "IResource" not in names

    def test_load_manifest_file(self):
        asm = loader.load(os.path.join(FIXTURES, "aws-cdk-lib", ".jsii"))
        assert asm.name == "aws-cdk-lib"

    def test_class_details(self):
        asm = loader.load(os.path.join(FIXTURES, "aws-cdk-lib"))
        bucket = asm.system.find_fqn("aws-cdk-lib.aws_s3.CfnBucket")
        assert bucket.base == "aws-cdk-lib.CfnResource"
        assert bucket.docs.custom_tag("cloudformationResource") == "AWS::S3::Bucket"
        assert bucket.docs.see.endswith("aws-resource-s3-bucket.html")
        assert [p.name for p in bucket.own_properties][:2] == ["attrArn", "attrDomainName"]

    def test_abstract_flag(self):
        asm = loader.load(os.path.join(FIXTURES, "aws-cdk-lib"))
        assert asm.system.find_fqn("aws-cdk-lib.Resource").abstract

    def test_dependencies_resolved_from_node_modules(self):
        app = loader.load(os.path.join(FIXTURES, "app"))
        assert app.system.includes_assembly("aws-cdk-lib")
        fqns = [c.fqn for c in app.all_classes]
        assert fqns[0] == "acme-widgets.CfnWidget"
        assert "aws-cdk-lib.aws_sqs.CfnQueue" in fqns

    def test_missing_dependency_is_skipped(self):
        app = loader.load(os.path.join(FIXTURES, "app"))
        assert not app.system.includes_assembly("constructs")

    def test_shared_type_system(self):
        system = TypeSystem()
        first = loader.load(os.path.join(FIXTURES, "aws-cdk-lib"), system)
        second = loader.load(os.path.join(FIXTURES, "aws-cdk-lib"), system)
        assert first is second
        assert len(system.assemblies) == 1

    def test_compressed_manifest(self):
        asm = loader.load(os.path.join(FIXTURES, "compressed"))
        assert asm.name == "aws-cdk-lib"
        assert asm.system.find_fqn("aws-cdk-lib.aws_sqs.CfnQueue") is not None

    def test_malformed_manifest_raises(self):
        with pytest.raises(AssemblyLoadError):
            loader.load(os.path.join(FIXTURES, "broken"))

    def test_missing_manifest_raises(self, tmp_path):
        with pytest.raises(AssemblyLoadError):
            loader.load(str(tmp_path))

    def test_unsupported_compression_raises(self, tmp_path):
        (tmp_path / ".jsii").write_text(json.dumps({
            "schema": "jsii/file-redirect", "compression": "zstd", "filename": ".jsii.zst",
        }))
        with pytest.raises(AssemblyLoadError):
            loader.load(str(tmp_path))

    def test_null_custom_tag_value_becomes_empty(self, tmp_path):
        (tmp_path / ".jsii").write_text(json.dumps({
            "schema": "jsii/0.10.0",
            "name": "t",
            "types": {"t.CfnX": {"kind": "class", "name": "CfnX", "docs": {"custom": {"cloudformationResource": None}}}},
        }))
        asm = loader.load(str(tmp_path))
        assert asm.classes[0].docs.custom_tag("cloudformationResource") == ""


class TestIsAssemblyFile:
    def test_manifest_detected(self):
        assert loader.is_assembly_file(os.path.join(FIXTURES, "aws-cdk-lib", ".jsii"))

    def test_redirect_detected(self):
        assert loader.is_assembly_file(os.path.join(FIXTURES, "compressed", ".jsii"))

    def test_broken_not_detected(self):
        assert not loader.is_assembly_file(os.path.join(FIXTURES, "broken", ".jsii"))

    def test_other_files_not_detected(self, tmp_path):
        f = tmp_path / "package.json"
        f.write_text('{"schema": "jsii/0.10.0"}')
        assert not loader.is_assembly_file(str(f))


class TestMalformedShapes:
    """Valid JSON with the wrong structure must fail as a load error naming the file."""

    def _write(self, tmp_path, **overrides):
        manifest = {"schema": "jsii/0.10.0", "name": "t", "types": {}}
        manifest.update(overrides)
        (tmp_path / ".jsii").write_text(json.dumps(manifest))
        return str(tmp_path / ".jsii")

    def test_dependencies_list_raises(self, tmp_path):
        path = self._write(tmp_path, dependencies=["aws-cdk-lib"])
        with pytest.raises(AssemblyLoadError) as excinfo:
            loader.load(str(tmp_path))
        assert path in str(excinfo.value)
        assert "dependencies" in str(excinfo.value)

    def test_custom_docs_list_raises(self, tmp_path):
        path = self._write(tmp_path, types={
            "t.CfnX": {"kind": "class", "name": "CfnX", "docs": {"custom": ["x"]}},
        })
        with pytest.raises(AssemblyLoadError) as excinfo:
            loader.load(str(tmp_path))
        assert path in str(excinfo.value)
        assert "docs.custom" in str(excinfo.value)

    def test_docs_string_raises(self, tmp_path):
        self._write(tmp_path, types={"t.X": {"kind": "class", "name": "X", "docs": "text"}})
        with pytest.raises(AssemblyLoadError):
            loader.load(str(tmp_path))

    def test_types_list_raises(self, tmp_path):
        self._write(tmp_path, types=[])
        with pytest.raises(AssemblyLoadError):
            loader.load(str(tmp_path))

    def test_properties_object_raises(self, tmp_path):
        self._write(tmp_path, types={"t.X": {"kind": "class", "name": "X", "properties": {}}})
        with pytest.raises(AssemblyLoadError):
            loader.load(str(tmp_path))

    def test_missing_optional_sections_load(self, tmp_path):
        self._write(tmp_path, types={"t.X": {"kind": "class", "name": "X"}})
        asm = loader.load(str(tmp_path))
        assert asm.dependencies == []
        assert asm.classes[0].docs.custom == {}
