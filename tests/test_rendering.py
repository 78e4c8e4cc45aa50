import pytest
from ruamel.yaml import YAML

from kamut.core.errors import ParseError, SerializationError
from kamut.core.models import KamutConfig
from kamut.core.splitter import DocumentSplitter
from kamut.generators.workload import generate_deployment
from kamut.rendering.exporter import ManifestExporter
from kamut.validator.validator import ManifestValidator


class TestSplitter:

    def test_splits_on_separator_lines_only(self):
        text = "name: a\n---\nname: b\nimage: 'x---y'\n---   \nname: c\n"
        docs = DocumentSplitter().split(text)
        assert len(docs) == 3
        assert "x---y" in docs[1]

    def test_drops_blank_documents_and_bom(self):
        text = "\ufeff---\nname: a\n---\n\n---\nname: b\n---\n"
        docs = DocumentSplitter().split(text)
        assert [d.strip() for d in docs] == ["name: a", "name: b"]

    def test_crlf_line_endings(self):
        docs = DocumentSplitter().split("name: a\r\n---\r\nname: b\r\n")
        assert len(docs) == 2

    def test_comment_only_document_loads_as_none(self):
        assert DocumentSplitter().load("# nothing here\n") is None

    def test_invalid_yaml_raises_parse_error(self):
        with pytest.raises(ParseError) as excinfo:
            DocumentSplitter().load("name: [unclosed\n", index=3, source="x.kamut.yaml")
        assert excinfo.value.index == 3


class TestExporter:

    def test_identity_keys_lead_and_rest_is_sorted(self):
        text = ManifestExporter().export(generate_deployment(KamutConfig(name="web", image="web:1", replicas=2)))
        lines = text.splitlines()

        assert lines[0] == "apiVersion: apps/v1"
        assert lines[1] == "kind: Deployment"
        assert lines[2] == "metadata:"
        assert lines.index("  labels:") < lines.index("  name: web")
        assert lines.index("  replicas: 2") < lines.index("  selector:") < lines.index("  template:")

    def test_output_is_deterministic(self):
        exporter = ManifestExporter()
        manifest = generate_deployment(KamutConfig(name="web", image="web:1", env={"B": "2", "A": "1"}))
        assert exporter.export(manifest) == exporter.export(manifest)

    def test_round_trips_through_yaml(self):
        manifest = generate_deployment(KamutConfig(name="web", image="web:1", replicas=2))
        loaded = YAML(typ='safe').load(ManifestExporter().export(manifest))
        assert loaded == manifest

    def test_join_uses_separator_lines(self):
        joined = ManifestExporter().join(["a: 1\n", "b: 2\n"])
        assert joined == "a: 1\n\n---\nb: 2\n"

    def test_unrepresentable_value_raises(self):
        with pytest.raises(SerializationError):
            ManifestExporter().export({"apiVersion": "v1", "kind": "Thing", "metadata": {"name": object()}})


class TestValidator:

    def test_generated_deployment_is_valid(self):
        valid, _ = ManifestValidator().validate(generate_deployment(KamutConfig(name="web", image="web:1")))
        assert valid

    def test_missing_identity_field(self):
        valid, message = ManifestValidator().validate({"kind": "Service", "metadata": {"name": "x"}})
        assert not valid
        assert "apiVersion" in message

    def test_selector_mismatch_is_rejected(self):
        manifest = generate_deployment(KamutConfig(name="web", image="web:1"))
        manifest["spec"]["selector"]["matchLabels"] = {"app": "other"}
        with pytest.raises(SerializationError):
            ManifestValidator().ensure_valid(manifest)
