"""
Unit tests for manifest sanitization and decoding.
"""

from datetime import datetime, timezone

import pytest
import yaml
from pydantic import BaseModel

from trashed.core.errors import CorruptManifestError, SanitizationFailedError
from trashed.core.manifests.sanitizer import decode_manifest, resolve_api_version, sanitize, to_tree


class TestToTree:
    """Test serialization of supported object shapes."""

    def test_mapping(self, configmap):
        tree = to_tree(configmap)

        assert tree == configmap
        assert tree is not configmap

    def test_pydantic_model(self):
        class Meta(BaseModel):
            name: str
            namespace: str | None = None

        class Obj(BaseModel):
            kind: str
            metadata: Meta

        tree = to_tree(Obj(kind="Secret", metadata=Meta(name="db")))

        assert tree == {"kind": "Secret", "metadata": {"name": "db"}}

    def test_to_dict_object(self):
        """Objects exposing to_dict() (e.g. typed client models) are accepted."""

        class Typed:
            def to_dict(self):
                return {"metadata": {"name": "x"}, "created": datetime(2026, 1, 1, tzinfo=timezone.utc)}

        tree = to_tree(Typed())

        assert tree["created"] == "2026-01-01T00:00:00Z"

    def test_unserializable_value_fails(self):
        with pytest.raises(SanitizationFailedError):
            to_tree({"metadata": {"name": "x"}, "bad": object()})

    def test_non_mapping_fails(self):
        with pytest.raises(SanitizationFailedError):
            to_tree(["not", "an", "object"])


class TestSanitize:
    """Test sanitize."""

    def test_strips_managed_fields(self, configmap):
        manifest = sanitize(configmap)
        data = yaml.safe_load(manifest)

        assert "managedFields" not in data["metadata"]
        assert data["metadata"]["uid"] == configmap["metadata"]["uid"]
        assert data["data"] == {"LOG_LEVEL": "debug"}

    def test_does_not_modify_input(self, configmap):
        sanitize(configmap)

        assert "managedFields" in configmap["metadata"]

    def test_injects_reported_type_metadata(self):
        """A typed object without kind/apiVersion gets them from the caller."""
        obj = {"metadata": {"name": "db", "namespace": "ns1"}, "data": {"pw": "c2VjcmV0"}}

        data = yaml.safe_load(sanitize(obj, kind="Secret", api_version="v1"))

        assert data["kind"] == "Secret"
        assert data["apiVersion"] == "v1"

    def test_api_version_falls_back_to_registry(self):
        obj = {"metadata": {"name": "web"}}

        data = yaml.safe_load(sanitize(obj, kind="deployment"))

        assert data["apiVersion"] == "apps/v1"

    def test_existing_type_metadata_is_kept(self, deployment):
        data = yaml.safe_load(sanitize(deployment, kind="Deployment", api_version="apps/v1beta1"))

        assert data["apiVersion"] == "apps/v1"

    def test_output_keeps_field_order(self, deployment):
        manifest = sanitize(deployment)

        assert manifest.startswith("apiVersion: apps/v1\nkind: Deployment\n")

    def test_sanitize_is_stable_through_decode(self, deployment, configmap):
        """Sanitizing a decoded manifest gives back the same manifest."""
        for obj in (deployment, configmap):
            once = sanitize(obj)
            assert sanitize(decode_manifest(once)) == once

    def test_failure_yields_no_manifest(self):
        with pytest.raises(SanitizationFailedError):
            sanitize({"metadata": {"name": "x"}, "bad": object()})


class TestResolveApiVersion:
    def test_prefers_reported_value(self):
        assert resolve_api_version("Deployment", "apps/v1beta2") == "apps/v1beta2"

    def test_unknown_kind(self):
        assert resolve_api_version("Pod", None) is None


class TestDecodeManifest:
    """Test decode_manifest."""

    def test_decodes_yaml(self, configmap):
        data = decode_manifest(sanitize(configmap))

        assert data["kind"] == "ConfigMap"
        assert data["metadata"]["name"] == "app-cfg"

    def test_decodes_json(self):
        data = decode_manifest('{"kind": "Secret", "metadata": {"name": "db"}}')

        assert data["metadata"]["name"] == "db"

    @pytest.mark.parametrize(
        "text",
        [
            "",
            "   \n",
            "{not: valid: yaml",
            "- just\n- a list\n",
            "metadata:\n  name: x\n",
            "kind: Secret\nmetadata: {}\n",
        ],
    )
    def test_corrupt_manifests(self, text):
        with pytest.raises(CorruptManifestError):
            decode_manifest(text)
