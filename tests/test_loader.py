"""Tests for the loader module."""

import json

import pytest
from conftest import GREETER_PROTO, MESSAGES_PROTO, make_descriptor_set
from google.protobuf import json_format

from gengateway.loader import find_file, get_files, load_descriptor_set


class TestLoadDescriptorSet:
    """Descriptor sets load from binary and JSON encodings."""

    def test_binary(self, tmp_path, descriptor_set):
        path = tmp_path / "image.binpb"
        path.write_bytes(descriptor_set.SerializeToString())
        assert load_descriptor_set(path) == descriptor_set

    def test_json(self, tmp_path, descriptor_set):
        path = tmp_path / "image.json"
        path.write_text(json.dumps(json_format.MessageToDict(descriptor_set)))
        assert load_descriptor_set(path) == descriptor_set

    def test_json_with_proto_field_names(self, tmp_path):
        path = tmp_path / "image.json"
        path.write_text(json.dumps({"file": [MESSAGES_PROTO, GREETER_PROTO]}))
        loaded = load_descriptor_set(str(path))
        assert [f.name for f in loaded.file] == ["pkg/v1/messages.proto", "pkg/v1/greeter.proto"]

    def test_unsupported_suffix(self, tmp_path):
        path = tmp_path / "image.txt"
        path.write_text("")
        with pytest.raises(ValueError, match="unsupported descriptor set file"):
            load_descriptor_set(path)


class TestLookups:
    def test_get_files(self, descriptor_set):
        assert [f.name for f in get_files(descriptor_set)] == [
            "pkg/v1/messages.proto",
            "pkg/v1/greeter.proto",
            "pkg/v1/empty.proto",
        ]

    def test_find_file(self):
        descriptor_set = make_descriptor_set(MESSAGES_PROTO, GREETER_PROTO)
        assert find_file(descriptor_set, "pkg/v1/greeter.proto").package == "pkg.v1"
        assert find_file(descriptor_set, "missing.proto") is None
