"""Shared fixtures: the Greeter schema as a model and as descriptors."""

from __future__ import annotations

import pytest
from google.protobuf import descriptor_pb2, json_format

from gengateway.schema import Method, SchemaFile, Service, TypeReference

GO_IMPORT_PATH = "example.com/gen/pkg/v1"


# ---------------------------------------------------------------------------
# Model builders
# ---------------------------------------------------------------------------

def ref(name: str, import_path: str = GO_IMPORT_PATH) -> TypeReference:
    return TypeReference(name, import_path)


def unary(name: str, deprecated: bool = False) -> Method:
    return Method(name, name, ref(f"{name}Request"), ref(f"{name}Response"), deprecated=deprecated)


def make_file(*services: Service, deprecated: bool = False) -> SchemaFile:
    return SchemaFile(
        path="pkg/v1/greeter.proto",
        package="pkg.v1",
        go_package_name="pkgv1",
        go_import_path=GO_IMPORT_PATH,
        filename_prefix="pkg/v1/greeter",
        services=list(services),
        deprecated=deprecated,
    )


def say_hello() -> Method:
    return Method("SayHello", "SayHello", ref("HelloRequest"), ref("HelloResponse"))


def chat() -> Method:
    return Method(
        "Chat", "Chat", ref("ChatRequest"), ref("ChatResponse"),
        client_streaming=True, server_streaming=True,
    )


@pytest.fixture
def greeter_file() -> SchemaFile:
    """Greeter with a single unary SayHello."""
    return make_file(Service("Greeter", "Greeter", [say_hello()]))


@pytest.fixture
def greeter_chat_file() -> SchemaFile:
    """Greeter with unary SayHello and bidirectional Chat."""
    return make_file(Service("Greeter", "Greeter", [say_hello(), chat()]))


# ---------------------------------------------------------------------------
# Descriptors
# ---------------------------------------------------------------------------

GREETER_PROTO: dict = {
    "name": "pkg/v1/greeter.proto",
    "package": "pkg.v1",
    "dependency": ["pkg/v1/messages.proto"],
    "options": {"go_package": "example.com/gen/pkg/v1;pkgv1"},
    "service": [
        {
            "name": "Greeter",
            "method": [
                {
                    "name": "SayHello",
                    "input_type": ".pkg.v1.HelloRequest",
                    "output_type": ".pkg.v1.HelloResponse",
                },
                {
                    "name": "Chat",
                    "input_type": ".pkg.v1.HelloRequest",
                    "output_type": ".pkg.v1.HelloResponse.Reply",
                    "client_streaming": True,
                    "server_streaming": True,
                },
                {
                    "name": "Legacy",
                    "input_type": ".pkg.v1.HelloRequest",
                    "output_type": ".pkg.v1.HelloResponse",
                    "options": {"deprecated": True},
                },
            ],
        },
        {
            "name": "old_greeter",
            "options": {"deprecated": True},
            "method": [
                {
                    "name": "list_greetings",
                    "input_type": ".pkg.v1.HelloRequest",
                    "output_type": ".pkg.v1.HelloResponse",
                    "server_streaming": True,
                },
            ],
        },
    ],
}

MESSAGES_PROTO: dict = {
    "name": "pkg/v1/messages.proto",
    "package": "pkg.v1",
    "options": {"go_package": "example.com/gen/pkg/v1;pkgv1"},
    "message_type": [
        {"name": "HelloRequest"},
        {"name": "HelloResponse", "nested_type": [{"name": "Reply"}]},
    ],
}

EMPTY_PROTO: dict = {
    "name": "pkg/v1/empty.proto",
    "package": "pkg.v1",
    "options": {"go_package": "example.com/gen/pkg/v1;pkgv1"},
}


def make_descriptor_set(*files: dict) -> descriptor_pb2.FileDescriptorSet:
    return json_format.ParseDict({"file": list(files)}, descriptor_pb2.FileDescriptorSet())


@pytest.fixture
def descriptor_set() -> descriptor_pb2.FileDescriptorSet:
    return make_descriptor_set(MESSAGES_PROTO, GREETER_PROTO, EMPTY_PROTO)
