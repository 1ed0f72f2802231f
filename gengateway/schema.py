"""Normalized schema model consumed by the generator.

SchemaFile -> Service -> Method, with TypeReference for message types.
Parents are reachable from children through weak references only; the
SchemaFile owns its services and each Service owns its methods.
"""

from __future__ import annotations

import enum
import weakref
from dataclasses import dataclass, field


@dataclass(frozen=True)
class TypeReference:
    """A Go identifier and the import path it lives in."""

    go_name: str
    import_path: str


class StreamingShape(enum.Enum):
    UNARY = "unary"
    CLIENT_STREAMING = "client_streaming"
    SERVER_STREAMING = "server_streaming"
    BIDIRECTIONAL = "bidirectional"

    @classmethod
    def from_flags(cls, client_streaming: bool, server_streaming: bool) -> StreamingShape:
        """Map the two descriptor streaming flags onto a shape."""
        if client_streaming and server_streaming:
            return cls.BIDIRECTIONAL
        if client_streaming:
            return cls.CLIENT_STREAMING
        if server_streaming:
            return cls.SERVER_STREAMING
        return cls.UNARY

    @property
    def is_unary(self) -> bool:
        return self is StreamingShape.UNARY


def _deref(ref: weakref.ref | None):
    return ref() if ref is not None else None


@dataclass(eq=False)
class Method:
    name: str
    go_name: str
    input: TypeReference
    output: TypeReference
    client_streaming: bool = False
    server_streaming: bool = False
    deprecated: bool = False
    _parent: weakref.ref | None = field(default=None, repr=False)

    @property
    def shape(self) -> StreamingShape:
        return StreamingShape.from_flags(self.client_streaming, self.server_streaming)

    @property
    def parent(self) -> Service | None:
        return _deref(self._parent)


@dataclass(eq=False)
class Service:
    name: str
    go_name: str
    methods: list[Method] = field(default_factory=list)
    deprecated: bool = False
    _parent: weakref.ref | None = field(default=None, repr=False)

    def __post_init__(self) -> None:
        for method in self.methods:
            method._parent = weakref.ref(self)

    @property
    def parent(self) -> SchemaFile | None:
        return _deref(self._parent)


@dataclass(eq=False)
class SchemaFile:
    """One .proto file as seen by the generator.

    ``filename_prefix`` is the path generated files are named after (the
    proto path without ``.proto``, possibly rebased under the Go import
    path); ``go_package_name`` and ``go_import_path`` locate the Go code
    protoc-gen-go and grpc-gateway produced for it.
    """

    path: str
    package: str
    go_package_name: str
    go_import_path: str
    filename_prefix: str
    services: list[Service] = field(default_factory=list)
    deprecated: bool = False

    def __post_init__(self) -> None:
        for service in self.services:
            service._parent = weakref.ref(self)


def is_unary_method(method: Method) -> bool:
    """Only unary methods get dispatch code; every streaming shape is stubbed."""
    return method.shape.is_unary


def is_deprecated_service(service: Service) -> bool:
    return service.deprecated
