"""Build Jinja2 template context for one service.

Every Go identifier the service template prints is resolved here through
the OutputBuffer, so the buffer ends up knowing exactly which imports the
rendered code needs. Runtime packages that a service does not use (status
and codes without streaming methods, UnaryHandler without unary methods)
are never touched, keeping the import block free of unused imports.
"""

from __future__ import annotations

from typing import Any

from .buffer import OutputBuffer
from .comments import Fragment, IdentifierFragment, TextFragment, wrap_comments
from .naming import (
    gateway_server_name,
    go_sanitized,
    handler_name,
    method_server_name,
    new_gateway_server_name,
    procedure_path,
    register_gateway_server_name,
    register_server_name,
    unexported_name,
    unimplemented_server_name,
)
from .schema import (
    Method,
    SchemaFile,
    Service,
    StreamingShape,
    TypeReference,
    is_deprecated_service,
    is_unary_method,
)

CONTEXT_PACKAGE = "context"
FMT_PACKAGE = "fmt"
CONNECT_GATEWAY_PACKAGE = "go.vallahaye.net/connect-gateway"
RUNTIME_PACKAGE = "github.com/grpc-ecosystem/grpc-gateway/v2/runtime"
CODES_PACKAGE = "google.golang.org/grpc/codes"
STATUS_PACKAGE = "google.golang.org/grpc/status"

DEPRECATED_NOTICE = "// Deprecated: do not use."
STREAMING_NOT_SUPPORTED = "streaming calls are not yet supported in the in-process transport"
REGISTRATION_ERROR_PREFIX = "connect-gateway"


def _ident(buffer: OutputBuffer, import_path: str, name: str) -> str:
    return buffer.qualify(TypeReference(name, import_path))


def _local(buffer: OutputBuffer, name: str) -> IdentifierFragment:
    """Doc comment reference to an identifier declared in the generated file."""
    return IdentifierFragment(TypeReference(name, buffer.go_import_path))


def build_doc(buffer: OutputBuffer, fragments: list[Fragment], deprecated: bool = False) -> list[str]:
    """Wrap a doc comment and append the deprecation paragraph if needed."""
    lines = wrap_comments(fragments, buffer.qualify)
    if deprecated:
        lines += ["//", DEPRECATED_NOTICE]
    return lines


def _stream_params(buffer: OutputBuffer, schema_file: SchemaFile, service: Service, method: Method) -> str:
    """Parameter list of the gRPC server method for a streaming shape."""
    stream = _ident(buffer, schema_file.go_import_path, method_server_name(service.go_name, method.go_name))
    if method.shape is StreamingShape.SERVER_STREAMING:
        return f"*{buffer.qualify(method.input)}, {stream}"
    return stream


def build_method_context(
    buffer: OutputBuffer,
    schema_file: SchemaFile,
    service: Service,
    method: Method,
) -> dict[str, Any]:
    """Context for one RPC: a forwarding method if unary, a stub otherwise."""
    ctx: dict[str, Any] = {
        "go_name": method.go_name,
        "shape": method.shape.value,
        "is_unary": is_unary_method(method),
        "doc": [DEPRECATED_NOTICE] if method.deprecated else [],
    }
    if ctx["is_unary"]:
        ctx.update({
            "field": go_sanitized(unexported_name(method.go_name)),
            "procedure": procedure_path(schema_file.package, service.name, method.name),
            "input": buffer.qualify(method.input),
            "output": buffer.qualify(method.output),
        })
    else:
        ctx["stream_params"] = _stream_params(buffer, schema_file, service, method)
    return ctx


def build_service_context(buffer: OutputBuffer, schema_file: SchemaFile, service: Service) -> dict[str, Any]:
    """Build the full service.go.j2 context for ``service``."""
    go_name = service.go_name
    deprecated = is_deprecated_service(service)
    gateway_server = gateway_server_name(go_name)
    new_gateway_server = new_gateway_server_name(go_name)
    register_gateway_server = register_gateway_server_name(go_name)

    type_doc = build_doc(
        buffer,
        [
            _local(buffer, gateway_server),
            TextFragment(f" implements the gRPC server API for the {go_name} service."),
        ],
        deprecated,
    )
    unimplemented_server = _ident(buffer, schema_file.go_import_path, unimplemented_server_name(go_name))

    methods = [build_method_context(buffer, schema_file, service, m) for m in service.methods]
    unary_methods = [m for m in methods if m["is_unary"]]

    ctx: dict[str, Any] = {
        "service": service.name,
        "go_name": go_name,
        "deprecated": deprecated,
        "gateway_server": gateway_server,
        "new_gateway_server": new_gateway_server,
        "register_gateway_server": register_gateway_server,
        "handler": handler_name(go_name),
        "unimplemented_server": unimplemented_server,
        "type_doc": type_doc,
        "methods": methods,
        "unary_methods": unary_methods,
        "streaming_not_supported": STREAMING_NOT_SUPPORTED,
        "registration_error_prefix": REGISTRATION_ERROR_PREFIX,
    }
    if unary_methods:
        ctx["unary_handler"] = _ident(buffer, CONNECT_GATEWAY_PACKAGE, "UnaryHandler")
        ctx["new_unary_handler"] = _ident(buffer, CONNECT_GATEWAY_PACKAGE, "NewUnaryHandler")
        ctx["context_type"] = _ident(buffer, CONTEXT_PACKAGE, "Context")
    if len(unary_methods) < len(methods):
        ctx["status_error"] = _ident(buffer, STATUS_PACKAGE, "Error")
        ctx["unimplemented_code"] = _ident(buffer, CODES_PACKAGE, "Unimplemented")

    ctx["constructor_doc"] = build_doc(
        buffer,
        [
            _local(buffer, new_gateway_server),
            TextFragment(f" constructs a Connect-Gateway gRPC server for the {go_name} service."),
        ],
        deprecated,
    )
    ctx["handler_option"] = _ident(buffer, CONNECT_GATEWAY_PACKAGE, "HandlerOption")
    ctx["register_doc"] = build_doc(
        buffer,
        [
            _local(buffer, register_gateway_server),
            TextFragment(f' registers the Connect handlers for the {go_name} "svc" to "mux".'),
        ],
        deprecated,
    )
    ctx["serve_mux"] = _ident(buffer, RUNTIME_PACKAGE, "ServeMux")
    ctx["register_server"] = _ident(buffer, schema_file.go_import_path, register_server_name(go_name))
    ctx["context_todo"] = _ident(buffer, CONTEXT_PACKAGE, "TODO")
    ctx["errorf"] = _ident(buffer, FMT_PACKAGE, "Errorf")
    return ctx

