"""Turn proto file descriptors into the generator's schema model.

Handles:
- go_package options ("path;name" and bare "path")
- import path overrides, like protoc's M flags
- Go names for messages, including nested ones (Outer.Inner -> Outer_Inner)
- cross-file message references
- file, service and method deprecation options
- "import" and "source_relative" output path modes
"""

from __future__ import annotations

import posixpath
from typing import Iterable

from google.protobuf import descriptor_pb2

from .naming import clean_package_name, go_camel_case
from .schema import Method, SchemaFile, Service, TypeReference

PATHS_IMPORT = "import"
PATHS_SOURCE_RELATIVE = "source_relative"
_PATHS_MODES = {PATHS_IMPORT, PATHS_SOURCE_RELATIVE}

_PROTO_EXTENSIONS = (".proto", ".protodevel")


class SchemaError(ValueError):
    """Descriptors that cannot be mapped onto Go code."""


def parse_go_package(go_package: str) -> tuple[str, str]:
    """Split a go_package option into (import path, package name)."""
    import_path, sep, name = go_package.partition(";")
    if not sep or not name:
        name = clean_package_name(posixpath.basename(import_path))
    return import_path, name


def resolve_go_package(
    file_proto: descriptor_pb2.FileDescriptorProto,
    import_paths: dict[str, str] | None = None,
) -> tuple[str, str]:
    """Go import path and package name for a proto file.

    An entry in ``import_paths`` (proto path -> Go import path) wins over
    the file's go_package option. Returns ("", "") when neither is set.
    """
    override = (import_paths or {}).get(file_proto.name)
    go_package = file_proto.options.go_package
    import_path, name = parse_go_package(go_package) if go_package else ("", "")
    if override:
        explicit_name = go_package.partition(";")[2]
        return override, explicit_name or clean_package_name(posixpath.basename(override))
    return import_path, name


def _message_names(
    messages: Iterable[descriptor_pb2.DescriptorProto],
    scope: str,
) -> Iterable[str]:
    """Yield dotted names (relative to the package) of messages and nested messages."""
    for message in messages:
        name = f"{scope}.{message.name}" if scope else message.name
        yield name
        yield from _message_names(message.nested_type, name)


def build_type_index(
    files: Iterable[descriptor_pb2.FileDescriptorProto],
    import_paths: dict[str, str] | None = None,
) -> dict[str, TypeReference]:
    """Map fully-qualified message names (".pkg.Msg") to Go identifiers.

    Messages of files without a Go import path are indexed with an empty
    import path and rejected by ``resolve_type`` when referenced.
    """
    index: dict[str, TypeReference] = {}
    for file_proto in files:
        import_path, _ = resolve_go_package(file_proto, import_paths)
        prefix = f".{file_proto.package}." if file_proto.package else "."
        for name in _message_names(file_proto.message_type, ""):
            index[prefix + name] = TypeReference(go_camel_case(name), import_path)
    return index


def resolve_type(type_index: dict[str, TypeReference], full_name: str) -> TypeReference:
    """Look up a method's input or output type."""
    if not full_name.startswith("."):
        full_name = "." + full_name
    ref = type_index.get(full_name)
    if ref is None:
        raise SchemaError(f"unknown message type {full_name}")
    if not ref.import_path:
        raise SchemaError(f"no Go import path for message type {full_name}")
    return ref


def filename_prefix(
    file_proto: descriptor_pb2.FileDescriptorProto,
    go_import_path: str,
    paths: str = PATHS_IMPORT,
) -> str:
    """Base name generated files are derived from, as protoc-gen-go computes it."""
    if paths not in _PATHS_MODES:
        raise ValueError(f"invalid paths mode {paths!r}, expected one of {sorted(_PATHS_MODES)}")
    prefix = file_proto.name
    for ext in _PROTO_EXTENSIONS:
        if prefix.endswith(ext):
            prefix = prefix[: -len(ext)]
            break
    if paths == PATHS_IMPORT:
        prefix = posixpath.join(go_import_path, posixpath.basename(prefix))
    return prefix


def _parse_method(
    method_proto: descriptor_pb2.MethodDescriptorProto,
    type_index: dict[str, TypeReference],
) -> Method:
    return Method(
        name=method_proto.name,
        go_name=go_camel_case(method_proto.name),
        input=resolve_type(type_index, method_proto.input_type),
        output=resolve_type(type_index, method_proto.output_type),
        client_streaming=method_proto.client_streaming,
        server_streaming=method_proto.server_streaming,
        deprecated=method_proto.options.deprecated,
    )


def _parse_service(
    service_proto: descriptor_pb2.ServiceDescriptorProto,
    type_index: dict[str, TypeReference],
) -> Service:
    return Service(
        name=service_proto.name,
        go_name=go_camel_case(service_proto.name),
        methods=[_parse_method(m, type_index) for m in service_proto.method],
        deprecated=service_proto.options.deprecated,
    )


def parse_file(
    file_proto: descriptor_pb2.FileDescriptorProto,
    type_index: dict[str, TypeReference],
    import_paths: dict[str, str] | None = None,
    paths: str = PATHS_IMPORT,
) -> SchemaFile:
    """Build the SchemaFile for one proto file."""
    go_import_path, go_package_name = resolve_go_package(file_proto, import_paths)
    if not go_import_path:
        raise SchemaError(
            f"unable to determine Go import path for {file_proto.name!r}:"
            " set the go_package option or pass an import path mapping"
        )
    return SchemaFile(
        path=file_proto.name,
        package=file_proto.package,
        go_package_name=go_package_name,
        go_import_path=go_import_path,
        filename_prefix=filename_prefix(file_proto, go_import_path, paths),
        services=[_parse_service(s, type_index) for s in file_proto.service],
        deprecated=file_proto.options.deprecated,
    )


def parse_descriptor_set(
    descriptor_set: descriptor_pb2.FileDescriptorSet,
    files_to_generate: Iterable[str] | None = None,
    import_paths: dict[str, str] | None = None,
    paths: str = PATHS_IMPORT,
) -> list[SchemaFile]:
    """Parse the requested files (all files by default) of a descriptor set."""
    files = {f.name: f for f in descriptor_set.file}
    type_index = build_type_index(descriptor_set.file, import_paths)
    names = list(files) if files_to_generate is None else list(files_to_generate)
    schema_files = []
    for name in names:
        if name not in files:
            raise SchemaError(f"file {name!r} is not in the descriptor set")
        schema_files.append(parse_file(files[name], type_index, import_paths, paths))
    return schema_files
