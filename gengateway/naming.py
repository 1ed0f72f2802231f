"""Go identifier, procedure path and output path derivation.

Identifier rules follow protoc-gen-go so that names line up with the code
protoc-gen-go, protoc-gen-connect-go and grpc-gateway generate:

  service Greeter, rpc SayHello
    -> GreeterGatewayServer            adapter type
    -> NewGreeterGatewayServer         constructor
    -> sayHello                        unary handler field
    -> RegisterGreeterHandlerGatewayServer
    -> /pkg.v1.Greeter/SayHello        procedure path

Output files land in a sibling "<package>connect" directory:

  foo/v1/foo  (package foov1)  ->  foo/v1/foov1connect/foo.connect.gw.go
"""

from __future__ import annotations

import posixpath

GENERATED_PACKAGE_SUFFIX = "connect"
GENERATED_FILENAME_EXTENSION = ".connect.gw.go"

_GO_KEYWORDS = {
    "break", "case", "chan", "const", "continue", "default", "defer", "else",
    "fallthrough", "for", "func", "go", "goto", "if", "import", "interface",
    "map", "package", "range", "return", "select", "struct", "switch", "type",
    "var",
}

# Names in the Go universe block; imported packages must not shadow them.
GO_PREDECLARED = frozenset({
    "any", "append", "bool", "byte", "cap", "clear", "close", "comparable",
    "complex", "complex128", "complex64", "copy", "delete", "error", "false",
    "float32", "float64", "imag", "int", "int16", "int32", "int64", "int8",
    "iota", "len", "make", "max", "min", "new", "nil", "panic", "print",
    "println", "real", "recover", "rune", "string", "true", "uint", "uint16",
    "uint32", "uint64", "uint8", "uintptr",
})


def unexported_name(name: str) -> str:
    """Lower-case the first character of ``name``, leaving the rest as is."""
    if not name:
        return name
    # İ lowers to two code points; keep only the first, as Go does
    return name[0].lower()[:1] + name[1:]


def procedure_path(package: str, service: str, method: str) -> str:
    """Build the ``/package.Service/Method`` path the gateway router matches on."""
    return f"/{package}.{service}/{method}"


def _is_ascii_lower(c: str) -> bool:
    return "a" <= c <= "z"


def _is_ascii_digit(c: str) -> bool:
    return "0" <= c <= "9"


def go_camel_case(name: str) -> str:
    """Convert a proto name to a Go identifier the way protoc-gen-go does.

    '.' becomes '_' unless it precedes a lower-case letter, a leading '_'
    becomes 'X', and every word is capitalized.
    """
    out: list[str] = []
    i = 0
    while i < len(name):
        c = name[i]
        nxt = name[i + 1] if i + 1 < len(name) else ""
        if c == "." and nxt and _is_ascii_lower(nxt):
            pass
        elif c == ".":
            out.append("_")
        elif c == "_" and (i == 0 or name[i - 1] == "."):
            out.append("X")
        elif c == "_" and nxt and _is_ascii_lower(nxt):
            pass
        elif _is_ascii_digit(c):
            out.append(c)
        else:
            if _is_ascii_lower(c):
                c = c.upper()
            out.append(c)
            while i + 1 < len(name) and _is_ascii_lower(name[i + 1]):
                i += 1
                out.append(name[i])
        i += 1
    return "".join(out)


def go_sanitized(name: str) -> str:
    """Make ``name`` a valid Go identifier."""
    name = "".join(c if c.isalpha() or c.isdecimal() or c == "_" else "_" for c in name)
    if not name:
        return "_"
    if name in _GO_KEYWORDS or not (name[0].isalpha() or name[0] == "_"):
        return "_" + name
    return name


def clean_package_name(name: str) -> str:
    return go_sanitized(name)


def handler_name(service_go_name: str) -> str:
    """Handler interface emitted by protoc-gen-connect-go."""
    return f"{service_go_name}Handler"


def gateway_server_name(service_go_name: str) -> str:
    return f"{service_go_name}GatewayServer"


def new_gateway_server_name(service_go_name: str) -> str:
    return f"New{gateway_server_name(service_go_name)}"


def unimplemented_server_name(service_go_name: str) -> str:
    return f"Unimplemented{service_go_name}Server"


def register_gateway_server_name(service_go_name: str) -> str:
    return f"Register{service_go_name}HandlerGatewayServer"


def register_server_name(service_go_name: str) -> str:
    """Registration entry point emitted by grpc-gateway."""
    return f"Register{service_go_name}HandlerServer"


def method_server_name(service_go_name: str, method_go_name: str) -> str:
    """Stream server type emitted by protoc-gen-go-grpc for streaming methods."""
    return f"{service_go_name}_{method_go_name}Server"


def output_package_name(go_package_name: str) -> str:
    return go_package_name + GENERATED_PACKAGE_SUFFIX


def output_filename(filename_prefix: str, go_package_name: str) -> str:
    """Path of the generated file for a proto file's filename prefix."""
    prefix = filename_prefix.replace("\\", "/")
    return posixpath.join(
        posixpath.dirname(prefix),
        output_package_name(go_package_name),
        posixpath.basename(prefix),
    ) + GENERATED_FILENAME_EXTENSION


def output_import_path(go_import_path: str, go_package_name: str) -> str:
    return posixpath.join(go_import_path, output_package_name(go_package_name))
