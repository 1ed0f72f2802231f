"""Append-only output buffer for one generated Go file."""

from __future__ import annotations

import posixpath

from .naming import GO_PREDECLARED, clean_package_name
from .schema import TypeReference


def is_stdlib_import(path: str) -> bool:
    """Go standard library paths have no dot in their first element."""
    return "." not in path.split("/", 1)[0]


class OutputBuffer:
    """Collects emitted lines and the imports they need.

    ``qualify`` hands out package names the way protoc-gen-go does: the
    sanitized base of the import path, numbered on collision.
    """

    def __init__(self, filename: str, go_import_path: str, package_name: str = "") -> None:
        self.filename = filename
        self.go_import_path = go_import_path
        self.lines: list[str] = []
        self._package_names: dict[str, str] = {}
        self._used_names: set[str] = set(GO_PREDECLARED)
        if package_name:
            self._used_names.add(package_name)

    def p(self, *parts: object) -> None:
        """Append one line built from ``parts``."""
        self.lines.append("".join(str(part) for part in parts))

    def extend(self, lines: list[str]) -> None:
        self.lines.extend(lines)

    def import_path(self, path: str) -> str:
        """Register ``path`` as an import and return its package name."""
        name = self._package_names.get(path)
        if name is not None:
            return name
        name = orig = clean_package_name(posixpath.basename(path))
        i = 1
        while name in self._used_names:
            name = f"{orig}{i}"
            i += 1
        self._package_names[path] = name
        self._used_names.add(name)
        return name

    def qualify(self, ident: TypeReference) -> str:
        """Return ``ident`` as it must be spelled in this file."""
        if ident.import_path == self.go_import_path:
            return ident.go_name
        return f"{self.import_path(ident.import_path)}.{ident.go_name}"

    @property
    def imports(self) -> list[tuple[str, str]]:
        """(name, path) pairs, standard library first, each group sorted by path."""
        return sorted(
            ((name, path) for path, name in self._package_names.items()),
            key=lambda item: (not is_stdlib_import(item[1]), item[1]),
        )

    @property
    def content(self) -> str:
        return "\n".join(self.lines) + "\n" if self.lines else ""
