"""Render templates and write generated output.

One SchemaFile becomes one Go file: services are rendered one after the
other into an OutputBuffer with service.go.j2, then file.go.j2 wraps the
buffer with the preamble, package clause and the imports the services
asked for.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable

import jinja2

from .buffer import OutputBuffer, is_stdlib_import
from .comments import TextFragment, wrap_comments
from .context_builder import build_service_context
from .naming import output_filename, output_import_path, output_package_name
from .schema import SchemaFile

logger = logging.getLogger(__name__)

TEMPLATE_DIR = Path(__file__).parent / "templates"
DEFAULT_GENERATOR_NAME = "protoc-gen-connect-gateway"


@dataclass(frozen=True)
class GeneratedFile:
    name: str
    go_import_path: str
    content: str


def _environment() -> jinja2.Environment:
    return jinja2.Environment(
        loader=jinja2.FileSystemLoader(str(TEMPLATE_DIR)),
        keep_trailing_newline=True,
        trim_blocks=True,
        lstrip_blocks=True,
        undefined=jinja2.StrictUndefined,
    )


def build_preamble(schema_file: SchemaFile, generator_name: str = DEFAULT_GENERATOR_NAME) -> list[str]:
    """Generated-code marker followed by the source or deprecation line."""
    lines = [f"// Code generated by {generator_name}. DO NOT EDIT.", "//"]
    if schema_file.deprecated:
        lines += wrap_comments([TextFragment(schema_file.path), TextFragment(" is a deprecated file.")])
    else:
        lines.append(f"// Source: {schema_file.path}")
    return lines


def render_services(
    buffer: OutputBuffer,
    schema_file: SchemaFile,
    env: jinja2.Environment | None = None,
) -> None:
    """Append every service of ``schema_file`` to ``buffer`` in declaration order."""
    env = env or _environment()
    template = env.get_template("service.go.j2")
    for i, service in enumerate(schema_file.services):
        if i:
            buffer.p()
        context = build_service_context(buffer, schema_file, service)
        buffer.extend(template.render(**context).rstrip("\n").split("\n"))


def generate(
    schema_file: SchemaFile,
    generator_name: str = DEFAULT_GENERATOR_NAME,
) -> GeneratedFile | None:
    """Generate the connect-gateway adapters for one proto file.

    Returns None for a file without services.
    """
    if not schema_file.services:
        logger.debug("Skipping %s: no services", schema_file.path)
        return None

    env = _environment()
    package_name = output_package_name(schema_file.go_package_name)
    buffer = OutputBuffer(
        output_filename(schema_file.filename_prefix, schema_file.go_package_name),
        output_import_path(schema_file.go_import_path, schema_file.go_package_name),
        package_name,
    )
    buffer.import_path(schema_file.go_import_path)
    render_services(buffer, schema_file, env)

    imports = buffer.imports
    content = env.get_template("file.go.j2").render(
        preamble=build_preamble(schema_file, generator_name),
        package_name=package_name,
        stdlib_imports=[i for i in imports if is_stdlib_import(i[1])],
        other_imports=[i for i in imports if not is_stdlib_import(i[1])],
        body=buffer.content,
    )
    logger.info("Generated %s (%d services)", buffer.filename, len(schema_file.services))
    return GeneratedFile(buffer.filename, buffer.go_import_path, content)


def generate_all(
    schema_files: Iterable[SchemaFile],
    generator_name: str = DEFAULT_GENERATOR_NAME,
) -> list[GeneratedFile]:
    """Generate every non-empty file, keeping input order."""
    generated = []
    for schema_file in schema_files:
        result = generate(schema_file, generator_name)
        if result is not None:
            generated.append(result)
    return generated


def write_generated(files: Iterable[GeneratedFile], output_dir: Path | str) -> list[Path]:
    """Write generated files under ``output_dir``, creating directories."""
    output_dir = Path(output_dir)
    written = []
    for generated in files:
        output_path = output_dir / generated.name
        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_text(generated.content)
        logger.info("Wrote %s", output_path)
        written.append(output_path)
    return written
