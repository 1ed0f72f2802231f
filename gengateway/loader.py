"""Load compiled proto descriptors.

Reads a FileDescriptorSet as produced by ``protoc --descriptor_set_out``
or ``buf build -o``, either binary or JSON encoded.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path

from google.protobuf import descriptor_pb2, json_format

logger = logging.getLogger(__name__)

_BINARY_SUFFIXES = {".pb", ".binpb", ".bin", ".desc"}


def load_descriptor_set(path: Path | str) -> descriptor_pb2.FileDescriptorSet:
    """Load a FileDescriptorSet from disk, binary or JSON by suffix."""
    path = Path(path)
    descriptor_set = descriptor_pb2.FileDescriptorSet()
    if path.suffix == ".json":
        with open(path) as f:
            json_format.ParseDict(json.load(f), descriptor_set)
    elif path.suffix in _BINARY_SUFFIXES:
        descriptor_set.ParseFromString(path.read_bytes())
    else:
        raise ValueError(f"unsupported descriptor set file: {path}")
    logger.info("Loaded %d proto files from %s", len(descriptor_set.file), path)
    return descriptor_set


def get_files(descriptor_set: descriptor_pb2.FileDescriptorSet) -> list[descriptor_pb2.FileDescriptorProto]:
    """Extract the file descriptors, in set order."""
    return list(descriptor_set.file)


def find_file(
    descriptor_set: descriptor_pb2.FileDescriptorSet,
    name: str,
) -> descriptor_pb2.FileDescriptorProto | None:
    """Look up a file descriptor by its proto path."""
    for file_proto in descriptor_set.file:
        if file_proto.name == name:
            return file_proto
    return None
