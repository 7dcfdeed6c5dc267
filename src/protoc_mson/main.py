from __future__ import annotations

import argparse
import os
import subprocess
import sys
import tempfile
from pathlib import Path
from typing import List, Optional, Set

from google.protobuf import descriptor_pb2 as d2
from google.protobuf.compiler import plugin_pb2

from protoc_mson.plugin import generate_response


def _find_proto_files(root: str) -> List[str]:
    """Recursively find .proto files under root, sorted for deterministic output."""
    return sorted(str(p) for p in Path(root).rglob("*.proto"))


def _include_args(includes: List[str]) -> List[str]:
    # de-dup while preserving order
    seen = set()
    args: List[str] = []
    for inc in includes:
        inc = os.path.abspath(inc)
        if inc not in seen:
            seen.add(inc)
            args.extend(["-I", inc])
    return args


def _target_names(proto_paths: List[str], includes: List[str]) -> Set[str]:
    """Names protoc gives the inputs: their paths relative to an include root."""
    names: Set[str] = set()
    for p in proto_paths:
        path = os.path.abspath(p)
        for inc in includes:
            rel = os.path.relpath(path, os.path.abspath(inc))
            if rel != os.pardir and not rel.startswith(os.pardir + os.sep):
                names.add(Path(rel).as_posix())
    return names


def load_request(proto_paths: List[str], includes: List[str]) -> plugin_pb2.CodeGeneratorRequest:
    """Compile proto files with protoc and wrap them the way protoc hands them to a plugin."""
    with tempfile.TemporaryDirectory() as td:
        desc_path = os.path.join(td, "descriptor_set.pb")
        cmd = [
            "protoc",
            "--include_imports",
            "--include_source_info",
            f"--descriptor_set_out={desc_path}",
        ] + _include_args(includes) + [os.path.abspath(p) for p in proto_paths]
        try:
            subprocess.run(cmd, check=True, capture_output=True)
        except FileNotFoundError as e:
            raise RuntimeError("'protoc' not found. Please install Protocol Buffers compiler and ensure it is in PATH.") from e
        except subprocess.CalledProcessError as e:
            raise RuntimeError(f"protoc failed: {e.stderr.decode('utf-8', errors='ignore')}") from e

        fds = d2.FileDescriptorSet()
        with open(desc_path, "rb") as f:
            fds.ParseFromString(f.read())

    request = plugin_pb2.CodeGeneratorRequest()
    request.proto_file.extend(fds.file)

    targets = _target_names(proto_paths, includes)
    for fi in request.proto_file:
        if fi.name in targets:
            request.file_to_generate.append(fi.name)
    return request


def run(proto: str, out_dir: str, includes: Optional[List[str]] = None, allow_all: bool = False) -> List[str]:
    """Generate .pb.apib files for a .proto file or a directory of them.

    Returns the list of written paths.
    """
    if os.path.isdir(proto):
        inputs = _find_proto_files(proto)
        default_include = proto
    else:
        inputs = [proto]
        default_include = os.path.dirname(os.path.abspath(proto))
    if not inputs:
        return []

    request = load_request(inputs, (includes or []) + [default_include])
    response = generate_response(request, allow_all=allow_all)
    if response.error:
        raise RuntimeError(response.error)

    os.makedirs(out_dir, exist_ok=True)
    generated: List[str] = []
    for out in response.file:
        out_path = os.path.join(out_dir, out.name)
        Path(out_path).write_text(out.content, encoding="utf-8")
        generated.append(out_path)
    return generated


def main():
    parser = argparse.ArgumentParser(description="Generate API Blueprint MSON data structures from .proto files")
    parser.add_argument("--proto", required=True, help="Path to a .proto file or a directory containing .proto files (recursively)")
    parser.add_argument("--out", required=True, help="Output directory for generated .pb.apib file(s)")
    parser.add_argument("-I", "--include", action="append", default=[], help="Additional import path passed to protoc (repeatable)")
    parser.add_argument("--allow-all", action="store_true", help="Also render imported files, not just the requested ones")
    args = parser.parse_args()

    try:
        generated = run(args.proto, args.out, args.include, allow_all=args.allow_all)
    except RuntimeError as e:
        print(f"protoc-gen-mson: {e}", file=sys.stderr)
        sys.exit(1)

    if not generated:
        print(f"No .proto files found under: {args.proto}")
        return
    print("Generated:\n" + "\n".join(generated))


if __name__ == "__main__":
    main()
