"""protoc plugin entry point: CodeGeneratorRequest on stdin, response on stdout."""

from __future__ import annotations

import os
import sys
from typing import Dict, Optional

from google.protobuf.compiler import plugin_pb2
from jinja2 import TemplateError

from protoc_mson.comments import attach_comments
from protoc_mson.generator.mson_generator import generate_mson, output_name
from protoc_mson.models import ScopeCollisionError
from protoc_mson.resolver import Resolver, UnhandledTypeError
from protoc_mson.symbols import build_symbol_table

_TRUE_VALUES = ("", "t", "true", "1", "yes")


def parse_parameter(parameter: str) -> Dict[str, str]:
    """Split a ``--mson_opt`` string such as ``allow_all,foo=bar``."""
    params: Dict[str, str] = {}
    for item in parameter.split(","):
        item = item.strip()
        if not item:
            continue
        key, _, value = item.partition("=")
        params[key.strip()] = value.strip()
    return params


def allow_all_enabled(parameter: str = "", environ: Optional[Dict[str, str]] = None) -> bool:
    environ = os.environ if environ is None else environ
    if environ.get("allow_all") == "T":
        return True
    value = parse_parameter(parameter).get("allow_all")
    return value is not None and value.lower() in _TRUE_VALUES


def generate_response(
    request: plugin_pb2.CodeGeneratorRequest,
    allow_all: bool = False,
) -> plugin_pb2.CodeGeneratorResponse:
    """Render one ``.pb.apib`` file per requested proto file."""
    response = plugin_pb2.CodeGeneratorResponse()
    response.supported_features = plugin_pb2.CodeGeneratorResponse.FEATURE_PROTO3_OPTIONAL
    to_generate = set(request.file_to_generate)

    for fi in request.proto_file:
        if not (fi.name in to_generate or allow_all):
            continue

        try:
            table = build_symbol_table(fi, to_generate=True)
            attach_comments(table, fi)
            content = generate_mson(table, Resolver(request, table))
        except (UnhandledTypeError, ScopeCollisionError, TemplateError) as e:
            response.error = f"{fi.name}: {e}"
            return response

        out = response.file.add()
        out.name = output_name(fi)
        out.content = content

    return response


def main():
    data = sys.stdin.buffer.read()
    request = plugin_pb2.CodeGeneratorRequest()
    request.ParseFromString(data)

    response = generate_response(request, allow_all=allow_all_enabled(request.parameter))
    if response.error:
        print(f"protoc-gen-mson: {response.error}", file=sys.stderr)

    sys.stdout.buffer.write(response.SerializeToString())
    sys.stdout.buffer.flush()


if __name__ == "__main__":
    main()
