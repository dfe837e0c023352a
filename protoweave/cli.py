"""CLI entrypoints for protoweave commands."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import BinaryIO

from google.protobuf.compiler import plugin_pb2
from google.protobuf.message import DecodeError

from .config import ConfigError, ProtoweaveConfig, load_config
from .descriptors.files import parse_descriptor_set
from .descriptors.linker import link
from .generators.base import GenerationError
from .logging import configure_logging, configure_plugin_logging, get_logger
from .models import OutputFile
from .plugin import ProtocPlugin, RequestError
from .postproc.markers import MissingInsertionPointError, fill_directory
from .postproc.merger import FileConflictError
from .types.extension import MoreKnownTypes
from .types.known import KnownTypesRegistry

LOGGER = get_logger("cli")

_EXPECTED_ERRORS = (
    ConfigError,
    DecodeError,
    FileConflictError,
    GenerationError,
    MissingInsertionPointError,
    OSError,
    RequestError,
)


def _add_verbose_option(
    parser: argparse.ArgumentParser, *, suppress_default: bool = False
) -> None:
    kwargs: dict[str, object] = {
        "action": "store_true",
        "help": "Increase log verbosity for troubleshooting.",
    }
    if suppress_default:
        kwargs["default"] = argparse.SUPPRESS
    else:
        kwargs["default"] = False
    parser.add_argument(
        "-v",
        "--verbose",
        **kwargs,
    )


def _add_config_option(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Path to a protoweave YAML configuration file.",
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="protoweave",
        description="Link Protobuf descriptors and generate Java insertion point code.",
    )
    _add_verbose_option(parser)
    subparsers = parser.add_subparsers(dest="command", required=True)

    link_parser = subparsers.add_parser(
        "link",
        help="Report how the files of a descriptor set link together.",
    )
    _add_verbose_option(link_parser, suppress_default=True)
    link_parser.add_argument("descriptor_set", type=Path, help="Serialized FileDescriptorSet.")

    types_parser = subparsers.add_parser(
        "types",
        help="List the type URLs known after adding a descriptor set.",
    )
    _add_verbose_option(types_parser, suppress_default=True)
    _add_config_option(types_parser)
    types_parser.add_argument("descriptor_set", type=Path, help="Serialized FileDescriptorSet.")

    generate_parser = subparsers.add_parser(
        "generate",
        help="Run the plugin pipeline on a serialized CodeGeneratorRequest.",
    )
    _add_verbose_option(generate_parser, suppress_default=True)
    _add_config_option(generate_parser)
    generate_parser.add_argument("request", type=Path, help="Serialized CodeGeneratorRequest.")
    generate_parser.add_argument(
        "-o",
        "--output",
        type=Path,
        default=None,
        help="Where to write the serialized response (defaults to stdout).",
    )

    fill_parser = subparsers.add_parser(
        "fill",
        help="Apply a serialized CodeGeneratorResponse to Java sources on disk.",
    )
    _add_verbose_option(fill_parser, suppress_default=True)
    fill_parser.add_argument("response", type=Path, help="Serialized CodeGeneratorResponse.")
    fill_parser.add_argument(
        "--root",
        type=Path,
        default=Path("."),
        help="Directory holding the generated Java sources (defaults to current directory).",
    )

    return parser


def main(argv: list[str] | None = None) -> None:
    """CLI entrypoint for protoweave commands."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    configure_logging(verbose=bool(args.verbose))

    try:
        if args.command == "link":
            _run_link(args.descriptor_set)
        elif args.command == "types":
            _run_types(args.descriptor_set, _config(args.config))
        elif args.command == "generate":
            _run_generate(args.request, args.output, _config(args.config))
        elif args.command == "fill":
            _run_fill(args.response, args.root)
        else:  # pragma: no cover - argparse enforces choices
            parser.exit(1, "Unknown command\n")
    except _EXPECTED_ERRORS as exc:
        parser.exit(1, f"protoweave {args.command} failed: {exc}\n")
    except Exception as exc:  # pragma: no cover - defensive guard
        parser.exit(
            1, f"protoweave {args.command} failed: {exc}\nRun with --verbose for more details.\n"
        )


def plugin_main() -> None:
    """protoc plugin entrypoint: reads a request from stdin, writes a response to stdout.

    On failure nothing is written to stdout; the diagnostic goes to stderr and the
    process exits with status 1.
    """
    configure_plugin_logging()
    try:
        response = run_plugin(sys.stdin.buffer.read())
    except Exception as exc:
        LOGGER.error("Code generation failed: %s", exc)
        LOGGER.debug("Failure details", exc_info=True)
        raise SystemExit(1) from exc
    _write(sys.stdout.buffer, response)


def run_plugin(data: bytes, plugin: ProtocPlugin | None = None) -> bytes:
    """Process a serialized request and return the serialized response."""
    request = plugin_pb2.CodeGeneratorRequest.FromString(data)
    response = (plugin or ProtocPlugin()).process(request)
    return response.SerializeToString()


def _config(path: Path | None) -> ProtoweaveConfig | None:
    return load_config(path, required=True) if path is not None else None


def _run_link(descriptor_set: Path) -> None:
    result = link(parse_descriptor_set(descriptor_set))
    for title, files in (
        ("resolved", result.resolved),
        ("partially resolved", result.partially_resolved),
        ("unresolved", result.unresolved),
    ):
        print(f"{title}: {len(files)}")
        for linked in sorted(files, key=lambda item: item.name):
            suffix = f" (missing: {', '.join(linked.missing)})" if linked.missing else ""
            print(f"  {linked.name}{suffix}")


def _run_types(descriptor_set: Path, config: ProtoweaveConfig | None) -> None:
    config = config or ProtoweaveConfig()
    result = link(parse_descriptor_set(descriptor_set))
    registry = KnownTypesRegistry.default()
    known = MoreKnownTypes.extend_with(registry, result.all_files(), config.prefixes())
    print(known.print_all_types())


def _run_generate(request_path: Path, output: Path | None, config: ProtoweaveConfig | None) -> None:
    plugin = ProtocPlugin(config=config)
    data = run_plugin(request_path.read_bytes(), plugin)
    if output is None:
        _write(sys.stdout.buffer, data)
        return
    output.write_bytes(data)
    print(f"Response written to {_relativize(output)}")


def _run_fill(response_path: Path, root: Path) -> None:
    response = plugin_pb2.CodeGeneratorResponse.FromString(response_path.read_bytes())
    if response.HasField("error"):
        raise RequestError(f"Response carries an error: {response.error}")
    files = [OutputFile.from_proto(file) for file in response.file]
    touched = fill_directory(root, files)
    for path in touched:
        print(f"Updated {_relativize(path)}")


def _write(stream: BinaryIO, data: bytes) -> None:
    stream.write(data)
    stream.flush()


def _relativize(path: Path) -> str:
    try:
        return str(path.resolve().relative_to(Path.cwd()))
    except ValueError:
        return str(path)


if __name__ == "__main__":
    main(sys.argv[1:])
