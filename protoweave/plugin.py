"""The protoc plugin pipeline: request in, response out."""

from __future__ import annotations

from typing import List, Optional

from google.protobuf.compiler import plugin_pb2

from .config import ProtoweaveConfig, config_from_parameter
from .descriptors.linker import link
from .generators import GeneratorContext, build_generator
from .logging import get_logger
from .models import OutputFile, OutputFragment
from .postproc.merger import merge
from .types.extension import MoreKnownTypes
from .types.known import KnownTypesRegistry
from .types.options import OptionIndex
from .types.typeset import TypeSet

LOGGER = get_logger("plugin")

MIN_COMPILER_MAJOR = 3


class RequestError(ValueError):
    """Raised when a code generation request cannot be processed."""


class ProtocPlugin:
    """Runs the configured generators over the files protoc asks to generate.

    The known types registry is the only state shared between requests.
    """

    def __init__(
        self,
        registry: Optional[KnownTypesRegistry] = None,
        config: Optional[ProtoweaveConfig] = None,
    ) -> None:
        self.registry = registry if registry is not None else KnownTypesRegistry.default()
        self._config = config

    def process(
        self, request: plugin_pb2.CodeGeneratorRequest
    ) -> plugin_pb2.CodeGeneratorResponse:
        """Build the response for ``request``.

        Raises:
            RequestError: if the compiler is too old or no file is to be generated.
            ConfigError: if the configuration passed in the parameter cannot be loaded.
            GenerationError: if a generator fails on a type.
            FileConflictError: if generators disagree on the content of a file.
        """
        files = self.generate(request)
        response = plugin_pb2.CodeGeneratorResponse()
        response.supported_features = plugin_pb2.CodeGeneratorResponse.FEATURE_PROTO3_OPTIONAL
        response.file.extend(file.to_proto() for file in files)
        return response

    def generate(self, request: plugin_pb2.CodeGeneratorRequest) -> List[OutputFile]:
        _check_request(request)
        config = self._config if self._config is not None else config_from_parameter(request.parameter)
        prefixes = config.prefixes()

        result = link(request.proto_file)
        if not result.is_complete():
            LOGGER.warning(
                "Some files were not fully linked: %s",
                ", ".join(result.partially_resolved.file_names() + result.unresolved.file_names()),
            )
        linked = result.all_files()
        known = MoreKnownTypes.extend_with(self.registry, linked, prefixes)
        LOGGER.debug("Known types version %d holds %d types", known.version, len(known))

        generator = build_generator(
            config, GeneratorContext(option_index=OptionIndex.from_files(linked))
        )
        fragments: List[OutputFragment] = []
        for file_name in request.file_to_generate:
            file = linked.try_find(file_name)
            if file is None:
                raise RequestError(f"File `{file_name}` is not among the request descriptors")
            for type_ in TypeSet.from_file(file, prefixes):
                fragments.extend(generator.generate(type_))
        LOGGER.debug(
            "Generated %d fragments for %d files", len(fragments), len(request.file_to_generate)
        )
        return merge(fragments)


def _check_request(request: plugin_pb2.CodeGeneratorRequest) -> None:
    if not request.HasField("compiler_version"):
        raise RequestError("The request does not name the compiler version")
    major = request.compiler_version.major
    if major < MIN_COMPILER_MAJOR:
        raise RequestError(
            f"Compiler version {major} is not supported; use {MIN_COMPILER_MAJOR} or newer"
        )
    if not request.file_to_generate:
        raise RequestError("The request has no files to generate")


__all__ = ["MIN_COMPILER_MAJOR", "ProtocPlugin", "RequestError"]
