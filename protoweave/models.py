"""Core data models shared across protoweave components."""

from dataclasses import dataclass
from typing import Optional

from google.protobuf.compiler import plugin_pb2


@dataclass(frozen=True)
class OutputFragment:
    """A piece of generated code produced for a single type.

    Without an insertion point the fragment is a whole file; with one it is a
    contribution spliced into a previously generated file.
    """

    name: str
    content: str
    insertion_point: Optional[str] = None

    @property
    def is_whole_file(self) -> bool:
        return not self.insertion_point


@dataclass(frozen=True)
class OutputFile:
    """A merged entry of the plugin response."""

    name: str
    content: str
    insertion_point: Optional[str] = None

    def to_proto(self) -> plugin_pb2.CodeGeneratorResponse.File:
        file = plugin_pb2.CodeGeneratorResponse.File(name=self.name, content=self.content)
        if self.insertion_point:
            file.insertion_point = self.insertion_point
        return file

    @classmethod
    def from_proto(cls, file: plugin_pb2.CodeGeneratorResponse.File) -> "OutputFile":
        insertion_point = file.insertion_point if file.HasField("insertion_point") else None
        return cls(name=file.name, content=file.content, insertion_point=insertion_point or None)
