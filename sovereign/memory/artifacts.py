"""
Artifact Collection
===================

Holds the external data visible to one turn:

1. Active user files - payloads the user attached to the workspace
2. Tool schemas - declared capabilities, looked up by tool name

Schema lookups are deliberately tolerant: an unknown name yields an empty
object and a warning, so a single missing schema never aborts context
compilation.
"""

import base64
from dataclasses import dataclass
from typing import TYPE_CHECKING

from sovereign.utils.logger import Logger

if TYPE_CHECKING:
    from sovereign.tools import ToolRegistry

logger = Logger("ArtifactCollection")


@dataclass(frozen=True)
class FileData:
    """
    A user-supplied file.

    Attributes:
        name: File name
        data: Base64-encoded payload
        mime_type: MIME type of the payload
    """
    name: str
    data: str
    mime_type: str = "text/plain"

    @classmethod
    def from_text(cls, name: str, text: str, mime_type: str = "text/plain") -> "FileData":
        """Build a FileData from plain text."""
        encoded = base64.b64encode(text.encode("utf-8")).decode("ascii")
        return cls(name=name, data=encoded, mime_type=mime_type)

    def decode(self) -> str:
        """Decode the payload as text. Undecodable bytes are replaced."""
        if not self.data:
            return ""
        return base64.b64decode(self.data).decode("utf-8", errors="replace")


class ArtifactCollection:
    """
    Active files and known tool schemas for a turn.

    Example:
        artifacts = ArtifactCollection(
            files=[FileData.from_text("notes.md", "# Plan")],
            schemas={"calculator": {"name": "calculator", ...}},
        )

        await artifacts.get_active_artifacts()   # [FileData(...)]
        await artifacts.get_schema("calculator") # {...}
        await artifacts.get_schema("missing")    # {}
    """

    def __init__(
        self,
        files: list[FileData] | tuple[FileData, ...] = (),
        schemas: dict[str, dict] | None = None
    ):
        self._files: list[FileData] = list(files)
        self._schemas: dict[str, dict] = dict(schemas or {})

    @classmethod
    def from_registry(
        cls,
        registry: "ToolRegistry",
        files: list[FileData] | tuple[FileData, ...] = ()
    ) -> "ArtifactCollection":
        """
        Build a collection whose schemas mirror a tool registry.

        Args:
            registry: Registry to copy schemas from
            files: Initially active files
        """
        schemas = {tool.name: tool.schema.to_dict() for tool in registry.get_all()}
        return cls(files=files, schemas=schemas)

    async def get_active_artifacts(self) -> list[FileData]:
        """Get the files visible to this turn (empty by default)."""
        return list(self._files)

    async def get_schema(self, name: str) -> dict:
        """
        Get the schema registered for a tool name.

        Returns:
            The schema dict, or an empty dict if unknown
        """
        schema = self._schemas.get(name)
        if schema is None:
            logger.warning(f"Schema not found for: {name}")
            return {}
        return dict(schema)

    def add_file(self, file: FileData) -> None:
        """Make a file active."""
        self._files.append(file)

    def clear_files(self) -> None:
        """Drop all active files."""
        self._files.clear()

    def register_schema(self, name: str, schema: dict) -> None:
        """Register or replace a tool schema."""
        self._schemas[name] = dict(schema)
