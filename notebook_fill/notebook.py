"""
Notebook: in-memory model of a Jupyter (.ipynb) document.
"""

import json
import logging
from enum import Enum
from pathlib import Path
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from notebook_fill.exceptions import FormatError

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = ("metadata", "nbformat", "nbformat_minor", "cells")


class CellType(str, Enum):
    """Type of notebook cell."""
    CODE = "code"
    MARKDOWN = "markdown"
    RAW = "raw"


def _split_lines(text: str) -> list[str]:
    return text.splitlines(keepends=True)


def stream_output(name: str, text: str) -> dict[str, Any]:
    """Build an nbformat stream output holding ``text`` as a single line."""
    return {
        "output_type": "stream",
        "name": name,
        "text": [text],
    }


def display_output(data: dict[str, Any], metadata: Optional[dict[str, Any]] = None) -> dict[str, Any]:
    """Build an nbformat display_data output."""
    return {
        "output_type": "display_data",
        "metadata": metadata or {},
        "data": data,
    }


class Cell(BaseModel):
    """A single notebook cell.

    Fields the document did not carry are left unset so that a cell
    which is never run is written back exactly as it was read.
    """

    model_config = ConfigDict(extra="allow")

    cell_type: str
    source: list[str]
    metadata: dict[str, Any] = Field(default_factory=dict)
    outputs: list[dict[str, Any]] = Field(default_factory=list)
    execution_count: Optional[int] = None

    @field_validator("source", mode="before")
    @classmethod
    def _normalize_source(cls, value):
        if isinstance(value, str):
            return _split_lines(value)
        return value

    @property
    def is_code(self) -> bool:
        return self.cell_type == CellType.CODE.value

    @property
    def text(self) -> str:
        """The cell source joined into one block of text."""
        return "".join(self.source)

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        return self.model_dump(exclude_unset=True)

    @classmethod
    def from_dict(cls, data: dict) -> "Cell":
        """Create from dictionary, checking the fields every cell needs."""
        if not isinstance(data, dict):
            raise FormatError("notebook cells must be JSON objects")
        if "source" not in data:
            raise FormatError('cells must contain a "source" field')
        if "cell_type" not in data:
            raise FormatError('cells must contain a "cell_type" field')

        try:
            cell = cls(**data)
        except ValidationError as exc:
            raise FormatError(f"invalid cell: {exc}") from exc
        if cell.is_code and cell.execution_count is None:
            cell.execution_count = 1
        return cell


class Notebook(BaseModel):
    """
    A Jupyter notebook document.

    A notebook contains:
    - Cells (code, markdown and raw)
    - Metadata
    - The nbformat version it was written with
    """

    model_config = ConfigDict(extra="allow")

    metadata: dict[str, Any] = Field(default_factory=dict)
    nbformat: int = 4
    nbformat_minor: int = 5
    cells: list[Cell] = Field(default_factory=list)

    def get_cell(self, index: int) -> Cell:
        """Get a cell by (0-based) position."""
        return self.cells[index]

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        data = self.model_dump(exclude={"cells"})
        data["cells"] = [cell.to_dict() for cell in self.cells]
        return data

    @classmethod
    def from_dict(cls, data: dict) -> "Notebook":
        """Create from a decoded .ipynb document."""
        if not isinstance(data, dict):
            raise FormatError("not a valid format for Jupyter notebooks")

        missing = [name for name in REQUIRED_FIELDS if name not in data]
        if missing:
            raise FormatError(
                "not a valid format for Jupyter notebooks: missing "
                + ", ".join(missing)
            )
        if not isinstance(data["cells"], list):
            raise FormatError('the "cells" field must be a list')

        if not isinstance(data["nbformat"], int):
            raise FormatError('the "nbformat" field must be an integer')
        if data["nbformat"] < 4:
            logger.warning(
                "nbformat %s.%s is older than 4.0; the notebook may not be handled correctly",
                data["nbformat"],
                data["nbformat_minor"],
            )

        fields = {key: value for key, value in data.items() if key != "cells"}
        cells = [Cell.from_dict(c) for c in data["cells"]]
        try:
            return cls(cells=cells, **fields)
        except ValidationError as exc:
            raise FormatError(f"invalid notebook: {exc}") from exc

    def save(self, path: Path):
        """
        Save notebook to an .ipynb file.

        NaN and infinities are written as JSON literals so they survive
        a load/save round trip.

        Args:
            path: Path to save to
        """
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)

        with open(path, "w", encoding="utf-8") as f:
            json.dump(self.to_dict(), f, indent=1, sort_keys=True, ensure_ascii=False)
            f.write("\n")

    @classmethod
    def load(cls, path: Path) -> "Notebook":
        """
        Load notebook from an .ipynb file.

        Args:
            path: Path to load from

        Returns:
            Loaded notebook

        Raises:
            FormatError: If the file is not a structurally valid notebook
        """
        path = Path(path)
        with open(path, "r", encoding="utf-8") as f:
            try:
                data = json.load(f)
            except json.JSONDecodeError as exc:
                raise FormatError(f"{path} is not valid JSON: {exc}") from exc
        return cls.from_dict(data)

    def to_script(self) -> str:
        """Transcribe the notebook into a Python script.

        Code cells are copied verbatim; markdown and raw cells become
        comment blocks.
        """
        chunks = []
        for cell in self.cells:
            if cell.is_code:
                text = cell.text
            else:
                text = "".join(f"# {line}".rstrip() + "\n" for line in _split_lines(cell.text))
            if text and not text.endswith("\n"):
                text += "\n"
            chunks.append(text)
        return "\n".join(chunks)

    def generate_script(self, path: Path):
        """Write the script transcription of the notebook to ``path``."""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(self.to_script(), encoding="utf-8")
