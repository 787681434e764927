"""
Host Bridge

The services BurnPath expects from the application embedding it: the size
of the editing canvas, and somewhere to store generated programs.
"""

from pathlib import Path
from typing import Optional, Protocol, Tuple, Union
import logging

logger = logging.getLogger(__name__)


class HostBridge(Protocol):
    """Collaborator supplied by the embedding application."""

    def canvas_size(self) -> Optional[Tuple[float, float]]:
        """Size of the editing canvas in canvas units, or None if unknown."""

    def save_output(self, filename: str, data: Union[str, bytes]) -> str:
        """Persist generated output; returns where it was stored."""


class FileSystemHost:
    """Host that writes output files into a directory."""

    def __init__(self, output_dir: Union[str, Path] = ".",
                 canvas: Optional[Tuple[float, float]] = None):
        self.output_dir = Path(output_dir)
        self._canvas = canvas

    def canvas_size(self) -> Optional[Tuple[float, float]]:
        return self._canvas

    def save_output(self, filename: str, data: Union[str, bytes]) -> str:
        self.output_dir.mkdir(parents=True, exist_ok=True)
        path = self.output_dir / filename
        if isinstance(data, str):
            path.write_text(data, encoding='utf-8')
        else:
            path.write_bytes(data)
        logger.info(f"Saved {path}")
        return str(path)
