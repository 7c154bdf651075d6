from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from .base import Connector


@dataclass(frozen=True)
class TextSeriesConnector(Connector):
    """Reads a headerless `period,value` file, one quarter per line.

    Lines are returned untouched; field validation belongs to the parser so
    that malformed rows are reported with their line numbers.
    """

    path: str
    encoding: str = "utf-8"

    def load_lines(self) -> list[str]:
        path = Path(self.path)
        if not path.is_file():
            raise FileNotFoundError(f"Series file not found: {path}")
        return path.read_text(encoding=self.encoding).splitlines()
