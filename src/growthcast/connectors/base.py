from __future__ import annotations

from abc import ABC, abstractmethod


class Connector(ABC):
    """Loads the raw `period,value` lines of a single quarterly series."""

    @abstractmethod
    def load_lines(self) -> list[str]:
        raise NotImplementedError
