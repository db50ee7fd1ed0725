__all__ = ["Algorithm"]

from enum import Enum


class Algorithm(str, Enum):
    # Python 3.10 does not support StrEnum, so do it manually
    auto = "auto"
    direct = "direct"
    network = "network"

    def __str__(self) -> str:
        return self.name
