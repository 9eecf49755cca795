"""How a catalog entry combines with an existing object of the same name."""

from enum import Enum
from typing import Optional


class Disposition(Enum):
    ADD = "Add"
    REPLACE = "Replace"
    MODIFY = "Modify"

    @classmethod
    def from_token(cls, name: str) -> Optional["Disposition"]:
        for disposition in cls:
            if disposition.value == name:
                return disposition
        return None
