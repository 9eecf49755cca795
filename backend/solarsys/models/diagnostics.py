"""Diagnostics produced while loading a catalog."""

from enum import Enum
from typing import List

from pydantic import BaseModel, Field


class Severity(str, Enum):
    """Diagnostic severity."""
    WARNING = "warning"
    ERROR = "error"


class Diagnostic(BaseModel):
    """A human-readable message tied to a catalog line."""
    severity: Severity = Field(description="warning or error")
    line_number: int = Field(description="Catalog line the message refers to")
    message: str = Field(description="Human-readable description")
    entry_name: str = Field(default="", description="Name of the catalog entry")
    parent_name: str = Field(default="", description="Parent path of the catalog entry")
    error_type: str = Field(default="", description="Exception class name for rejected entries")

    def __str__(self) -> str:
        return f"line {self.line_number}: {self.severity.value}: {self.message}"


class LoadResult(BaseModel):
    """Outcome of loading one catalog."""
    success: bool = Field(default=True, description="False if the load stopped on a syntax error")
    entries_applied: int = Field(default=0, description="Entries committed to the universe")
    entries_rejected: int = Field(default=0, description="Entries skipped because of an error")
    diagnostics: List[Diagnostic] = Field(default_factory=list)

    @property
    def warnings(self) -> List[Diagnostic]:
        return [d for d in self.diagnostics if d.severity == Severity.WARNING]

    @property
    def errors(self) -> List[Diagnostic]:
        return [d for d in self.diagnostics if d.severity == Severity.ERROR]
