"""
Models for static-analysis output.

These mirror the JSON produced by the workspace analyzer. The analyzer
itself lives outside this package; everything here is read-only input for
formatting, display and test planning.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional


class Severity(str, Enum):
    """Severity of an analysis issue, most severe first."""

    ERROR = "error"
    WARNING = "warning"
    INFO = "info"

    @property
    def rank(self) -> int:
        return _SEVERITY_RANK[self]

    @property
    def emoji(self) -> str:
        return _SEVERITY_EMOJI[self]


_SEVERITY_RANK = {Severity.ERROR: 0, Severity.WARNING: 1, Severity.INFO: 2}
_SEVERITY_EMOJI = {Severity.ERROR: "🔴", Severity.WARNING: "⚠️", Severity.INFO: "ℹ️"}


@dataclass(frozen=True)
class AnalysisIssue:
    severity: Severity
    category: str
    description: str
    file: str
    line: int
    suggestion: str

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "AnalysisIssue":
        return cls(
            severity=Severity(str(data["severity"]).lower()),
            category=data.get("category", ""),
            description=data["description"],
            file=data.get("file", ""),
            line=int(data.get("line") or 0),
            suggestion=data.get("suggestion", ""),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "severity": self.severity.value,
            "category": self.category,
            "description": self.description,
            "file": self.file,
            "line": self.line,
            "suggestion": self.suggestion,
        }


@dataclass
class TreeNode:
    """A node of the analysis results tree shown in the UI."""

    id: str
    label: str
    type: str
    description: Optional[str] = None
    tooltip: Optional[str] = None
    children: Optional[List["TreeNode"]] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "TreeNode":
        children = data.get("children")
        return cls(
            id=data["id"],
            label=data["label"],
            type=data.get("type", ""),
            description=data.get("description"),
            tooltip=data.get("tooltip"),
            children=None if children is None else [cls.from_dict(c) for c in children],
        )


@dataclass
class AnalysisData:
    root_nodes: List[TreeNode] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "AnalysisData":
        return cls(
            root_nodes=[TreeNode.from_dict(node) for node in data.get("rootNodes") or []]
        )


@dataclass
class FunctionInfo:
    """A function as reported by the analyzer."""

    name: str
    file: str
    start_line: int
    end_line: int
    lines: Optional[int] = None
    complexity: Optional[str] = None
    parameters: Optional[List[str]] = None
    return_type: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "FunctionInfo":
        return cls(
            name=data["name"],
            file=data["file"],
            start_line=data.get("startLine", data.get("start_line")),
            end_line=data.get("endLine", data.get("end_line")),
            lines=data.get("lines"),
            complexity=data.get("complexity"),
            parameters=data.get("parameters"),
            return_type=data.get("returnType", data.get("return_type")),
        )


@dataclass
class EntryPoint:
    path: str
    type: str
    reason: str = ""

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "EntryPoint":
        return cls(path=data["path"], type=data.get("type", ""), reason=data.get("reason", ""))


@dataclass
class CodeAnalysis:
    """Summary of a workspace analysis."""

    total_files: int = 0
    total_functions: int = 0
    functions: Optional[List[FunctionInfo]] = None
    entry_points: List[EntryPoint] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "CodeAnalysis":
        functions = data.get("functions")
        return cls(
            total_files=data.get("totalFiles", data.get("total_files", 0)),
            total_functions=data.get("totalFunctions", data.get("total_functions", 0)),
            functions=None if functions is None else [FunctionInfo.from_dict(f) for f in functions],
            entry_points=[
                EntryPoint.from_dict(ep)
                for ep in data.get("entryPoints", data.get("entry_points")) or []
            ],
        )
