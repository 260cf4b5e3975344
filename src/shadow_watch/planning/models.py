"""
Models for LLM test planning.

A test plan groups the testable functions of a workspace by priority. Plans
are produced by an LLM and stored as JSON, so each model converts to and
from the JSON representation with ``to_dict``/``from_dict``.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


@dataclass
class TestableFunction:
    __test__ = False

    name: str
    file: str
    start_line: Optional[int] = None
    end_line: Optional[int] = None
    lines: Optional[int] = None
    complexity: str = "unknown"
    parameters: List[str] = field(default_factory=list)
    return_type: Optional[str] = None
    dependencies: List[str] = field(default_factory=list)
    mocking_needed: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "file": self.file,
            "startLine": self.start_line,
            "endLine": self.end_line,
            "lines": self.lines,
            "complexity": self.complexity,
            "parameters": list(self.parameters),
            "returnType": self.return_type,
            "dependencies": list(self.dependencies),
            "mocking_needed": self.mocking_needed,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "TestableFunction":
        return cls(
            name=data["name"],
            file=data.get("file", ""),
            start_line=data.get("startLine", data.get("start_line")),
            end_line=data.get("endLine", data.get("end_line")),
            lines=data.get("lines"),
            complexity=data.get("complexity") or "unknown",
            parameters=list(data.get("parameters") or []),
            return_type=data.get("returnType", data.get("return_type")),
            dependencies=list(data.get("dependencies") or []),
            mocking_needed=bool(data.get("mocking_needed", False)),
        )


@dataclass
class FunctionGroup:
    priority: int
    functions: List[TestableFunction] = field(default_factory=list)
    group_id: str = ""
    name: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {
            "group_id": self.group_id,
            "name": self.name,
            "priority": self.priority,
            "functions": [func.to_dict() for func in self.functions],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "FunctionGroup":
        return cls(
            priority=data["priority"],
            functions=[TestableFunction.from_dict(f) for f in data.get("functions") or []],
            group_id=data.get("group_id", ""),
            name=data.get("name", ""),
        )


@dataclass
class TestPlan:
    __test__ = False

    total_functions: int
    testable_functions: int
    function_groups: List[FunctionGroup] = field(default_factory=list)
    strategy: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {
            "strategy": self.strategy,
            "total_functions": self.total_functions,
            "testable_functions": self.testable_functions,
            "function_groups": [group.to_dict() for group in self.function_groups],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "TestPlan":
        """
        Build a plan from its JSON form.

        Raises:
            KeyError: If a required field is missing
            TypeError: If the data is not a mapping
        """
        if not isinstance(data, dict):
            raise TypeError(f"Test plan must be a JSON object, got {type(data).__name__}")
        return cls(
            total_functions=data["total_functions"],
            testable_functions=data["testable_functions"],
            function_groups=[FunctionGroup.from_dict(g) for g in data["function_groups"]],
            strategy=data.get("strategy", ""),
        )
