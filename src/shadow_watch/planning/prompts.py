"""
Prompt construction for the test planning phase.

The planning prompt gives the model high-level statistics about the codebase
plus the candidate functions, and asks for a JSON test plan grouped by
priority.
"""

import json
from typing import Any, Dict, List, Optional

from shadow_watch.analysis.models import CodeAnalysis
from shadow_watch.planning.models import TestableFunction

MAX_ENTRY_POINTS = 10
MAX_PRODUCT_FUNCTIONS = 20
MAX_INSIGHTS = 10
MAX_LISTED_FUNCTIONS = 200

PLANNING_SYSTEM_PROMPT = (
    "You are a test strategy expert. You create prioritized unit test plans "
    "and always answer with a single JSON object."
)

PLAN_FORMAT_EXAMPLE = {
    "strategy": "Brief overall testing approach",
    "total_functions": 42,
    "testable_functions": 30,
    "function_groups": [
        {
            "group_id": "core-analysis",
            "name": "Core Analysis Engine",
            "priority": 1,
            "functions": [
                {
                    "name": "analyzeFile",
                    "file": "src/analyzer.ts",
                    "startLine": 10,
                    "endLine": 48,
                    "complexity": "high",
                    "dependencies": ["fs"],
                    "mocking_needed": True,
                }
            ],
        }
    ],
}


def _describe_item(item: Any) -> str:
    if isinstance(item, str):
        return f"- {item}"
    return f"- {item.get('title', 'Untitled')}: {item.get('description', '')}"


def _describe_function(func: TestableFunction) -> str:
    location = f"{func.file}:{func.start_line}-{func.end_line}"
    details = [f"complexity {func.complexity}"]
    if func.lines:
        details.append(f"{func.lines} lines")
    if func.parameters:
        details.append(f"params ({', '.join(func.parameters)})")
    return f"- {func.name} [{location}] {', '.join(details)}"


def build_planning_prompt(
    context: Optional[CodeAnalysis],
    functions: List[TestableFunction],
    product_docs: Optional[Dict[str, Any]] = None,
    architecture_insights: Optional[Dict[str, Any]] = None,
) -> str:
    """
    Build the user prompt for test plan creation.

    Args:
        context: Workspace analysis used for statistics and entry points
        functions: Candidate functions, as returned by analyze_functions
        product_docs: Optional product documentation with ``overview`` and
            ``relevantFunctions``
        architecture_insights: Optional insights with ``issues`` and
            ``priorities``

    Returns:
        The prompt text
    """
    context = context or CodeAnalysis()

    sections = [
        "Create a prioritized test plan for this codebase.",
        "## Codebase Statistics\n"
        f"- Total Files: {context.total_files}\n"
        f"- Total Functions: {context.total_functions} functions available\n"
        f"- Entry Points: {len(context.entry_points)}",
    ]

    if context.entry_points:
        entry_lines = [
            f"- {ep.path} ({ep.type}): {ep.reason}"
            for ep in context.entry_points[:MAX_ENTRY_POINTS]
        ]
        sections.append("## Entry Points (Critical for Testing)\n" + "\n".join(entry_lines))

    if product_docs:
        relevant = product_docs.get("relevantFunctions") or []
        function_lines = [
            f"- {f.get('name')}: {f.get('description') or 'N/A'}"
            for f in relevant[:MAX_PRODUCT_FUNCTIONS]
        ]
        sections.append(
            f"## Product Overview\n{product_docs.get('overview') or 'N/A'}\n\n"
            "## Key Functions\n" + ("\n".join(function_lines) or "N/A")
        )

    if architecture_insights:
        issues = architecture_insights.get("issues") or []
        priorities = architecture_insights.get("priorities") or []
        sections.append(
            "## Critical Issues (Must Test These Areas)\n"
            + ("\n".join(_describe_item(i) for i in issues[:MAX_INSIGHTS]) or "N/A")
            + "\n\n## High Priority Areas\n"
            + ("\n".join(_describe_item(p) for p in priorities[:MAX_INSIGHTS]) or "N/A")
        )

    listed = functions[:MAX_LISTED_FUNCTIONS]
    function_section = f"## Candidate Functions ({len(functions)} total)\n"
    function_section += "\n".join(_describe_function(f) for f in listed) or "None"
    if len(functions) > len(listed):
        function_section += f"\n- ... and {len(functions) - len(listed)} more"
    sections.append(function_section)

    sections.append(
        "## Your Task\n"
        "1. Decide which candidate functions are worth unit testing\n"
        "2. Group them into areas and give each group a priority (1 = test first), based on:\n"
        "   - Entry points and main functionality\n"
        "   - Complex business logic\n"
        "   - Error-prone areas mentioned in architecture insights\n"
        "   - Integration points that need careful testing\n"
        "3. Note each function's dependencies and whether mocking is needed\n\n"
        f"`total_functions` must be {len(functions)}. "
        "Return your response in this JSON format:\n"
        + json.dumps(PLAN_FORMAT_EXAMPLE, indent=2)
    )

    return "\n\n".join(sections)
