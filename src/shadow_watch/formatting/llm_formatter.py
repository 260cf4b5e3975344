"""
Formatting of analysis issues as prompts for LLM assistants.

Each style targets a different consumer: ``cursor`` is terse and ordered by
severity, ``chatgpt`` is verbose with explicit context/issue/suggestion
sections, ``generic`` is plain markdown and ``compact`` is a short summary.
All formatters accept an empty list.
"""

from typing import Callable, Dict, List, Optional, Sequence, Union

from shadow_watch.analysis.models import AnalysisIssue, Severity
from shadow_watch.config.settings import LLMFormat

SEVERITY_HEADINGS = {
    Severity.ERROR: "## 🔴 Errors",
    Severity.WARNING: "## ⚠️ Warnings",
    Severity.INFO: "## ℹ️ Info",
}


def _location(issue: AnalysisIssue, separator: str = ":") -> str:
    if not issue.file:
        return ""
    if issue.line:
        return f"{issue.file}{separator}{issue.line}"
    return issue.file


def sort_by_severity(issues: Sequence[AnalysisIssue]) -> List[AnalysisIssue]:
    """Errors first, then warnings, then info; input order kept within each."""
    return sorted(issues, key=lambda issue: Severity(issue.severity).rank)


def format_for_cursor(issues: Sequence[AnalysisIssue]) -> str:
    output = "# Code Analysis Issues\n\n"
    if not issues:
        return output + "No issues found.\n"

    output += f"Fix these {len(issues)} issues:\n"

    current = None
    for issue in sort_by_severity(issues):
        if issue.severity != current:
            current = issue.severity
            output += f"\n{SEVERITY_HEADINGS[Severity(current)]}\n\n"
        output += f"- **{issue.description}** (`{_location(issue)}`)"
        if issue.suggestion:
            output += f" → {issue.suggestion}"
        output += "\n"

    return output


def format_for_chatgpt(issues: Sequence[AnalysisIssue]) -> str:
    output = "# Code Analysis Results\n\n"
    output += (
        "I've analyzed my codebase and found several issues that need attention. "
        "Could you help me understand the implications and create a plan to address them?\n\n"
    )

    counts = {severity: 0 for severity in Severity}
    for issue in issues:
        counts[Severity(issue.severity)] += 1

    output += "## Summary\n\n"
    output += f"- Total Issues: {len(issues)}\n"
    output += f"- Critical (Errors): {counts[Severity.ERROR]}\n"
    output += f"- Warnings: {counts[Severity.WARNING]}\n"
    output += f"- Informational: {counts[Severity.INFO]}\n\n"

    for index, issue in enumerate(issues, start=1):
        severity = Severity(issue.severity)
        output += f"## Issue {index}: {issue.category or 'General'} ({severity.emoji} {severity.value})\n\n"
        output += "### Context\n\n"
        output += f"- **File:** `{issue.file or 'unknown'}`\n"
        output += f"- **Line:** {issue.line or 'n/a'}\n"
        output += f"- **Category:** {issue.category or 'General'}\n"
        output += f"- **Severity:** {severity.value}\n\n"
        output += "### Issue\n\n"
        output += f"{issue.description}\n\n"
        output += "### Suggestion\n\n"
        output += f"{issue.suggestion or 'No suggestion provided.'}\n\n"

    output += "## Questions\n\n"
    output += "1. Which of these issues should I prioritize based on impact?\n"
    output += "2. Are there any patterns I should apply to solve multiple issues at once?\n"
    output += "3. Could you provide a step-by-step refactoring plan?\n"
    output += "4. Are there any quick wins I can implement immediately?\n"

    return output


def format_generic(issues: Sequence[AnalysisIssue]) -> str:
    header = "# Analysis Issues\n\n"
    if not issues:
        return header + "No issues found.\n"

    blocks = []
    for issue in issues:
        severity = Severity(issue.severity)
        blocks.append(
            f"## {severity.emoji} {issue.category or 'General'}\n\n"
            f"**Severity:** {severity.value.upper()}  \n"
            f"**Category:** {issue.category}  \n"
            f"**File:** `{issue.file}`  \n"
            f"**Line:** {issue.line}\n\n"
            f"{issue.description}\n\n"
            f"**💡 Suggestion:** {issue.suggestion}\n"
        )

    return header + "\n".join(blocks)


def format_compact(issues: Sequence[AnalysisIssue]) -> str:
    output = "# Quick Issues\n\n"

    errors = [i for i in issues if i.severity == Severity.ERROR]
    warnings = [i for i in issues if i.severity == Severity.WARNING]

    if errors:
        output += "**Critical Issues:**\n"
        for issue in errors:
            output += f"- {issue.description}"
            if issue.file:
                output += f" → `{issue.file}`"
            output += "\n"
        output += "\n"

    if warnings:
        output += "**Warnings:**\n"
        for issue in warnings:
            output += f"- {issue.description}"
            if issue.file:
                output += f" in `{issue.file}`"
            output += "\n"
        output += "\n"

    suggestions = [i.suggestion for i in sort_by_severity(issues) if i.suggestion][:5]
    if suggestions:
        output += "**Top Recommendations:**\n"
        output += "".join(f"- {s}\n" for s in suggestions)

    return output


FORMATTERS: Dict[LLMFormat, Callable[[Sequence[AnalysisIssue]], str]] = {
    LLMFormat.CURSOR: format_for_cursor,
    LLMFormat.CHATGPT: format_for_chatgpt,
    LLMFormat.GENERIC: format_generic,
    LLMFormat.COMPACT: format_compact,
}


def format_issues(
    issues: Sequence[AnalysisIssue], style: Union[LLMFormat, str] = LLMFormat.CURSOR
) -> str:
    """
    Format issues in the requested style.

    Unknown styles fall back to the generic format.
    """
    try:
        style = LLMFormat(str(style).lower()) if not isinstance(style, LLMFormat) else style
    except ValueError:
        style = LLMFormat.GENERIC
    return FORMATTERS[style](issues)


def generate_fix_prompt(issue: AnalysisIssue, code_context: Optional[str] = None) -> str:
    """Build a prompt asking for a fix of a single issue."""
    prompt = f"# Fix Request: {issue.category or 'Issue'}\n\n"
    prompt += f"## Problem\n{issue.description}\n\n"
    prompt += f"## Suggestion\n{issue.suggestion}\n\n"

    if issue.file:
        prompt += f"## Location\nFile: `{issue.file}`\n"
        if issue.line:
            prompt += f"Line: {issue.line}\n"
        prompt += "\n"

    if code_context:
        prompt += f"## Current Code\n```\n{code_context}\n```\n\n"

    prompt += "## Request\n"
    prompt += "Please provide:\n"
    prompt += "1. A detailed explanation of why this is a problem\n"
    prompt += "2. Step-by-step refactoring instructions\n"
    prompt += "3. Refactored code that addresses the issue\n"

    return prompt
