import json
from pathlib import Path
from typing import List, Optional

from rich.console import Console

from shadow_watch.analysis.models import AnalysisIssue, Severity
from shadow_watch.config.settings import get_configuration_manager
from shadow_watch.formatting.llm_formatter import format_issues
from shadow_watch.logging.logger import get_logger

logger = get_logger(__name__)
console = Console()


def load_issues(issues_path: Path) -> List[AnalysisIssue]:
    """Read issues from a JSON list, or an object with an ``issues`` list."""
    data = json.loads(issues_path.read_text(encoding="utf-8"))
    if isinstance(data, dict):
        data = data.get("issues", [])
    return [AnalysisIssue.from_dict(item) for item in data]


class FormatCommands:
    """Commands for formatting analysis issues as LLM prompts."""

    def issues(self, issues_file: str, style: Optional[str] = None) -> None:
        """
        Print analysis issues formatted for an LLM assistant.

        Issues less severe than the configured severity threshold are left out.

        Args:
            issues_file: JSON file holding the issues
            style: cursor, chatgpt, generic or compact. Defaults to the
                configured format.
        """
        config = get_configuration_manager()

        try:
            all_issues = load_issues(Path(issues_file))
        except (OSError, ValueError, KeyError) as e:
            logger.error(f"Failed to load issues from {issues_file}: {str(e)}")
            raise

        threshold = Severity(config.severity_threshold.value).rank
        selected = [issue for issue in all_issues if issue.severity.rank <= threshold]
        logger.info(f"Formatting {len(selected)} of {len(all_issues)} issues")

        console.print(
            format_issues(selected, style or config.llm_format),
            markup=False,
            highlight=False,
        )
