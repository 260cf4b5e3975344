import asyncio
import json
import os
from pathlib import Path
from typing import Any, Dict, Optional

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from shadow_watch.analysis.models import CodeAnalysis
from shadow_watch.extension import activate, deactivate
from shadow_watch.logging.logger import get_logger
from shadow_watch.planning.service import LLMTestPlanningService

logger = get_logger(__name__)
console = Console()


def _read_json(path: Optional[str]) -> Optional[Dict[str, Any]]:
    if not path:
        return None
    return json.loads(Path(path).read_text(encoding="utf-8"))


class PlanCommands:
    """Commands for LLM test planning."""

    def create(
        self,
        analysis_file: str,
        workspace: Optional[str] = None,
        product_docs: Optional[str] = None,
        architecture_insights: Optional[str] = None,
    ) -> None:
        """
        Create a test plan with the configured LLM provider and save it.

        Examples:
            shadow-watch plan create analysis.json --workspace=. \\
                --product-docs=docs.json

        Args:
            analysis_file: Code analysis JSON produced by the analyzer
            workspace: Workspace root the plan is saved under. Defaults to the
                current directory.
            product_docs: Optional product documentation JSON
            architecture_insights: Optional architecture insights JSON
        """
        root = Path(workspace or os.getcwd())
        context = activate(root)

        try:
            code_analysis = CodeAnalysis.from_dict(_read_json(analysis_file))
            functions = LLMTestPlanningService.analyze_functions(code_analysis)

            test_plan = asyncio.run(
                LLMTestPlanningService.create_test_plan(
                    code_analysis,
                    functions,
                    context.llm_service,
                    product_docs=_read_json(product_docs),
                    architecture_insights=_read_json(architecture_insights),
                )
            )

            plan_path = LLMTestPlanningService.save_test_plan(root, test_plan)
            console.print(f"Test plan saved to [bold]{escape(str(plan_path))}[/bold]")

        except Exception as e:
            logger.error(f"Failed to create test plan: {str(e)}")
            raise

        finally:
            deactivate()

    def show(self, workspace: Optional[str] = None) -> None:
        """
        Show the saved plan's functions in priority order.

        Args:
            workspace: Workspace root. Defaults to the current directory.
        """
        root = Path(workspace or os.getcwd())
        test_plan = LLMTestPlanningService.load_test_plan(root)

        if test_plan is None:
            console.print(f"No test plan found in {escape(str(root))}")
            return

        if test_plan.strategy:
            console.print(f"[bold]Strategy:[/bold] {escape(test_plan.strategy)}")
        console.print(
            f"{test_plan.testable_functions} of {test_plan.total_functions} functions are testable"
        )

        priorities = LLMTestPlanningService.get_function_priorities(test_plan)

        table = Table(show_header=True, header_style="bold")
        table.add_column("Priority")
        table.add_column("Function")
        table.add_column("File")
        table.add_column("Complexity")
        table.add_column("Mocking")

        for func in LLMTestPlanningService.get_prioritized_functions(test_plan):
            table.add_row(
                str(priorities[func.name]),
                escape(func.name),
                escape(func.file),
                escape(func.complexity),
                "yes" if func.mocking_needed else "no",
            )

        console.print(table)
