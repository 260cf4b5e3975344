"""
LLM-based test planning.

This module implements the planning phase of test generation: it projects
analyzer output into testable functions, asks an LLM for a prioritized plan,
persists the plan inside the workspace's shadow directory and reads it back.
"""

import json
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Optional, Protocol, Union

from shadow_watch.analysis.models import CodeAnalysis
from shadow_watch.logging.logger import get_logger
from shadow_watch.planning.models import TestableFunction, TestPlan
from shadow_watch.planning.prompts import build_planning_prompt

logger = get_logger(__name__)

SHADOW_DIR = ".shadow"
TEST_PLAN_FILE = "test-plan.json"

# Priority for functions that belong to no group
DEFAULT_PRIORITY = 999


class TestStrategyGenerator(Protocol):
    async def generate_test_strategy(self, prompt: str) -> TestPlan:
        ...


class PlanLoadStatus(Enum):
    FOUND = "found"
    NOT_FOUND = "not_found"
    INVALID = "invalid"


@dataclass
class PlanLoadResult:
    status: PlanLoadStatus
    path: Path
    plan: Optional[TestPlan] = None
    error: Optional[str] = None


class LLMTestPlanningService:
    """
    Creates, stores and prioritizes LLM test plans.

    The service holds no state; the plan file is the only thing shared
    between calls.
    """

    @staticmethod
    def analyze_functions(code_analysis: Optional[CodeAnalysis]) -> List[TestableFunction]:
        """
        Project analyzer functions into testable function records.

        Args:
            code_analysis: Workspace analysis, may be None

        Returns:
            One record per analyzed function, empty if there are none
        """
        if code_analysis is None or not code_analysis.functions:
            return []

        return [
            TestableFunction(
                name=func.name,
                file=func.file,
                start_line=func.start_line,
                end_line=func.end_line,
                lines=func.lines,
                complexity=func.complexity or "unknown",
                parameters=list(func.parameters or []),
                return_type=func.return_type,
            )
            for func in code_analysis.functions
        ]

    @staticmethod
    async def create_test_plan(
        context: Optional[CodeAnalysis],
        functions: List[TestableFunction],
        llm_service: TestStrategyGenerator,
        product_docs: Optional[Dict[str, Any]] = None,
        architecture_insights: Optional[Dict[str, Any]] = None,
    ) -> TestPlan:
        """
        Create a test plan using an LLM.

        Args:
            context: Workspace analysis
            functions: Candidate functions from analyze_functions
            llm_service: Anything with an async generate_test_strategy(prompt)
            product_docs: Optional product documentation for the prompt
            architecture_insights: Optional architecture insights for the prompt

        Returns:
            The plan returned by the LLM service, unmodified
        """
        logger.info("Creating test plan with LLM...")
        logger.info(f"Analyzing {len(functions)} functions")

        prompt = build_planning_prompt(context, functions, product_docs, architecture_insights)
        test_plan = await llm_service.generate_test_strategy(prompt)

        logger.info(f"Created plan with {len(test_plan.function_groups)} function groups")
        logger.info(
            f"{test_plan.testable_functions} of {test_plan.total_functions} functions are testable"
        )

        return test_plan

    @staticmethod
    def get_plan_path(workspace_root: Union[str, Path]) -> Path:
        return Path(workspace_root) / SHADOW_DIR / TEST_PLAN_FILE

    @classmethod
    def save_test_plan(cls, workspace_root: Union[str, Path], test_plan: TestPlan) -> Path:
        """
        Write the plan to ``.shadow/test-plan.json``, replacing any previous plan.

        Returns:
            Path of the written file

        Raises:
            OSError: If the directory or file cannot be written
        """
        plan_path = cls.get_plan_path(workspace_root)
        plan_path.parent.mkdir(parents=True, exist_ok=True)
        plan_path.write_text(json.dumps(test_plan.to_dict(), indent=2), encoding="utf-8")

        logger.info(f"Saved test plan to {plan_path}")
        return plan_path

    @classmethod
    def read_test_plan(cls, workspace_root: Union[str, Path]) -> PlanLoadResult:
        """Read the saved plan, reporting why it could not be used."""
        plan_path = cls.get_plan_path(workspace_root)
        if not plan_path.is_file():
            return PlanLoadResult(PlanLoadStatus.NOT_FOUND, plan_path)

        try:
            data = json.loads(plan_path.read_text(encoding="utf-8"))
            plan = TestPlan.from_dict(data)
        except (OSError, ValueError, KeyError, TypeError) as e:
            return PlanLoadResult(PlanLoadStatus.INVALID, plan_path, error=f"{type(e).__name__}: {e}")

        return PlanLoadResult(PlanLoadStatus.FOUND, plan_path, plan=plan)

    @classmethod
    def load_test_plan(cls, workspace_root: Union[str, Path]) -> Optional[TestPlan]:
        """
        Load the saved plan.

        Returns:
            The plan, or None if there is no plan file or it cannot be parsed
        """
        result = cls.read_test_plan(workspace_root)
        if result.status == PlanLoadStatus.INVALID:
            logger.warning(f"Error loading test plan from {result.path}: {result.error}")
        return result.plan

    @staticmethod
    def get_function_priorities(test_plan: TestPlan) -> Dict[str, int]:
        """
        Map each function name to the priority of its group.

        A name listed in several groups takes the priority of the last group
        it appears in.
        """
        priorities: Dict[str, int] = {}
        for group in test_plan.function_groups:
            for func in group.functions:
                priorities[func.name] = group.priority
        return priorities

    @classmethod
    def get_prioritized_functions(cls, test_plan: TestPlan) -> List[TestableFunction]:
        """
        Flatten the plan's groups, most urgent first.

        Functions are ordered by get_function_priorities; ties keep plan
        order and names missing from the map sort last.
        """
        all_functions = [func for group in test_plan.function_groups for func in group.functions]
        priorities = cls.get_function_priorities(test_plan)

        return sorted(all_functions, key=lambda f: priorities.get(f.name, DEFAULT_PRIORITY))
