import json
from unittest.mock import AsyncMock

import pytest

from shadow_watch.analysis.models import CodeAnalysis, EntryPoint, FunctionInfo
from shadow_watch.planning.models import FunctionGroup, TestableFunction, TestPlan
from shadow_watch.planning.prompts import build_planning_prompt
from shadow_watch.planning.service import LLMTestPlanningService, PlanLoadStatus


def make_plan():
    return TestPlan(
        strategy="Focus on the parser",
        total_functions=3,
        testable_functions=3,
        function_groups=[
            FunctionGroup(
                group_id="helpers",
                name="Helpers",
                priority=3,
                functions=[TestableFunction(name="formatDate", file="src/util.ts")],
            ),
            FunctionGroup(
                group_id="core",
                name="Core",
                priority=1,
                functions=[
                    TestableFunction(name="parse", file="src/parser.ts", mocking_needed=True),
                    TestableFunction(name="tokenize", file="src/lexer.ts"),
                ],
            ),
        ],
    )


@pytest.fixture
def code_analysis():
    return CodeAnalysis(
        total_files=2,
        total_functions=2,
        functions=[
            FunctionInfo(
                name="parse",
                file="src/parser.ts",
                start_line=1,
                end_line=40,
                lines=40,
                complexity="high",
                parameters=["source"],
                return_type="Ast",
            ),
            FunctionInfo(name="tokenize", file="src/lexer.ts", start_line=3, end_line=9),
        ],
        entry_points=[EntryPoint(path="src/main.ts", type="cli", reason="bin entry")],
    )


class TestAnalyzeFunctions:
    def test_projects_functions(self, code_analysis):
        functions = LLMTestPlanningService.analyze_functions(code_analysis)

        assert [f.name for f in functions] == ["parse", "tokenize"]
        assert functions[0].complexity == "high"
        assert functions[0].parameters == ["source"]
        assert functions[0].return_type == "Ast"

    def test_applies_defaults(self, code_analysis):
        tokenize = LLMTestPlanningService.analyze_functions(code_analysis)[1]
        assert tokenize.complexity == "unknown"
        assert tokenize.parameters == []
        assert tokenize.start_line == 3
        assert tokenize.end_line == 9

    def test_missing_analysis(self):
        assert LLMTestPlanningService.analyze_functions(None) == []
        assert LLMTestPlanningService.analyze_functions(CodeAnalysis()) == []
        assert LLMTestPlanningService.analyze_functions(CodeAnalysis(functions=[])) == []


class TestCreateTestPlan:
    async def test_returns_llm_plan_unmodified(self, code_analysis):
        plan = make_plan()
        llm_service = AsyncMock()
        llm_service.generate_test_strategy.return_value = plan
        functions = LLMTestPlanningService.analyze_functions(code_analysis)

        result = await LLMTestPlanningService.create_test_plan(
            code_analysis, functions, llm_service
        )

        assert result is plan
        llm_service.generate_test_strategy.assert_awaited_once()
        prompt = llm_service.generate_test_strategy.await_args.args[0]
        assert "parse" in prompt
        assert "2 functions available" in prompt

    async def test_llm_errors_propagate(self, code_analysis):
        llm_service = AsyncMock()
        llm_service.generate_test_strategy.side_effect = RuntimeError("API down")

        with pytest.raises(RuntimeError, match="API down"):
            await LLMTestPlanningService.create_test_plan(code_analysis, [], llm_service)

    async def test_passes_docs_and_insights(self, code_analysis):
        llm_service = AsyncMock()
        llm_service.generate_test_strategy.return_value = make_plan()

        await LLMTestPlanningService.create_test_plan(
            code_analysis,
            [],
            llm_service,
            product_docs={"overview": "A compiler", "relevantFunctions": []},
            architecture_insights={"issues": ["Parser is fragile"], "priorities": []},
        )

        prompt = llm_service.generate_test_strategy.await_args.args[0]
        assert "A compiler" in prompt
        assert "Parser is fragile" in prompt


class TestPlanPersistence:
    def test_save_creates_shadow_directory(self, tmp_path):
        path = LLMTestPlanningService.save_test_plan(tmp_path, make_plan())

        assert path == tmp_path / ".shadow" / "test-plan.json"
        assert path.is_file()
        text = path.read_text(encoding="utf-8")
        assert '\n  "strategy"' in text
        assert json.loads(text)["total_functions"] == 3

    def test_save_overwrites(self, tmp_path):
        LLMTestPlanningService.save_test_plan(tmp_path, make_plan())
        LLMTestPlanningService.save_test_plan(
            tmp_path, TestPlan(total_functions=0, testable_functions=0)
        )

        loaded = LLMTestPlanningService.load_test_plan(tmp_path)
        assert loaded.total_functions == 0
        assert loaded.function_groups == []

    def test_round_trip(self, tmp_path):
        plan = make_plan()
        LLMTestPlanningService.save_test_plan(tmp_path, plan)
        assert LLMTestPlanningService.load_test_plan(tmp_path) == plan

    def test_load_missing_plan(self, tmp_path):
        assert LLMTestPlanningService.load_test_plan(tmp_path) is None
        result = LLMTestPlanningService.read_test_plan(tmp_path)
        assert result.status == PlanLoadStatus.NOT_FOUND

    @pytest.mark.parametrize(
        "content",
        [
            "not json",
            "[1, 2, 3]",
            '{"strategy": "missing counts"}',
            "",
        ],
    )
    def test_load_invalid_plan(self, tmp_path, content):
        plan_path = LLMTestPlanningService.get_plan_path(tmp_path)
        plan_path.parent.mkdir(parents=True)
        plan_path.write_text(content, encoding="utf-8")

        assert LLMTestPlanningService.load_test_plan(tmp_path) is None
        result = LLMTestPlanningService.read_test_plan(tmp_path)
        assert result.status == PlanLoadStatus.INVALID
        assert result.error

    def test_save_fails_when_shadow_is_a_file(self, tmp_path):
        (tmp_path / ".shadow").write_text("occupied")
        with pytest.raises(OSError):
            LLMTestPlanningService.save_test_plan(tmp_path, make_plan())


class TestGetPrioritizedFunctions:
    def test_function_priorities_match_sort_key(self):
        plan = make_plan()
        priorities = LLMTestPlanningService.get_function_priorities(plan)
        assert priorities == {"formatDate": 3, "parse": 1, "tokenize": 1}
        ordered = LLMTestPlanningService.get_prioritized_functions(plan)
        assert [priorities[f.name] for f in ordered] == [1, 1, 3]

    def test_orders_by_group_priority(self):
        ordered = LLMTestPlanningService.get_prioritized_functions(make_plan())
        assert [f.name for f in ordered] == ["parse", "tokenize", "formatDate"]

    def test_priority_zero_sorts_first(self):
        plan = TestPlan(
            total_functions=2,
            testable_functions=2,
            function_groups=[
                FunctionGroup(priority=1, functions=[TestableFunction(name="b", file="b.ts")]),
                FunctionGroup(priority=0, functions=[TestableFunction(name="a", file="a.ts")]),
            ],
        )
        ordered = LLMTestPlanningService.get_prioritized_functions(plan)
        assert [f.name for f in ordered] == ["a", "b"]

    def test_duplicate_name_takes_last_priority(self):
        plan = TestPlan(
            total_functions=2,
            testable_functions=2,
            function_groups=[
                FunctionGroup(priority=1, functions=[TestableFunction(name="dup", file="x.ts")]),
                FunctionGroup(priority=5, functions=[TestableFunction(name="other", file="y.ts")]),
                FunctionGroup(priority=9, functions=[TestableFunction(name="dup", file="z.ts")]),
            ],
        )
        ordered = LLMTestPlanningService.get_prioritized_functions(plan)
        assert [(f.name, f.file) for f in ordered] == [
            ("other", "y.ts"),
            ("dup", "x.ts"),
            ("dup", "z.ts"),
        ]

    def test_empty_plan(self):
        plan = TestPlan(total_functions=0, testable_functions=0)
        assert LLMTestPlanningService.get_prioritized_functions(plan) == []


class TestPlanningPrompt:
    def test_includes_statistics_and_entry_points(self, code_analysis):
        functions = LLMTestPlanningService.analyze_functions(code_analysis)
        prompt = build_planning_prompt(code_analysis, functions)

        assert "Total Files: 2" in prompt
        assert "src/main.ts (cli): bin entry" in prompt
        assert "parse [src/parser.ts:1-40]" in prompt
        assert '"function_groups"' in prompt

    def test_without_context(self):
        prompt = build_planning_prompt(None, [])
        assert "Total Functions: 0" in prompt
        assert "Candidate Functions (0 total)" in prompt
