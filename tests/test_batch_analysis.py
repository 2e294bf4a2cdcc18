# tests/test_batch_analysis.py
import pytest

from core.batch_analysis import run_batch
from core.entities import AnalysisSpec, GenerationOutput
from util.errors import GenerationError
from tests.fakes import FakeGenerator


def _spec(kb_id: str, context: str = "Context 1: aturan", template: str | None = None) -> AnalysisSpec:
    return AnalysisSpec(
        knowledge_base_id=kb_id,
        knowledge_base_name=kb_id.upper(),
        color="info",
        retrieved_context=context,
        prompt_template=template or f"[{kb_id}] {{RETRIEVED_CONTEXT}} :: {{USER_INPUT}}",
    )


class TestRunBatch:
    @pytest.mark.asyncio
    async def test_results_follow_input_order(self):
        # The first item finishes last
        generator = FakeGenerator(delays={"[a]": 0.2, "[b]": 0.05, "[c]": 0.0})
        batch = await run_batch(
            hazard_description="hazard",
            analyses=[_spec("a"), _spec("b"), _spec("c")],
            generator=generator,
        )
        assert [r.knowledge_base_id for r in batch.results] == ["a", "b", "c"]
        assert [r.knowledge_base_name for r in batch.results] == ["A", "B", "C"]

    @pytest.mark.asyncio
    async def test_items_run_concurrently(self):
        generator = FakeGenerator(delays={"[": 0.3})
        batch = await run_batch(
            hazard_description="hazard",
            analyses=[_spec("a"), _spec("b"), _spec("c")],
            generator=generator,
        )
        # Wall clock is the slowest item, not the sum
        slowest = max(r.processing_time for r in batch.results)
        assert slowest >= 250
        assert 0 <= batch.total_processing_time - slowest < 100

    @pytest.mark.asyncio
    async def test_concurrency_limit_serializes(self):
        generator = FakeGenerator(delays={"[": 0.1})
        batch = await run_batch(
            hazard_description="hazard",
            analyses=[_spec("a"), _spec("b"), _spec("c")],
            generator=generator,
            concurrency=1,
        )
        assert batch.total_processing_time >= 290

    @pytest.mark.asyncio
    async def test_failed_item_does_not_affect_others(self):
        generator = FakeGenerator(
            errors={"[b]": GenerationError("Generation API error: 500 Internal Server Error", 500)}
        )
        batch = await run_batch(
            hazard_description="hazard",
            analyses=[_spec("a"), _spec("b"), _spec("c")],
            generator=generator,
        )

        failed = batch.results[1]
        assert failed.category == "Error"
        assert failed.confidence == "0%"
        assert failed.reasoning == "Analysis failed: Generation API error: 500 Internal Server Error"
        assert failed.color == "info"
        assert [s.status for s in failed.thinking_steps] == ["success", "error"]
        assert failed.thinking_steps[1].details["statusCode"] == 500

        assert batch.results[0].category == "Lock Out & Tag Out"
        assert batch.results[2].category == "Lock Out & Tag Out"
        assert batch.succeeded == 2

    @pytest.mark.asyncio
    async def test_thinking_steps(self):
        batch = await run_batch(
            hazard_description="hazard",
            analyses=[_spec("a")],
            generator=FakeGenerator(),
        )
        steps = batch.results[0].thinking_steps
        assert [s.step for s in steps] == [1, 2, 3]
        assert [s.name for s in steps] == [
            "Konstruksi Prompt",
            "Gemini API Call",
            "Parse AI Response",
        ]
        assert all(s.status == "success" for s in steps)
        assert steps[0].details["hazardLength"] == len("hazard")
        assert steps[0].details["template"].endswith("...")
        assert steps[1].details["model"] == "fake-model"
        assert steps[2].details["extractedFields"]["category"] == "Lock Out & Tag Out"
        assert steps[2].details["isPartial"] is False

    @pytest.mark.asyncio
    async def test_empty_context_and_hazard_use_placeholders(self):
        generator = FakeGenerator()
        await run_batch(
            hazard_description="",
            analyses=[_spec("a", context="")],
            generator=generator,
        )
        assert generator.prompts == [
            "[a] No relevant context found :: No hazard description provided"
        ]

    @pytest.mark.asyncio
    async def test_missing_template_fails_only_that_item(self):
        generator = FakeGenerator()
        no_template = AnalysisSpec(
            knowledge_base_id="b",
            knowledge_base_name="B",
            color="info",
            retrieved_context=None,
            prompt_template=None,
        )
        batch = await run_batch(
            hazard_description=None,
            analyses=[_spec("a"), no_template, _spec("c")],
            generator=generator,
        )
        assert [r.category for r in batch.results] == [
            "Lock Out & Tag Out",
            "Error",
            "Lock Out & Tag Out",
        ]
        assert batch.results[1].reasoning == "Analysis failed: Prompt template is missing"
        assert batch.results[1].thinking_steps == []
        assert len(generator.prompts) == 2

    @pytest.mark.asyncio
    async def test_truncated_item_is_partial(self):
        generator = FakeGenerator(
            replies={"[a]": GenerationOutput(text="KATEGORI: Air\nCONFIDENCE: 70%", finish_reason="MAX_TOKENS")}
        )
        batch = await run_batch(
            hazard_description="hazard", analyses=[_spec("a")], generator=generator
        )
        item = batch.results[0]
        assert item.category == "Air (Partial)"
        assert item.confidence == "70%"
        assert item.reasoning == "No reasoning provided"
        assert item.thinking_steps[2].details["isPartial"] is True

    @pytest.mark.asyncio
    async def test_empty_batch(self):
        batch = await run_batch(hazard_description="h", analyses=[], generator=FakeGenerator())
        assert batch.results == []
        assert batch.succeeded == 0
