"""
Tests for GraphSession.

Tests cover:
1. Selection toggling
2. Batch analysis: provenance tags, all-or-nothing failure
3. Save dialog defaults and saving
4. Loading saved graphs
"""

import asyncio

import pytest

from talkgraph.core.library import LocalFileLibrary
from talkgraph.models import GraphNode, SaveRequest, SourceFile
from talkgraph.services import AnalysisGateway, GraphSession
from talkgraph.services.graph_combiner import SHARED_COLOR
from talkgraph.utils.exceptions import (
    CorruptDataError,
    LLMError,
    NotFoundError,
    UpstreamError,
    ValidationError,
)


@pytest.fixture
def session(library, gateway, graph_store):
    """Session over a temporary library, scripted LLM and in-memory store."""
    return GraphSession(library=library, gateway=gateway, store=graph_store)


@pytest.mark.unit
class TestSelection:
    """Selecting files."""

    @pytest.fixture
    def session(self, tmp_path, gateway, graph_store):
        library = LocalFileLibrary(tmp_path / "uploads", tmp_path / "metadata")
        return GraphSession(library=library, gateway=gateway, store=graph_store)

    def _file(self, name):
        return SourceFile(filename=f"1_{name}", original_name=name)

    def test_toggle(self, session):
        a = self._file("a.txt")

        assert session.toggle(a) is True
        assert session.is_selected(a)
        assert session.toggle(a) is False
        assert not session.is_selected(a)
        assert session.selected == []

    def test_toggle_by_id(self, session):
        """Files with the same id are the same selection entry."""
        a = self._file("a.txt")
        a_again = SourceFile(filename="1_a.txt", original_name="a.txt", custom_name="Other")

        session.toggle(a)

        assert session.toggle(a_again) is False
        assert session.selected == []

    def test_selection_order(self, session):
        a, b, c = self._file("a.txt"), self._file("b.txt"), self._file("c.txt")

        for source_file in (b, a, c):
            session.toggle(source_file)

        assert [f.original_name for f in session.selected] == ["b.txt", "a.txt", "c.txt"]

    def test_select_and_deselect(self, session):
        a = self._file("a.txt")

        session.select(a)
        session.select(a)
        assert len(session.selected) == 1

        session.deselect(a)
        session.deselect(a)
        assert session.selected == []

    def test_clear_selection(self, session):
        session.toggle(self._file("a.txt"))
        session.toggle(self._file("b.txt"))

        session.clear_selection()

        assert session.selected == []


@pytest.mark.unit
@pytest.mark.asyncio
class TestAnalyze:
    """Batch analysis of the selection."""

    async def _upload(self, library, name, content):
        return await library.add_file(name, content.encode("utf-8"))

    async def test_empty_selection(self, session, scripted_llm):
        with pytest.raises(ValidationError, match="No files selected"):
            await session.analyze()

        assert scripted_llm.prompts == []

    async def test_combined_provenance(self, session, library, scripted_llm, answer_factory):
        f1 = await self._upload(library, "f1.txt", "first document")
        f2 = await self._upload(library, "f2.txt", "second document")
        scripted_llm.responses = {
            "first document": answer_factory(["a", "b"], [("a", "b", "r")]),
            "second document": answer_factory(["a", "c"]),
        }
        session.toggle(f1)
        session.toggle(f2)

        graph = await session.analyze()

        by_id = {node.id: node for node in graph.nodes}
        assert by_id["a"].sources == ["f1.txt", "f2.txt"]
        assert by_id["a"].size == 30
        assert by_id["a"].color == SHARED_COLOR
        assert by_id["b"].sources == ["f1.txt"]
        assert by_id["c"].sources == ["f2.txt"]
        assert graph.links[0].sources == ["f1.txt"]
        assert session.current_graph == graph
        assert session.error is None
        assert session.analyzing is False

    async def test_single_file(self, session, library, scripted_llm, answer_factory):
        f1 = await self._upload(library, "only.txt", "content")
        scripted_llm.default = answer_factory(["x"])
        session.toggle(f1)

        graph = await session.analyze()

        assert graph.nodes[0].sources == ["only.txt"]
        assert graph.nodes[0].size == 25

    async def test_one_failure_fails_batch(self, session, library, scripted_llm, answer_factory):
        good = await self._upload(library, "good.txt", "fine content")
        bad = await self._upload(library, "bad.txt", "explosive content")
        scripted_llm.responses = {
            "fine content": answer_factory(["a"]),
            "explosive content": LLMError("model overloaded"),
        }
        session.toggle(good)
        session.toggle(bad)

        with pytest.raises(UpstreamError, match="Error processing bad.txt"):
            await session.analyze()

        assert session.current_graph is None
        assert session.error.startswith("Failed to analyze files: Error processing bad.txt")
        assert session.analyzing is False

    async def test_failure_clears_previous_graph(
        self, session, library, scripted_llm, answer_factory
    ):
        f1 = await self._upload(library, "a.txt", "works")
        scripted_llm.default = answer_factory(["a"])
        session.toggle(f1)
        await session.analyze()
        assert session.current_graph is not None

        scripted_llm.default = "garbage"

        with pytest.raises(UpstreamError):
            await session.analyze()

        assert session.current_graph is None

    async def test_all_units_awaited_after_failure(self, library, graph_store, answer_factory):
        """A failing file doesn't leave the other analyses running."""
        finished = []

        class SlowGateway:
            async def analyze(self, content):
                if "fail" in content:
                    raise LLMError("fast failure")
                await asyncio.sleep(0.05)
                finished.append(content)
                return AnalysisGateway.parse_graph(answer_factory(["a"]))

        session = GraphSession(library=library, gateway=SlowGateway(), store=graph_store)
        for name, content in (("fail.txt", "fail"), ("slow1.txt", "slow one"), ("slow2.txt", "slow two")):
            session.toggle(await self._upload(library, name, content))

        with pytest.raises(UpstreamError):
            await session.analyze()

        assert sorted(finished) == ["slow one", "slow two"]

    async def test_unexpected_error_reported_per_file(self, library, graph_store):
        class BrokenGateway:
            async def analyze(self, content):
                raise ValueError("Unknown encoding bogus")

        session = GraphSession(library=library, gateway=BrokenGateway(), store=graph_store)
        session.toggle(await self._upload(library, "big.txt", "x" * 1000))

        with pytest.raises(UpstreamError, match="Error processing big.txt: Unknown encoding bogus"):
            await session.analyze()

        assert session.error.startswith("Failed to analyze files: Error processing big.txt")
        assert session.current_graph is None
        assert session.analyzing is False

    async def test_missing_file(self, session):
        ghost = SourceFile(filename="123_ghost.txt", original_name="ghost.txt")
        session.toggle(ghost)

        with pytest.raises(NotFoundError, match="Error processing ghost.txt"):
            await session.analyze()

        assert "ghost.txt" in session.error

    async def test_empty_file_content(self, session, library, scripted_llm):
        empty = await self._upload(library, "empty.txt", "")
        session.toggle(empty)

        with pytest.raises(UpstreamError, match="No content provided"):
            await session.analyze()

        assert scripted_llm.prompts == []


@pytest.mark.unit
@pytest.mark.asyncio
class TestSaveAndLoad:
    """Save dialog, saving and loading."""

    async def _analyzed_session(self, session, library, scripted_llm, answer_factory, names):
        scripted_llm.default = answer_factory(["a", "b"], [("a", "b", "r")])
        for name in names:
            session.toggle(await library.add_file(name, b"some text"))
        await session.analyze()
        return session

    async def test_dialog_requires_graph(self, session):
        with pytest.raises(ValidationError):
            session.open_save_dialog()

    async def test_dialog_defaults_multiple_files(
        self, session, library, scripted_llm, answer_factory
    ):
        await self._analyzed_session(
            session, library, scripted_llm, answer_factory, ["alpha.txt", "beta.md"]
        )

        dialog = session.open_save_dialog()

        assert dialog.open is True
        assert dialog.name == "alpha + beta"
        assert dialog.description == "Graph generated from 2 sources"

    async def test_dialog_defaults_single_file(
        self, session, library, scripted_llm, answer_factory
    ):
        await self._analyzed_session(session, library, scripted_llm, answer_factory, ["solo.txt"])

        dialog = session.open_save_dialog()

        assert dialog.name == "solo"
        assert dialog.description == "Graph generated from 1 source"

    async def test_save_current(self, session, library, scripted_llm, answer_factory, graph_store):
        await self._analyzed_session(
            session, library, scripted_llm, answer_factory, ["alpha.txt", "beta.txt"]
        )
        session.open_save_dialog()

        summary = await session.save_current()

        assert summary.metadata.name == "alpha + beta"
        assert summary.metadata.source_files == ["alpha.txt", "beta.txt"]
        assert summary.metadata.node_count == 2
        assert session.save_dialog.open is False
        assert session.saving is False
        assert [s.filename for s in await session.list_saved()] == [summary.filename]

    async def test_save_with_overrides(self, session, library, scripted_llm, answer_factory):
        await self._analyzed_session(session, library, scripted_llm, answer_factory, ["a.txt"])
        session.open_save_dialog()

        summary = await session.save_current(name="Custom", description="Mine")

        assert summary.metadata.name == "Custom"
        assert summary.metadata.description == "Mine"

    async def test_save_empty_name(self, session, library, scripted_llm, answer_factory, memory_backend):
        await self._analyzed_session(session, library, scripted_llm, answer_factory, ["a.txt"])
        session.open_save_dialog()

        with pytest.raises(ValidationError, match="Graph name is required"):
            await session.save_current(name="  ")

        assert memory_backend.records == {}
        assert session.save_dialog.open is True
        assert session.error == "Graph name is required"

    async def test_save_without_graph(self, session):
        with pytest.raises(ValidationError):
            await session.save_current(name="x")

    async def test_load_saved(self, session, graph_store, sample_document):
        summary = await graph_store.save(sample_document, SaveRequest(name="Stored"))
        session.toggle(SourceFile(filename="1_a.txt", original_name="a.txt"))

        saved = await session.load_saved(summary.filename)

        assert session.current_graph == saved.graph
        assert session.current_source.name == "Stored"
        assert session.selected == []
        assert isinstance(session.current_graph.links[0].source, GraphNode)

    async def test_load_missing(self, session):
        with pytest.raises(NotFoundError):
            await session.load_saved("graph_missing")

        assert session.error == "Failed to load graph"

    async def test_load_corrupt(self, session, memory_backend):
        memory_backend.records["graph_bad"] = b"{{{"

        with pytest.raises(CorruptDataError):
            await session.load_saved("graph_bad")

        assert session.error == "Failed to load graph"
