"""
Shared test fixtures for all test modules.
"""

import json

import pytest

from talkgraph.config import AnalysisConfig, LLMConfig
from talkgraph.core.library import LocalFileLibrary
from talkgraph.core.llm.base import LLMProvider
from talkgraph.core.storage import InMemoryStorage
from talkgraph.models import GraphDocument
from talkgraph.services import AnalysisGateway, GraphStore
from talkgraph.utils.exceptions import LLMError


class ScriptedLLM(LLMProvider):
    """
    LLM double answering from a script.

    The first marker found in the prompt selects the response; an exception
    instance as response is raised instead of returned.
    """

    def __init__(self, responses: dict | None = None, default: str | None = None):
        self.responses = responses or {}
        self.default = default
        self.prompts: list[str] = []
        self.closed = False

    async def complete(
        self,
        prompt: str,
        system: str | None = None,
        json_output: bool = False,
        max_tokens: int = 2000,
        temperature: float = 0.0,
        **kwargs,
    ) -> str:
        self.prompts.append(prompt)
        for marker, response in self.responses.items():
            if marker in prompt:
                if isinstance(response, Exception):
                    raise response
                return response
        if self.default is None:
            raise LLMError("No scripted response for prompt")
        return self.default

    async def close(self):
        self.closed = True


def graph_json(node_ids: list[str], links: list[tuple[str, str, str]] | None = None) -> str:
    """Model-style JSON answer for the given node ids and (source, target, relationship) links."""
    return json.dumps(
        {
            "nodes": [
                {"id": node_id, "label": node_id.title(), "description": f"About {node_id}"}
                for node_id in node_ids
            ],
            "links": [
                {"source": source, "target": target, "relationship": relationship}
                for source, target, relationship in links or []
            ],
        }
    )


def make_document(
    node_ids: list[str],
    links: list[tuple[str, str, str]] | None = None,
    source: str | None = None,
) -> GraphDocument:
    """GraphDocument with the given node ids and links, optionally tagged."""
    document = GraphDocument.model_validate_json(graph_json(node_ids, links))
    return document.tagged(source) if source else document


@pytest.fixture
def analysis_config():
    """Analysis config that never loads a tiktoken encoding."""
    return AnalysisConfig(tokenizer_provider="approximate")


@pytest.fixture
def memory_backend():
    """Empty in-memory storage backend."""
    return InMemoryStorage()


@pytest.fixture
def graph_store(memory_backend):
    """Graph store over an in-memory backend."""
    return GraphStore(memory_backend)


@pytest.fixture
async def library(tmp_path):
    """Initialized file library in a temporary directory."""
    library = LocalFileLibrary(
        uploads_dir=tmp_path / "uploads", metadata_dir=tmp_path / "metadata"
    )
    await library.initialize()
    return library


@pytest.fixture
def scripted_llm():
    """Scripted LLM with no responses; tests fill in `responses`."""
    return ScriptedLLM()


@pytest.fixture
def gateway(scripted_llm, analysis_config):
    """Analysis gateway over the scripted LLM."""
    return AnalysisGateway(
        scripted_llm, llm_config=LLMConfig(temperature=0.7), config=analysis_config
    )


@pytest.fixture
def sample_document():
    """Small connected graph."""
    return make_document(
        ["python", "asyncio", "fastapi"],
        [("python", "asyncio", "includes"), ("fastapi", "python", "written in")],
    )


@pytest.fixture
def document_factory():
    """Build GraphDocuments: document_factory(["a", "b"], [("a", "b", "rel")], source="f1")."""
    return make_document


@pytest.fixture
def answer_factory():
    """Build model-style JSON answers: answer_factory(["a", "b"], [("a", "b", "rel")])."""
    return graph_json
