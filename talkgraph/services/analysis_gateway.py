"""
Analysis gateway: turn raw text into a concept graph with an LLM.
"""

import json

from pydantic import ValidationError as PydanticValidationError

from talkgraph.config import AnalysisConfig, LLMConfig
from talkgraph.core.llm.base import LLMProvider
from talkgraph.core.tokenizer import Tokenizer
from talkgraph.models.graph import GraphDocument
from talkgraph.utils.exceptions import AnalysisError, LLMError, ValidationError
from talkgraph.utils.logger import get_logger

logger = get_logger(__name__)

SYSTEM_PROMPT = (
    "You are a helpful assistant that analyzes text and identifies key concepts "
    "and their relationships. Return only valid JSON without any additional text."
)

ANALYSIS_PROMPT = """Analyze the following content and return a JSON object containing:
1. nodes: An array of objects, each representing a key concept with properties:
   - id: unique identifier
   - label: name of the concept
   - description: brief explanation
2. links: An array of objects representing relationships between nodes with properties:
   - source: id of the source node
   - target: id of the target node
   - relationship: description of how these concepts are related

Content to analyze:
{content}

Please ensure the response is valid JSON and includes at least 5-10 key concepts and their relationships."""


class AnalysisGateway:
    """
    Produces a GraphDocument from text.

    The model's answer is validated strictly: anything that isn't a JSON
    object with `nodes` and `links` arrays of well-formed records is an
    AnalysisError.
    """

    def __init__(
        self,
        llm: LLMProvider,
        llm_config: LLMConfig | None = None,
        config: AnalysisConfig | None = None,
        tokenizer: Tokenizer | None = None,
    ):
        """
        Initialize the gateway.

        Args:
            llm: LLM provider used for analysis
            llm_config: Sampling parameters (temperature, max_tokens)
            config: Analysis configuration (input token budget)
            tokenizer: Token counter; built from `config` if not given
        """
        self.llm = llm
        self.llm_config = llm_config or LLMConfig()
        self.config = config or AnalysisConfig()
        self.tokenizer = tokenizer or Tokenizer(self.config)

    async def analyze(self, content: str) -> GraphDocument:
        """
        Analyze text into a concept graph.

        Args:
            content: Raw text

        Returns:
            Untagged GraphDocument as returned by the model

        Raises:
            ValidationError: If content is empty
            AnalysisError: If the LLM call fails or its answer is malformed
        """
        if not content or not content.strip():
            raise ValidationError("No content provided")

        limit = self.config.max_input_tokens
        if self.tokenizer.exceeds(content, limit):
            logger.warning(f"Content exceeds {limit} tokens, truncating before analysis")
            content = self.tokenizer.truncate(content, limit)

        logger.info(f"Analyzing content length: {len(content)}")

        try:
            raw = await self.llm.complete(
                ANALYSIS_PROMPT.format(content=content),
                system=SYSTEM_PROMPT,
                json_output=True,
                max_tokens=self.llm_config.max_tokens,
                temperature=self.llm_config.temperature,
            )
        except LLMError as e:
            raise AnalysisError(f"Failed to analyze content: {e.message}") from e

        document = self.parse_graph(raw)
        logger.info(
            f"Analysis completed successfully: {len(document.nodes)} nodes, {len(document.links)} links"
        )
        return document

    @staticmethod
    def parse_graph(raw: str) -> GraphDocument:
        """
        Parse a model answer into a GraphDocument.

        Raises:
            AnalysisError: If the answer isn't a well-formed graph
        """
        try:
            data = json.loads(raw)
        except json.JSONDecodeError as e:
            raise AnalysisError(
                f"Model returned invalid JSON: {e}", context={"preview": raw[:200]}
            ) from e

        if not isinstance(data, dict):
            raise AnalysisError("Model returned JSON that is not an object")
        for field in ("nodes", "links"):
            if not isinstance(data.get(field), list):
                raise AnalysisError(f"Model response is missing the '{field}' array")

        try:
            return GraphDocument.model_validate({"nodes": data["nodes"], "links": data["links"]})
        except PydanticValidationError as e:
            raise AnalysisError(f"Model returned a malformed graph: {e}") from e
