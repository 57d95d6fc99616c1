"""
Orchestrator — 依序處理每個組件：prompt → 生成 → 解析

嚴格循序；任一組件失敗即中止，不產出後續組件的結果。
"""

import logging
from typing import Iterator, List, NamedTuple, Optional

from .config import GenerationConfig
from .document import ComponentExtractor, ComponentNode
from .errors import ComponentError, GenerationBackendError
from .figma_reader import DocumentClient
from .llm import GenerationClient
from .parser import ArtifactBundle, ArtifactParser
from .prompt_builder import PromptBuilder

logger = logging.getLogger(__name__)


class ComponentResult(NamedTuple):
    component: ComponentNode
    bundle: ArtifactBundle


class Orchestrator:

    def __init__(
        self,
        document_client: DocumentClient,
        generation_client: GenerationClient,
        config: Optional[GenerationConfig] = None,
        *,
        extractor: Optional[ComponentExtractor] = None,
        prompt_builder: Optional[PromptBuilder] = None,
        parser: Optional[ArtifactParser] = None,
        include_styles: bool = False,
    ):
        self.document_client = document_client
        self.generation_client = generation_client
        self.config = config or GenerationConfig()
        self.extractor = extractor or ComponentExtractor()
        self.prompt_builder = prompt_builder or PromptBuilder()
        self.parser = parser or ArtifactParser(self.config)
        self.include_styles = include_styles

    def find_components(self, document_id: str, node_id: Optional[str] = None) -> List[ComponentNode]:
        if node_id:
            root = self.document_client.fetch_node(document_id, node_id)
        else:
            root = self.document_client.fetch_document(document_id)
        components = self.extractor.extract(root)
        logger.info("Found %d components in %s", len(components), document_id)
        return components

    def iter_results(self, document_id: str, node_id: Optional[str] = None) -> Iterator[ComponentResult]:
        components = self.find_components(document_id, node_id)
        for index, component in enumerate(components, start=1):
            logger.info("[%d/%d] Generating %s (%s)", index, len(components), component.name, component.id)
            yield ComponentResult(component, self.process(document_id, component))

    def run(self, document_id: str, node_id: Optional[str] = None) -> List[ComponentResult]:
        return list(self.iter_results(document_id, node_id))

    def process(self, document_id: str, component: ComponentNode) -> ArtifactBundle:
        """單一組件：樣式（可選）→ prompt → 生成 → 解析。失敗時帶上組件資訊拋出。"""
        styles = None
        if self.include_styles:
            try:
                styles = self.document_client.fetch_styles(document_id, component.id)
            except Exception as e:
                raise ComponentError(component, e, step="fetch styles for") from e

        try:
            prompt = self.prompt_builder.build(component, self.config, styles)
        except Exception as e:
            raise ComponentError(component, e, step="build prompt for") from e

        try:
            reply = self.generation_client.generate(prompt.system, prompt.user, self.config)
        except Exception as e:
            raise GenerationBackendError(component, e) from e

        try:
            return self.parser.parse(reply)
        except Exception as e:
            raise ComponentError(component, e, step="parse reply for") from e
