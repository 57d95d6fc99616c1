"""
design-to-code — Figma 組件 → 前端程式碼（Python 管線）

擷取組件 → 組 prompt → 文字生成 → 解析成 artifact。
"""

__version__ = "0.1.0"

from .config import (
    FeatureFlags,
    GenerationConfig,
    load_config,
    resolve_generation_config,
    validate_config,
)
from .contract import ArtifactKind, OutputContract
from .document import (
    ComponentExtractor,
    ComponentNode,
    DocumentNode,
    NodeKind,
    extract_components,
    parse_document,
)
from .errors import (
    ArtifactWriteError,
    ComponentError,
    ConfigError,
    DesignToCodeError,
    DocumentFetchError,
    GenerationBackendError,
    InvalidDocumentError,
    StyleFetchError,
)
from .figma_reader import (
    DocumentClient,
    FigmaAPIClient,
    FileNodesDocumentClient,
    FileStylesDocumentClient,
    parse_figma_url,
)
from .llm import GenerationClient, OpenAIGenerationClient, RetryingGenerationClient
from .orchestrator import ComponentResult, Orchestrator
from .parser import ArtifactBundle, ArtifactParser, extract_dependencies
from .prompt_builder import Prompt, PromptBuilder
from .rulesets import Rule, Ruleset, RulesetConfig, RulesetStore, generate_ruleset
from .writer import write_bundle

__all__ = [
    "__version__",
    "FeatureFlags",
    "GenerationConfig",
    "load_config",
    "resolve_generation_config",
    "validate_config",
    "ArtifactKind",
    "OutputContract",
    "ComponentExtractor",
    "ComponentNode",
    "DocumentNode",
    "NodeKind",
    "extract_components",
    "parse_document",
    "ArtifactWriteError",
    "ComponentError",
    "ConfigError",
    "DesignToCodeError",
    "DocumentFetchError",
    "GenerationBackendError",
    "InvalidDocumentError",
    "StyleFetchError",
    "DocumentClient",
    "FigmaAPIClient",
    "FileNodesDocumentClient",
    "FileStylesDocumentClient",
    "parse_figma_url",
    "GenerationClient",
    "OpenAIGenerationClient",
    "RetryingGenerationClient",
    "ComponentResult",
    "Orchestrator",
    "ArtifactBundle",
    "ArtifactParser",
    "extract_dependencies",
    "Prompt",
    "PromptBuilder",
    "Rule",
    "Ruleset",
    "RulesetConfig",
    "RulesetStore",
    "generate_ruleset",
    "write_bundle",
]
