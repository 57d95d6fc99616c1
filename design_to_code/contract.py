"""
輸出約定 — fence 語言標籤 ↔ artifact 種類

PromptBuilder 依此表要求模型輸出哪些 fence，ArtifactParser 依同一張表
把 fence 對回欄位；兩者只能一起改。
"""

import re
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Tuple

from .config import GenerationConfig


class ArtifactKind(str, Enum):
    CODE = "code"
    STYLES = "styles"
    TYPES = "types"
    STORIES = "stories"
    TESTS = "tests"
    DOCUMENTATION = "documentation"


TYPES_TAG = "typescript"
DOCUMENTATION_TAG = "markdown"
STORIES_TAG_PREFIX = "stories."
TESTS_TAG_PREFIX = "test."

# 不論設定為何都視為 styles 的 fence 標籤
_STYLE_TAGS = ("css", "tailwind", "scss", "styled-components")


@dataclass(frozen=True)
class FenceSpec:
    kind: ArtifactKind
    tag: str
    label: str


def code_extension(config: GenerationConfig) -> str:
    return "tsx" if config.features.typescript else "jsx"


def styling_fence_tag(styling_approach: str) -> str:
    """fence 標籤只取 info string 第一個字，多字的 styling 以 "-" 連成一個 token。"""
    return re.sub(r"[\s`]+", "-", styling_approach.strip().lower()).strip("-") or "css"


@dataclass(frozen=True)
class OutputContract:
    """某個 GenerationConfig 要求的 fence 清單（依 prompt 中的順序）."""
    requested: Tuple[FenceSpec, ...]
    styling_tag: str

    @classmethod
    def from_config(cls, config: GenerationConfig) -> "OutputContract":
        ext = code_extension(config)
        styling_tag = styling_fence_tag(config.styling_approach)
        specs = [
            FenceSpec(ArtifactKind.CODE, ext, "Component"),
            FenceSpec(ArtifactKind.STYLES, styling_tag, "Styles"),
        ]
        if config.features.storybook:
            specs.append(FenceSpec(ArtifactKind.STORIES, STORIES_TAG_PREFIX + ext, "Stories"))
        if config.features.tests:
            specs.append(FenceSpec(ArtifactKind.TESTS, TESTS_TAG_PREFIX + ext, "Tests"))
        specs.append(FenceSpec(ArtifactKind.TYPES, TYPES_TAG, "Types"))
        specs.append(FenceSpec(ArtifactKind.DOCUMENTATION, DOCUMENTATION_TAG, "Documentation"))
        return cls(requested=tuple(specs), styling_tag=styling_tag)

    @property
    def expected_kinds(self) -> Tuple[ArtifactKind, ...]:
        return tuple(spec.kind for spec in self.requested)

    def tag_map(self) -> Dict[str, ArtifactKind]:
        """所有可辨識的 fence 標籤；tsx 與 jsx 都對應 code，與 typescript 旗標無關。"""
        tags: Dict[str, ArtifactKind] = {}
        for ext in ("tsx", "jsx"):
            tags[ext] = ArtifactKind.CODE
            tags[STORIES_TAG_PREFIX + ext] = ArtifactKind.STORIES
            tags[TESTS_TAG_PREFIX + ext] = ArtifactKind.TESTS
        for tag in _STYLE_TAGS:
            tags[tag] = ArtifactKind.STYLES
        tags.setdefault(self.styling_tag, ArtifactKind.STYLES)
        tags[TYPES_TAG] = ArtifactKind.TYPES
        tags[DOCUMENTATION_TAG] = ArtifactKind.DOCUMENTATION
        return tags
