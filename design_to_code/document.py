"""
文件樹與組件擷取

原始 Figma 節點樹只在 parse_document() 檢查一次，轉成帶 NodeKind 標籤的
DocumentNode；之後的走訪不再讀原始 type 字串。
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, List, Optional, Tuple, Union

from .errors import InvalidDocumentError

logger = logging.getLogger(__name__)


class NodeKind(str, Enum):
    DOCUMENT = "DOCUMENT"
    COMPONENT = "COMPONENT"
    COMPONENT_SET = "COMPONENT_SET"
    OTHER = "OTHER"

    @classmethod
    def from_raw(cls, raw_type: str) -> "NodeKind":
        if raw_type in (cls.DOCUMENT.value, cls.COMPONENT.value, cls.COMPONENT_SET.value):
            return cls(raw_type)
        return cls.OTHER


COMPONENT_KINDS = (NodeKind.COMPONENT, NodeKind.COMPONENT_SET)


@dataclass(frozen=True)
class DocumentNode:
    """解析後的文件節點（不可變）."""
    kind: NodeKind
    raw_type: str
    id: str = ""
    name: str = ""
    children: Tuple["DocumentNode", ...] = field(default_factory=tuple)

    @property
    def is_component(self) -> bool:
        return self.kind in COMPONENT_KINDS


@dataclass(frozen=True)
class ComponentNode:
    """擷取出的組件紀錄；只保留 id / name / type，不含 children."""
    id: str
    name: str
    type: NodeKind

    def to_dict(self) -> dict:
        return {"id": self.id, "name": self.name, "type": self.type.value}


def parse_document(raw: Any, path: str = "document") -> DocumentNode:
    """將原始節點樹（dict）轉為 DocumentNode，格式錯誤時拋出 InvalidDocumentError。"""
    if raw is None:
        raise InvalidDocumentError(f"{path}: node is missing")
    if not isinstance(raw, dict):
        raise InvalidDocumentError(f"{path}: expected an object, got {type(raw).__name__}")

    raw_type = raw.get("type")
    if not isinstance(raw_type, str) or not raw_type:
        raise InvalidDocumentError(f"{path}: node has no 'type'")
    kind = NodeKind.from_raw(raw_type)

    node_id = raw.get("id", "")
    name = raw.get("name", "")
    if kind in COMPONENT_KINDS:
        if not isinstance(node_id, str) or not node_id:
            raise InvalidDocumentError(f"{path}: {raw_type} node has no 'id'")
        if not isinstance(raw.get("name"), str):
            raise InvalidDocumentError(f"{path}: {raw_type} node '{node_id}' has no 'name'")

    raw_children = raw.get("children")
    if raw_children is None:
        raw_children = []
    if not isinstance(raw_children, list):
        raise InvalidDocumentError(f"{path}: 'children' must be a list")

    children = tuple(
        parse_document(child, f"{path}.children[{i}]")
        for i, child in enumerate(raw_children)
    )
    return DocumentNode(
        kind=kind,
        raw_type=raw_type,
        id=node_id if isinstance(node_id, str) else str(node_id),
        name=name if isinstance(name, str) else str(name),
        children=children,
    )


class ComponentExtractor:
    """深度優先、前序走訪文件樹，依文件順序收集 COMPONENT / COMPONENT_SET 節點."""

    def extract(self, root: Union[DocumentNode, dict, None]) -> List[ComponentNode]:
        if not isinstance(root, DocumentNode):
            root = parse_document(root)
        components: List[ComponentNode] = []
        self._collect(root, components)
        logger.debug("Extracted %d components", len(components))
        return components

    def _collect(self, node: DocumentNode, components: List[ComponentNode]) -> None:
        if node.is_component:
            components.append(ComponentNode(id=node.id, name=node.name, type=node.kind))
        # 不論本節點是否為組件，都繼續往下走
        for child in node.children:
            self._collect(child, components)


def extract_components(root: Union[DocumentNode, dict, None],
                       extractor: Optional[ComponentExtractor] = None) -> List[ComponentNode]:
    return (extractor or ComponentExtractor()).extract(root)
