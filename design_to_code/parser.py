"""
ArtifactParser — 將模型回覆拆成 ArtifactBundle

回覆以 markdown fence 區隔各 artifact；每個欄位取第一個符合的 fence，
找不到則為空字串。未關閉的 fence 不貢獻任何內容。
"""

import logging
import re
from dataclasses import dataclass, field
from typing import Container, Iterator, List, Optional, Tuple

from .config import GenerationConfig
from .contract import DOCUMENTATION_TAG, ArtifactKind, OutputContract

logger = logging.getLogger(__name__)

_FENCE_OPEN_RE = re.compile(r"^[ \t]{0,3}(`{3,})[ \t]*([^`\s][^`]*?)?[ \t]*$")
_FENCE_CLOSE_RE = re.compile(r"^[ \t]{0,3}(`{3,})[ \t]*$")

# import X from 'm' / import { a,\n b } from "m" / import 'm' / import type T from 'm' / export * from 'm'
_IMPORT_RE = re.compile(
    r"""^[ \t]*(?:import|export)\s+(?:type\s+)?(?:[\w$*\s{},]*?\s*from\s*)?['"]([^'"\n]+)['"]""",
    re.MULTILINE,
)


@dataclass
class ArtifactBundle:
    code: str = ""
    styles: str = ""
    dependencies: List[str] = field(default_factory=list)
    types: str = ""
    stories: str = ""
    tests: str = ""
    documentation: str = ""

    def get(self, kind: ArtifactKind) -> str:
        return getattr(self, kind.value)

    def non_empty(self) -> List[ArtifactKind]:
        return [kind for kind in ArtifactKind if self.get(kind)]


def _fence_tag(opening: "re.Match") -> str:
    info = (opening.group(2) or "").strip()
    return info.split()[0].lower() if info else ""


def iter_fences(text: str, known_tags: Optional[Container[str]] = None) -> Iterator[Tuple[str, str]]:
    """
    逐一產出已關閉的 (tag, content)；tag 為 info string 第一個字、轉小寫。

    給定 known_tags 時，非 markdown 的 fence 內若出現已知標籤的開頭行，
    視為前一個 fence 未關閉：丟棄目前區塊，從該行重新掃描。
    """
    lines = text.splitlines()
    i = 0
    while i < len(lines):
        opening = _FENCE_OPEN_RE.match(lines[i])
        if not opening:
            i += 1
            continue
        ticks = len(opening.group(1))
        tag = _fence_tag(opening)
        nested = tag == DOCUMENTATION_TAG
        depth = 0
        body: List[str] = []
        j = i + 1
        closed = False
        restart = False
        while j < len(lines):
            line = lines[j]
            close = _FENCE_CLOSE_RE.match(line)
            if close and len(close.group(1)) >= ticks:
                if depth == 0:
                    closed = True
                    break
                depth -= 1
            elif not close:
                inner = _FENCE_OPEN_RE.match(line)
                if inner and nested:
                    # markdown 內嵌範例 fence，保留為內容
                    depth += 1
                elif inner and known_tags is not None and _fence_tag(inner) in known_tags:
                    restart = True
                    break
            body.append(line)
            j += 1
        if restart:
            logger.debug("Dropping unterminated %r fence at line %d", tag, i + 1)
            i = j
            continue
        if not closed:
            logger.debug("Ignoring unterminated %r fence at line %d", tag, i + 1)
            return
        yield tag, "\n".join(body)
        i = j + 1


def extract_dependencies(code: str) -> List[str]:
    """擷取 import / export-from 的模組名稱，依首次出現順序去重。"""
    return list(dict.fromkeys(m.group(1) for m in _IMPORT_RE.finditer(code)))


class ArtifactParser:

    def __init__(self, config: Optional[GenerationConfig] = None):
        self.contract = OutputContract.from_config(config or GenerationConfig())
        self._tags = self.contract.tag_map()

    def parse(self, reply: Optional[str]) -> ArtifactBundle:
        bundle = ArtifactBundle()
        found = set()
        for tag, content in iter_fences(reply or "", self._tags):
            kind = self._tags.get(tag)
            if kind is None or kind in found:
                continue
            found.add(kind)
            setattr(bundle, kind.value, content.strip())

        bundle.dependencies = extract_dependencies(bundle.code)

        missing = [k.value for k in self.contract.expected_kinds if k not in found]
        if missing:
            logger.warning("Reply is missing requested artifacts: %s", ", ".join(missing))
        return bundle
