"""將 ArtifactBundle 寫成檔案；只寫非空欄位."""

import logging
from pathlib import Path
from typing import Dict, List, Optional, Set

from .config import GenerationConfig
from .contract import ArtifactKind, code_extension
from .errors import ArtifactWriteError
from .parser import ArtifactBundle

logger = logging.getLogger(__name__)

_STYLE_SUFFIXES = {
    "css": ".css",
    "tailwind": ".css",
    "css-modules": ".module.css",
    "scss": ".scss",
}


def component_file_name(name: str) -> str:
    safe = "".join(ch if ch.isalnum() else " " for ch in name).strip()
    if not safe:
        return "Unnamed"
    parts = [p for p in safe.split() if p]
    return "".join(p[:1].upper() + p[1:] for p in parts)


def unique_file_stem(name: str, component_id: str, taken: Set[str]) -> str:
    """同名組件（常見於不同頁面）第二個起加上 id 後綴；會把結果加入 taken。"""
    stem = component_file_name(name)
    if stem in taken:
        suffix = "".join(ch if ch.isalnum() else "_" for ch in component_id).strip("_")
        stem = f"{stem}_{suffix or len(taken)}"
        while stem in taken:
            stem += "_"
    taken.add(stem)
    return stem


def artifact_suffixes(config: GenerationConfig) -> Dict[ArtifactKind, str]:
    ext = code_extension(config)
    script = "ts" if config.features.typescript else "js"
    if config.styling_approach == "styled-components":
        styles = f".styles.{script}"
    else:
        styles = _STYLE_SUFFIXES.get(config.styling_approach, ".css")
    return {
        ArtifactKind.CODE: f".{ext}",
        ArtifactKind.STYLES: styles,
        ArtifactKind.TYPES: ".types.ts",
        ArtifactKind.STORIES: f".stories.{ext}",
        ArtifactKind.TESTS: f".test.{ext}",
        ArtifactKind.DOCUMENTATION: ".md",
    }


def _write(path: Path, content: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")


def write_bundle(bundle: ArtifactBundle, component_name: str, output_dir: str,
                 config: GenerationConfig, stem: Optional[str] = None) -> List[Path]:
    """回傳已寫出的檔案路徑（依 ArtifactKind 順序）。stem 未給時由組件名稱產生。"""
    base = Path(output_dir)
    stem = stem or component_file_name(component_name)
    written: List[Path] = []
    for kind, suffix in artifact_suffixes(config).items():
        content = bundle.get(kind)
        if not content:
            continue
        path = base / f"{stem}{suffix}"
        try:
            _write(path, content + "\n")
        except OSError as e:
            raise ArtifactWriteError(f"Failed to write {path}: {e}") from e
        logger.debug("Wrote %s", path)
        written.append(path)
    return written
