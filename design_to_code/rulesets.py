"""
Ruleset — 專案慣例規則產生與保存

規則與範例檔存放於 <project>/.cursor/rules/<name>/，並同步
<project>/.cursor/config.json 的 rulesets 清單。
"""

import json
import shutil
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Dict, List, Optional

from .errors import ArtifactWriteError

SEVERITIES = ("error", "warning", "info")
CATEGORIES = ("naming", "structure", "documentation", "styling")

# (convention key, rule name, description, pattern, severity, category)
_CONVENTION_RULES = (
    ("naming.props", "props-naming", "Props must use camelCase", "^[a-z][a-zA-Z0-9]*$", "error", "naming"),
    ("naming.styles", "style-naming", "Style class names must use kebab-case", "^[a-z][a-z0-9-]*$", "warning", "naming"),
    ("structure.imports", "import-order", "Imports are grouped: external packages first, then local modules",
     "^import .* from '(?!\\.)", "warning", "structure"),
    ("structure.exports", "named-exports", "Components use named exports", "^export (const|function) [A-Z]", "warning", "structure"),
    ("structure.types", "props-interface", "Every component declares a <Name>Props interface",
     "^(export )?interface [A-Z][a-zA-Z0-9]*Props", "warning", "structure"),
    ("documentation.jsdoc", "jsdoc-components", "Exported components carry a JSDoc block", "^/\\*\\*", "info", "documentation"),
    ("documentation.readme", "component-readme", "Each component folder has a README.md", "README\\.md$", "info", "documentation"),
)

_REACT_EXAMPLE = """import React from 'react';

interface ExampleComponentProps {
  title: string;
  description?: string;
  onAction: () => void;
}

/**
 * Example component following project conventions
 */
export const ExampleComponent: React.FC<ExampleComponentProps> = ({
  title,
  description,
  onAction
}) => {
  return (
    <div className="flex flex-col p-4 bg-white rounded-lg shadow-md">
      <h2 className="text-xl font-bold mb-2">{title}</h2>
      {description && <p className="text-gray-600 mb-4">{description}</p>}
      <button
        onClick={onAction}
        className="px-4 py-2 bg-blue-500 text-white rounded hover:bg-blue-600"
      >
        Click me
      </button>
    </div>
  );
};
"""

_VUE_EXAMPLE = """<template>
  <div class="example-component">
    <h2>{{ title }}</h2>
    <p v-if="description">{{ description }}</p>
    <button @click="$emit('action')">Click me</button>
  </div>
</template>

<script lang="ts">
export default {
  name: 'ExampleComponent',
  props: {
    title: { type: String, required: true },
    description: String,
  },
  emits: ['action'],
}
</script>
"""

_SVELTE_EXAMPLE = """<script lang="ts">
  import { createEventDispatcher } from 'svelte';

  export let title: string;
  export let description: string | undefined = undefined;

  const dispatch = createEventDispatcher();
</script>

<div class="example-component">
  <h2>{title}</h2>
  {#if description}
    <p>{description}</p>
  {/if}
  <button on:click={() => dispatch('action')}>Click me</button>
</div>
"""

_EXAMPLES = {
    "react": ("ExampleComponent.tsx", _REACT_EXAMPLE),
    "next": ("ExampleComponent.tsx", _REACT_EXAMPLE),
    "vue": ("ExampleComponent.vue", _VUE_EXAMPLE),
    "nuxt": ("ExampleComponent.vue", _VUE_EXAMPLE),
    "svelte": ("ExampleComponent.svelte", _SVELTE_EXAMPLE),
}


@dataclass
class Rule:
    name: str
    description: str
    pattern: str
    severity: str = "warning"
    category: str = "structure"

    def __post_init__(self) -> None:
        if self.severity not in SEVERITIES:
            raise ValueError(f"Invalid severity '{self.severity}' (expected one of {', '.join(SEVERITIES)})")
        if self.category not in CATEGORIES:
            raise ValueError(f"Invalid category '{self.category}' (expected one of {', '.join(CATEGORIES)})")


@dataclass
class Ruleset:
    name: str
    rules: List[Rule] = field(default_factory=list)
    examples: Dict[str, str] = field(default_factory=dict)

    def to_dict(self) -> dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict) -> "Ruleset":
        return cls(
            name=data["name"],
            rules=[Rule(**r) for r in data.get("rules", [])],
            examples=dict(data.get("examples", {})),
        )


@dataclass
class RulesetConfig:
    project_name: str
    framework: str = "react"
    styling: str = "tailwind"
    component_structure: str = "atomic"
    # 例如 ["naming.components", "structure.types"]
    conventions: List[str] = field(default_factory=list)


def generate_ruleset(config: RulesetConfig) -> Ruleset:
    rules: List[Rule] = []
    conventions = set(config.conventions)

    if config.framework in ("react", "next"):
        rules.append(Rule(
            name="react-component-naming",
            description="React components must use PascalCase",
            pattern="^[A-Z][a-zA-Z0-9]*$",
            severity="error",
            category="naming",
        ))
    elif "naming.components" in conventions:
        rules.append(Rule(
            name="component-naming",
            description="Components must use PascalCase",
            pattern="^[A-Z][a-zA-Z0-9]*$",
            severity="error",
            category="naming",
        ))

    if config.styling == "tailwind":
        rules.append(Rule(
            name="tailwind-class-order",
            description="Tailwind classes should follow recommended ordering",
            pattern="^(layout|spacing|sizing|typography|colors|effects).*$",
            severity="warning",
            category="styling",
        ))
    elif config.styling == "css-modules":
        rules.append(Rule(
            name="css-modules-file",
            description="Component styles live in <Name>.module.css next to the component",
            pattern="^[A-Z][a-zA-Z0-9]*\\.module\\.css$",
            severity="warning",
            category="styling",
        ))

    if config.component_structure == "atomic":
        rules.append(Rule(
            name="atomic-structure",
            description="Components should be organized by atomic design principles",
            pattern="^(atoms|molecules|organisms|templates|pages)/.*$",
            severity="warning",
            category="structure",
        ))
    elif config.component_structure == "feature-based":
        rules.append(Rule(
            name="feature-structure",
            description="Components live under the feature that owns them",
            pattern="^features/[a-z0-9-]+/components/.*$",
            severity="warning",
            category="structure",
        ))

    for key, name, description, pattern, severity, category in _CONVENTION_RULES:
        if key in conventions:
            rules.append(Rule(name, description, pattern, severity, category))

    examples: Dict[str, str] = {}
    if config.framework in _EXAMPLES:
        filename, content = _EXAMPLES[config.framework]
        examples[filename] = content
    elif config.framework == "custom":
        examples["ExampleComponent.tsx"] = _REACT_EXAMPLE

    return Ruleset(name=f"{config.project_name}-ruleset", rules=rules, examples=examples)


class RulesetStore:
    """以 JSON 保存 ruleset，並維護 .cursor/config.json 的清單."""

    def __init__(self, project_root: str = ".", config_path: Optional[str] = None):
        self.project_root = Path(project_root)
        self.rules_dir = self.project_root / ".cursor" / "rules"
        self.config_path = Path(config_path) if config_path else self.project_root / ".cursor" / "config.json"

    def _ruleset_dir(self, name: str) -> Path:
        return self.rules_dir / name

    def save(self, ruleset: Ruleset) -> Path:
        target = self._ruleset_dir(ruleset.name)
        examples_dir = target / "examples"
        try:
            examples_dir.mkdir(parents=True, exist_ok=True)
            with open(target / "ruleset.json", "w", encoding="utf-8") as f:
                json.dump(ruleset.to_dict(), f, indent=2, ensure_ascii=False)
            for filename, content in ruleset.examples.items():
                if content:
                    (examples_dir / filename).write_text(content, encoding="utf-8")
        except OSError as e:
            raise ArtifactWriteError(f"Failed to save ruleset '{ruleset.name}': {e}") from e
        self._update_config(add=ruleset.name)
        return target

    def load(self, name: str) -> Ruleset:
        path = self._ruleset_dir(name) / "ruleset.json"
        if not path.exists():
            raise FileNotFoundError(f"Ruleset '{name}' not found ({path})")
        with open(path, "r", encoding="utf-8") as f:
            return Ruleset.from_dict(json.load(f))

    def list(self) -> List[str]:
        if not self.rules_dir.exists():
            return []
        return sorted(p.name for p in self.rules_dir.iterdir() if (p / "ruleset.json").exists())

    def remove(self, name: str) -> bool:
        """刪除 ruleset；不存在時回傳 False。"""
        target = self._ruleset_dir(name)
        existed = target.exists()
        if existed:
            shutil.rmtree(target)
        self._update_config(remove=name)
        return existed

    def read_config(self) -> dict:
        if not self.config_path.exists():
            return {"rulesets": []}
        with open(self.config_path, "r", encoding="utf-8") as f:
            cfg = json.load(f)
        if not isinstance(cfg, dict):
            return {"rulesets": []}
        cfg.setdefault("rulesets", [])
        return cfg

    def _update_config(self, add: Optional[str] = None, remove: Optional[str] = None) -> None:
        cfg = self.read_config()
        names = [n for n in cfg["rulesets"] if n != remove]
        if add and add not in names:
            names.append(add)
        if names == cfg["rulesets"] and self.config_path.exists():
            return
        if not names and not self.config_path.exists():
            return
        cfg["rulesets"] = names
        try:
            self.config_path.parent.mkdir(parents=True, exist_ok=True)
            with open(self.config_path, "w", encoding="utf-8") as f:
                json.dump(cfg, f, indent=2, ensure_ascii=False)
        except OSError as e:
            raise ArtifactWriteError(f"Failed to update {self.config_path}: {e}") from e
