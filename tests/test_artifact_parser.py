"""
ArtifactParser 測試
fence 對應、第一個符合者優先、未關閉 fence、dependency 擷取。
"""
import pytest

from design_to_code.config import FeatureFlags, GenerationConfig
from design_to_code.parser import ArtifactBundle, ArtifactParser, extract_dependencies, iter_fences
from design_to_code.prompt_builder import PromptBuilder
from design_to_code.document import ComponentNode, NodeKind

CARD_REPLY = """Here is the component.

```tsx
import React from 'react';
import { motion } from 'framer-motion';

export const Card = () => {
  return <div>Card</div>;
};
```

```css
.card {
  padding: 1rem;
}
```
"""


def parser(**kwargs):
    return ArtifactParser(GenerationConfig(**kwargs))


# ─── 沒有 fence ──────────────────────────────────────────────────────────────

class TestEmptyReplies:
    @pytest.mark.parametrize("reply", ["No code blocks here", "", None, "```", "``` \n```"])
    def test_no_fences_yields_empty_bundle(self, reply):
        bundle = parser().parse(reply)
        assert bundle == ArtifactBundle()
        assert bundle.code == "" and bundle.styles == "" and bundle.types == ""
        assert bundle.stories == "" and bundle.tests == "" and bundle.documentation == ""
        assert bundle.dependencies == []


# ─── fence → 欄位 ────────────────────────────────────────────────────────────

class TestFenceMapping:
    def test_code_and_styles(self):
        bundle = parser().parse(CARD_REPLY)
        assert bundle.code.startswith("import React from 'react';")
        assert "export const Card" in bundle.code
        assert bundle.styles == ".card {\n  padding: 1rem;\n}"
        assert bundle.dependencies == ["react", "framer-motion"]

    def test_jsx_fence_populates_code(self):
        reply = "```jsx\nexport const A = () => <a />;\n```"
        bundle = parser(features=FeatureFlags(typescript=False)).parse(reply)
        assert bundle.code == "export const A = () => <a />;"

    def test_jsx_fence_accepted_with_typescript_config(self):
        bundle = parser().parse("```jsx\nconst x = 1;\n```")
        assert bundle.code == "const x = 1;"

    @pytest.mark.parametrize("tag", ["css", "tailwind", "scss", "styled-components"])
    def test_style_tags(self, tag):
        assert parser().parse(f"```{tag}\n.a {{}}\n```").styles == ".a {}"

    def test_configured_styling_tag(self):
        bundle = parser(styling_approach="css-modules").parse("```css-modules\n.root {}\n```")
        assert bundle.styles == ".root {}"

    def test_types_and_documentation(self):
        reply = (
            "```typescript\nexport interface CardProps { title: string }\n```\n"
            "```markdown\n# Card\nA card.\n```\n"
        )
        bundle = parser().parse(reply)
        assert bundle.types == "export interface CardProps { title: string }"
        assert bundle.documentation == "# Card\nA card."

    def test_tag_is_case_insensitive_and_ignores_extra_info(self):
        bundle = parser().parse("```TSX title=Card.tsx\nconst c = 1;\n```")
        assert bundle.code == "const c = 1;"

    def test_unknown_tags_ignored(self):
        bundle = parser().parse("```python\nprint(1)\n```\n```bash\nnpm i\n```")
        assert bundle == ArtifactBundle()

    def test_first_matching_fence_wins(self):
        reply = "```tsx\nconst first = 1;\n```\n\n```tsx\nconst second = 2;\n```"
        assert parser().parse(reply).code == "const first = 1;"

    def test_first_style_fence_wins_across_tags(self):
        reply = "```scss\n.a {}\n```\n```css\n.b {}\n```"
        assert parser().parse(reply).styles == ".a {}"


# ─── stories / tests 不會重複擷取 component code ─────────────────────────────

class TestDistinctArtifacts:
    REPLY = (
        "```tsx\nimport React from 'react';\nexport const Button = () => <button />;\n```\n"
        "```stories.tsx\nimport { Button } from './Button';\nexport default { component: Button };\n```\n"
        "```test.tsx\nimport { render } from '@testing-library/react';\ntest('renders', () => {});\n```\n"
    )

    def test_stories_and_tests_are_separate(self):
        config = GenerationConfig(features=FeatureFlags(storybook=True, tests=True))
        bundle = ArtifactParser(config).parse(self.REPLY)
        assert "export const Button" in bundle.code
        assert bundle.stories.startswith("import { Button } from './Button';")
        assert bundle.tests.startswith("import { render }")
        assert bundle.stories != bundle.code
        assert bundle.tests != bundle.code

    def test_dependencies_come_only_from_code(self):
        bundle = parser().parse(self.REPLY)
        assert bundle.dependencies == ["react"]


# ─── fence 邊界情況 ──────────────────────────────────────────────────────────

class TestFenceEdgeCases:
    def test_unterminated_fence_contributes_nothing(self):
        reply = "```css\n.a {}\n```\n```tsx\nimport React from 'react';\nexport const Broken"
        bundle = parser().parse(reply)
        assert bundle.styles == ".a {}"
        assert bundle.code == ""
        assert bundle.dependencies == []

    def test_unclosed_fence_before_known_fence_is_dropped(self):
        reply = (
            "```css\n.a {}\n\n"
            "```tsx\nimport React from 'react';\nexport const B = () => null;\n```\n"
        )
        bundle = parser().parse(reply)
        assert bundle.styles == ""
        assert bundle.code == "import React from 'react';\nexport const B = () => null;"
        assert bundle.dependencies == ["react"]

    def test_unknown_inner_opener_stays_content(self):
        reply = "```tsx\nconst s = `\n```python\nprint(1)\n```"
        assert parser().parse(reply).code == "const s = `\n```python\nprint(1)"

    def test_markdown_fence_keeps_nested_examples(self):
        reply = (
            "```markdown\n# Button\n\n```tsx\n<Button />\n```\n\nDone.\n```\n"
            "```tsx\nexport const Button = () => null;\n```\n"
        )
        bundle = parser().parse(reply)
        assert "```tsx\n<Button />\n```" in bundle.documentation
        assert bundle.documentation.endswith("Done.")
        assert bundle.code == "export const Button = () => null;"

    def test_longer_fence_contains_backticks(self):
        reply = "````markdown\nUse ``` for code.\n````"
        assert parser().parse(reply).documentation == "Use ``` for code."

    def test_indented_fences(self):
        reply = "  ```tsx\n  const a = 1;\n  ```"
        assert parser().parse(reply).code == "const a = 1;"

    def test_iter_fences_yields_tags_in_order(self):
        tags = [tag for tag, _ in iter_fences(CARD_REPLY)]
        assert tags == ["tsx", "css"]


# ─── dependencies ────────────────────────────────────────────────────────────

class TestExtractDependencies:
    def test_order_and_dedup(self):
        code = (
            "import React from 'react';\n"
            "import { useState } from \"react\";\n"
            "import { motion } from 'framer-motion';\n"
        )
        assert extract_dependencies(code) == ["react", "framer-motion"]

    def test_import_forms(self):
        code = (
            "import './Button.css';\n"
            "import * as Icons from 'lucide-react';\n"
            "import type { FC } from 'react';\n"
            "import React, { useEffect } from 'react';\n"
            "import {\n  Button,\n  Card,\n} from '@/components/ui';\n"
            "export { default as Tag } from './Tag';\n"
            "export * from './types';\n"
        )
        assert extract_dependencies(code) == [
            "./Button.css", "lucide-react", "react", "@/components/ui", "./Tag", "./types",
        ]

    def test_ignores_non_import_statements(self):
        code = (
            "export const label = 'react';\n"
            "const mod = require('lodash');\n"
            "// import fake from 'fake'\n"
            "const lazy = import('./Lazy');\n"
        )
        assert extract_dependencies(code) == []

    def test_exact_string_equality(self):
        assert extract_dependencies("import a from 'x';\nimport b from './x';") == ["x", "./x"]


# ─── builder ↔ parser ────────────────────────────────────────────────────────

def test_builder_and_parser_agree_on_jsx():
    config = GenerationConfig(features=FeatureFlags(typescript=False))
    component = ComponentNode(id="c1", name="Link", type=NodeKind.COMPONENT)
    user = PromptBuilder().build(component, config).user
    assert "```jsx```" in user
    bundle = ArtifactParser(config).parse("```jsx\nimport React from 'react';\n```")
    assert bundle.code == "import React from 'react';"
    assert bundle.dependencies == ["react"]


def test_builder_and_parser_agree_on_multi_word_styling():
    config = GenerationConfig.from_dict({"styling": "custom", "customStyling": "Vanilla Extract"})
    component = ComponentNode(id="c1", name="Link", type=NodeKind.COMPONENT)
    user = PromptBuilder().build(component, config).user
    assert "Styles: ```vanilla-extract```" in user
    bundle = ArtifactParser(config).parse("```vanilla-extract\nexport const root = style({});\n```")
    assert bundle.styles == "export const root = style({});"
