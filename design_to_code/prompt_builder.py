"""
PromptBuilder — 將組件與 GenerationConfig 轉成 system / user 指令

user 指令最後附上輸出約定（contract.OutputContract），告訴模型每種
artifact 應放在哪個語言標籤的 fence 裡。
"""

import json
from dataclasses import dataclass
from typing import List, Optional

from .config import GenerationConfig
from .contract import OutputContract
from .document import ComponentNode

FEATURE_PHRASES = (
    ("typescript", "TypeScript types/interfaces"),
    ("storybook", "Storybook stories"),
    ("tests", "Unit tests"),
    ("accessibility", "Accessibility features (ARIA attributes, keyboard navigation)"),
)

QUALITY_CHECKLIST = (
    "Proper component structure",
    "Any necessary imports",
    "Component documentation",
    "Props validation",
    "Error boundaries",
    "Loading states",
    "Interactive states (hover, focus, active)",
)


@dataclass(frozen=True)
class Prompt:
    system: str
    user: str


def feature_checklist(config: GenerationConfig) -> List[str]:
    return [phrase for flag, phrase in FEATURE_PHRASES if getattr(config.features, flag)]


class PromptBuilder:

    def build(self, component: ComponentNode, config: GenerationConfig,
              styles: Optional[dict] = None) -> Prompt:
        return Prompt(
            system=self.system_instruction(config),
            user=self.user_instruction(component, config, styles),
        )

    def system_instruction(self, config: GenerationConfig) -> str:
        language = "TypeScript" if config.features.typescript else "JavaScript"
        if config.styling_approach == "tailwind":
            styling = "Efficient Tailwind utilities"
        else:
            styling = "Clean, modular styles"
        return (
            f"You are a professional front-end developer. Generate clean, semantic "
            f"{config.target_framework} components with {language} and modern best practices.\n"
            "Focus on:\n"
            "- Semantic HTML and accessibility\n"
            "- Clean, maintainable code structure\n"
            f"- {styling}\n"
            "- Proper component organization\n"
            "- Type safety and documentation\n"
            "- Responsive design patterns"
        )

    def user_instruction(self, component: ComponentNode, config: GenerationConfig,
                         styles: Optional[dict] = None) -> str:
        structure = component.to_dict()
        if styles:
            structure["styles"] = styles
        summary = json.dumps(structure, indent=2, ensure_ascii=False)

        if config.styling_approach == "tailwind":
            styling_item = "Tailwind CSS classes"
        else:
            styling_item = f"{config.styling_approach} styles"
        checklist = feature_checklist(config) + list(QUALITY_CHECKLIST) + [styling_item]

        lines = [
            f"Generate a {config.target_framework} component for the following Figma component:",
            f"Name: {component.name}",
            f"Type: {component.type.value}",
            f"Structure: {summary}",
            "",
            "Please include:",
        ]
        lines.extend(f"- {item}" for item in checklist)
        lines.append("")
        lines.extend(self.output_contract(config))
        return "\n".join(lines)

    def output_contract(self, config: GenerationConfig) -> List[str]:
        contract = OutputContract.from_config(config)
        lines = [
            "Return each artifact in its own markdown code block, using exactly these "
            "language tags (one block per tag):",
        ]
        lines.extend(f"- {spec.label}: ```{spec.tag}```" for spec in contract.requested)
        return lines
