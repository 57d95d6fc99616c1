#!/usr/bin/env python3
"""
design-to-code CLI — Figma 組件 → 前端程式碼

  ddtc generate <figma-link | file-key> [--output DIR]   # 產生組件程式碼
  ddtc components <figma-link | file-key>               # 列出組件
  ddtc ruleset create --name NAME                       # 建立 ruleset
  ddtc ruleset list | show NAME | remove NAME
"""

import argparse
import json
import logging
import sys

from . import __version__
from .config import (
    DEFAULT_CONFIG_PATH,
    load_config,
    load_env,
    resolve_figma_token,
    resolve_generation_config,
    resolve_openai_key,
)
from .errors import DesignToCodeError
from .figma_reader import FigmaAPIClient, FileNodesDocumentClient, parse_figma_url
from .llm import OpenAIGenerationClient, RetryingGenerationClient
from .orchestrator import Orchestrator
from .rulesets import RulesetConfig, RulesetStore, generate_ruleset
from .writer import unique_file_stem, write_bundle


def _resolve_target(link: str, node_override=None):
    file_key, node_id = parse_figma_url(link)
    return file_key, node_override or node_id


def _document_client(config: dict):
    token = resolve_figma_token(config)
    if not token:
        print("❌ 請設定 FIGMA_ACCESS_TOKEN 環境變數，或在設定檔的 figma.accessToken 設定。")
        print("   取得方式：Figma → Settings → Personal access tokens → 新增")
        return None
    return FileNodesDocumentClient(FigmaAPIClient(token))


def _generation_overrides(args) -> dict:
    features = {}
    if args.javascript:
        features["typescript"] = False
    if args.storybook:
        features["storybook"] = True
    if args.tests:
        features["tests"] = True
    if args.no_a11y:
        features["accessibility"] = False
    return {
        "framework": args.framework,
        "styling": args.styling,
        "model": args.model,
        "temperature": args.temperature,
        "features": features or None,
    }


def cmd_generate(args, config: dict) -> int:
    """Generate: 擷取組件 → 生成 → 解析 → 寫檔."""
    file_key, node_id = _resolve_target(args.link, args.node)
    file_key = file_key or config.get("figma", {}).get("fileKey")
    if not file_key:
        print("❌ 無法從連結取得 Figma file key，請貼上 Figma 的 'Copy link to selection' 連結。")
        return 1

    documents = _document_client(config)
    if documents is None:
        return 1
    api_key = resolve_openai_key(config)
    if not api_key:
        print("❌ 請設定 OPENAI_API_KEY 環境變數，或在設定檔的 openai.apiKey 設定。")
        return 1

    output_dir = args.output or config.get("output", {}).get("dir") or "./components"
    try:
        gen_config = resolve_generation_config(config, _generation_overrides(args))
        generator = OpenAIGenerationClient(api_key=api_key)
        if args.retries > 1:
            generator = RetryingGenerationClient(generator, max_attempts=args.retries)
        orchestrator = Orchestrator(
            documents, generator, gen_config, include_styles=args.include_styles,
        )

        print(f"🔍 Analyzing Figma file: {file_key}" + (f" (node {node_id})" if node_id else ""))
        total = 0
        stems: set = set()
        for component, bundle in orchestrator.iter_results(file_key, node_id):
            total += 1
            print(f"   ⚙️  Generated {component.name} ({component.type.value})")
            stem = unique_file_stem(component.name, component.id, stems)
            for path in write_bundle(bundle, component.name, output_dir, gen_config, stem):
                print(f"      📄 {path}")
            if bundle.dependencies:
                print(f"      📦 dependencies: {', '.join(bundle.dependencies)}")
    except DesignToCodeError as e:
        print(f"❌ {e}")
        return 1

    if total == 0:
        print("   ℹ️  No components found.")
    else:
        print(f"✨ Code generation complete! {total} components written to {output_dir}")
    return 0


def cmd_components(args, config: dict) -> int:
    """列出文件中的組件（不呼叫生成後端）。"""
    file_key, node_id = _resolve_target(args.link, args.node)
    file_key = file_key or config.get("figma", {}).get("fileKey")
    if not file_key:
        print("❌ 無法從連結取得 Figma file key。")
        return 1
    documents = _document_client(config)
    if documents is None:
        return 1

    orchestrator = Orchestrator(documents, generation_client=None)
    try:
        components = orchestrator.find_components(file_key, node_id)
    except DesignToCodeError as e:
        print(f"❌ {e}")
        return 1
    if args.json:
        print(json.dumps([c.to_dict() for c in components], indent=2, ensure_ascii=False))
        return 0
    for c in components:
        print(f"   {c.type.value:<14} {c.id:<12} {c.name}")
    print(f"\nTotal components: {len(components)}")
    return 0


def cmd_ruleset(args, config: dict) -> int:
    store = RulesetStore(args.project_root)
    if args.ruleset_command == "create":
        ruleset = generate_ruleset(RulesetConfig(
            project_name=args.name,
            framework=args.framework,
            styling=args.styling,
            component_structure=args.structure,
            conventions=args.convention or [],
        ))
        print("📝 Generating ruleset...")
        path = store.save(ruleset)
        print(f"✨ Ruleset '{ruleset.name}' saved to {path} ({len(ruleset.rules)} rules)")
    elif args.ruleset_command == "list":
        names = store.list()
        if not names:
            print("❌ No rulesets found. Create one first using: ddtc ruleset create --name NAME")
            return 0
        for name in names:
            print(f"   {name}")
    elif args.ruleset_command == "show":
        try:
            ruleset = store.load(args.name)
        except FileNotFoundError as e:
            print(f"❌ {e}")
            return 1
        print(json.dumps(ruleset.to_dict(), indent=2, ensure_ascii=False))
    elif args.ruleset_command == "remove":
        if store.remove(args.name):
            print(f"🗑️  Ruleset '{args.name}' removed.")
        else:
            print(f"❌ Ruleset '{args.name}' not found.")
            return 1
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="ddtc",
        description="design-to-code: Figma components → front-end code",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument("--config", "-c", default=DEFAULT_CONFIG_PATH, help="Config path")
    parser.add_argument("--verbose", action="store_true", help="Debug logging")
    parser.add_argument("--version", "-v", action="version", version=f"%(prog)s {__version__}")
    sub = parser.add_subparsers(dest="command")

    gen_p = sub.add_parser("generate", help="Generate code for Figma components",
        epilog="Examples:\n  ddtc generate 'https://www.figma.com/design/ABC123/App?node-id=1-2'\n  ddtc generate ABC123 --output ./src/components --storybook --tests",
        formatter_class=argparse.RawDescriptionHelpFormatter)
    gen_p.add_argument("link", help="Figma link (Copy link to selection) or file key")
    gen_p.add_argument("--node", help="Node id to restrict extraction to (overrides the link)")
    gen_p.add_argument("--output", "-o", help="Output directory (default ./components)")
    gen_p.add_argument("--framework", help="react, vue, svelte, solid, angular")
    gen_p.add_argument("--styling", help="css, tailwind, css-modules, styled-components, scss")
    gen_p.add_argument("--model", help="Model id (default gpt-4)")
    gen_p.add_argument("--temperature", type=float, help="Sampling temperature (default 0.7)")
    gen_p.add_argument("--javascript", action="store_true", help="Generate JavaScript (jsx) instead of TypeScript")
    gen_p.add_argument("--storybook", action="store_true", help="Also generate Storybook stories")
    gen_p.add_argument("--tests", action="store_true", help="Also generate unit tests")
    gen_p.add_argument("--no-a11y", action="store_true", help="Do not ask for accessibility features")
    gen_p.add_argument("--include-styles", action="store_true", help="Send node style metadata with each prompt")
    gen_p.add_argument("--retries", type=int, default=1, help="Attempts per component for transient backend errors")

    comp_p = sub.add_parser("components", help="List components in a Figma file")
    comp_p.add_argument("link", help="Figma link or file key")
    comp_p.add_argument("--node", help="Node id to restrict extraction to")
    comp_p.add_argument("--json", action="store_true", help="Print JSON")

    rules_p = sub.add_parser("ruleset", help="Create and manage rulesets")
    rules_p.add_argument("--project-root", default=".", help="Project root (default .)")
    rules_sub = rules_p.add_subparsers(dest="ruleset_command", required=True)
    create_p = rules_sub.add_parser("create", help="Generate and save a ruleset")
    create_p.add_argument("--name", required=True, help="Project name")
    create_p.add_argument("--framework", default="react",
                          choices=["react", "next", "vue", "nuxt", "svelte", "solid", "angular", "custom"])
    create_p.add_argument("--styling", default="tailwind",
                          choices=["tailwind", "css-modules", "styled-components", "scss"])
    create_p.add_argument("--structure", default="atomic", choices=["atomic", "feature-based", "flat"])
    create_p.add_argument("--convention", action="append",
                          help="Convention to enforce, e.g. naming.props (repeatable)")
    rules_sub.add_parser("list", help="List saved rulesets")
    show_p = rules_sub.add_parser("show", help="Print a ruleset")
    show_p.add_argument("name")
    remove_p = rules_sub.add_parser("remove", help="Remove a ruleset")
    remove_p.add_argument("name")
    return parser


def main(argv=None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    load_env()
    config = load_config(args.config)

    if args.command == "generate":
        return cmd_generate(args, config)
    if args.command == "components":
        return cmd_components(args, config)
    if args.command == "ruleset":
        return cmd_ruleset(args, config)
    parser.print_help()
    return 0


if __name__ == "__main__":
    sys.exit(main())
