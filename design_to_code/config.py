"""設定檔載入、基本驗證與 GenerationConfig 解析."""

import json
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Mapping, Optional

from dotenv import load_dotenv

from .errors import ConfigError

DEFAULT_CONFIG_PATH = "design-to-code.config.json"

# 已知有效的頂層欄位
_KNOWN_TOP_KEYS = {"figma", "openai", "generation", "output"}

# 各區塊已知欄位（用於拼字提示）
_KNOWN_SECTION_KEYS = {
    "figma": {"accessToken", "fileKey"},
    "openai": {"apiKey", "model", "temperature"},
    "generation": {"framework", "customFramework", "styling", "customStyling", "features"},
    "output": {"dir"},
}

_KNOWN_FEATURES = {"typescript", "storybook", "tests", "accessibility"}

VALID_FRAMEWORKS = {"react", "vue", "svelte", "solid", "angular", "custom"}
VALID_STYLINGS = {"css", "tailwind", "css-modules", "styled-components", "scss", "custom"}


@dataclass(frozen=True)
class FeatureFlags:
    typescript: bool = True
    storybook: bool = False
    tests: bool = False
    accessibility: bool = True

    @classmethod
    def from_dict(cls, data: Optional[Mapping[str, Any]]) -> "FeatureFlags":
        data = data or {}
        defaults = cls()
        return cls(**{
            name: _parse_flag(name, data.get(name, getattr(defaults, name)))
            for name in _KNOWN_FEATURES
        })


_TRUE_STRINGS = {"true", "1", "yes", "on"}
_FALSE_STRINGS = {"false", "0", "no", "off", ""}


def _parse_flag(name: str, value: Any) -> bool:
    if isinstance(value, str):
        text = value.strip().lower()
        if text in _TRUE_STRINGS:
            return True
        if text in _FALSE_STRINGS:
            return False
        raise ConfigError(f"features.{name} must be true/false, got {value!r}")
    return bool(value)


@dataclass(frozen=True)
class GenerationConfig:
    """一次執行只解析一次的生成設定；所有欄位在建構時即有確定值."""
    target_framework: str = "react"
    styling_approach: str = "tailwind"
    temperature: float = 0.7
    model: str = "gpt-4"
    features: FeatureFlags = field(default_factory=FeatureFlags)

    @classmethod
    def from_dict(cls, data: Optional[Mapping[str, Any]]) -> "GenerationConfig":
        """由扁平 dict 建立；framework/styling 為 "custom" 時以 customFramework/customStyling 取代。"""
        data = data or {}
        defaults = cls()

        framework = data.get("framework") or defaults.target_framework
        if framework == "custom":
            framework = data.get("customFramework")
            if not framework:
                raise ConfigError("framework is 'custom' but customFramework is not set")

        styling = data.get("styling") or defaults.styling_approach
        if styling == "custom":
            styling = data.get("customStyling")
            if not styling:
                raise ConfigError("styling is 'custom' but customStyling is not set")

        temperature = data.get("temperature")
        if temperature is None or temperature == "":
            temperature = defaults.temperature
        try:
            temperature = float(temperature)
        except (TypeError, ValueError):
            raise ConfigError(f"temperature must be a number, got {temperature!r}") from None

        return cls(
            target_framework=str(framework),
            styling_approach=str(styling),
            temperature=temperature,
            model=str(data.get("model") or defaults.model),
            features=FeatureFlags.from_dict(data.get("features")),
        )


def _warn(msg: str) -> None:
    print(f"   ⚠️  [config] {msg}")


def validate_config(cfg: dict) -> None:
    """對 config 做基本欄位驗證，印出警告但不拋例外。"""
    if not cfg:
        return

    # 頂層未知欄位
    for key in cfg:
        if key not in _KNOWN_TOP_KEYS:
            known = ", ".join(sorted(_KNOWN_TOP_KEYS))
            _warn(f"未知頂層欄位 '{key}'（已知欄位：{known}）")

    # 各區塊欄位
    for section, known_keys in _KNOWN_SECTION_KEYS.items():
        section_cfg = cfg.get(section, {})
        if not isinstance(section_cfg, dict):
            continue
        for key in section_cfg:
            if key not in known_keys:
                known = ", ".join(sorted(known_keys))
                _warn(f"[{section}] 未知欄位 '{key}'（已知欄位：{known}）")

    generation = cfg.get("generation", {})
    if not isinstance(generation, dict):
        return

    framework = generation.get("framework")
    if framework and framework not in VALID_FRAMEWORKS:
        valid = ", ".join(sorted(VALID_FRAMEWORKS))
        _warn(f"generation.framework '{framework}' 不在已知值中（{valid}）")

    styling = generation.get("styling")
    if styling and styling not in VALID_STYLINGS:
        valid = ", ".join(sorted(VALID_STYLINGS))
        _warn(f"generation.styling '{styling}' 不在已知值中（{valid}）")

    features = generation.get("features", {})
    if isinstance(features, dict):
        for key, val in features.items():
            if key not in _KNOWN_FEATURES:
                _warn(f"generation.features 未知欄位 '{key}'")
            elif not isinstance(val, bool):
                _warn(f"generation.features.{key} 應為 true/false，目前是 {type(val).__name__}")

    temperature = cfg.get("openai", {}).get("temperature") if isinstance(cfg.get("openai"), dict) else None
    if temperature is not None and not isinstance(temperature, (int, float)):
        _warn(f"openai.temperature 應為數字，目前是 {type(temperature).__name__}")


def load_config(config_path: str = DEFAULT_CONFIG_PATH) -> dict:
    """載入 JSON 設定檔，不存在則回傳空 dict；存在則做基本驗證。"""
    path = Path(config_path)
    if not path.exists():
        return {}
    with open(path, "r", encoding="utf-8") as f:
        cfg: Any = json.load(f)
    if not isinstance(cfg, dict):
        print(f"   ⚠️  [config] '{config_path}' 格式錯誤，應為 JSON 物件，回傳空設定。")
        return {}
    validate_config(cfg)
    return cfg


def load_env(dotenv_path: Optional[str] = None) -> None:
    """從 .env 載入環境變數（不覆寫已存在的變數）。"""
    load_dotenv(dotenv_path=dotenv_path)


def resolve_generation_config(
    cfg: dict,
    overrides: Optional[Mapping[str, Any]] = None,
    env: Optional[Mapping[str, str]] = None,
) -> GenerationConfig:
    """合併 CLI 參數 > 設定檔 > 環境變數 > 預設值，建立 GenerationConfig。"""
    env = os.environ if env is None else env
    generation = cfg.get("generation", {}) or {}
    openai_cfg = cfg.get("openai", {}) or {}

    merged: dict = {
        "framework": env.get("FRAMEWORK"),
        "styling": env.get("STYLING"),
        "model": env.get("MODEL"),
        "temperature": env.get("TEMPERATURE"),
    }
    for key in ("framework", "customFramework", "styling", "customStyling", "features"):
        if generation.get(key) is not None:
            merged[key] = generation[key]
    for key in ("model", "temperature"):
        if openai_cfg.get(key) is not None:
            merged[key] = openai_cfg[key]

    for key, val in (overrides or {}).items():
        if val is None:
            continue
        if key == "features":
            merged["features"] = {**(merged.get("features") or {}), **val}
        else:
            merged[key] = val

    return GenerationConfig.from_dict(merged)


def resolve_figma_token(cfg: dict, env: Optional[Mapping[str, str]] = None) -> Optional[str]:
    env = os.environ if env is None else env
    return (cfg.get("figma", {}) or {}).get("accessToken") or env.get("FIGMA_ACCESS_TOKEN")


def resolve_openai_key(cfg: dict, env: Optional[Mapping[str, str]] = None) -> Optional[str]:
    env = os.environ if env is None else env
    return (cfg.get("openai", {}) or {}).get("apiKey") or env.get("OPENAI_API_KEY")
