"""
config 測試
GenerationConfig 解析、來源優先順序、設定檔載入與欄位警告。
"""
import json

import pytest

from design_to_code.config import (
    FeatureFlags,
    GenerationConfig,
    load_config,
    resolve_figma_token,
    resolve_generation_config,
    resolve_openai_key,
    validate_config,
)
from design_to_code.errors import ConfigError


# ─── GenerationConfig.from_dict ──────────────────────────────────────────────

class TestGenerationConfig:
    def test_defaults(self):
        config = GenerationConfig.from_dict({})
        assert config == GenerationConfig()
        assert config.target_framework == "react"
        assert config.styling_approach == "tailwind"
        assert config.temperature == 0.7
        assert config.model == "gpt-4"
        assert config.features == FeatureFlags(typescript=True, storybook=False, tests=False, accessibility=True)

    def test_custom_framework_and_styling(self):
        config = GenerationConfig.from_dict({
            "framework": "custom", "customFramework": "qwik",
            "styling": "custom", "customStyling": "vanilla-extract",
        })
        assert config.target_framework == "qwik"
        assert config.styling_approach == "vanilla-extract"

    @pytest.mark.parametrize("data", [
        {"framework": "custom"},
        {"styling": "custom", "customStyling": ""},
    ])
    def test_custom_without_value(self, data):
        with pytest.raises(ConfigError):
            GenerationConfig.from_dict(data)

    def test_temperature_string_is_converted(self):
        assert GenerationConfig.from_dict({"temperature": "0.2"}).temperature == 0.2

    def test_zero_temperature_is_kept(self):
        assert GenerationConfig.from_dict({"temperature": 0}).temperature == 0.0

    def test_bad_temperature(self):
        with pytest.raises(ConfigError):
            GenerationConfig.from_dict({"temperature": "hot"})

    def test_partial_features(self):
        config = GenerationConfig.from_dict({"features": {"storybook": True}})
        assert config.features.storybook is True
        assert config.features.typescript is True
        assert config.features.accessibility is True

    @pytest.mark.parametrize("raw,expected", [
        ("false", False), ("False", False), ("0", False), ("no", False),
        ("true", True), (" YES ", True), ("1", True), (0, False), (1, True),
    ])
    def test_feature_flag_strings(self, raw, expected):
        assert FeatureFlags.from_dict({"storybook": raw}).storybook is expected

    def test_unrecognised_feature_string(self):
        with pytest.raises(ConfigError):
            GenerationConfig.from_dict({"features": {"tests": "maybe"}})

    def test_frozen(self):
        with pytest.raises(AttributeError):
            GenerationConfig().model = "other"


# ─── 優先順序：CLI > 設定檔 > 環境變數 > 預設 ──────────────────────────────────

class TestResolveGenerationConfig:
    ENV = {"FRAMEWORK": "vue", "STYLING": "scss", "MODEL": "gpt-4o-mini", "TEMPERATURE": "0.3"}

    def test_env_over_defaults(self):
        config = resolve_generation_config({}, env=self.ENV)
        assert config.target_framework == "vue"
        assert config.styling_approach == "scss"
        assert config.model == "gpt-4o-mini"
        assert config.temperature == 0.3

    def test_file_over_env(self):
        cfg = {"generation": {"framework": "svelte"}, "openai": {"temperature": 0.9}}
        config = resolve_generation_config(cfg, env=self.ENV)
        assert config.target_framework == "svelte"
        assert config.temperature == 0.9
        assert config.styling_approach == "scss"

    def test_overrides_win(self):
        cfg = {"generation": {"framework": "svelte", "features": {"tests": True}}}
        overrides = {"framework": "react", "model": None, "features": {"storybook": True}}
        config = resolve_generation_config(cfg, overrides, env=self.ENV)
        assert config.target_framework == "react"
        assert config.model == "gpt-4o-mini"
        assert config.features.tests is True
        assert config.features.storybook is True

    def test_empty_env(self):
        assert resolve_generation_config({}, env={}) == GenerationConfig()


def test_resolve_credentials():
    env = {"FIGMA_ACCESS_TOKEN": "env-figma", "OPENAI_API_KEY": "env-openai"}
    assert resolve_figma_token({}, env) == "env-figma"
    assert resolve_openai_key({}, env) == "env-openai"
    cfg = {"figma": {"accessToken": "file-figma"}, "openai": {"apiKey": "file-openai"}}
    assert resolve_figma_token(cfg, env) == "file-figma"
    assert resolve_openai_key(cfg, env) == "file-openai"
    assert resolve_openai_key({}, {}) is None


# ─── 設定檔 ──────────────────────────────────────────────────────────────────

class TestLoadConfig:
    def test_missing_file(self, tmp_path):
        assert load_config(str(tmp_path / "nope.json")) == {}

    def test_loads_json(self, tmp_path):
        path = tmp_path / "design-to-code.config.json"
        path.write_text(json.dumps({"generation": {"framework": "vue"}}), encoding="utf-8")
        assert load_config(str(path)) == {"generation": {"framework": "vue"}}

    def test_non_object_returns_empty(self, tmp_path, capsys):
        path = tmp_path / "c.json"
        path.write_text("[1, 2]", encoding="utf-8")
        assert load_config(str(path)) == {}
        assert "格式錯誤" in capsys.readouterr().out


class TestValidateConfig:
    def test_valid_config_is_silent(self, capsys):
        validate_config({
            "figma": {"accessToken": "x"},
            "generation": {"framework": "react", "styling": "tailwind", "features": {"tests": True}},
            "openai": {"temperature": 0.5},
            "output": {"dir": "out"},
        })
        assert capsys.readouterr().out == ""

    def test_unknown_keys_warn(self, capsys):
        validate_config({"genration": {}, "output": {"folder": "x"}})
        out = capsys.readouterr().out
        assert "genration" in out
        assert "folder" in out

    def test_bad_values_warn(self, capsys):
        validate_config({
            "generation": {"framework": "ember", "styling": "less", "features": {"tests": "yes", "darkMode": True}},
            "openai": {"temperature": "warm"},
        })
        out = capsys.readouterr().out
        assert "ember" in out
        assert "less" in out
        assert "generation.features.tests" in out
        assert "darkMode" in out
        assert "openai.temperature" in out
