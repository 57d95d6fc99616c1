"""
Smoke tests：驗證套件可匯入、版本與公開 API 存在。
"""


def test_import_package():
    """套件可正常匯入"""
    import design_to_code
    assert design_to_code.__version__ == "0.1.0"


def test_public_api():
    """公開 API 可從 design_to_code 取得"""
    from design_to_code import (
        ArtifactParser,
        ComponentExtractor,
        GenerationConfig,
        Orchestrator,
        PromptBuilder,
        extract_dependencies,
        load_config,
        write_bundle,
    )
    assert callable(extract_dependencies)
    assert callable(load_config)
    assert callable(write_bundle)
    assert GenerationConfig().target_framework == "react"
    assert ComponentExtractor().extract({"type": "DOCUMENT", "children": []}) == []
    assert PromptBuilder is not None and ArtifactParser is not None and Orchestrator is not None
