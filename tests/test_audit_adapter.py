from unittest.mock import patch

from memaudit.audit.adapter import LiteLLMAdapter
from memaudit.audit.schemas import AuditConfig
from memaudit.schemas import Turn


def test_from_config():
    config = AuditConfig(model="openai/gpt-4o", temperature=0.2, max_tokens=64, api_base="http://x")
    adapter = LiteLLMAdapter.from_config(config)
    assert adapter.model == "openai/gpt-4o"
    assert adapter.temperature == 0.2
    assert adapter.max_tokens == 64
    assert adapter.api_base == "http://x"


def test_config_reads_environment(monkeypatch):
    monkeypatch.setenv("MEMAUDIT_MODEL", "anthropic/claude-3-5-haiku-20241022")
    monkeypatch.setenv("OPENAI_BASE_URL", "http://proxy/v1")
    config = AuditConfig()
    assert config.model == "anthropic/claude-3-5-haiku-20241022"
    assert config.api_base == "http://proxy/v1"
    assert config.output_dir == "./audit-results"
    assert config.format == "all"


def test_config_defaults(monkeypatch):
    monkeypatch.delenv("MEMAUDIT_MODEL", raising=False)
    monkeypatch.delenv("OPENAI_BASE_URL", raising=False)
    config = AuditConfig()
    assert config.model == "gpt-4o-mini"
    assert config.api_base is None


@patch("memaudit.audit.adapter.generate_answer", return_value="Tea")
def test_answer_delegates(mock_generate):
    adapter = LiteLLMAdapter(model="m", max_tokens=32)
    context = [Turn(role="user", content="I like tea")]

    assert adapter.answer("What drink?", context) == "Tea"
    mock_generate.assert_called_once_with(
        "What drink?", context, model="m", temperature=0.0, max_tokens=32, api_base=None
    )


@patch("memaudit.audit.adapter.judge_equivalence", return_value=True)
def test_judge_delegates(mock_judge):
    adapter = LiteLLMAdapter(model="m")
    assert adapter.judge_equivalence("a", "b") is True
    mock_judge.assert_called_once_with("a", "b", model="m", temperature=0.0, api_base=None)
