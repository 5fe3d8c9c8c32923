import json
from unittest.mock import patch

import pytest

from memaudit.__main__ import build_parser, main


def test_parser_defaults():
    args = build_parser().parse_args(["audit", "data.json"])
    assert args.output == "./audit-results"
    assert args.format == "all"
    assert args.model is None


def test_parser_rejects_unknown_format():
    with pytest.raises(SystemExit):
        build_parser().parse_args(["audit", "data.json", "-f", "html"])


def test_validate(sample_json, capsys):
    main(["validate", str(sample_json)])
    out = capsys.readouterr().out
    assert "✓ Valid dataset: test-dataset-1" in out
    assert "Conversations: 2" in out
    assert "Total turns: 3" in out
    assert "Total facts: 3" in out
    assert "Warnings" not in out


def test_validate_reports_supersession_problems(tmp_path, capsys):
    f = tmp_path / "d.json"
    f.write_text(
        json.dumps(
            {
                "id": "d",
                "conversations": [
                    {"id": "c", "turns": [], "facts": [{"id": "a", "content": "A", "supersedes": "x"}]}
                ],
            }
        ),
        encoding="utf-8",
    )
    main(["validate", str(f)])
    out = capsys.readouterr().out
    assert "Warnings: 1" in out
    assert "unknown fact x" in out


def test_validate_missing_file_exits_nonzero(tmp_path, capsys):
    with pytest.raises(SystemExit) as exc:
        main(["validate", str(tmp_path / "missing.json")])
    assert exc.value.code == 1
    assert "Error:" in capsys.readouterr().err


def test_validate_unsupported_extension(tmp_path, capsys):
    f = tmp_path / "data.yaml"
    f.write_text("id: x\n")
    with pytest.raises(SystemExit) as exc:
        main(["validate", str(f)])
    assert exc.value.code == 1
    assert "No loader found" in capsys.readouterr().err


def test_audit_writes_reports(sample_json, tmp_path, capsys, fake_adapter):
    out = tmp_path / "results"
    with patch("memaudit.__main__.LiteLLMAdapter") as mock_cls:
        mock_cls.from_config.return_value = fake_adapter
        main(["audit", str(sample_json), "-o", str(out), "-m", "fake/model"])

    config = mock_cls.from_config.call_args.args[0]
    assert config.model == "fake/model"
    assert (out / "results.json").exists()
    assert (out / "report.md").exists()
    data = json.loads((out / "results.json").read_text(encoding="utf-8"))
    assert data["model"] == "fake/model"
    assert "Progress: 7/7" in capsys.readouterr().out


def test_audit_markdown_only(sample_json, tmp_path, fake_adapter):
    out = tmp_path / "results"
    with patch("memaudit.__main__.LiteLLMAdapter") as mock_cls:
        mock_cls.from_config.return_value = fake_adapter
        main(["audit", str(sample_json), "-o", str(out), "-f", "markdown"])

    assert (out / "report.md").exists()
    assert not (out / "results.json").exists()


def test_audit_adapter_failure_writes_nothing(sample_json, tmp_path, capsys, fake_adapter):
    def failing_answer(question, context):
        raise RuntimeError("API key missing")

    fake_adapter.answer = failing_answer
    out = tmp_path / "results"
    with patch("memaudit.__main__.LiteLLMAdapter") as mock_cls:
        mock_cls.from_config.return_value = fake_adapter
        with pytest.raises(SystemExit) as exc:
            main(["audit", str(sample_json), "-o", str(out)])

    assert exc.value.code == 1
    assert "API key missing" in capsys.readouterr().err
    assert not out.exists()


def test_fetch_memorybench_command(tmp_path, capsys):
    with patch("memaudit.__main__.fetch_memorybench") as mock_fetch:
        mock_fetch.return_value.conversations = [object(), object()]
        main(["fetch-memorybench", "--samples", "2", "--data-dir", str(tmp_path)])

    mock_fetch.assert_called_once_with(str(tmp_path), max_samples=2)
    assert "Conversations: 2" in capsys.readouterr().out
