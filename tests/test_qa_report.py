import importlib.util
import os

import orjson

ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
module_spec = importlib.util.spec_from_file_location("qa_report", os.path.join(ROOT, "tools", "qa_report.py"))
qa_report = importlib.util.module_from_spec(module_spec)
module_spec.loader.exec_module(qa_report)


def test_soft_checks_flag_bleed_and_bad_values():
    record = {
        "main_stat": {"name": "CRIT DMG", "value": "62.2%"},
        "substats": [
            {"name": "crit dmg", "value": "62.2%"},
            {"name": "ATK", "value": "1 9"},
        ],
        "set_name": None,
    }
    issues = qa_report.soft_checks(record)
    assert any("repeated in substats" in i for i in issues)
    assert any("substats[1] value not numeric" in i for i in issues)
    assert "set_name unresolved" in issues


def test_clean_record_has_no_issues():
    record = {
        "main_stat": {"name": "HP", "value": "705"},
        "substats": [{"name": "SPD", "value": "7"}],
        "set_name": "Musketeer of Wild Wheat",
    }
    assert qa_report.soft_checks(record) == []


def test_main_reports_schema_failures(tmp_path, capsys):
    (tmp_path / "bad.json").write_bytes(orjson.dumps({"id": "bad", "game": "gi"}))
    assert qa_report.main(str(tmp_path)) == 1
    assert "schema-bad: 1" in capsys.readouterr().out
