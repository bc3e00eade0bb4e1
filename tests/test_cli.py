"""
CLI Tests — argument handling, status line, exit codes.
"""

import json
from pathlib import Path

import pytest

from policygen.cli import EXIT_ERROR, EXIT_INVALID, EXIT_OK, main
from policygen.config import DEFAULT_DESTINATION, DEFAULT_SOURCE
from policygen.contracts.required import ANKA_REQUIRED_MODULES
from tests.fixtures import make_surface, strict_entries


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for var in (
        "POLICYGEN_CONFIG",
        "POLICYGEN_SOURCE",
        "POLICYGEN_DESTINATION",
        "POLICYGEN_VARIANT",
        "POLICYGEN_LOG_LEVEL",
        "POLICYGEN_LOG_FORMAT",
    ):
        monkeypatch.delenv(var, raising=False)


class TestGenerate:
    def test_writes_and_reports(self, tmp_path, write_surface, capsys):
        src = write_surface(make_surface([("std/list", "map"), ("std/str", "trim")]))
        dst = tmp_path / "out" / "policy.json"

        code = main([src, str(dst)])

        assert code == EXIT_OK
        assert json.loads(dst.read_text(encoding="utf-8"))["modules"] == {
            "std/list": ["map"],
            "std/str": ["trim"],
        }
        out = capsys.readouterr().out
        assert str(dst) in out
        assert "2 modules" in out

    def test_strict_flag(self, tmp_path, write_surface, strict_surface, capsys):
        src = write_surface(strict_surface)
        dst = tmp_path / "policy.json"

        code = main([src, str(dst), "--strict"])

        assert code == EXIT_OK
        assert list(json.loads(dst.read_text(encoding="utf-8"))["modules"]) == sorted(
            ANKA_REQUIRED_MODULES
        )
        assert "14 modules" in capsys.readouterr().out

    def test_default_paths(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        src = Path(DEFAULT_SOURCE)
        src.parent.mkdir(parents=True)
        src.write_text(json.dumps(make_surface([("a", "x")])), encoding="utf-8")

        code = main(["--log-format", "human"])

        assert code == EXIT_OK
        written = json.loads(Path(DEFAULT_DESTINATION).read_text(encoding="utf-8"))
        assert written["source"] == DEFAULT_SOURCE

    def test_settings_file(self, tmp_path, write_surface):
        src = write_surface(make_surface(strict_entries()))
        dst = tmp_path / "policy.json"
        config = tmp_path / "policygen.yaml"
        config.write_text(f"source: {src}\ndestination: {dst}\nvariant: strict\n", encoding="utf-8")

        assert main(["--config", str(config)]) == EXIT_OK
        assert len(json.loads(dst.read_text(encoding="utf-8"))["modules"]) == 14

    def test_lone_surrogate_export(self, tmp_path, write_surface):
        src = write_surface(make_surface([("std/str", "\ud800")]))
        dst = tmp_path / "policy.json"

        assert main([src, str(dst)]) == EXIT_OK
        assert json.loads(dst.read_text(encoding="utf-8"))["modules"] == {"std/str": ["\ud800"]}
        assert main([src, str(dst), "--check"]) == EXIT_OK


class TestFailures:
    def test_missing_required_module(self, tmp_path, write_surface, capsys):
        src = write_surface(make_surface(strict_entries(skip=("std/http",))))
        dst = tmp_path / "policy.json"

        code = main([src, str(dst), "--strict"])

        assert code == EXIT_INVALID
        assert not dst.exists()
        assert "MissingRequiredModule" in capsys.readouterr().err

    def test_schema_mismatch(self, tmp_path, write_surface, capsys):
        src = write_surface(make_surface([("a", "x")], schema="wrong.schema"))

        code = main([src, str(tmp_path / "policy.json")])

        assert code == EXIT_INVALID
        assert "SchemaMismatch" in capsys.readouterr().err

    def test_missing_source(self, tmp_path, capsys):
        code = main([str(tmp_path / "absent.json"), str(tmp_path / "policy.json")])

        assert code == EXIT_ERROR
        assert "cannot read surface file" in capsys.readouterr().err

    def test_unparsable_source(self, tmp_path, capsys):
        src = tmp_path / "surface.json"
        src.write_text("{", encoding="utf-8")

        assert main([str(src), str(tmp_path / "policy.json")]) == EXIT_ERROR

    def test_bad_settings(self, tmp_path, capsys):
        config = tmp_path / "policygen.yaml"
        config.write_text("variant: lenient\n", encoding="utf-8")

        assert main(["--config", str(config)]) == EXIT_ERROR
        assert "invalid settings" in capsys.readouterr().err

    def test_variant_flags_are_exclusive(self):
        with pytest.raises(SystemExit):
            main(["--strict", "--variant", "permissive"])


    def test_empty_source_argument_is_not_defaulted(self, tmp_path, monkeypatch, capsys):
        monkeypatch.chdir(tmp_path)
        src = Path(DEFAULT_SOURCE)
        src.parent.mkdir(parents=True)
        src.write_text(json.dumps(make_surface([("a", "x")])), encoding="utf-8")

        code = main(["", "policy.json"])

        assert code == EXIT_ERROR
        assert not Path("policy.json").exists()
        assert "cannot read surface file" in capsys.readouterr().err

    def test_empty_destination_argument_is_not_defaulted(
        self, tmp_path, monkeypatch, write_surface, capsys
    ):
        src = write_surface(make_surface([("a", "x")]))
        monkeypatch.chdir(tmp_path)

        code = main([src, ""])

        assert code == EXIT_ERROR
        assert not Path(DEFAULT_DESTINATION).exists()
        assert "cannot write policy file" in capsys.readouterr().err

    def test_unwritable_destination(self, tmp_path, write_surface, capsys):
        src = write_surface(make_surface([("a", "x")]))
        blocker = tmp_path / "blocker"
        blocker.write_text("", encoding="utf-8")

        code = main([src, str(blocker / "policy.json")])

        assert code == EXIT_ERROR
        assert "cannot write policy file" in capsys.readouterr().err


class TestCheck:
    def test_up_to_date(self, tmp_path, write_surface, capsys):
        src = write_surface(make_surface([("a", "x")]))
        dst = tmp_path / "policy.json"
        assert main([src, str(dst)]) == EXIT_OK
        before = dst.read_bytes()

        code = main([src, str(dst), "--check"])

        assert code == EXIT_OK
        assert "is up to date" in capsys.readouterr().out
        assert dst.read_bytes() == before

    def test_drift(self, tmp_path, write_surface, capsys):
        src = write_surface(make_surface([("a", "x")]))
        dst = tmp_path / "policy.json"
        assert main([src, str(dst)]) == EXIT_OK
        write_surface(make_surface([("a", "x"), ("b", "y")]))

        code = main([src, str(dst), "--check"])

        assert code == EXIT_INVALID
        err = capsys.readouterr().err
        assert "differs from generator output" in err
        assert "Run: policygen" in err

    def test_missing_destination(self, tmp_path, write_surface):
        src = write_surface(make_surface([("a", "x")]))
        dst = tmp_path / "policy.json"

        assert main([src, str(dst), "--check"]) == EXIT_INVALID
        assert not dst.exists()

    @pytest.mark.parametrize(
        "module, bad_exports",
        [("std/hash", 5), ("std/list", [{}]), ("std/fs", None)],
    )
    def test_strict_check_with_malformed_exports(
        self, tmp_path, write_surface, module, bad_exports, capsys
    ):
        src = write_surface(make_surface(strict_entries()))
        dst = tmp_path / "policy.json"
        modules = {m: ["fn"] for m in sorted(ANKA_REQUIRED_MODULES)}
        modules[module] = bad_exports
        doc = {"schema": "fard.anka.policy.allowed_stdlib.v1", "source": src, "modules": modules}
        dst.write_text(json.dumps(doc, separators=(",", ":")), encoding="utf-8")

        code = main([src, str(dst), "--strict", "--check"])

        assert code == EXIT_INVALID
        assert f"exports must be a list of strings for module {module}" in capsys.readouterr().err
