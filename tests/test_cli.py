"""
CLI tests: token dumps, keyword listings and exit codes.
"""

import json

from olparse.cli import main

from tests.infrastructure.cli_utils import jload, run_cli
from tests.infrastructure.file_utils import write_keywords


class TestTokensCommand:

    def test_text_output(self, srcfile, capsys):
        """One token per line with its position"""
        path = srcfile("main { x = 1 }\n")
        assert main(["tokens", str(path)]) == 0

        lines = capsys.readouterr().out.splitlines()
        assert lines[:6] == [
            "1:0 MAIN 'main'",
            "1:5 LCURLY '{'",
            "1:7 ID 'x'",
            "1:9 ASSIGN '='",
            "1:11 INT '1'",
            "1:13 RCURLY '}'",
        ]
        assert lines[-1].split()[1] == "EOF"

    def test_json_output(self, srcfile, capsys):
        """JSON report with tokens and no diagnostics"""
        path = srcfile('s = "hi"\n')
        assert main(["tokens", str(path), "--json"]) == 0

        data = json.loads(capsys.readouterr().out)
        assert data["source"] == str(path)
        assert data["tokens"][0] == {"line": 1, "column": 0, "type": "ID", "content": "s"}
        assert data["tokens"][2] == {"line": 1, "column": 4, "type": "STRING", "content": "hi"}
        assert data["tokens"][-1]["type"] == "EOF"
        assert data["diagnostics"] == []

    def test_newline_tokens(self, srcfile, capsys):
        """--newlines shows line breaks"""
        path = srcfile("a\nb\n")
        assert main(["tokens", str(path), "--newlines"]) == 0
        out = capsys.readouterr().out.splitlines()
        assert out[1] == "1:1 NEWLINE"

    def test_scan_error_resumes_next_line(self, srcfile, capsys):
        """A scan error is reported and scanning goes on"""
        path = srcfile('x = "a\\qb"\ny\n')
        assert main(["tokens", str(path), "--json"]) == 2

        captured = capsys.readouterr()
        data = json.loads(captured.out)
        assert [t["content"] for t in data["tokens"][:3]] == ["x", "=", "y"]
        assert data["diagnostics"][0]["description"] == "malformed string: bad \\ usage"
        assert data["diagnostics"][0]["start_line"] == 1
        assert "malformed string" in captured.err

    def test_angle_operators_keep_their_text(self, srcfile, capsys):
        """Operators starting with < print their lexeme"""
        path = srcfile("a <= b < c\n")
        assert main(["tokens", str(path)]) == 0
        lines = capsys.readouterr().out.splitlines()
        assert lines[1] == "1:2 MINOR_OR_EQUAL '<='"
        assert lines[3] == "1:7 LANGLE '<'"

    def test_invalid_utf8_is_reported(self, tmp_path, capsys):
        """Undecodable lines become diagnostics and scanning goes on"""
        path = tmp_path / "latin.ol"
        path.write_bytes(b'a = "caf\xe9"\nb\n')
        assert main(["tokens", str(path), "--json"]) == 2

        data = json.loads(capsys.readouterr().out)
        assert data["tokens"][0] == {"line": 2, "column": 0, "type": "ID", "content": "b"}
        assert data["diagnostics"][0]["description"] == "invalid UTF-8 byte 0xe9 at byte offset 8"
        assert data["diagnostics"][0]["column"] == 8

    def test_missing_file(self, tmp_path, capsys):
        """Unknown files are user errors"""
        assert main(["tokens", str(tmp_path / "nope.ol")]) == 2
        assert "Source file not found" in capsys.readouterr().err


class TestKeywordsCommand:

    def test_single_scope(self, capsys):
        """A scope prints its vocabulary"""
        assert main(["keywords", "import"]) == 0
        assert capsys.readouterr().out == "import: from, import, as\n"

    def test_all_scopes_json(self, capsys):
        """--json dumps every scope"""
        assert main(["keywords", "--json"]) == 0
        data = json.loads(capsys.readouterr().out)
        assert data["scopes"]["execution"] == ["single", "sequential", "concurrent"]
        assert "inputPort" in data["scopes"]

    def test_overlay(self, tmp_path, capsys):
        """--config extends the packaged vocabulary"""
        overlay = write_keywords(tmp_path / "kw.yaml", {"import": ["with"]})
        assert main(["keywords", "import", "--config", str(overlay)]) == 0
        assert capsys.readouterr().out == "import: from, import, as, with\n"

    def test_unknown_scope(self, capsys):
        """Unknown scopes are user errors"""
        assert main(["keywords", "nowhere"]) == 2
        assert "Unknown scope 'nowhere'" in capsys.readouterr().err

    def test_broken_overlay(self, tmp_path, capsys):
        """Config errors surface as clean messages"""
        assert main(["keywords", "--config", str(tmp_path / "absent.yaml")]) == 2
        assert "Keyword file not found" in capsys.readouterr().err


class TestSubprocess:

    def test_version(self, tmp_path):
        """-v prints the tool version"""
        cp = run_cli(tmp_path, "-v")
        assert cp.returncode == 0, cp.stderr
        assert cp.stdout.startswith("olparse ")

    def test_tokens_json(self, tmp_path):
        """End-to-end run of the module entry point"""
        (tmp_path / "a.ol").write_text("main {}\n", encoding="utf-8")
        cp = run_cli(tmp_path, "tokens", "a.ol", "--json")
        assert cp.returncode == 0, cp.stderr
        data = jload(cp.stdout)
        assert [t["type"] for t in data["tokens"]] == ["MAIN", "LCURLY", "RCURLY", "EOF"]
