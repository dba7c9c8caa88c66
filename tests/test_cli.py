"""Tests for the command line interface."""

import json
from pathlib import Path

import pytest

from cli import main, parse_args


def make_corpus(tmp_path: Path) -> Path:
    content = tmp_path.resolve() / "WebContent"
    (content / "companyGLOBALSAS").mkdir(parents=True)
    (content / "companyGLOBALSAS" / "Home.jsp").write_text(
        '<jsp:include page="Header.jspf"/>', encoding="utf-8"
    )
    (content / "companyGLOBALSAS" / "Header.jspf").write_text(
        '<%@ include file="Home.jsp" %>', encoding="utf-8"
    )
    (content / "Orphan.jsp").write_text("", encoding="utf-8")
    return tmp_path.resolve()


class TestParseArgs:
    """Tests for argument parsing."""

    def test_defaults(self):
        parsed = parse_args([])

        assert parsed.root == "."
        assert parsed.stage == "deep"
        assert parsed.format == "json"
        assert parsed.verbose == 0

    def test_verbosity_count(self):
        assert parse_args(["-vv"]).verbose == 2


class TestMain:
    """Tests for running the CLI end to end."""

    def test_deep_json(self, tmp_path, capsys):
        """Test the default run prints deep trees."""
        root = make_corpus(tmp_path)

        assert main([str(root)]) == 0

        data = json.loads(capsys.readouterr().out)
        home = next(tree for tree in data if tree["name"] == "Home.jsp")
        header = home["nested"][0]
        assert header["name"] == "Header.jspf"
        assert header["nested"][0]["circular"]["firstIncludedDepth"] == 0

    def test_deep_ascii(self, tmp_path, capsys):
        root = make_corpus(tmp_path)

        assert main([str(root), "-f", "ascii", "--ascii-style", "ascii"]) == 0

        out = capsys.readouterr().out
        assert "companyGLOBALSAS/Home.jsp" in out
        assert "\\-- companyGLOBALSAS/Header.jspf" in out
        assert "[circular:" in out

    def test_raw_stage(self, tmp_path, capsys):
        root = make_corpus(tmp_path)

        assert main([str(root), "--stage", "raw"]) == 0

        names = sorted(r["name"] for r in json.loads(capsys.readouterr().out))
        assert names == ["Header.jspf", "Home.jsp", "Orphan.jsp"]

    def test_shallow_then_deep_from_file(self, tmp_path, capsys):
        """Test writing shallow nodes and resolving them in a second run."""
        root = make_corpus(tmp_path)
        shallow_file = tmp_path / "shallow.json"

        assert main([str(root), "--stage", "shallow", "-o", str(shallow_file)]) == 0
        shallow = json.loads(shallow_file.read_text(encoding="utf-8"))
        assert [n["name"] for n in shallow] == ["Header.jspf", "Home.jsp", "Orphan.jsp"]
        capsys.readouterr()

        assert main([str(root), "--from-shallow", str(shallow_file)]) == 0
        deep = json.loads(capsys.readouterr().out)
        assert [tree["name"] for tree in deep] == ["Header.jspf", "Home.jsp", "Orphan.jsp"]

    def test_unreferenced(self, tmp_path, capsys):
        root = make_corpus(tmp_path)

        assert main([str(root), "--unreferenced"]) == 0

        out = capsys.readouterr().out.splitlines()
        assert out == [str(root / "WebContent" / "Orphan.jsp")]

    def test_layout_file(self, tmp_path, capsys):
        root = make_corpus(tmp_path)
        config = tmp_path / "layout.yaml"
        config.write_text("extensions: [jspf]\n", encoding="utf-8")

        assert main([str(root), "--stage", "raw", "--layout", str(config)]) == 0

        names = [r["name"] for r in json.loads(capsys.readouterr().out)]
        assert names == ["Header.jspf"]

    @pytest.mark.parametrize("extra", [
        ["--layout", "missing.yaml"],
        ["--from-shallow", "missing.json"],
        ["--workers", "0"],
        ["--from-shallow", "shallow.json", "--stage", "raw"],
    ])
    def test_user_errors(self, tmp_path, capsys, extra):
        root = make_corpus(tmp_path)

        assert main([str(root)] + extra) == 1
        assert "Error" in capsys.readouterr().err

    def test_not_a_directory(self, tmp_path, capsys):
        assert main([str(tmp_path / "missing")]) == 1
        assert "is not a directory" in capsys.readouterr().err

    def test_raw_stage_rejected_with_shallow_input(self, tmp_path, capsys):
        """Test that a raw listing is refused when pages are not scanned."""
        root = make_corpus(tmp_path)
        shallow_file = tmp_path / "shallow.json"
        assert main([str(root), "--stage", "shallow", "-o", str(shallow_file)]) == 0
        capsys.readouterr()

        assert main([str(root), "--from-shallow", str(shallow_file), "--stage", "raw"]) == 1

        captured = capsys.readouterr()
        assert captured.out == ""
        assert "--stage raw cannot be used with --from-shallow" in captured.err
