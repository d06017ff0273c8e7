"""
Assembler tests

Tests include resolution, blank-line handling around includes, composite
path resolution in nested directories, and missing files.
"""

import pytest

from beamerdown.lib.assembler import Assembler, assemble
from beamerdown.lib.errors import MissingFileError, SourceEncodingError


class TestNoIncludes:
    """Documents without include lines"""

    def test_text_returned_unchanged(self, tmp_path):
        """Assembling a file with no includes returns its text verbatim"""
        source = "--- Title\n\n  * one\n  * two\n\nText with \\input{x} inline\n"
        (tmp_path / "main.tex").write_text(source)

        assert assemble(tmp_path, "main.tex") == source

    def test_empty_file(self, tmp_path):
        """Empty file assembles to empty text"""
        (tmp_path / "main.tex").write_text("")
        assert assemble(tmp_path, "main.tex") == ""


class TestIncludes:
    """Single and recursive includes"""

    def test_single_include(self, tmp_path):
        """Include line is replaced by the included text"""
        (tmp_path / "main.tex").write_text("before\n\\input{part.tex}\nafter\n")
        (tmp_path / "part.tex").write_text("included\n")

        assert assemble(tmp_path, "main.tex") == "before\nincluded\nafter\n"

    def test_surrounding_blank_lines_removed(self, tmp_path):
        """Blank lines around the include line are absorbed"""
        (tmp_path / "main.tex").write_text("before\n\n\n\\input{part.tex}\n\n\nafter\n")
        (tmp_path / "part.tex").write_text("\n\nincluded\n\n")

        assert assemble(tmp_path, "main.tex") == "before\nincluded\nafter\n"

    def test_include_as_last_line_keeps_final_newline(self, tmp_path):
        """A trailing include does not swallow the document's final newline"""
        (tmp_path / "main.tex").write_text("before\n\\input{part.tex}\n")
        (tmp_path / "part.tex").write_text("  * item\n")

        assert assemble(tmp_path, "main.tex") == "before\n  * item\n"

    def test_indented_include_line(self, tmp_path):
        """Whitespace around the include marker is allowed"""
        (tmp_path / "main.tex").write_text("  \\input{part.tex}  \n")
        (tmp_path / "part.tex").write_text("x")

        assert assemble(tmp_path, "main.tex") == "x\n"

    def test_recursive_includes_resolve_relative_to_including_file(self, tmp_path):
        """Nested includes resolve against the composite directory path"""
        (tmp_path / "chapters" / "figures").mkdir(parents=True)
        (tmp_path / "main.tex").write_text("top\n\\input{chapters/one.tex}\nend")
        (tmp_path / "chapters" / "one.tex").write_text("one\n\\input{figures/fig.tex}\n")
        (tmp_path / "chapters" / "figures" / "fig.tex").write_text("fig\n")

        assert assemble(tmp_path, "main.tex") == "top\none\nfig\nend"

    def test_file_included_twice_is_read_twice(self, tmp_path):
        """No memoization: each include reads the file again"""
        (tmp_path / "main.tex").write_text("\\input{p.tex}\nmid\n\\input{p.tex}")
        (tmp_path / "p.tex").write_text("P")

        assembler = Assembler()
        assert assembler.assemble(tmp_path, "main.tex") == "P\nmid\nP"
        assert assembler.files_read == 3

    def test_input_in_subdirectory_file_name(self, tmp_path):
        """fileName itself may carry a directory"""
        (tmp_path / "talk").mkdir()
        (tmp_path / "talk" / "main.tex").write_text("\\input{p.tex}")
        (tmp_path / "talk" / "p.tex").write_text("P")

        assert assemble(tmp_path, "talk/main.tex") == "P"


class TestMissingFiles:
    """Missing input and include files"""

    def test_missing_input(self, tmp_path):
        """Missing top-level file raises MissingFileError"""
        with pytest.raises(MissingFileError, match="input file not found"):
            assemble(tmp_path, "nope.tex")

    def test_missing_include(self, tmp_path):
        """Missing included file raises MissingFileError naming it"""
        (tmp_path / "main.tex").write_text("\\input{gone.tex}\n")
        with pytest.raises(MissingFileError, match="gone.tex"):
            assemble(tmp_path, "main.tex")

    def test_missing_file_is_file_not_found(self, tmp_path):
        """MissingFileError is also a FileNotFoundError"""
        with pytest.raises(FileNotFoundError):
            assemble(tmp_path, "nope.tex")

    def test_include_not_utf8(self, tmp_path):
        """An include that is not valid UTF-8 raises SourceEncodingError naming it"""
        (tmp_path / "main.tex").write_text("\\input{latin.tex}\n")
        (tmp_path / "latin.tex").write_bytes(b"caf\xe9\n")
        with pytest.raises(SourceEncodingError, match="latin.tex"):
            assemble(tmp_path, "main.tex")
