"""
Builder registry tests

Tests lookup, registration of custom builders, and the output of each
built-in builder, including the poster column stacks of the h builder.
"""

import pytest

from beamerdown.lib.builders import BuilderRegistry, boxName_derive, options_format
from beamerdown.lib.errors import BuilderError
from beamerdown.lib.frames import FrameExpander
from beamerdown.models import BuilderArgs, BuilderCategory, BuilderSpec


class TestRegistry:
    """Lookup and registration"""

    def test_builtin_builders(self):
        """All built-in builders are registered"""
        registry = BuilderRegistry()
        for name in ["default", "intro", "contents", "image", "h"]:
            assert registry.get(name) is not None

    def test_unknown_is_none(self):
        """Lookup misses return None"""
        assert BuilderRegistry().get("nosuchbuilder") is None

    def test_alias(self):
        """toc is an alias of contents"""
        registry = BuilderRegistry()
        assert registry.get("toc") is registry.get("contents")

    def test_registered_aliases_resolve(self):
        """Aliases of a registered builder resolve through get()"""
        registry = BuilderRegistry()
        spec = BuilderSpec(
            name="note",
            category=BuilderCategory.FRAME,
            description="Speaker note",
            handler=lambda args, is_open, context: [],
            aliases=["remark"],
        )
        registry.register(spec)
        assert registry.get("remark") is spec
        assert registry.get("note") is spec

    def test_by_category(self):
        """Builders can be listed by category"""
        names = [spec.name for spec in BuilderRegistry().builders_listByCategory(BuilderCategory.POSTER)]
        assert names == ["h"]

    def test_custom_builder(self, context):
        """Registered builders are dispatched by the frame expander"""
        def note_handler(args, is_open, context):
            return [f"\\begin{{note}}{{{args.title}}}"] if is_open else ["\\end{note}"]

        registry = BuilderRegistry()
        registry.register(BuilderSpec(
            name="note",
            category=BuilderCategory.FRAME,
            description="Speaker note",
            handler=note_handler,
        ))
        out = FrameExpander(context, registry).expand("---note Remember\nx\n---")
        assert out.split("\n") == ["\\begin{note}{Remember}", "  x", "\\end{note}"]


class TestHelpers:
    """Formatting helpers"""

    def test_options_format(self):
        """Empty values render as bare keys"""
        assert options_format({"fragile": "", "t": "1"}) == "fragile, t=1"

    def test_box_name(self):
        """Box names collapse case, punctuation and spaces"""
        assert boxName_derive("Results & Discussion!") == "resultsdiscussion"
        assert boxName_derive("...") == ""


class TestFrameBuilders:
    """default, intro, contents, image"""

    def build(self, context, name, title="", options=None, is_open=True):
        spec = BuilderRegistry().get(name)
        return spec.handler(BuilderArgs(title=title, options=options or {}), is_open, context)

    def test_default(self, context):
        assert self.build(context, "default", "T") == ["\\begin{frame}{T}"]
        assert self.build(context, "default", is_open=False) == ["\\end{frame}"]

    def test_intro_with_title(self, context):
        """intro sets the document title before the title page"""
        assert self.build(context, "intro", "A Talk") == [
            "\\title{A Talk}",
            "\\begin{frame}[plain]",
            "  \\titlepage",
        ]

    def test_contents_default_title(self, context):
        """contents falls back to the configured title"""
        assert self.build(context, "contents") == ["\\begin{frame}{Outline}", "  \\tableofcontents"]

    def test_contents_options(self, context):
        """contents options go to \\tableofcontents"""
        lines = self.build(context, "contents", "Roadmap", {"currentsection": ""})
        assert lines == ["\\begin{frame}{Roadmap}", "  \\tableofcontents[currentsection]"]

    def test_image(self, context):
        """image centers the graphic with the default width"""
        assert self.build(context, "image", "fig.png Architecture") == [
            "\\begin{frame}{Architecture}",
            "  \\begin{center}",
            "    \\includegraphics[width=0.8\\textwidth]{fig.png}",
            "  \\end{center}",
        ]

    def test_image_width_override(self, context):
        lines = self.build(context, "image", "fig.png", {"width": "3cm", "angle": "90"})
        assert lines[0] == "\\begin{frame}"
        assert lines[2] == "    \\includegraphics[width=3cm, angle=90]{fig.png}"

    def test_image_without_path(self, context):
        with pytest.raises(BuilderError):
            self.build(context, "image")


class TestPosterBoxes:
    """h builder and the column box stacks"""

    def test_first_box_anchored_at_column(self, context):
        """The first box of a column sits at the column's top coordinate"""
        out = FrameExpander(context).expand("---h Introduction\ntext\n---")
        lines = out.split("\n")

        assert lines[0] == "\\node[anchor=north] (introduction) at (col0) {%"
        assert lines[1] == "\\begin{minipage}{\\linewidth}"
        assert lines[2] == "\\textbf{Introduction}\\par"
        assert lines[-2:] == ["\\end{minipage}", "};"]
        assert context.columnBoxes == {0: ["introduction"]}

    def test_later_box_hangs_below_previous(self, context):
        """Boxes in one column reference the previous box by name"""
        source = "---h Intro column=1\na\n---h Methods\nb\n---"
        out = FrameExpander(context).expand(source)

        assert "\\node[anchor=north] (intro) at (col1) {%" in out
        assert "\\node[below=of intro] (methods) {%" in out
        assert context.columnBoxes == {1: ["intro", "methods"]}
        assert context.lastColumn == 1

    def test_columns_tracked_separately(self, context):
        """Each column has its own stack"""
        source = "---h A column=0\n---h B column=1\n---h C column=0\n---"
        out = FrameExpander(context).expand(source)

        assert "\\node[anchor=north] (b) at (col1) {%" in out
        assert "\\node[below=of a] (c) {%" in out
        assert context.columnBoxes == {0: ["a", "c"], 1: ["b"]}

    def test_options_forwarded(self, context):
        """Options other than column and width go into the node options"""
        out = FrameExpander(context).expand("---h Key Points column=2 draw=blue width=8cm\nx\n---")
        lines = out.split("\n")

        assert lines[0] == "\\node[anchor=north, draw=blue] (keypoints) at (col2) {%"
        assert lines[1] == "\\begin{minipage}{8cm}"

    def test_untitled_box_name(self, context):
        """Untitled boxes get a numbered name"""
        FrameExpander(context).expand("---h column=0\nx\n---")
        assert context.columnBoxes[0] == ["box1"]

    def test_bad_column(self, context):
        with pytest.raises(BuilderError, match="column"):
            FrameExpander(context).expand("---h A column=left\n---")

    def test_stacks_persist_across_passes(self, context):
        """Column stacks belong to the run, not to one frame pass"""
        FrameExpander(context).expand("---h First\nx\n---")
        out = FrameExpander(context).expand("---h Second\ny\n---")
        assert "\\node[below=of first] (second) {%" in out
