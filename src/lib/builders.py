"""
Frame builder implementations for beamerdown

Each builder turns the arguments of a frame marker into the LaTeX lines that
open (is_open=True) or close (is_open=False) its block.
Uses BuilderSpec for metadata and lookup.
"""

import re
from typing import Dict, List, Optional

from ..models.builders import BuilderSpec, BuilderCategory
from ..models.context import RunContext
from ..models.frames import BuilderArgs
from .errors import BuilderError


def options_format(options: Dict[str, str]) -> str:
    """Render options as a LaTeX key=value list (bare key for empty values)"""
    return ", ".join(f"{key}={value}" if value != "" else key for key, value in options.items())


def boxName_derive(title: str) -> str:
    """
    Derive a TikZ node name from a box title.

    Example:
        >>> boxName_derive("Results & Discussion!")
        'resultsdiscussion'
    """
    return re.sub(r'[^a-z0-9]+', '', title.lower())


class BuilderRegistry:
    """
    Registry of builder specifications and handlers

    Maps builder names to BuilderSpec objects containing metadata
    and build handlers.
    """

    def __init__(self) -> None:
        """Initialize the builder registry and register all built-in builders"""
        self.specs: Dict[str, BuilderSpec] = {}
        self.frameBuilders_register()
        self.titleBuilders_register()
        self.figureBuilders_register()
        self.posterBuilders_register()

    def register(self, spec: BuilderSpec) -> None:
        """Register a builder specification (replacing any with the same name)"""
        self.specs[spec.name] = spec
        for alias in spec.aliases:
            self.specs[alias] = spec

    def get(self, name: str) -> Optional[BuilderSpec]:
        """
        Get builder specification by name

        Args:
            name: Builder name to look up

        Returns:
            BuilderSpec or None if not registered
        """
        return self.specs.get(name)

    def builders_listByCategory(self, category: BuilderCategory) -> List[BuilderSpec]:
        """Get all builders in a category"""
        return [spec for spec in self.specs.values() if spec.category == category]

    def frameBuilders_register(self) -> None:
        """Register the plain frame builder"""

        def default_handler(args: BuilderArgs, is_open: bool, context: RunContext) -> List[str]:
            """Handle --- / ---default: a titled beamer frame"""
            if not is_open:
                return ["\\end{frame}"]
            options = options_format(args.options)
            header = "\\begin{frame}"
            if options:
                header += f"[{options}]"
            if args.title:
                header += f"{{{args.title}}}"
            return [header]

        self.register(BuilderSpec(
            name='default',
            category=BuilderCategory.FRAME,
            description='Beamer frame with optional title and frame options',
            handler=default_handler,
            examples=['--- My Title', '---default Code listing fragile'],
        ))

    def titleBuilders_register(self) -> None:
        """Register title page and table of contents builders"""

        def intro_handler(args: BuilderArgs, is_open: bool, context: RunContext) -> List[str]:
            """Handle ---intro: title page frame"""
            if not is_open:
                return ["\\end{frame}"]
            lines = []
            if args.title:
                lines.append(f"\\title{{{args.title}}}")
            lines.extend(["\\begin{frame}[plain]", "  \\titlepage"])
            return lines

        def contents_handler(args: BuilderArgs, is_open: bool, context: RunContext) -> List[str]:
            """Handle ---contents: table of contents frame"""
            if not is_open:
                return ["\\end{frame}"]
            title = args.title or context.settings.contents_title
            options = options_format(args.options)
            toc = f"  \\tableofcontents[{options}]" if options else "  \\tableofcontents"
            return [f"\\begin{{frame}}{{{title}}}", toc]

        self.register(BuilderSpec(
            name='intro',
            category=BuilderCategory.TITLE,
            description='Title page frame (optionally setting the title)',
            handler=intro_handler,
            examples=['---intro', '---intro A Talk About Frames'],
        ))

        self.register(BuilderSpec(
            name='contents',
            category=BuilderCategory.NAVIGATION,
            description='Table of contents frame',
            handler=contents_handler,
            examples=['---contents', '---contents Roadmap currentsection'],
            aliases=['toc'],
        ))

    def figureBuilders_register(self) -> None:
        """Register the image frame builder"""

        def image_handler(args: BuilderArgs, is_open: bool, context: RunContext) -> List[str]:
            """Handle ---image <path> <title>: frame with a centered graphic"""
            if not is_open:
                return ["\\end{frame}"]
            parts = args.title.split(None, 1)
            if not parts:
                raise BuilderError("image builder needs a graphics path")
            path = parts[0]
            title = parts[1] if len(parts) > 1 else ""

            options = dict(args.options)
            options.setdefault("width", context.settings.image_width)
            header = f"\\begin{{frame}}{{{title}}}" if title else "\\begin{frame}"
            return [
                header,
                "  \\begin{center}",
                f"    \\includegraphics[{options_format(options)}]{{{path}}}",
                "  \\end{center}",
            ]

        self.register(BuilderSpec(
            name='image',
            category=BuilderCategory.FIGURE,
            description='Frame showing one centered graphic',
            handler=image_handler,
            examples=['---image figures/arch.pdf Architecture', '---image plot.png width=0.5\\textwidth'],
        ))

    def posterBuilders_register(self) -> None:
        """Register the dashboard/poster box builder"""

        def h_handler(args: BuilderArgs, is_open: bool, context: RunContext) -> List[str]:
            """
            Handle ---h <title> [column=N]: a TikZ box stacked in a poster column

            Boxes in one column hang below the previous box of that column;
            the first box of a column is anchored at the column's top
            coordinate col<N>.
            """
            if not is_open:
                return ["\\end{minipage}", "};"]

            options = dict(args.options)
            column_text = options.pop("column", None)
            if column_text is not None:
                try:
                    column = int(column_text)
                except ValueError as e:
                    raise BuilderError(f"column must be an integer, got '{column_text}'") from e
            elif context.lastColumn is not None:
                column = context.lastColumn
            else:
                column = 0
            context.lastColumn = column

            context.boxCount += 1
            name = boxName_derive(args.title) or f"box{context.boxCount}"
            boxes = context.columnBoxes.setdefault(column, [])
            width = options.pop("width", "\\linewidth")

            forwarded = options_format(options)
            if boxes:
                node_options = f"below=of {boxes[-1]}"
                position = ""
            else:
                node_options = "anchor=north"
                position = f" at (col{column})"
            if forwarded:
                node_options += f", {forwarded}"
            boxes.append(name)

            lines = [
                f"\\node[{node_options}] ({name}){position} {{%",
                f"\\begin{{minipage}}{{{width}}}",
            ]
            if args.title:
                lines.append(f"\\textbf{{{args.title}}}\\par")
            return lines

        self.register(BuilderSpec(
            name='h',
            category=BuilderCategory.POSTER,
            description='Poster box stacked below the previous box of its column',
            handler=h_handler,
            examples=['---h Introduction column=0', '---h Methods', '---h Results column=1 draw=blue'],
        ))
