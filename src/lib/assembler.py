"""
Assembler for \\input{} includes

Flattens a document by replacing every include line with the (recursively
assembled) contents of the file it names.

An include line is `\\input{path}` alone on its line. The include line and
the blank lines directly around it are replaced by the included text, with
the included text's own leading/trailing blank lines removed.

Paths resolve against a composite base: the base path joined with the
directory of the file doing the including, at every level of recursion.
Files are re-read each time they are included. Include cycles are not
detected and recurse until Python's recursion limit stops them.

Example:
    >>> Assembler().assemble("talk", "main.tex")   # main.tex: "\\input{parts/a.tex}"
    # parts/a.tex is read from talk/parts/a.tex; its own includes resolve
    # relative to talk/parts/
"""

import re
from pathlib import Path
from typing import List, Union

from .errors import MissingFileError, SourceEncodingError
from .log import LOG


INCLUDE_LINE = re.compile(r'^\s*\\input\{(?P<path>[^{}]+)\}\s*$')

PathLike = Union[str, Path]


class Assembler:
    """
    Recursive include resolver

    Stateless apart from the number of files read, which is kept for
    reporting.
    """

    def __init__(self) -> None:
        self.files_read = 0

    def file_read(self, path: Path) -> str:
        """Read a source file, mapping absence and bad encoding to BeamerdownErrors"""
        if not path.is_file():
            raise MissingFileError(str(path), "include file not found" if self.files_read else "input file not found")
        self.files_read += 1
        try:
            return path.read_text(encoding="utf-8")
        except UnicodeDecodeError as e:
            raise SourceEncodingError(str(path), e.reason) from e

    def assemble(self, basePath: PathLike, fileName: PathLike) -> str:
        """
        Assemble fileName (relative to basePath) into one flat text.

        Args:
            basePath: Directory the file name is relative to
            fileName: File to read

        Returns:
            The file's text with every include line expanded

        Raises:
            MissingFileError: If the file or any included file is absent
            SourceEncodingError: If a file is not valid UTF-8
        """
        base = Path(basePath)
        source = self.file_read(base / fileName)
        includeBase = base / Path(fileName).parent
        return self.includes_expand(source, includeBase)

    def includes_expand(self, source: str, includeBase: Path) -> str:
        """
        Replace include lines in source with the assembled included files.

        Args:
            source: Text to scan
            includeBase: Directory include paths are relative to

        Returns:
            Text with includes expanded (unchanged if there are none)
        """
        lines = source.split("\n")
        if not any(INCLUDE_LINE.match(line) for line in lines):
            return source

        result: List[str] = []
        skip_blank = False
        for line in lines:
            match = INCLUDE_LINE.match(line)
            if match:
                include_path = match.group("path").strip()
                LOG(f"Including {includeBase / include_path}", level=3)

                # Drop the blank lines leading up to the include
                while result and not result[-1].strip():
                    result.pop()

                included = self.assemble(includeBase, include_path)
                result.extend(included.strip("\n").split("\n"))
                skip_blank = True
                continue

            if skip_blank and not line.strip():
                continue
            skip_blank = False
            result.append(line)

        # Keep the final newline when the include was the last line
        if source.endswith("\n") and (not result or result[-1] != ""):
            result.append("")
        return "\n".join(result)


def assemble(basePath: PathLike, fileName: PathLike) -> str:
    """Assemble fileName relative to basePath (see Assembler.assemble)"""
    return Assembler().assemble(basePath, fileName)
