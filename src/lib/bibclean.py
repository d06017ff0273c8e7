"""
Bibliography normalizer

Rewrites a BibTeX file in place so that it typesets cleanly with plain
bibliography styles:

- fields on a denylist are dropped (doi, isbn, abstract, ...)
- url/urldate are dropped except inside @misc records
- accented letters, dashes and curly quotes become plain ASCII/TeX
- `pages = {p45}` loses its `p` prefix

The file to clean is either given directly (anything not ending in the
document extension) or found through the `\\bibliography{name}` reference in
a document source.
"""

import re
from pathlib import Path
from typing import Dict, List, Optional, Union

from .errors import MissingFileError, SourceEncodingError
from .log import LOG


BIBLIOGRAPHY_REFERENCE = re.compile(r'\\bibliography\{(?P<name>[^{}]+)\}')
RECORD_START = re.compile(r'^\s*@(?P<type>\w+)')
FIELD_KEY = re.compile(r'^\s*(?P<key>[\w-]+)\s*=')
PAGES_PREFIX = re.compile(r'^(?P<head>\s*pages\s*=\s*\{)p(?P<digits>\d+)', re.IGNORECASE)

CHARACTER_MAP: Dict[str, str] = {
    "á": "a", "à": "a", "â": "a", "ä": "a", "ã": "a", "å": "a", "ā": "a", "ą": "a",
    "Á": "A", "À": "A", "Â": "A", "Ä": "A", "Ã": "A", "Å": "A", "Ā": "A", "Ą": "A",
    "é": "e", "è": "e", "ê": "e", "ë": "e", "ē": "e", "ę": "e", "ě": "e",
    "É": "E", "È": "E", "Ê": "E", "Ë": "E", "Ē": "E", "Ę": "E", "Ě": "E",
    "í": "i", "ì": "i", "î": "i", "ï": "i", "ī": "i",
    "Í": "I", "Ì": "I", "Î": "I", "Ï": "I", "Ī": "I",
    "ó": "o", "ò": "o", "ô": "o", "ö": "o", "õ": "o", "ø": "o", "ō": "o", "ő": "o",
    "Ó": "O", "Ò": "O", "Ô": "O", "Ö": "O", "Õ": "O", "Ø": "O", "Ō": "O", "Ő": "O",
    "ú": "u", "ù": "u", "û": "u", "ü": "u", "ū": "u", "ů": "u", "ű": "u",
    "Ú": "U", "Ù": "U", "Û": "U", "Ü": "U", "Ū": "U", "Ů": "U", "Ű": "U",
    "ý": "y", "ÿ": "y", "Ý": "Y",
    "ñ": "n", "ń": "n", "ň": "n", "Ñ": "N", "Ń": "N", "Ň": "N",
    "ç": "c", "ć": "c", "č": "c", "Ç": "C", "Ć": "C", "Č": "C",
    "š": "s", "ś": "s", "ş": "s", "Š": "S", "Ś": "S", "Ş": "S",
    "ž": "z", "ź": "z", "ż": "z", "Ž": "Z", "Ź": "Z", "Ż": "Z",
    "ř": "r", "Ř": "R", "ł": "l", "Ł": "L", "ğ": "g", "Ğ": "G",
    "–": "--", "—": "--",
    "“": "``", "”": "''", "‘": "`", "’": "'",
}

PathLike = Union[str, Path]


class BibCleaner:
    """
    BibTeX field filter and character normalizer

    Args:
        dropFields: Fields always removed (default: settings.bib_drop_fields)
        miscFields: Fields kept only in @misc records (default: settings.bib_misc_fields)
        documentExtension: Extension identifying document sources
    """

    def __init__(
        self,
        dropFields: Optional[List[str]] = None,
        miscFields: Optional[List[str]] = None,
        documentExtension: Optional[str] = None,
    ) -> None:
        from ..config import appsettings

        self.dropFields = {f.lower() for f in (dropFields if dropFields is not None else appsettings.bib_drop_fields)}
        self.miscFields = {f.lower() for f in (miscFields if miscFields is not None else appsettings.bib_misc_fields)}
        self.documentExtension = documentExtension or appsettings.document_extension
        self.translation = str.maketrans(CHARACTER_MAP)
        self.dropped = 0

    def text_read(self, path: Path) -> str:
        """Read a UTF-8 text file, mapping bad encoding to SourceEncodingError"""
        try:
            return path.read_text(encoding="utf-8")
        except UnicodeDecodeError as e:
            raise SourceEncodingError(str(path), e.reason) from e

    def bibFile_locate(self, basePath: PathLike, fileName: PathLike) -> Path:
        """
        Resolve the .bib file to clean.

        Args:
            basePath: Directory the file name is relative to
            fileName: A .bib file, or a document source referencing one

        Returns:
            Path of the bibliography file

        Raises:
            MissingFileError: If the document, its reference or the .bib is absent
            SourceEncodingError: If the document is not valid UTF-8
        """
        base = Path(basePath)
        if not str(fileName).endswith(self.documentExtension):
            bib_path = base / fileName
        else:
            source_path = base / fileName
            if not source_path.is_file():
                raise MissingFileError(str(source_path), "input file not found")
            match = BIBLIOGRAPHY_REFERENCE.search(self.text_read(source_path))
            if not match:
                raise MissingFileError(str(source_path), "no \\bibliography{} reference in")
            name = match.group("name").strip()
            if not name.endswith(".bib"):
                name += ".bib"
            bib_path = source_path.parent / name

        if not bib_path.is_file():
            raise MissingFileError(str(bib_path), "bibliography file not found")
        return bib_path

    def lines_filter(self, lines: List[str]) -> List[str]:
        """
        Apply the field filter and normalization to bibliography lines.

        Args:
            lines: Lines of a .bib file

        Returns:
            Surviving, normalized lines
        """
        kept: List[str] = []
        in_misc = False

        for line in lines:
            record = RECORD_START.match(line)
            if record:
                in_misc = record.group("type").lower() == "misc"

            field = FIELD_KEY.match(line)
            if field and not record:
                key = field.group("key").lower()
                if key in self.dropFields or (key in self.miscFields and not in_misc):
                    self.dropped += 1
                    continue

            line = line.translate(self.translation)
            line = PAGES_PREFIX.sub(r'\g<head>\g<digits>', line)
            kept.append(line)

        return kept

    def bibliography_clean(self, basePath: PathLike, fileName: PathLike) -> str:
        """
        Clean a bibliography file in place.

        Args:
            basePath: Directory the file name is relative to
            fileName: A .bib file, or a document source with \\bibliography{}

        Returns:
            The cleaned bibliography text (also written back to the file)

        Raises:
            MissingFileError: If the document, its reference or the .bib is absent
            SourceEncodingError: If the document or the .bib is not valid UTF-8
        """
        bib_path = self.bibFile_locate(basePath, fileName)
        LOG(f"Cleaning bibliography {bib_path}", level=2)

        text = self.text_read(bib_path)
        cleaned = "\n".join(self.lines_filter(text.split("\n")))
        bib_path.write_text(cleaned, encoding="utf-8")

        LOG(f"Dropped {self.dropped} field lines from {bib_path.name}", level=2)
        return cleaned


def bibliography_clean(basePath: PathLike, fileName: PathLike) -> str:
    """Clean the bibliography referenced by fileName (see BibCleaner.bibliography_clean)"""
    return BibCleaner().bibliography_clean(basePath, fileName)
