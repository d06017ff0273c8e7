"""
Exception hierarchy for beamerdown

Every failure in the expansion pipeline is fatal at the point it is raised.
The CLI catches BeamerdownError, reports it and exits non-zero; library
callers can catch the specific kinds below.
"""

from typing import Optional


class BeamerdownError(Exception):
    """Base class for all beamerdown failures"""
    pass


class MissingFileError(BeamerdownError, FileNotFoundError):
    """Raised when a source, include or bibliography file does not exist"""

    def __init__(self, path: str, reason: str = "file not found") -> None:
        self.path = str(path)
        super().__init__(f"{reason}: {self.path}")


class SourceEncodingError(BeamerdownError):
    """Raised when a source or bibliography file is not valid UTF-8"""

    def __init__(self, path: str, reason: str = "") -> None:
        self.path = str(path)
        detail = f" ({reason})" if reason else ""
        super().__init__(f"not valid UTF-8: {self.path}{detail}")


class UnknownBuilderError(BeamerdownError):
    """Raised when a frame marker names a builder that is not registered"""

    def __init__(self, name: str, marker: str = "", line_number: Optional[int] = None) -> None:
        self.name = name
        self.marker = marker
        self.line_number = line_number
        where = f" at line {line_number}" if line_number is not None else ""
        super().__init__(f"No builder named '{name}'{where}: {marker.strip()}")


class UnclosedStructureError(BeamerdownError):
    """Raised when a list or frame block is left open, or closed with nothing open"""

    def __init__(self, message: str, line_number: Optional[int] = None) -> None:
        self.line_number = line_number
        where = f" (line {line_number})" if line_number is not None else ""
        super().__init__(f"{message}{where}")


class MutuallyExclusiveOptionsError(BeamerdownError):
    """Raised when options that cannot be combined are requested together"""
    pass


class ScriptError(BeamerdownError):
    """Raised when an embedded script directive is rejected or fails"""

    def __init__(self, message: str, line_number: Optional[int] = None) -> None:
        self.line_number = line_number
        where = f"line {line_number}: " if line_number is not None else ""
        super().__init__(f"{where}{message}")


class FilterError(BeamerdownError):
    """Raised when an external filter process cannot run to completion"""
    pass


class BuilderError(BeamerdownError):
    """Raised when a builder receives arguments it cannot use"""
    pass
