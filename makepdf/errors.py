from __future__ import annotations


class MakePdfError(Exception):
    """Base class for failures that abort a document run."""


class ScriptLoadError(MakePdfError):
    pass


class ScriptExecError(MakePdfError):
    pass


class ConfigExtractError(MakePdfError):
    pass


class FontParseError(MakePdfError, ValueError):
    pass


class FontAttachError(MakePdfError):
    def __init__(self, font_id: int, reason: str = "") -> None:
        self.font_id = font_id
        message = f"Failed to attach font {font_id:08X} to document"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)
