from __future__ import annotations


class SemdocError(Exception):
    """Base class for all semdoc errors."""


class ParseError(SemdocError):
    """Raised when an input document cannot be parsed.

    ``label`` names which input failed ("document", "source", "template",
    "first", "second"), ``diagnostic`` is the underlying parser message and
    ``text`` is the original input.
    """

    def __init__(self, label: str, text: str, diagnostic: str):
        self.label = label
        self.text = text
        self.diagnostic = diagnostic
        what = label if label == "document" else f"{label} document"
        super().__init__(f"failed to parse {what}: {diagnostic}")


class RuleConfigError(SemdocError):
    """Raised for invalid default-rule files or environment configuration."""
