"""Exception types raised by the exporter."""


class ExportError(Exception):
    """Base class for all exporter errors."""


class ConfigurationError(ExportError):
    """Raised when an ExportConfig value is invalid."""


class TemplateError(ExportError):
    """Raised when the Word template cannot be used."""


class TemplateNotFoundError(TemplateError):
    """Raised when the template path does not exist."""


class IncompatibleTemplateError(TemplateError):
    """Raised when the template lacks styles or numbering the renderer relies on."""

    def __init__(self, missing_styles: list[str], missing_numbering: list[str]):
        self.missing_styles = missing_styles
        self.missing_numbering = missing_numbering
        parts = []
        if missing_styles:
            parts.append(f"styles: {', '.join(missing_styles)}")
        if missing_numbering:
            parts.append(f"numbering ids: {', '.join(missing_numbering)}")
        super().__init__(f"Incompatible template, missing {'; '.join(parts)}")


class RenderError(ExportError):
    """Raised when the generated document.xml is not well-formed."""
