"""Exporter configuration."""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from .errors import ConfigurationError

TEMPLATES_DIR = Path(__file__).parent / "templates"
DEFAULT_TEMPLATE = TEMPLATES_DIR / "default-template.docx"
DEFAULT_START_PAGE = 3

# camelCase keys used by the calling application, mapped to field names
_KEY_ALIASES = {
    "templatePath": "template_path",
    "startPage": "start_page",
    "strictStyles": "strict_styles",
    "markTocDirty": "mark_toc_dirty",
}


@dataclass(frozen=True)
class ExportConfig:
    """Immutable settings shared by every export.

    Attributes:
        template_path: Word template (.docx or .docm)
        start_page: 1-based page where generated content starts; pages before
            it (cover, table of contents) are kept from the template
        strict_styles: Fail on templates missing the expected styles instead
            of logging a warning
        mark_toc_dirty: Flag the template's TOC so Word refreshes it on open
    """

    template_path: Path = field(default=DEFAULT_TEMPLATE)
    start_page: int = DEFAULT_START_PAGE
    strict_styles: bool = False
    mark_toc_dirty: bool = True

    def __post_init__(self):
        if self.template_path is None:
            object.__setattr__(self, "template_path", DEFAULT_TEMPLATE)
        else:
            object.__setattr__(self, "template_path", Path(self.template_path))

        if isinstance(self.start_page, bool) or not isinstance(self.start_page, int):
            raise ConfigurationError(
                f"start_page must be an integer, got {self.start_page!r}"
            )
        if self.start_page < 1:
            raise ConfigurationError(f"start_page must be >= 1, got {self.start_page}")

    @classmethod
    def from_mapping(cls, data: dict[str, Any]) -> "ExportConfig":
        """Build a config from a dict with camelCase or snake_case keys.

        Unknown keys are ignored; missing keys use defaults.
        """
        kwargs = {}
        for key, value in data.items():
            name = _KEY_ALIASES.get(key, key)
            if name in cls.__dataclass_fields__ and value is not None:
                kwargs[name] = value
        return cls(**kwargs)
