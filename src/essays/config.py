"""Site-level configuration for essays."""

from __future__ import annotations

import os
from dataclasses import dataclass


DEFAULT_TITLE_SUFFIX = "Essays"
DEFAULT_TITLE_SEPARATOR = " — "
DEFAULT_BACK_TARGET = "/"
DEFAULT_LANG = "en"


@dataclass(frozen=True, slots=True)
class SiteConfig:
    """Defaults shared by every page of the site.

    Passed explicitly into the composer; nothing here is read at render time.
    """

    title_suffix: str = DEFAULT_TITLE_SUFFIX
    title_separator: str = DEFAULT_TITLE_SEPARATOR
    back_target: str = DEFAULT_BACK_TARGET
    lang: str = DEFAULT_LANG

    @classmethod
    def from_env(cls) -> SiteConfig:
        return cls(
            title_suffix=os.getenv("ESSAYS_TITLE_SUFFIX", DEFAULT_TITLE_SUFFIX),
            title_separator=os.getenv("ESSAYS_TITLE_SEPARATOR", DEFAULT_TITLE_SEPARATOR),
            back_target=os.getenv("ESSAYS_BACK_TARGET", DEFAULT_BACK_TARGET),
            lang=os.getenv("ESSAYS_LANG", DEFAULT_LANG),
        )

    def page_title(self, title: str | None) -> str:
        """Return the text for the page's ``<title>`` tag."""
        if title:
            return f"{title}{self.title_separator}{self.title_suffix}"
        return self.title_suffix
