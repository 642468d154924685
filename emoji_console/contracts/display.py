"""Resolver outputs: resolved entries and renderable previews."""

from html import escape
from typing import Literal

from pydantic import Field

from .common import BaseContract
from .emoji import EmojiEntry


class ResolvedEmoji(EmojiEntry):
    """Canonical entry merged with one provider's asset location.

    `asset_path` is None when the entry is known but the provider has no
    asset for it.
    """

    asset_path: str | None = Field(None, alias="assetPath")


class DisplayOptions(BaseContract):
    """Caller preferences for a single emoji preview."""

    preferred_set: str | None = Field(None, alias="set")
    fallback_set: str | None = Field(None, alias="fallbackSet")
    size: int | None = Field(None, ge=1, le=1024)
    css_class: str | None = Field(None, alias="className")


class EmojiRendering(BaseContract):
    """Renderable result: an image reference or a literal text fallback."""

    kind: Literal["image", "text"]
    text: str | None = None
    src: str | None = None
    alt: str | None = None
    title: str | None = None
    size: int | None = None
    css_class: str | None = Field(None, alias="className")
    grayscale: bool = False
    codepoints: str | None = None
    set_key: str | None = Field(None, alias="set")

    def to_html(self) -> str:
        """Render as an `<img>` or `<span>` element."""
        class_attr = f' class="{escape(self.css_class)}"' if self.css_class else ""
        if self.kind == "text":
            return f"<span{class_attr}>{escape(self.text or '')}</span>"

        attrs = [
            f'src="{escape(self.src or "")}"',
            f'alt="{escape(self.alt or "")}"',
            f'title="{escape(self.title or "")}"',
        ]
        styles: list[str] = []
        if self.size:
            attrs.append(f'width="{self.size}" height="{self.size}"')
            styles.append(f"width: {self.size}px; height: {self.size}px")
        if self.grayscale:
            styles.append("filter: grayscale(1)")
        if styles:
            attrs.append(f'style="{"; ".join(styles)}"')
        return f"<img {' '.join(attrs)}{class_attr}>"
