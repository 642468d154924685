"""Models for external reference data (alias sources).

Only the fields the console merges are modelled; everything else in the
upstream documents is ignored.
"""

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter


class GemojiSourceEntry(BaseModel):
    """One record of github/gemoji `db/emoji.json`, keyed by literal emoji."""

    model_config = ConfigDict(extra="ignore")

    emoji: str | None = None
    description: str | None = ""
    category: str | None = ""
    aliases: list[str] = Field(default_factory=list)
    tags: list[str] = Field(default_factory=list)


class IamcalSourceEntry(BaseModel):
    """One record of iamcal/emoji-data `emoji.json`, keyed by codepoints."""

    model_config = ConfigDict(extra="ignore")

    unified: str | None = None
    short_names: list[str] = Field(default_factory=list)
    keywords: list[str] = Field(default_factory=list)
    category: str | None = ""
    added_in: str | None = ""


GEMOJI_LIST_ADAPTER: TypeAdapter[list[GemojiSourceEntry]] = TypeAdapter(list[GemojiSourceEntry])
IAMCAL_LIST_ADAPTER: TypeAdapter[list[IamcalSourceEntry]] = TypeAdapter(list[IamcalSourceEntry])
