"""Immutable emoji system configuration models.

Provider behaviour is described by data only: the `naming` discriminant
selects one of the policies in `emoji_console.core.naming`, so a provider
definition never embeds executable logic.
"""

from pydantic import BaseModel, ConfigDict, Field, model_validator

from .common import CasePolicy, NamingScheme

NAMING_CASE = {
    NamingScheme.UPPER_HEX.value: CasePolicy.UPPER.value,
    NamingScheme.LOWER_HEX.value: CasePolicy.LOWER.value,
    NamingScheme.PREFIXED_UNDERSCORE_HEX.value: CasePolicy.LOWER.value,
    NamingScheme.LITERAL.value: CasePolicy.ASIS.value,
}


class AssetBundle(BaseModel):
    """Remote archive that installs a provider's asset directory."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    url: str = Field(..., description="Zip archive download URL")
    version: str = Field(..., description="Upstream release version")
    member_filter: str | None = Field(
        None, description="Only extract members whose path contains this fragment"
    )


class EmojiSetConfig(BaseModel):
    """Static configuration of one emoji asset provider."""

    model_config = ConfigDict(frozen=True, extra="forbid", use_enum_values=True)

    key: str = Field(..., description="Set key, e.g. 'openmoji'")
    name: str = Field(..., description="Display name")
    asset_dir: str = Field(..., description="Asset folder relative to the public root")
    url_prefix: str = Field(..., description="Public URL prefix of the asset folder")
    ext: str = Field(".svg", description="File extension including the dot")
    case: CasePolicy
    naming: NamingScheme
    prefix: str = Field("", description="Filename prefix, e.g. 'emoji_u'")
    notes: str | None = None
    install_instructions: str | None = None
    bundle: AssetBundle | None = None

    # Literal (name-based) providers only cover part of the catalog.
    catalog_group: str | None = None
    catalog_subgroup_keyword: str | None = None

    @model_validator(mode="after")
    def _check_literal_catalog(self) -> "EmojiSetConfig":
        if self.naming == NamingScheme.LITERAL.value and not self.catalog_group:
            raise ValueError(f"literal provider '{self.key}' requires catalog_group")
        return self

    @model_validator(mode="after")
    def _check_case_matches_naming(self) -> "EmojiSetConfig":
        expected = NAMING_CASE[self.naming]
        if self.case != expected:
            raise ValueError(
                f"provider '{self.key}' uses {self.naming} naming, which implies case '{expected}'"
            )
        return self


class EmojiSystemConfig(BaseModel):
    """Process-wide emoji configuration, read-only after load."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    active_set: str
    fallback_set: str
    grayscale: bool = False
    shortcodes_enabled: bool = True
    sets: dict[str, EmojiSetConfig]

    @model_validator(mode="after")
    def _check_set_keys(self) -> "EmojiSystemConfig":
        for field_name in ("active_set", "fallback_set"):
            value = getattr(self, field_name)
            if value not in self.sets:
                raise ValueError(f"{field_name} '{value}' is not a configured set")
        for key, set_config in self.sets.items():
            if key != set_config.key:
                raise ValueError(f"set '{key}' declares mismatched key '{set_config.key}'")
        return self

    def get_set(self, set_key: str) -> EmojiSetConfig | None:
        return self.sets.get(set_key)
