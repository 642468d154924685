"""
Common data types and base models for the emoji console.
All models use Pydantic V2.
"""

from enum import Enum

from pydantic import BaseModel, ConfigDict


class SkinTone(str, Enum):
    """Skin tone labels derived from Fitzpatrick modifier codepoints."""

    DEFAULT = "default"
    LIGHT = "light"
    MEDIUM_LIGHT = "medium-light"
    MEDIUM = "medium"
    MEDIUM_DARK = "medium-dark"
    DARK = "dark"


# Modifier codepoint -> label, in Unicode order (1F3FB..1F3FF).
SKIN_TONE_MODIFIERS: dict[str, SkinTone] = {
    "1F3FB": SkinTone.LIGHT,
    "1F3FC": SkinTone.MEDIUM_LIGHT,
    "1F3FD": SkinTone.MEDIUM,
    "1F3FE": SkinTone.MEDIUM_DARK,
    "1F3FF": SkinTone.DARK,
}


class CasePolicy(str, Enum):
    """Case transform applied to codepoint keys when forming filenames."""

    LOWER = "lower"
    UPPER = "upper"
    ASIS = "asis"


class NamingScheme(str, Enum):
    """Discriminant selecting a provider's naming policy."""

    UPPER_HEX = "upper_hex"
    LOWER_HEX = "lower_hex"
    PREFIXED_UNDERSCORE_HEX = "prefixed_underscore_hex"
    LITERAL = "literal"


class BaseContract(BaseModel):
    """Base model for persisted artifacts and API payloads."""

    model_config = ConfigDict(
        # Validate data on assignment
        validate_assignment=True,
        # Use enum values in JSON
        use_enum_values=True,
        # Accept both python names and camelCase aliases
        populate_by_name=True,
        # Older artifacts may carry fields we no longer model
        extra="ignore",
    )
