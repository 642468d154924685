"""Static emoji provider definitions.

Every provider the console knows about is declared here once. Deployment
flags (active/fallback set, grayscale, shortcodes) may be overridden through
settings; the provider table itself is not configurable at runtime.

To add a set, append an `EmojiSetConfig` below and place its assets in
`<public_dir>/emoji/<key>/`.
"""

from emoji_console.config.settings import Settings, get_settings
from emoji_console.contracts.common import CasePolicy, NamingScheme
from emoji_console.contracts.emoji_config import AssetBundle, EmojiSetConfig, EmojiSystemConfig

OPENMOJI_VERSION = "15.1.0"
TWEMOJI_VERSION = "14.0.2"

_NO_INSTRUCTIONS = "_(No instructions yet. Please add them in the future.)_"

DEFAULT_SETS: tuple[EmojiSetConfig, ...] = (
    EmojiSetConfig(
        key="openmoji",
        name="OpenMoji",
        asset_dir="emoji/openmoji",
        url_prefix="/emoji/openmoji",
        ext=".svg",
        case=CasePolicy.UPPER,
        naming=NamingScheme.UPPER_HEX,
        bundle=AssetBundle(
            url=(
                "https://github.com/hfg-gmuend/openmoji/releases/download/"
                f"{OPENMOJI_VERSION}/openmoji-svg-color.zip"
            ),
            version=OPENMOJI_VERSION,
        ),
        install_instructions=(
            "Use **Download** to fetch the OpenMoji colour SVG release "
            f"({OPENMOJI_VERSION}) into `public/emoji/openmoji/`."
        ),
    ),
    EmojiSetConfig(
        key="twemoji",
        name="Twemoji",
        asset_dir="emoji/twemoji",
        url_prefix="/emoji/twemoji",
        ext=".svg",
        case=CasePolicy.LOWER,
        naming=NamingScheme.LOWER_HEX,
        bundle=AssetBundle(
            url=f"https://github.com/twitter/twemoji/archive/refs/tags/v{TWEMOJI_VERSION}.zip",
            version=TWEMOJI_VERSION,
            member_filter="/assets/svg/",
        ),
        install_instructions=(
            "Use **Download** to fetch the Twemoji source archive; only "
            "`assets/svg/*.svg` is extracted into `public/emoji/twemoji/`.\n\n"
            "Alternatively copy `assets/svg/` from https://github.com/twitter/twemoji by hand."
        ),
    ),
    EmojiSetConfig(
        key="blobmoji",
        name="Blobmoji",
        asset_dir="emoji/blobmoji",
        url_prefix="/emoji/blobmoji",
        ext=".svg",
        case=CasePolicy.LOWER,
        naming=NamingScheme.PREFIXED_UNDERSCORE_HEX,
        prefix="emoji_u",
        notes="Filenames are prefixed with emoji_u and use underscores between codepoints",
        install_instructions=f"Instructions for installing **Blobmoji** assets will go here.\n\n{_NO_INSTRUCTIONS}",
    ),
    EmojiSetConfig(
        key="notomoji",
        name="Noto Emoji",
        asset_dir="emoji/notomoji",
        url_prefix="/emoji/notomoji",
        ext=".svg",
        case=CasePolicy.LOWER,
        naming=NamingScheme.PREFIXED_UNDERSCORE_HEX,
        prefix="emoji_u",
        notes="Filenames are prefixed with emoji_u and use underscores between codepoints",
        install_instructions=f"Instructions for installing **Noto Emoji** assets will go here.\n\n{_NO_INSTRUCTIONS}",
    ),
    EmojiSetConfig(
        key="sensamoji",
        name="Sensa",
        asset_dir="emoji/sensamoji",
        url_prefix="/emoji/sensamoji",
        ext=".svg",
        case=CasePolicy.ASIS,
        naming=NamingScheme.LITERAL,
        notes="Filenames are plain English names, not codepoints. Mapped by name heuristics.",
        catalog_group="People & Body",
        catalog_subgroup_keyword="hand",
        install_instructions=f"Instructions for installing **Sensa** assets will go here.\n\n{_NO_INSTRUCTIONS}",
    ),
)

DEFAULT_ACTIVE_SET = "openmoji"
DEFAULT_FALLBACK_SET = "twemoji"


def load_emoji_config(settings: Settings | None = None) -> EmojiSystemConfig:
    """Build the immutable emoji system config.

    Raises:
        pydantic.ValidationError: if an override names an unknown set
    """
    settings = settings or get_settings()
    return EmojiSystemConfig(
        active_set=settings.emoji_active_set or DEFAULT_ACTIVE_SET,
        fallback_set=settings.emoji_fallback_set or DEFAULT_FALLBACK_SET,
        grayscale=bool(settings.emoji_grayscale) if settings.emoji_grayscale is not None else False,
        shortcodes_enabled=(
            settings.emoji_shortcodes_enabled
            if settings.emoji_shortcodes_enabled is not None
            else True
        ),
        sets={s.key: s for s in DEFAULT_SETS},
    )
