"""Provider asset bundle installation.

Bundles are zip archives. Only members ending with the provider extension
(and, when configured, whose path contains the bundle's `member_filter`)
are extracted, flattened to their basename, into a staging directory that
then replaces the provider's asset directory in one rename.
"""

import io
import logging
import shutil
import zipfile
from pathlib import Path, PurePosixPath

from emoji_console.contracts.emoji_config import EmojiSetConfig
from emoji_console.core.errors import ParseError

logger = logging.getLogger(__name__)


def _wanted_members(archive: zipfile.ZipFile, set_config: EmojiSetConfig) -> list[zipfile.ZipInfo]:
    member_filter = set_config.bundle.member_filter if set_config.bundle else None
    members: list[zipfile.ZipInfo] = []
    for info in archive.infolist():
        if info.is_dir():
            continue
        name = info.filename
        if not name.endswith(set_config.ext):
            continue
        if member_filter and member_filter not in f"/{name}":
            continue
        members.append(info)
    return members


def install_bundle(archive_bytes: bytes, set_config: EmojiSetConfig, asset_dir: Path) -> int:
    """Extract a bundle into `asset_dir`, replacing its previous contents.

    Returns:
        Number of files installed

    Raises:
        ParseError: when the payload is not a zip archive or holds no assets
    """
    try:
        archive = zipfile.ZipFile(io.BytesIO(archive_bytes))
    except zipfile.BadZipFile as e:
        raise ParseError(f"Bundle for {set_config.key} is not a valid zip archive") from e

    staging = asset_dir.with_name(f".{asset_dir.name}.staging")
    if staging.exists():
        shutil.rmtree(staging)
    staging.mkdir(parents=True)

    count = 0
    try:
        with archive:
            for info in _wanted_members(archive, set_config):
                basename = PurePosixPath(info.filename).name
                if not basename or basename.startswith("."):
                    continue
                with archive.open(info) as src, (staging / basename).open("wb") as dst:
                    shutil.copyfileobj(src, dst)
                count += 1
        if count == 0:
            raise ParseError(f"Bundle for {set_config.key} contains no {set_config.ext} files")

        if asset_dir.exists():
            shutil.rmtree(asset_dir)
        staging.rename(asset_dir)
    except Exception:
        shutil.rmtree(staging, ignore_errors=True)
        raise

    logger.info("Installed %d %s files into %s", count, set_config.key, asset_dir)
    return count
