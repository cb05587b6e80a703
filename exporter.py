"""Copy kept images and their CR3 sidecars into a mirrored kept_images/ folder."""

import logging
import os
import shutil
from dataclasses import dataclass
from typing import Iterable, Optional

from constants import KEPT_FOLDER, SIDECAR_EXTENSIONS
from errors import ExportIOError, PathError

logger = logging.getLogger(__name__)


@dataclass
class ExportResult:
    output_folder: str
    images_copied: int = 0
    sidecars_copied: int = 0


def find_sidecar(image_path: str) -> Optional[str]:
    """Return the first existing RAW sidecar (.CR3 before .cr3) next to the image."""
    base = os.path.splitext(image_path)[0]
    for ext in SIDECAR_EXTENSIONS:
        candidate = base + ext
        if os.path.isfile(candidate):
            return candidate
    return None


def _relative_to_root(path: str, root: str) -> str:
    abs_path = os.path.abspath(path)
    abs_root = os.path.abspath(root)
    try:
        common = os.path.commonpath([abs_path, abs_root])
    except ValueError:
        common = None
    if common != abs_root or abs_path == abs_root:
        raise PathError(f"'{path}' is not inside '{root}'")
    return os.path.relpath(abs_path, abs_root)


def _copy_mirrored(src: str, working_root: str, output_folder: str) -> str:
    dest = os.path.join(output_folder, _relative_to_root(src, working_root))
    try:
        os.makedirs(os.path.dirname(dest), exist_ok=True)
        shutil.copy2(src, dest)
    except OSError as e:
        raise ExportIOError(f"{os.path.basename(src)}: {e}") from e
    return dest


def export_kept(kept_paths: Iterable[str], working_root: str) -> ExportResult:
    """
    Copy every kept image under working_root/kept_images/, keeping its
    relative directory, along with one CR3 sidecar if present.
    Stops at the first failure; files already copied are left in place.
    Raises PathError or ExportIOError.
    """
    output_folder = os.path.join(working_root, KEPT_FOLDER)
    try:
        os.makedirs(output_folder, exist_ok=True)
    except OSError as e:
        raise ExportIOError(f"{output_folder}: {e}") from e

    result = ExportResult(output_folder=output_folder)
    for path in kept_paths:
        _copy_mirrored(path, working_root, output_folder)
        result.images_copied += 1

        sidecar = find_sidecar(path)
        if sidecar:
            _copy_mirrored(sidecar, working_root, output_folder)
            result.sidecars_copied += 1

    logger.info(
        "Exported %d images and %d sidecars to %s",
        result.images_copied, result.sidecars_copied, output_folder,
    )
    return result
