"""
Local Sources

Screenshot uploads and local folder scans, turned into variants.
"""

import base64
import logging
from pathlib import Path

from .models import UI_FILE_EXTENSIONS, CodeFile, ImagePayload, Variant

logger = logging.getLogger(__name__)

IMAGE_MEDIA_TYPES = {
    ".png": "image/png",
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
}

EXCLUDED_DIRECTORIES = {"node_modules", ".git", "dist", "build"}


def load_image_variant(image_path: Path) -> Variant:
    """
    Read a screenshot into an image variant.

    Args:
        image_path: Path to a png or jpeg file

    Returns:
        Variant of kind "image", origin "upload"

    Raises:
        FileNotFoundError: If the file does not exist
        ValueError: If the extension is not a supported image type
    """
    image_path = Path(image_path)
    media_type = IMAGE_MEDIA_TYPES.get(image_path.suffix.lower())
    if media_type is None:
        raise ValueError(
            f"Unsupported image type: {image_path.name}. "
            f"Use one of: {', '.join(sorted(IMAGE_MEDIA_TYPES))}"
        )

    with open(image_path, "rb") as f:
        data = base64.b64encode(f.read()).decode("utf-8")

    return Variant(
        kind="image",
        origin="upload",
        image=ImagePayload(filename=image_path.name, media_type=media_type, data=data),
    )


def _is_excluded(parts: tuple[str, ...]) -> bool:
    return any(part in EXCLUDED_DIRECTORIES or part.startswith(".") for part in parts)


def scan_local_folder(root: Path) -> list[Variant]:
    """
    Scan a folder for UI source files and group them into variants.

    Files inside a sub-directory of root are grouped under that
    sub-directory's name; files directly in root are grouped under root's
    own name. Hidden paths and build/dependency directories are skipped.
    File paths are recorded relative to root's parent, so they start with
    root's name.

    Args:
        root: Folder selected by the user

    Returns:
        One code variant per group, groups in sorted path order

    Raises:
        NotADirectoryError: If root is not a directory
    """
    root = Path(root).resolve()
    if not root.is_dir():
        raise NotADirectoryError(f"Not a folder: {root}")

    groups: dict[str, list[CodeFile]] = {}
    for file_path in sorted(root.rglob("*")):
        if not file_path.is_file():
            continue

        relative = file_path.relative_to(root)
        if _is_excluded(relative.parts):
            continue
        if file_path.suffix.lower() not in UI_FILE_EXTENSIONS:
            continue

        key = relative.parts[0] if len(relative.parts) > 1 else root.name
        display_path = (Path(root.name) / relative).as_posix()
        content = file_path.read_text(encoding="utf-8", errors="replace")
        groups.setdefault(key, []).append(CodeFile.from_path(display_path, content))

    if not groups:
        logger.warning("No UI files found under %s", root)

    return [
        Variant(kind="code", origin="local-folder", folder_name=name, files=files)
        for name, files in groups.items()
    ]
