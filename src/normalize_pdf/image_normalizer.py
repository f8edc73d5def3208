from __future__ import annotations

import logging
import math
import shutil
from pathlib import Path

from PIL import Image, UnidentifiedImageError

from .contracts import ImageNormalizeResult, NormalizeError

logger = logging.getLogger("invoice_ocr.normalize")


def scaled_size(*, width_px: int, height_px: int, max_area_px: int) -> tuple[int, int]:
    """
    Uniformly scale (width, height) so the area fits within `max_area_px`.

    Both sides are multiplied by sqrt(max_area / area) and rounded down.
    Sizes already within budget are returned unchanged.
    """

    area = width_px * height_px
    if area <= max_area_px:
        return width_px, height_px

    scale = math.sqrt(max_area_px / area)
    return max(1, math.floor(width_px * scale)), max(1, math.floor(height_px * scale))


def normalize_image_area(
    *, image_file: Path, out_stem: Path, max_area_px: int, jpeg_quality: int = 90
) -> ImageNormalizeResult:
    """
    Ensure a page image is within the pixel-area budget before OCR.

    - within budget: the source bytes are copied unchanged to `out_stem` + source suffix
    - over budget: resized and written as JPEG to `out_stem` + ".jpg"

    Failures are returned as `ok=False` results, never raised.
    """

    source = str(image_file)
    try:
        with Image.open(image_file) as im:
            width_px, height_px = im.size
            new_w, new_h = scaled_size(width_px=width_px, height_px=height_px, max_area_px=max_area_px)

            if (new_w, new_h) == (width_px, height_px):
                out_file = out_stem.with_suffix(image_file.suffix.lower() or ".img")
                resized = None
            else:
                out_file = out_stem.with_suffix(".jpg")
                resized = im.convert("RGB").resize((new_w, new_h), Image.LANCZOS)
    except (UnidentifiedImageError, Image.DecompressionBombError, OSError, ValueError) as e:
        return ImageNormalizeResult(
            ok=False,
            source_file=source,
            out_file=None,
            width_px=None,
            height_px=None,
            resized=False,
            errors=[
                NormalizeError(
                    code="IMAGE_UNREADABLE",
                    message=f"Cannot read image {image_file.name}: {e}",
                    detail={"image_file": source, "error": repr(e)},
                )
            ],
        )

    try:
        out_file.parent.mkdir(parents=True, exist_ok=True)
        if resized is None:
            shutil.copyfile(image_file, out_file)
        else:
            resized.save(out_file, format="JPEG", quality=jpeg_quality)
    except OSError as e:
        return ImageNormalizeResult(
            ok=False,
            source_file=source,
            out_file=None,
            width_px=None,
            height_px=None,
            resized=False,
            errors=[
                NormalizeError(
                    code="IMAGE_WRITE_FAILED",
                    message=f"Cannot write normalized image {out_file.name}: {e}",
                    detail={"out_file": str(out_file), "error": repr(e)},
                )
            ],
        )

    if resized is not None:
        logger.debug("Resized %s from %dx%d to %dx%d", image_file.name, width_px, height_px, new_w, new_h)

    return ImageNormalizeResult(
        ok=True,
        source_file=source,
        out_file=out_file,
        width_px=new_w,
        height_px=new_h,
        resized=resized is not None,
        errors=[],
    )
