from dataclasses import dataclass
from io import BytesIO
import base64

from PIL import Image, ImageOps, UnidentifiedImageError

from calcvault.shared.config import settings
from calcvault.shared.errors import DecodeFailure
from calcvault.vault.encoding import estimated_size

@dataclass(frozen=True)
class CompressedImage:
    data: str           # data:image/jpeg;base64,...
    size: int           # estimated from the payload length
    width: int
    height: int
    original_size: int

def bounded_size(width: int, height: int, max_dim: int) -> tuple[int, int]:
    """
    Scale the longer side down to max_dim, the other proportionally.
    Images already inside the box keep their dimensions.
    """
    w, h = float(width), float(height)
    if w > h:
        if w > max_dim:
            h *= max_dim / w
            w = max_dim
    else:
        if h > max_dim:
            w *= max_dim / h
            h = max_dim
    # pixel dimensions truncate, like assigning to a canvas
    return max(1, int(w)), max(1, int(h))

def compress_image(raw: bytes, max_dim: int | None = None, quality: int | None = None) -> CompressedImage:
    """
    Re-encode a raster image as a bounded JPEG. The original bytes are not
    kept. Raises DecodeFailure for anything Pillow cannot decode.
    """
    max_dim = max_dim or settings.IMAGE_MAX_DIMENSION
    quality = quality or settings.IMAGE_QUALITY
    try:
        with Image.open(BytesIO(raw)) as im:
            im.load()
            im = ImageOps.exif_transpose(im)
            width, height = bounded_size(im.width, im.height, max_dim)
            frame = im.convert("RGB")
            if (width, height) != frame.size:
                frame = frame.resize((width, height), Image.Resampling.LANCZOS)
            out = BytesIO()
            frame.save(out, format="JPEG", quality=quality)
    except (UnidentifiedImageError, Image.DecompressionBombError, OSError, ValueError) as e:
        raise DecodeFailure(f"could not decode image: {e}")

    data = "data:image/jpeg;base64," + base64.b64encode(out.getvalue()).decode("ascii")
    return CompressedImage(
        data=data,
        size=estimated_size(data),
        width=width,
        height=height,
        original_size=len(raw),
    )
