# renderer/tone_mapping.py
import numpy as np


def to_rgb8(accumulated: np.ndarray, samples: int) -> np.ndarray:
    """
    Turn a buffer of summed linear radiance into displayable 8-bit RGB.

    Each pixel is averaged over the sample count, gamma corrected with a
    square root (gamma 2), clamped to [0, 0.999] and scaled by 256, so every
    channel lands in 0..255 without a special case for 1.0.
    """
    if samples <= 0:
        raise ValueError(f"sample count must be positive, got {samples}")
    averaged = np.maximum(accumulated / samples, 0.0)
    corrected = np.sqrt(averaged)
    clamped = np.clip(corrected, 0.0, 0.999)
    return (256.0 * clamped).astype(np.uint8)
