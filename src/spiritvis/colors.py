import cv2
import numpy as np


def hsb_to_bgr(hue, saturation, brightness):
    """
    Convert HSB (hue 0-360, saturation and brightness 0-100) to BGR uint8.

    `hue` may be a scalar or an array; the result has shape (..., 3).
    """
    hue = np.mod(np.asarray(hue, dtype=np.float32), 360.0)
    hsv = np.empty(hue.shape + (3,), dtype=np.float32)
    hsv[..., 0] = hue
    hsv[..., 1] = saturation / 100.0
    hsv[..., 2] = brightness / 100.0

    bgr = cv2.cvtColor(hsv.reshape(-1, 1, 3), cv2.COLOR_HSV2BGR)
    bgr = np.clip(np.round(bgr * 255.0), 0, 255).astype(np.uint8)
    return bgr.reshape(hue.shape + (3,))


def blend_over(canvas, layer, coverage, opacity):
    """
    Composite a premultiplied `layer` onto `canvas`.

    `coverage` (uint8, 0-255) is how much of each pixel the strokes cover,
    so anti-aliased edges blend in proportion instead of as solid colour.
    """
    if opacity <= 0 or not coverage.any():
        return canvas
    opacity = min(1.0, opacity)
    weight = coverage.astype(np.float32)[..., None] * (opacity / 255.0)
    out = canvas.astype(np.float32) * (1.0 - weight) + layer.astype(np.float32) * opacity
    return np.clip(np.round(out), 0, 255).astype(np.uint8)
