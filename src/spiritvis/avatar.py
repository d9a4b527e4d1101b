from dataclasses import dataclass

import cv2
import numpy as np

from spiritvis.colors import hsb_to_bgr
from spiritvis.constants import (
    AVATAR_BASE_HUE,
    AVATAR_BRIGHTNESS,
    AVATAR_LAYERS,
    AVATAR_SATURATION,
)


@dataclass(frozen=True)
class AvatarLayer:
    index: int
    size: float  # full width of the glow ellipse in pixels
    alpha: float  # percent, may exceed 100 before drawing
    hue: float


def avatar_layers(width, height, bands, pulse, layers=AVATAR_LAYERS):
    """
    Geometry of the glow, outermost layer first (index `layers` down to 1).
    """
    base_hue = AVATAR_BASE_HUE + 40 * bands.high
    base_size = min(width, height) * (0.16 + 0.06 * bands.low + 0.10 * pulse)

    result = []
    for i in range(layers, 0, -1):
        t = i / layers
        result.append(
            AvatarLayer(
                index=i,
                size=base_size * (0.5 + t),
                alpha=(6 + i * 10) * (0.7 + 0.6 * bands.mid + 0.4 * pulse),
                hue=(base_hue + i * 4) % 360,
            )
        )
    return result


class AvatarRenderer:
    """
    Layered "breathing" glow at the canvas centre.
    All layers blend additively onto the canvas.
    """

    def __init__(self, layers=AVATAR_LAYERS):
        self.layers = layers

    def draw(self, canvas, bands, pulse):
        h, w = canvas.shape[:2]
        center = (w // 2, h // 2)

        for layer in avatar_layers(w, h, bands, pulse, self.layers):
            axis = max(1, int(round(layer.size / 2)))
            opacity = min(100.0, max(0.0, layer.alpha)) / 100.0
            color = hsb_to_bgr(layer.hue, AVATAR_SATURATION, AVATAR_BRIGHTNESS) * opacity

            glow = np.zeros_like(canvas)
            cv2.ellipse(
                glow,
                center,
                (axis, axis),
                0,
                0,
                360,
                tuple(int(round(c)) for c in color),
                -1,
                cv2.LINE_AA,
            )
            canvas = cv2.add(canvas, glow)

        return canvas
