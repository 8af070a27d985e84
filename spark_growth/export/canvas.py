"""Pixel canvas that renders snapshot windows for the spark growth simulation."""

import numpy as np
import matplotlib
matplotlib.use('Agg')  # Use non-interactive backend
import matplotlib.pyplot as plt
from matplotlib.colors import to_rgb
from pathlib import Path
from typing import Dict, List
from PIL import Image


class Canvas:
    """
    Accumulates snapshot windows onto an RGB buffer over a black background.

    Every record is composited with the spark color at an alpha chosen from
    its weight, so repeated windows over the same area brighten it:
    - weight == 1: fully opaque (0xFF)
    - weight > 0.5: 0x15
    - otherwise: 0x07

    Supports:
    - Single PNG snapshots
    - Animated GIF compilation
    """

    FADE_ACTIVE = 0xFF
    FADE_HIGH = 0x15
    FADE_LOW = 0x07

    def __init__(self, width: int, height: int,
                 color: str = '#05edf5', scale: int = 3):
        self.width = width
        self.height = height
        self.color = color
        self.rgb = np.array(to_rgb(color), dtype=np.float64)
        self.scale = scale
        self.pixels = np.zeros((height + 1, width + 1, 3), dtype=np.float64)
        self.painted = 0
        self.frames: List[Image.Image] = []

    @classmethod
    def fade_for(cls, weight: float) -> int:
        if weight == 1:
            return cls.FADE_ACTIVE
        if weight > 0.5:
            return cls.FADE_HIGH
        return cls.FADE_LOW

    def reset(self) -> None:
        """Clear to black."""
        self.pixels.fill(0.0)
        self.painted = 0

    def paint_pixel(self, x: int, y: int, fade: int = FADE_ACTIVE) -> bool:
        """Composite the spark color at (x, y). Cells off the canvas are skipped."""
        if x > self.width or x < 0 or y > self.height or y < 0:
            return False
        alpha = fade / 0xFF
        self.pixels[y, x] = self.pixels[y, x] * (1 - alpha) + self.rgb * alpha
        self.painted += 1
        return True

    def paint_records(self, records: List[Dict]) -> None:
        """Paint one snapshot message."""
        for record in records:
            self.paint_pixel(record['x'], record['y'],
                             self.fade_for(record['weight']))

    def to_image(self) -> Image.Image:
        """Current buffer as a PIL image, upscaled by `scale`."""
        data = np.clip(np.rint(self.pixels * 255), 0, 255).astype(np.uint8)
        img = Image.fromarray(data)
        if self.scale != 1:
            img = img.resize((img.width * self.scale, img.height * self.scale),
                             Image.Resampling.NEAREST)
        return img

    def _create_figure(self, step: int, active_count: int) -> plt.Figure:
        """Create matplotlib figure for the current buffer."""
        aspect = (self.width + 1) / (self.height + 1)
        fig_height = 6
        fig_width = max(6, fig_height * aspect)
        fig, ax = plt.subplots(figsize=(fig_width, fig_height))
        fig.patch.set_facecolor('black')

        ax.imshow(self.pixels, origin='upper', interpolation='nearest',
                  extent=[-0.5, self.width + 0.5, self.height + 0.5, -0.5])
        ax.set_title(f'Tick {step} | Active cells: {active_count}',
                     color='white')
        ax.set_axis_off()

        plt.tight_layout()
        return fig

    def buffer_frame(self) -> None:
        """Store the current buffer for GIF generation."""
        self.frames.append(self.to_image())

    def save_snapshot(self, output_path: Path, step: int,
                      active_count: int) -> None:
        """Save single PNG image of the current buffer."""
        output_path = Path(output_path)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        fig = self._create_figure(step, active_count)
        fig.savefig(output_path, dpi=150, bbox_inches='tight',
                    facecolor=fig.get_facecolor())
        plt.close(fig)

    def generate_gif(self, output_path: Path, fps: int = 10) -> None:
        """Compile buffered frames into animated GIF."""
        if not self.frames:
            return

        output_path = Path(output_path)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        duration = int(1000 / fps)  # milliseconds per frame

        self.frames[0].save(
            output_path,
            save_all=True,
            append_images=self.frames[1:],
            duration=duration,
            loop=0
        )
