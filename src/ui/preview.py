import math

import numpy as np
from matplotlib.backends.backend_tkagg import FigureCanvasTkAgg
from matplotlib.figure import Figure


def _prep_image(img: np.ndarray):
    if img is None:
        return None
    if img.ndim == 2:
        return img
    return img.astype(np.float32) / 255.0


def grid_shape(count: int):
    """Rows and columns for ``count`` panels, filled left-to-right, top-to-bottom."""
    if count <= 0:
        return 1, 1
    cols = min(count, 3)
    return math.ceil(count / cols), cols


class ImagePreview:
    def __init__(self, parent):
        self.figure = Figure(figsize=(8, 5), dpi=100)
        self.canvas = FigureCanvasTkAgg(self.figure, master=parent)
        self.canvas_widget = self.canvas.get_tk_widget()
        self.canvas_widget.pack(fill="both", expand=True)
        # Draw once so the canvas renders immediately on load.
        self.canvas.draw()

    def show_stages(self, stages):
        """Lay the stages out in sequence order."""
        self.figure.clear()
        rows, cols = grid_shape(len(stages))
        for idx, (title, img) in enumerate(stages):
            ax = self.figure.add_subplot(rows, cols, idx + 1)
            ax.axis("off")
            img_prep = _prep_image(img)
            if img_prep is not None:
                if img_prep.ndim == 2:
                    ax.imshow(img_prep, cmap="gray", vmin=0, vmax=255)
                else:
                    ax.imshow(img_prep)
            ax.set_title(title, fontsize=9)
        self.figure.tight_layout()
        self.canvas.draw_idle()

    def show_original(self, img: np.ndarray, title="Original"):
        self.show_stages([(title, img)])
