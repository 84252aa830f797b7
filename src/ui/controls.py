import tkinter as tk
from tkinter import filedialog, messagebox, ttk

from processing import io_utils, pipeline
from processing.logging_config import get_logger
from ui.preview import ImagePreview

logger = get_logger("ui")


class ImageApp(ttk.Frame):
    def __init__(self, root):
        super().__init__(root, padding=10)
        root.configure(bg="#111827")
        self.style = ttk.Style()
        self.style.theme_use("clam")
        self.style.configure("TFrame", background="#111827")
        self.style.configure("TLabel", background="#111827", foreground="#e5e7eb")
        self.style.configure("TButton", background="#1f2937", foreground="#e5e7eb", padding=6)
        self.style.map("TButton", background=[("active", "#2563eb")])

        self.original_img = None

        self.grid(column=0, row=0, sticky="nsew")
        root.rowconfigure(0, weight=1)
        root.columnconfigure(0, weight=1)

        self._build_layout()

    # ---------- Layout ---------- #
    def _build_layout(self):
        header = ttk.Label(self, text="Color Space Studio", font=("Segoe UI", 18, "bold"))
        header.grid(column=0, row=0, sticky="w", pady=(0, 6))

        container = ttk.Frame(self)
        container.grid(column=0, row=1, sticky="nsew")
        container.columnconfigure(1, weight=1)
        container.rowconfigure(0, weight=1)
        self.rowconfigure(1, weight=1)
        self.columnconfigure(0, weight=1)

        controls = ttk.Frame(container, padding=8)
        controls.grid(column=0, row=0, sticky="ns")
        preview_frame = ttk.Frame(container)
        preview_frame.grid(column=1, row=0, sticky="nsew")

        self.preview = ImagePreview(preview_frame)
        self.info_label = ttk.Label(preview_frame, text="No image loaded", anchor="center")
        self.info_label.pack(fill="x", pady=4)

        # File section
        file_box = self._labeled_box(controls, "Image I/O")
        ttk.Button(file_box, text="Load Image", command=self.load_image).grid(column=0, row=0, sticky="ew", padx=4, pady=2)
        self.image_path_var = tk.StringVar(value="No file chosen")
        ttk.Label(file_box, textvariable=self.image_path_var, wraplength=180).grid(column=0, row=1, sticky="w", padx=4)

        # Grayscale / binary
        conv_box = self._labeled_box(controls, "Grayscale")
        ttk.Button(conv_box, text="To Grayscale", command=lambda: self.run_action("gray")).grid(column=0, row=0, columnspan=2, sticky="ew", padx=4, pady=2)
        self.threshold_var = tk.StringVar(value="auto")
        ttk.Label(conv_box, text="Threshold").grid(column=0, row=1, sticky="w", padx=4)
        ttk.Entry(conv_box, textvariable=self.threshold_var, width=6).grid(column=1, row=1, sticky="w", padx=4)
        ttk.Button(conv_box, text="To Binary", command=lambda: self.run_action("binary")).grid(column=0, row=2, columnspan=2, sticky="ew", padx=4, pady=2)

        # Color spaces
        space_box = self._labeled_box(controls, "Color Space")
        self.space_var = tk.StringVar(value="hsv")
        ttk.Combobox(space_box, textvariable=self.space_var, values=["rgb", "hsv", "hsl", "hsi", "yuv"], width=8).grid(column=0, row=0, sticky="ew", padx=4, pady=2)
        ttk.Button(space_box, text="Convert", command=lambda: self.run_action("convert")).grid(column=0, row=1, sticky="ew", padx=4, pady=2)

        # Histogram
        hist_box = self._labeled_box(controls, "Histogram")
        self.full_var = tk.BooleanVar(value=False)
        ttk.Checkbutton(hist_box, text="Equalize in color space", variable=self.full_var).grid(column=0, row=0, sticky="w", padx=4)
        ttk.Button(hist_box, text="Compute Histogram", command=lambda: self.run_action("histogram")).grid(column=0, row=1, sticky="ew", padx=4, pady=2)
        ttk.Button(hist_box, text="Equalize", command=lambda: self.run_action("equalize")).grid(column=0, row=2, sticky="ew", padx=4, pady=2)
        self.hist_eval_label = ttk.Label(hist_box, text="", wraplength=180)
        self.hist_eval_label.grid(column=0, row=3, sticky="w", padx=4)

        self.status_var = tk.StringVar(value="Ready")
        ttk.Label(self, textvariable=self.status_var).grid(column=0, row=2, sticky="ew", pady=(6, 0))

    def _labeled_box(self, parent, title: str):
        box = ttk.LabelFrame(parent, text=title, padding=6)
        box.configure(style="TFrame")
        box.grid(column=0, row=parent.grid_size()[1], sticky="ew", pady=6)
        return box

    # ---------- Helpers ---------- #
    def _require_image(self):
        if self.original_img is None:
            messagebox.showwarning("No image", "Please load an image first.")
            return False
        return True

    def _update_info(self):
        if self.original_img is None:
            self.info_label.config(text="No image loaded")
            return
        info = io_utils.info(self.original_img)
        text = f"{info['width']}x{info['height']}  |  channels: {info['channels']}  |  dtype: {info['dtype']}"
        self.info_label.config(text=text)

    def _params(self):
        return {
            "threshold": self.threshold_var.get(),
            "space": self.space_var.get(),
            "target": "full" if self.full_var.get() else "gray",
        }

    # ---------- Actions ---------- #
    def load_image(self):
        path = filedialog.askopenfilename(filetypes=[("Images", "*.png *.jpg *.jpeg *.bmp *.tif *.tiff")])
        if not path:
            return
        try:
            self.original_img = io_utils.load_image(path)
        except ValueError as exc:
            messagebox.showerror("Error", str(exc))
            return
        self.preview.show_original(self.original_img)
        self._update_info()
        self.image_path_var.set(path.split("/")[-1])
        self.status_var.set("Loaded image.")

    def run_action(self, action: str):
        if not self._require_image():
            return
        try:
            result = pipeline.run(action, self.original_img, self._params())
        except ValueError as exc:
            logger.warning("%s rejected: %s", action, exc)
            messagebox.showerror("Invalid parameter", str(exc))
            self.status_var.set(str(exc))
            return
        self.preview.show_stages(result.stages)
        if action in ("histogram", "equalize") and result.notes:
            self.hist_eval_label.config(text=result.notes[-1])
        self.status_var.set(" | ".join(result.notes[:2]) if result.notes else f"Applied {action}.")
