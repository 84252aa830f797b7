import tkinter as tk

from processing.config import APP_CONFIG
from processing.logging_config import setup_logging
from ui.controls import ImageApp


def main():
    setup_logging(APP_CONFIG.log_level)
    root = tk.Tk()
    root.title("Color Space Studio")
    root.geometry("1100x720")
    root.configure(bg="#111827")
    ImageApp(root)
    root.mainloop()


if __name__ == "__main__":
    main()
