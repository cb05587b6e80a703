"""Tkinter window, layout, key bindings, and display loop."""

import logging
import os
import tkinter as tk
from tkinter import filedialog, messagebox
from typing import Optional

from PIL import ImageTk

from constants import (
    COLOR_BG, COLOR_KEEP, COLOR_DISCARD, COLOR_BUTTON_BG,
    COLOR_STATUS_BG, COLOR_STATUS_FG, COLOR_FILENAME,
    STATUS_BAR_HEIGHT, BUTTON_ROW_HEIGHT,
)
from errors import ExportIOError, PathError, ScanError
from image_loader import decode, placeholder
from sift_model import SiftSession, Verdict

logger = logging.getLogger(__name__)


class SifterApp:
    def __init__(self, folder: Optional[str] = None):
        self.session: Optional[SiftSession] = None
        self._photo = None  # prevent GC of PhotoImage
        self._decoded = None  # (cursor, path, Image) of the last decoded image

        self._build_ui()
        self._bind_keys()
        if folder:
            self._open_folder(folder)
        else:
            self._show_current()
        self.root.mainloop()

    def _build_ui(self):
        self.root = tk.Tk()
        self.root.title("Image Sifter")
        self.root.configure(bg=COLOR_BG)
        self.root.geometry("1280x800")
        self.root.minsize(640, 480)

        # Top bar: folder picker and picked folder
        top_frame = tk.Frame(self.root, bg=COLOR_STATUS_BG)
        top_frame.pack(fill=tk.X, side=tk.TOP)

        tk.Button(
            top_frame, text="Select working folder", command=self._pick_folder,
        ).pack(side=tk.LEFT, padx=12, pady=6)

        self.lbl_folder = tk.Label(
            top_frame, text="", bg=COLOR_STATUS_BG, fg=COLOR_STATUS_FG,
            font=("Menlo", 11),
        )
        self.lbl_folder.pack(side=tk.LEFT, padx=4)

        # Status bar frame at bottom
        self.status_frame = tk.Frame(self.root, bg=COLOR_STATUS_BG, height=STATUS_BAR_HEIGHT)
        self.status_frame.pack(fill=tk.X, side=tk.BOTTOM)
        self.status_frame.pack_propagate(False)

        self.lbl_position = tk.Label(
            self.status_frame, text="", bg=COLOR_STATUS_BG, fg=COLOR_STATUS_FG,
            font=("Helvetica", 16, "bold"),
        )
        self.lbl_position.pack(side=tk.LEFT, padx=(12, 10))

        self.lbl_filename = tk.Label(
            self.status_frame, text="", bg=COLOR_STATUS_BG, fg=COLOR_FILENAME,
            font=("Helvetica", 12),
        )
        self.lbl_filename.pack(side=tk.LEFT, padx=4)

        self.lbl_summary = tk.Label(
            self.status_frame, text="", bg=COLOR_STATUS_BG, fg=COLOR_STATUS_FG,
            font=("Helvetica", 12),
        )
        self.lbl_summary.pack(side=tk.RIGHT, padx=(0, 12))

        # Button row above the status bar; contents swap when sifting is done
        self.button_frame = tk.Frame(self.root, bg=COLOR_BG, height=BUTTON_ROW_HEIGHT)
        self.button_frame.pack(fill=tk.X, side=tk.BOTTOM)
        self.button_frame.pack_propagate(False)

        # Main canvas for the image
        self.canvas = tk.Canvas(self.root, bg=COLOR_BG, highlightthickness=0)
        self.canvas.pack(fill=tk.BOTH, expand=True)

        # Handle resize
        self.canvas.bind("<Configure>", lambda e: self._show_current())

    def _build_buttons(self, finished: bool):
        for w in self.button_frame.winfo_children():
            w.destroy()

        inner = tk.Frame(self.button_frame, bg=COLOR_BG)
        inner.pack(expand=True)

        if finished:
            buttons = [
                ("Copy Kept Images", COLOR_KEEP, self._export),
                ("Reset", COLOR_STATUS_FG, self._reset),
            ]
        else:
            buttons = [
                ("\u2190 Discard", COLOR_DISCARD, lambda: self._decide(Verdict.DISCARD)),
                ("Keep \u2192", COLOR_KEEP, lambda: self._decide(Verdict.KEEP)),
            ]

        for text, color, command in buttons:
            tk.Button(
                inner, text=text, fg=color, bg=COLOR_BUTTON_BG,
                font=("Helvetica", 14, "bold"), width=14, command=command,
            ).pack(side=tk.LEFT, padx=15, pady=8)

    def _bind_keys(self):
        self.root.bind("<Right>", lambda e: self._decide(Verdict.KEEP))
        self.root.bind("<Left>", lambda e: self._decide(Verdict.DISCARD))
        self.root.bind("<Escape>", lambda e: self._quit())

    def _pick_folder(self):
        folder = filedialog.askdirectory(title="Select folder with images")
        if folder:
            self._open_folder(folder)

    def _open_folder(self, folder: str):
        try:
            session = SiftSession.open(folder)
        except ScanError as e:
            messagebox.showerror("Cannot open folder", str(e))
            return

        self.session = session
        self._decoded = None
        self.lbl_folder.config(text=session.working_root)
        if session.total == 0:
            messagebox.showinfo("No Images", f"No JPEG files found in:\n{session.working_root}")
        self._build_buttons(session.is_finished)
        self._show_current()

    def _decide(self, verdict: Verdict):
        if self.session is None or self.session.is_finished:
            return
        self.session.advance(verdict)
        if self.session.is_finished:
            self._build_buttons(True)
        self._show_current()

    def _current_image(self):
        if self.session is None:
            return placeholder("Select a working folder")
        path = self.session.current_item()
        if path is None:
            return placeholder("All images processed!")

        key = (self.session.cursor, path)
        if self._decoded and self._decoded[:2] == key:
            return self._decoded[2]

        data = self.session.current_bytes()
        if data is None:
            return placeholder("Loading image...")
        img = decode(data, os.path.splitext(path)[1])
        if img is None:
            return placeholder("Cannot display image")
        self._decoded = key + (img,)
        return img

    def _show_current(self):
        img = self._current_image()

        # Fit image to canvas
        cw = self.canvas.winfo_width()
        ch = self.canvas.winfo_height()
        if cw < 2 or ch < 2:
            return

        iw, ih = img.size
        scale = min(cw / iw, ch / ih)
        new_w = max(1, int(iw * scale))
        new_h = max(1, int(ih * scale))
        resized = img.resize((new_w, new_h), resample=1)  # BILINEAR

        self._photo = ImageTk.PhotoImage(resized)
        self.canvas.delete("all")
        self.canvas.create_image(cw // 2, ch // 2, image=self._photo, anchor=tk.CENTER)

        self._update_status()

    def _update_status(self):
        if self.session is None:
            return
        counts = self.session.counts()
        path = self.session.current_item()

        if path is None:
            pos_text = f"{counts.total}/{counts.total}"
            self.lbl_filename.config(text="")
        else:
            pos_text = f"{self.session.cursor + 1}/{counts.total}"
            self.lbl_filename.config(text=os.path.basename(path))
        self.lbl_position.config(text=pos_text)

        self.lbl_summary.config(
            text=(
                f"Kept:{counts.kept}  Discarded:{counts.discarded}  "
                f"Remaining:{counts.remaining}  Cached:{len(self.session.cache)}"
            )
        )
        folder_name = os.path.basename(self.session.working_root)
        self.root.title(f"Image Sifter \u2014 {folder_name} ({pos_text})")

    def _export(self):
        if self.session is None:
            return
        try:
            result = self.session.export()
        except (PathError, ExportIOError) as e:
            logger.error("Export failed: %s", e)
            messagebox.showerror("Copy failed", f"Error copying images:\n{e}")
            return

        messagebox.showinfo(
            "Copy Complete",
            f"{result.images_copied} images ({result.sidecars_copied} RAW sidecars) "
            f"copied to:\n{result.output_folder}",
        )

    def _reset(self):
        if self.session is None:
            return
        self.session.reset()
        self._build_buttons(self.session.is_finished)
        self._show_current()

    def _quit(self):
        self.root.destroy()
