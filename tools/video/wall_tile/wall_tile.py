#!/usr/bin/env python3
"""Interactive preview and exporter for striped perspective wall tiles."""
from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import List, Optional

import tkinter as tk
from PIL import Image, ImageTk
from tkinter import colorchooser, filedialog, messagebox, ttk

from app_core.settings import load_settings, size_setting
from tools.video.wall_tile.compositor import EXPORT_SCALES, WallScene, render_preview
from tools.video.wall_tile.export import export_filename, export_wall
from tools.video.wall_tile.perspective import CameraConfig
from tools.video.wall_tile.stripes import (
    Stripe,
    add_stripe,
    format_stripes,
    parse_stripes,
    remove_stripe,
    update_stripe,
)

LOG = logging.getLogger("wall_tile_tool")

if hasattr(Image, "Resampling"):
    RESAMPLE = Image.Resampling.LANCZOS
else:  # pragma: no cover - Pillow < 9 fallback
    RESAMPLE = Image.LANCZOS


# (label, variable name, from, to, resolution)
SLIDERS = [
    ("Field of view (deg)", "fov_var", 30.0, 120.0, 1.0),
    ("Camera height", "camera_height_var", 100.0, 5000.0, 10.0),
    ("Horizon height (0-1)", "horizon_var", 0.1, 0.9, 0.01),
    ("Road width", "road_width_var", 200.0, 8000.0, 10.0),
    ("Wall start depth", "start_depth_var", 100.0, 20000.0, 10.0),
    ("Wall segment length", "segment_length_var", 100.0, 20000.0, 10.0),
    ("Wall height", "wall_height_var", 100.0, 5000.0, 10.0),
]


class WallTileApp(tk.Tk):
    """UI for tuning the camera, the wall and its stripes."""

    def __init__(self, args: argparse.Namespace) -> None:
        super().__init__()
        self.args = args
        title = "Perspective Wall Tiles"
        if args.project_name:
            title += f" — {args.project_name}"
        self.title(title)
        self.geometry("1180x760")

        self.repo_root = Path(__file__).resolve().parents[3]
        config_path = Path(args.config).expanduser() if args.config else None
        self.settings = load_settings(config_path)
        self.preview_size = size_setting(self.settings, "preview_size")
        self.export_base_size = size_setting(self.settings, "export_base_size")
        self.output_dir = self._resolve_output_dir(args)

        initial = WallScene.from_settings(self.settings.get("wall_tile", {}))
        self.stripes: List[Stripe] = list(initial.stripes)

        self.fov_var = tk.DoubleVar(value=initial.camera.field_of_view)
        self.camera_height_var = tk.DoubleVar(value=initial.camera.camera_height)
        self.horizon_var = tk.DoubleVar(value=initial.camera.horizon_fraction)
        self.road_width_var = tk.DoubleVar(value=initial.road_width)
        self.start_depth_var = tk.DoubleVar(value=initial.start_depth)
        self.segment_length_var = tk.DoubleVar(value=initial.segment_length)
        self.wall_height_var = tk.DoubleVar(value=initial.wall_height)
        self.side_var = tk.IntVar(value=initial.side)
        self.show_ground_var = tk.BooleanVar(value=initial.show_ground)
        scale = initial.export_scale if initial.export_scale in EXPORT_SCALES else 1
        self.export_scale_var = tk.StringVar(value=f"{scale}x")
        self.status_var = tk.StringVar(value=f"Exports go to {self.output_dir}")

        self._preview_after_id: Optional[str] = None
        self._preview_photo: Optional[ImageTk.PhotoImage] = None
        self._editor: Optional[ttk.Entry] = None
        self._editor_var = tk.StringVar()

        self._build_ui()
        self._refresh_stripe_table()
        self._schedule_preview_refresh()

    # ------------------------------------------------------------------
    def _resolve_output_dir(self, args: argparse.Namespace) -> Path:
        """Pick the export folder: --output-dir, then the project assets, then settings."""

        if args.output_dir:
            return Path(args.output_dir).expanduser().resolve()
        if args.project:
            project_path = Path(args.project).expanduser().resolve()
            if project_path.exists():
                return project_path / "assets"
        export_dir = Path(str(self.settings.get("export_dir", "exports"))).expanduser()
        if not export_dir.is_absolute():
            export_dir = self.repo_root / export_dir
        return export_dir

    # ------------------------------------------------------------------
    def _build_ui(self) -> None:
        container = ttk.Frame(self, padding=20)
        container.pack(fill="both", expand=True)
        container.columnconfigure(0, weight=1)
        container.rowconfigure(1, weight=1)

        header = ttk.Frame(container)
        header.grid(row=0, column=0, columnspan=2, sticky="ew", pady=(0, 12))
        ttk.Label(header, text="Perspective Wall Tiles", font=("Segoe UI", 14, "bold")).pack(anchor="w")
        ttk.Label(
            header,
            text="Preview a striped side wall under a road camera and export it as a trimmed PNG.",
            foreground="#666",
        ).pack(anchor="w", pady=(4, 0))

        width, height = self.preview_size
        self.preview_canvas = tk.Canvas(
            container, width=width, height=height, highlightthickness=1, highlightbackground="#333"
        )
        self.preview_canvas.grid(row=1, column=0, sticky="nsew")

        side_panel = ttk.Frame(container)
        side_panel.grid(row=1, column=1, sticky="ns", padx=(16, 0))
        self._build_camera_settings(side_panel)
        self._build_stripe_editor(side_panel)
        self._build_export_controls(side_panel)

        ttk.Label(container, textvariable=self.status_var, foreground="#4a4a4a").grid(
            row=2, column=0, columnspan=2, sticky="w", pady=(8, 0)
        )

    # ------------------------------------------------------------------
    def _build_camera_settings(self, parent: ttk.Frame) -> None:
        settings = ttk.LabelFrame(parent, text="Camera and wall", padding=12)
        settings.pack(fill="x")
        settings.columnconfigure(1, weight=1)

        for row, (label, var_name, lo, hi, resolution) in enumerate(SLIDERS):
            var = getattr(self, var_name)
            ttk.Label(settings, text=label).grid(row=row, column=0, sticky="w", padx=(0, 8), pady=2)
            scale = tk.Scale(
                settings,
                variable=var,
                from_=lo,
                to=hi,
                resolution=resolution,
                orient="horizontal",
                length=220,
                command=lambda _value=None: self._schedule_preview_refresh(),
            )
            scale.grid(row=row, column=1, sticky="ew")

        side_row = len(SLIDERS)
        ttk.Label(settings, text="Wall side").grid(row=side_row, column=0, sticky="w", padx=(0, 8), pady=4)
        side_frame = ttk.Frame(settings)
        side_frame.grid(row=side_row, column=1, sticky="w")
        for text, value in (("Left", -1), ("Right", 1)):
            ttk.Radiobutton(
                side_frame, text=text, value=value, variable=self.side_var, command=self._schedule_preview_refresh
            ).pack(side="left", padx=(0, 8))

        ttk.Checkbutton(
            settings,
            text="Show ground",
            variable=self.show_ground_var,
            command=self._schedule_preview_refresh,
        ).grid(row=side_row + 1, column=0, columnspan=2, sticky="w", pady=(4, 0))

    # ------------------------------------------------------------------
    def _build_stripe_editor(self, parent: ttk.Frame) -> None:
        frame = ttk.LabelFrame(parent, text="Color stripes", padding=12)
        frame.pack(fill="both", expand=True, pady=(12, 0))

        self.tree = ttk.Treeview(frame, columns=("position", "color"), show="headings", height=6, selectmode="browse")
        self.tree.heading("position", text="Position")
        self.tree.heading("color", text="Color")
        self.tree.column("position", anchor="center", width=90)
        self.tree.column("color", anchor="center", width=110)
        self.tree.pack(fill="x")
        self.tree.bind("<Double-1>", self._start_edit)

        buttons = ttk.Frame(frame)
        buttons.pack(fill="x", pady=(6, 0))
        ttk.Button(buttons, text="Add stripe", command=self._add_stripe).pack(side="left")
        ttk.Button(buttons, text="Color...", command=self._pick_stripe_color).pack(side="left", padx=(6, 0))
        ttk.Button(buttons, text="Remove", command=self._remove_stripe).pack(side="left", padx=(6, 0))

        ttk.Label(frame, text="Stripes as text (position: color)", foreground="#666").pack(anchor="w", pady=(8, 2))
        self.stripes_text = tk.Text(frame, height=5, width=28, font=("Consolas", 10))
        self.stripes_text.pack(fill="x")
        ttk.Button(frame, text="Apply text", command=self._apply_stripes_text).pack(anchor="e", pady=(4, 0))

    # ------------------------------------------------------------------
    def _build_export_controls(self, parent: ttk.Frame) -> None:
        frame = ttk.LabelFrame(parent, text="Export", padding=12)
        frame.pack(fill="x", pady=(12, 0))
        ttk.Label(frame, text="Scale").pack(side="left")
        ttk.Combobox(
            frame,
            textvariable=self.export_scale_var,
            values=[f"{scale}x" for scale in EXPORT_SCALES],
            state="readonly",
            width=5,
        ).pack(side="left", padx=(6, 12))
        ttk.Button(frame, text="Export PNG", command=self._export).pack(side="left")
        ttk.Button(frame, text="Export as...", command=self._export_as).pack(side="left", padx=(6, 0))

    # ------------------------------------------------------------------
    def _safe_float(self, var: tk.Variable) -> Optional[float]:
        try:
            return float(var.get())
        except (tk.TclError, ValueError):
            return None

    # ------------------------------------------------------------------
    def _collect_scene(self, *, context: str, quiet: bool = False) -> Optional[WallScene]:
        """Snapshot the current controls into a ``WallScene``."""

        values = {name: self._safe_float(getattr(self, name)) for _label, name, *_rest in SLIDERS}
        if any(value is None for value in values.values()):
            if not quiet:
                messagebox.showerror(context, "Please enter numeric camera and wall settings.", parent=self)
            return None

        fov = values["fov_var"]
        horizon = values["horizon_var"]
        assert fov is not None and horizon is not None
        if not 0 < fov < 180:
            if not quiet:
                messagebox.showerror(context, "Field of view must be between 0 and 180 degrees.", parent=self)
            return None
        if not 0 <= horizon <= 1:
            if not quiet:
                messagebox.showerror(context, "Horizon height must be between 0 and 1.", parent=self)
            return None
        for name in ("start_depth_var", "segment_length_var", "wall_height_var"):
            value = values[name]
            if value is None or value <= 0:
                if not quiet:
                    messagebox.showerror(context, "Wall depth, length and height must be positive.", parent=self)
                return None

        try:
            scale = int(self.export_scale_var.get().rstrip("x"))
        except ValueError:
            scale = 1

        return WallScene(
            camera=CameraConfig(
                field_of_view=fov,
                camera_height=values["camera_height_var"] or 0.0,
                horizon_fraction=horizon,
            ),
            road_width=values["road_width_var"] or 0.0,
            side=-1 if self.side_var.get() < 0 else 1,
            start_depth=values["start_depth_var"] or 0.0,
            segment_length=values["segment_length_var"] or 0.0,
            wall_height=values["wall_height_var"] or 0.0,
            stripes=tuple(self.stripes),
            show_ground=bool(self.show_ground_var.get()),
            export_scale=scale if scale in EXPORT_SCALES else 1,
        )

    # ------------------------------------------------------------------
    def _schedule_preview_refresh(self) -> None:
        if self._preview_after_id is not None:
            try:
                self.after_cancel(self._preview_after_id)
            except tk.TclError:
                pass
        self._preview_after_id = self.after(60, self._render_preview)

    # ------------------------------------------------------------------
    def _render_preview(self) -> None:
        self._preview_after_id = None
        scene = self._collect_scene(context="Preview", quiet=True)
        if scene is None:
            return
        frame = render_preview(scene, self.preview_size)

        canvas_width = max(int(self.preview_canvas.winfo_width()) or 0, 1)
        canvas_height = max(int(self.preview_canvas.winfo_height()) or 0, 1)
        scale = min(canvas_width / frame.width, canvas_height / frame.height, 1.0)
        if scale < 1.0:
            frame = frame.resize((max(1, int(frame.width * scale)), max(1, int(frame.height * scale))), RESAMPLE)

        self._preview_photo = ImageTk.PhotoImage(frame)
        self.preview_canvas.delete("all")
        self.preview_canvas.create_image(0, 0, anchor="nw", image=self._preview_photo)

    # ------------------------------------------------------------------
    def _refresh_stripe_table(self) -> None:
        self.tree.delete(*self.tree.get_children())
        for idx, stripe in enumerate(self.stripes):
            self.tree.insert("", "end", iid=str(idx), values=stripe.as_row())
        self.stripes_text.delete("1.0", tk.END)
        self.stripes_text.insert("1.0", format_stripes(self.stripes))

    def _set_stripes(self, stripes: List[Stripe]) -> None:
        self.stripes = stripes
        self._refresh_stripe_table()
        self._schedule_preview_refresh()

    def _selected_index(self) -> Optional[int]:
        selection = self.tree.selection()
        if not selection:
            return None
        return int(selection[0])

    # ------------------------------------------------------------------
    def _add_stripe(self) -> None:  # pragma: no cover - UI callback
        self._set_stripes(add_stripe(self.stripes))

    def _remove_stripe(self) -> None:  # pragma: no cover - UI callback
        index = self._selected_index()
        if index is None:
            messagebox.showinfo("Remove stripe", "Select a stripe first.", parent=self)
            return
        self._set_stripes(remove_stripe(self.stripes, index))

    def _pick_stripe_color(self) -> None:  # pragma: no cover - UI callback
        index = self._selected_index()
        if index is None:
            messagebox.showinfo("Stripe color", "Select a stripe first.", parent=self)
            return
        color = colorchooser.askcolor(title="Choose stripe color", initialcolor=self.stripes[index].hex_color)
        if color and color[1]:
            self._set_stripes(update_stripe(self.stripes, index, color=color[1]))

    def _apply_stripes_text(self) -> None:  # pragma: no cover - UI callback
        stripes = parse_stripes(self.stripes_text.get("1.0", tk.END))
        LOG.debug("Parsed %d stripe(s) from text", len(stripes))
        self._set_stripes(stripes)

    # ------------------------------------------------------------------
    def _start_edit(self, event: tk.Event) -> None:  # pragma: no cover - UI callback
        region = self.tree.identify("region", event.x, event.y)
        if region != "cell":
            return
        iid = self.tree.identify_row(event.y)
        column = self.tree.identify_column(event.x)
        if not iid or column != "#1":  # position only; colors use the picker
            return

        self._teardown_editor()
        bbox = self.tree.bbox(iid, column)
        if not bbox:
            return
        x, y, width, height = bbox
        self._editor_var.set(self.tree.set(iid, column))
        self._editor = ttk.Entry(self.tree, textvariable=self._editor_var)
        self._editor.place(x=x, y=y, width=width, height=height)
        self._editor.focus()
        self._editor.select_range(0, tk.END)
        self._editor.bind("<Return>", lambda e: self._commit_edit(iid))
        self._editor.bind("<FocusOut>", lambda e: self._commit_edit(iid))

    def _commit_edit(self, iid: str) -> None:  # pragma: no cover - UI callback
        if not self._editor:
            return
        raw_value = self._editor_var.get().strip()
        try:
            position = float(raw_value)
        except ValueError:
            messagebox.showerror("Invalid value", "Please enter a numeric position.", parent=self)
            self._editor.focus_set()
            return
        if not 0 <= position <= 1:
            messagebox.showerror("Invalid value", "Stripe positions run from 0 to 1.", parent=self)
            self._editor.focus_set()
            return
        self._teardown_editor()
        self._set_stripes(update_stripe(self.stripes, int(iid), position=position))

    def _teardown_editor(self) -> None:
        if self._editor is not None:
            self._editor.destroy()
            self._editor = None

    # ------------------------------------------------------------------
    def _export(self) -> None:  # pragma: no cover - UI callback
        scene = self._collect_scene(context="Export")
        if scene is None:
            return
        self._write_export(scene, self.output_dir)

    def _export_as(self) -> None:  # pragma: no cover - UI callback
        scene = self._collect_scene(context="Export")
        if scene is None:
            return
        folder = filedialog.askdirectory(parent=self, title="Export folder", initialdir=str(self.output_dir))
        if folder:
            self._write_export(scene, Path(folder))

    def _write_export(self, scene: WallScene, output_dir: Path) -> None:
        LOG.info("Exporting %s at %dx", export_filename(scene), scene.export_scale)
        try:
            path = export_wall(scene, output_dir, self.export_base_size)
        except OSError as exc:
            LOG.error("Export to %s failed: %s", output_dir, exc)
            messagebox.showerror("Export failed", f"Could not write the PNG:\n{exc}", parent=self)
            return
        self.status_var.set(f"Saved {path}")


# ---------------------------------------------------------------------------
# Entrypoint
# ---------------------------------------------------------------------------


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Perspective Wall Tiles")
    parser.add_argument("--project", help="Path to the active project root")
    parser.add_argument("--project-name", help="Display name for the project")
    parser.add_argument("--output-dir", help="Directory for exported PNGs")
    parser.add_argument("--config", help="Settings JSON overriding the defaults")
    parser.add_argument(
        "--log-level",
        default="INFO",
        help="Logging verbosity (e.g. DEBUG, INFO, WARNING)",
    )
    return parser.parse_args()


def main() -> None:
    args = parse_args()
    log_level = getattr(logging, str(args.log_level).upper(), logging.INFO)
    logging.basicConfig(
        level=log_level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )
    LOG.info("Launching WallTileApp (project=%s, project_name=%s)", args.project, args.project_name)
    app = WallTileApp(args)
    app.mainloop()


if __name__ == "__main__":
    main()
