import tkinter as tk
import os
import sys
from datetime import datetime, timezone
from tkinter import filedialog, messagebox
from typing import Callable, Optional

import session_log
from session_log import SessionLogger

from netmap import Navigation, Rect, Snapshot, SnapshotError, TopologyView, ViewConfig
from netmap.export import sample_snapshot
from netmap.paint import paint
from netmap.render import HELP_TEXT

BG = "#0f1115"
PANEL_BG = "#14161b"
FG = "#e0e0e0"
MUTED_FG = "#9e9e9e"

# Pixels of canvas left blank around the map on every side.
MAP_MARGIN = 12


class NetworkMapWindow:
    """Tk host for the topology map.

    Reads a controller snapshot from a JSON file on a timer, forwards mouse and
    key input to TopologyView and repaints after every event.
    """

    def __init__(
        self,
        root: tk.Tk,
        snapshot_path: Optional[str] = None,
        config: Optional[ViewConfig] = None,
        on_navigate: Optional[Callable[[Navigation], None]] = None,
    ):
        self.root = root
        self.root.title("Network Map")
        self.config = config or ViewConfig.from_env()
        self.snapshot_path = snapshot_path
        self.on_navigate = on_navigate
        self.refresh_job: Optional[str] = None

        self.session = SessionLogger()
        self.session.add(session_log.SESSION_START, cwd=os.getcwd(), snapshot=snapshot_path)

        self.view = TopologyView(self.config, log_event_cb=self.log_event)

        self.header = tk.Label(root, text="", fg=FG, bg=PANEL_BG, anchor="w", padx=8, pady=4)
        self.header.pack(fill=tk.X, side=tk.TOP)

        self.canvas = tk.Canvas(root, bg=BG, width=1000, height=700, highlightthickness=0)
        self.canvas.pack(fill=tk.BOTH, expand=True)

        self.status = tk.Label(root, text="", fg=MUTED_FG, bg=PANEL_BG, anchor="w", padx=8, pady=4)
        self.status.pack(fill=tk.X, side=tk.BOTTOM)

        self.build_menu()
        self.bind_events()

        if not snapshot_path:
            # Nothing to poll; show the built-in example network.
            self.view.update_from_snapshot(Snapshot.from_dict(sample_snapshot()))
        self.refresh()

    def log_event(self, kind: str, **data):
        self.session.add(kind, **data)

    # ───────────────── Menu ─────────────────

    def build_menu(self):
        menubar = tk.Menu(self.root)

        filemenu = tk.Menu(menubar, tearoff=0)
        filemenu.add_command(label="Open Snapshot…", accelerator="Ctrl+O", command=self.open_snapshot_dialog)
        filemenu.add_command(label="Refresh Now", accelerator="F5", command=self.refresh)
        filemenu.add_separator()
        filemenu.add_command(label="Exit", command=self.root.quit)
        menubar.add_cascade(label="File", menu=filemenu)

        viewmenu = tk.Menu(menubar, tearoff=0)
        viewmenu.add_command(label="Zoom In", accelerator="+", command=lambda: self.on_key_command("+"))
        viewmenu.add_command(label="Zoom Out", accelerator="-", command=lambda: self.on_key_command("-"))
        viewmenu.add_command(label="Reset View", accelerator="r", command=lambda: self.on_key_command("r"))
        menubar.add_cascade(label="View", menu=viewmenu)

        sessionmenu = tk.Menu(menubar, tearoff=0)
        sessionmenu.add_command(label="Save Session Log…", command=self.save_session_log)
        sessionmenu.add_command(label="Clear Session Log", command=self.clear_session_log)
        menubar.add_cascade(label="Session", menu=sessionmenu)

        self.root.config(menu=menubar)

    def open_snapshot_dialog(self):
        path = filedialog.askopenfilename(
            title="Open controller snapshot",
            filetypes=[("Snapshot JSON", "*.json"), ("All files", "*.*")],
        )
        if not path:
            return
        self.snapshot_path = path
        self.refresh()

    def save_session_log(self):
        ts = datetime.now(timezone.utc).strftime("%Y%m%dT%H%M%SZ")
        path = filedialog.asksaveasfilename(
            title="Save session log",
            initialfile=f"netmap_{ts}.session.json",
            defaultextension=".json",
            filetypes=[("Session JSON", "*.json"), ("All files", "*.*")],
        )
        if not path:
            return
        try:
            self.session.save_json(path)
        except OSError as e:
            messagebox.showerror("Session log", str(e))

    def clear_session_log(self):
        self.session.clear()
        self.session.add(session_log.SESSION_CLEARED)

    # ───────────────── Events ─────────────────

    def bind_events(self):
        self.canvas.bind("<Button-1>", self.on_mouse_down)
        self.canvas.bind("<B1-Motion>", self.on_mouse_drag)
        self.canvas.bind("<ButtonRelease-1>", self.on_mouse_up)

        # Wheel zoom: Windows/macOS, then Linux buttons.
        self.canvas.bind("<MouseWheel>", lambda e: self.on_key_command("+" if e.delta > 0 else "-"))
        self.canvas.bind("<Button-4>", lambda e: self.on_key_command("+"))
        self.canvas.bind("<Button-5>", lambda e: self.on_key_command("-"))

        self.canvas.bind("<Configure>", lambda e: self.redraw())
        self.canvas.bind("<Key>", self.on_key)

        self.root.bind_all("<Control-o>", lambda e: self.open_snapshot_dialog())
        self.root.bind_all("<F5>", lambda e: self.refresh())

        self.canvas.focus_set()

    def viewport_area(self) -> Rect:
        return Rect(0, 0, self.canvas.winfo_width(), self.canvas.winfo_height()).inner(MAP_MARGIN)

    def on_mouse_down(self, event):
        self.canvas.focus_set()
        area = self.viewport_area()
        if not area.contains(event.x, event.y):
            return
        self.view.on_pointer_down(event.x, event.y, area)
        self.redraw()

    def on_mouse_drag(self, event):
        self.view.on_pointer_drag(event.x, event.y, self.viewport_area())
        self.redraw()

    def on_mouse_up(self, event):
        self.view.on_pointer_up()
        self.redraw()

    def on_key(self, event):
        # Printable keys come through as event.char, the rest as keysym.
        key = event.char if event.char in ("+", "=", "-", "_", "r") else event.keysym
        self.on_key_command(key)

    def on_key_command(self, key: str):
        nav = self.view.handle_key(key)
        self.redraw()
        if nav is not None:
            self.navigate(nav)

    def navigate(self, nav: Navigation):
        if self.on_navigate is not None:
            self.on_navigate(nav)
            return
        if nav.view == "overview":
            self.view.select_by_id(None)
            self.redraw()
            return
        node = self.view.get_selected_node()
        if node is not None:
            messagebox.showinfo("Details", f"{node.display_name()}\n{node.kind.describe()}\nid: {node.id}")

    # ───────────────── Refresh / draw ─────────────────

    def refresh(self):
        if self.refresh_job is not None:
            self.root.after_cancel(self.refresh_job)
            self.refresh_job = None

        # Never swap the graph out from under a node being dragged.
        if self.snapshot_path and self.view.dragging_node is None:
            try:
                snapshot = Snapshot.from_json_file(self.snapshot_path)
            except (OSError, SnapshotError) as e:
                self.log_event(session_log.SNAPSHOT_ERROR, path=self.snapshot_path, error=str(e))
                self.status.config(text=f"Snapshot error: {e}".splitlines()[0])
            else:
                self.view.update_from_snapshot(snapshot)
                self.redraw()

        self.refresh_job = self.root.after(self.config.refresh_ms, self.refresh)

    def redraw(self):
        paint(self.canvas, self.view.render(), self.viewport_area(), self.view.canvas)
        self.header.config(text=self.view.title())
        self.status.config(text=f"{self.view.status_text()} | {HELP_TEXT}")


def main(argv=None):
    argv = sys.argv[1:] if argv is None else argv
    path = argv[0] if argv else os.environ.get("NETMAP_SNAPSHOT")
    root = tk.Tk()
    NetworkMapWindow(root, snapshot_path=path)
    root.mainloop()


if __name__ == "__main__":
    main()
