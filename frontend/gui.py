#!/usr/bin/env python3
"""
ForceGraph-Lite GTK4 Frontend
Interactive viewer that animates the force-directed layout of a graph.
"""
import warnings
warnings.filterwarnings('ignore', category=DeprecationWarning, module='gi')

import gi
gi.require_version('Gtk', '4.0')
from gi.repository import Gtk, GLib, Gdk
import logging
import os
import sys
import time

from backend.graph import GraphError
from backend.graph_loader import load_graph_or_demo
from backend.preferences import layout_config_from, load_preferences, save_preferences
from frontend.driver import LayoutDriver
from frontend.renderer import ViewTransform, draw_graph, render_png

logger = logging.getLogger(__name__)

ZOOM_STEP = 1.1


class GraphViewerWindow(Gtk.Window):
    def __init__(self, app, graph, prefs, title='ForceGraph-Lite'):
        super().__init__(application=app, title=title)
        self._prefs = prefs
        window = prefs.get('window', {})
        self.set_default_size(window.get('width', 1200), window.get('height', 800))

        self.graph = graph
        self.driver = LayoutDriver(graph)
        self.view = ViewTransform()
        self._pointer = (0.0, 0.0)
        self._drag_offset = (0.0, 0.0)

        self._build_ui()
        self._setup_keyboard_shortcuts()
        self.connect("close-request", self._on_window_close)

    def _build_ui(self):
        """Build the GTK4 UI."""
        header = Gtk.HeaderBar()
        header.set_show_title_buttons(True)
        self.set_titlebar(header)

        self.pause_btn = Gtk.Button(label="Pause")
        self.pause_btn.connect('clicked', lambda b: self._toggle_pause())
        header.pack_start(self.pause_btn)

        restart_btn = Gtk.Button(label="Restart Layout")
        restart_btn.connect('clicked', lambda b: self._restart_layout())
        header.pack_start(restart_btn)

        reset_btn = Gtk.Button(label="Reset View")
        reset_btn.connect('clicked', lambda b: self._reset_view())
        header.pack_end(reset_btn)

        export_btn = Gtk.Button(label="Export PNG")
        export_btn.connect('clicked', self._export_image)
        header.pack_end(export_btn)

        self.drawing_area = Gtk.DrawingArea()
        self.drawing_area.set_hexpand(True)
        self.drawing_area.set_vexpand(True)
        self.drawing_area.set_draw_func(self._draw)
        self.set_child(self.drawing_area)

        # Pan with left-button drag
        drag = Gtk.GestureDrag()
        drag.set_button(1)
        drag.connect("drag-begin", self._on_drag_begin)
        drag.connect("drag-update", self._on_drag_update)
        self.drawing_area.add_controller(drag)

        # Zoom around the pointer
        motion = Gtk.EventControllerMotion()
        motion.connect("motion", self._on_motion)
        self.drawing_area.add_controller(motion)

        scroll = Gtk.EventControllerScroll()
        scroll.set_flags(Gtk.EventControllerScrollFlags.VERTICAL)
        scroll.connect("scroll", self._on_scroll)
        self.drawing_area.add_controller(scroll)

        self.drawing_area.add_tick_callback(self._on_tick)

    def _on_tick(self, widget, frame_clock):
        """Run one simulation step per display frame, then redraw."""
        now = frame_clock.get_frame_time() / 1e6
        self.driver.tick(now, widget.get_width(), widget.get_height())
        widget.queue_draw()
        return GLib.SOURCE_CONTINUE

    def _draw(self, widget, cr, width, height):
        draw_graph(cr, self.graph, width, height, view=self.view)

    def _on_drag_begin(self, gesture, x, y):
        self._drag_offset = (0.0, 0.0)

    def _on_drag_update(self, gesture, offset_x, offset_y):
        # Offsets are cumulative from the drag start
        last_x, last_y = self._drag_offset
        self.view.pan(offset_x - last_x, offset_y - last_y)
        self._drag_offset = (offset_x, offset_y)

    def _on_motion(self, controller, x, y):
        self._pointer = (x, y)

    def _on_scroll(self, controller, dx, dy):
        if dy == 0:
            return False
        factor = ZOOM_STEP if dy < 0 else 1 / ZOOM_STEP
        self.view.zoom_at(factor, *self._pointer)
        return True

    def _zoom_center(self, factor):
        width = self.drawing_area.get_width()
        height = self.drawing_area.get_height()
        self.view.zoom_at(factor, width / 2, height / 2)

    def _reset_view(self):
        self.view.reset()

    def _toggle_pause(self):
        paused = self.driver.toggle_pause()
        self.pause_btn.set_label("Resume" if paused else "Pause")

    def _restart_layout(self):
        width = self.drawing_area.get_width()
        height = self.drawing_area.get_height()
        if width > 0 and height > 0:
            self.driver.restart(width, height)

    def _setup_keyboard_shortcuts(self):
        key_controller = Gtk.EventControllerKey()
        key_controller.connect("key-pressed", self._on_key_pressed)
        self.add_controller(key_controller)

    def _on_key_pressed(self, controller, keyval, keycode, state):
        """Handle keyboard shortcuts."""
        if keyval == Gdk.KEY_space:
            self._toggle_pause()
            return True
        if keyval in (Gdk.KEY_r, Gdk.KEY_R):
            self._reset_view()
            return True
        if keyval in (Gdk.KEY_plus, Gdk.KEY_equal, Gdk.KEY_KP_Add):
            self._zoom_center(ZOOM_STEP)
            return True
        if keyval in (Gdk.KEY_minus, Gdk.KEY_KP_Subtract):
            self._zoom_center(1 / ZOOM_STEP)
            return True
        return False

    def _export_image(self, btn):
        """Export the current layout as a PNG image."""
        dialog = Gtk.FileChooserDialog(
            title="Export Graph Image",
            transient_for=self,
            modal=True,
            action=Gtk.FileChooserAction.SAVE
        )
        dialog.add_button("Cancel", Gtk.ResponseType.CANCEL)
        dialog.add_button("Save", Gtk.ResponseType.ACCEPT)

        timestamp = time.strftime("%Y%m%d_%H%M%S")
        dialog.set_current_name(f"graph_{timestamp}.png")

        png_filter = Gtk.FileFilter()
        png_filter.set_name("PNG Images")
        png_filter.add_pattern("*.png")
        dialog.add_filter(png_filter)

        def on_response(dialog, response_id):
            file = dialog.get_file() if response_id == Gtk.ResponseType.ACCEPT else None
            dialog.close()
            if file:
                self._do_export(file.get_path())

        dialog.connect("response", on_response)
        dialog.present()

    def _do_export(self, filename):
        width = self.drawing_area.get_width() or 1200
        height = self.drawing_area.get_height() or 800
        try:
            render_png(self.graph, filename, width, height, view=self.view)
        except OSError as e:
            logger.error(f"Failed to export image to {filename}: {e}")
            self._show_error_dialog("Export Error", f"Failed to export image: {e}")

    def _show_error_dialog(self, title, message):
        dialog = Gtk.MessageDialog(
            transient_for=self,
            modal=True,
            message_type=Gtk.MessageType.ERROR,
            buttons=Gtk.ButtonsType.OK,
            text=title
        )
        dialog.set_secondary_text(message)
        dialog.connect("response", lambda d, r: d.close())
        dialog.present()

    def _on_window_close(self, window):
        """Save window size on close."""
        self._prefs['window'].update({'width': self.get_width(), 'height': self.get_height()})
        try:
            save_preferences(self._prefs)
        except OSError as e:
            logger.error(f"Error saving preferences: {e}")
        return False  # Allow window to close


class ForceGraphApp(Gtk.Application):
    def __init__(self, graph, prefs, title):
        super().__init__(application_id='com.forcegraph.lite')
        self.graph = graph
        self.prefs = prefs
        self.title = title
        self.window = None

    def do_activate(self):
        if not self.window:
            self.window = GraphViewerWindow(self, self.graph, self.prefs, title=self.title)
        self.window.present()


def main(argv=None):
    argv = sys.argv[1:] if argv is None else argv
    logging.basicConfig(
        level=logging.DEBUG if '--verbose' in argv else logging.INFO,
        format='%(asctime)s [%(levelname)s] %(message)s'
    )
    paths = [arg for arg in argv if not arg.startswith('--')]
    graph_path = paths[0] if paths else None

    if 'DISPLAY' not in os.environ and 'WAYLAND_DISPLAY' not in os.environ:
        logger.error("No display available; GUI applications require X11 or Wayland")
        return 1

    prefs = load_preferences()
    try:
        graph = load_graph_or_demo(graph_path, config=layout_config_from(prefs))
    except (OSError, GraphError) as e:
        logger.error(f"Could not load {graph_path}: {e}")
        return 1

    name = os.path.basename(graph_path) if graph_path else "demo"
    app = ForceGraphApp(graph, prefs, title=f"ForceGraph-Lite - {name}")
    return app.run(None)


if __name__ == '__main__':
    sys.exit(main())
