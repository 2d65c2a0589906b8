#!/usr/bin/env python3
"""
Cairo drawing for laid-out graphs.
Works on any cairo.Context: the GTK viewer passes the DrawingArea context,
PNG export uses an ImageSurface.
"""
import argparse
import logging
import math
import sys

import cairo

logger = logging.getLogger(__name__)

NODE_RADIUS = 5
ARROW_SIZE = 5
MIN_ZOOM = 0.1
MAX_ZOOM = 10.0

BACKGROUND = (1, 1, 1)
FOREGROUND = (0, 0, 0)
ARROW_COLOR = (0, 0, 1)


class ViewTransform:
    """
    Pan and zoom applied on top of simulation coordinates.

    screen = world * zoom + offset
    """

    def __init__(self, zoom=1.0, offset_x=0.0, offset_y=0.0):
        self.zoom = zoom
        self.offset_x = offset_x
        self.offset_y = offset_y

    def reset(self):
        self.zoom = 1.0
        self.offset_x = 0.0
        self.offset_y = 0.0

    def pan(self, dx, dy):
        """Move the view by a screen-space delta."""
        self.offset_x += dx
        self.offset_y += dy

    def zoom_at(self, factor, x, y):
        """Zoom by ``factor`` keeping the world point under (x, y) fixed."""
        world_x, world_y = self.to_world(x, y)
        self.zoom = max(MIN_ZOOM, min(MAX_ZOOM, self.zoom * factor))
        self.offset_x = x - world_x * self.zoom
        self.offset_y = y - world_y * self.zoom

    def to_world(self, x, y):
        return (x - self.offset_x) / self.zoom, (y - self.offset_y) / self.zoom

    def to_screen(self, x, y):
        return x * self.zoom + self.offset_x, y * self.zoom + self.offset_y

    def apply(self, cr):
        cr.translate(self.offset_x, self.offset_y)
        cr.scale(self.zoom, self.zoom)


def draw_node(cr, node):
    x, y = node.pos.x, node.pos.y
    cr.set_source_rgb(*FOREGROUND)
    cr.set_line_width(1)
    cr.new_sub_path()
    cr.arc(x, y, NODE_RADIUS, 0, 2 * math.pi)
    cr.stroke()

    cr.select_font_face("Sans")
    cr.set_font_size(10)
    cr.move_to(x + NODE_RADIUS, y)
    cr.show_text(str(node.label))


def draw_edge(cr, edge):
    start, end = edge.start.pos, edge.end.pos
    angle = math.atan2(end.y - start.y, end.x - start.x)
    cos_a, sin_a = math.cos(angle), math.sin(angle)

    # Trim the segment so it meets the node outlines instead of the centers
    start_x = start.x + NODE_RADIUS * cos_a
    start_y = start.y + NODE_RADIUS * sin_a
    end_x = end.x - NODE_RADIUS * cos_a
    end_y = end.y - NODE_RADIUS * sin_a

    cr.set_source_rgb(*FOREGROUND)
    cr.set_line_width(1)
    cr.move_to(start_x, start_y)
    cr.line_to(end_x, end_y)
    cr.stroke()

    if edge.is_directed:
        cr.save()
        cr.translate(end_x, end_y)
        cr.scale(ARROW_SIZE, ARROW_SIZE)
        cr.rotate(angle - math.pi / 2)
        cr.set_source_rgb(*ARROW_COLOR)
        cr.move_to(-0.5, -1)
        cr.line_to(0.5, -1)
        cr.line_to(0, 0)
        cr.close_path()
        cr.fill()
        cr.restore()


def draw_graph(cr, graph, width, height, view=None, node_painter=None, edge_painter=None):
    """
    Clear the surface and draw every edge, then every node.

    ``node_painter(cr, node)`` and ``edge_painter(cr, edge)`` replace the
    default drawing when given.
    """
    node_painter = node_painter or draw_node
    edge_painter = edge_painter or draw_edge

    cr.save()
    cr.set_source_rgb(*BACKGROUND)
    cr.rectangle(0, 0, width, height)
    cr.fill()

    if view is not None:
        view.apply(cr)

    for edge in graph.edges:
        edge_painter(cr, edge)
    for node in graph.nodes.values():
        node_painter(cr, node)
    cr.restore()


def render_surface(graph, width, height, view=None):
    surface = cairo.ImageSurface(cairo.FORMAT_ARGB32, width, height)
    cr = cairo.Context(surface)
    draw_graph(cr, graph, width, height, view=view)
    surface.flush()
    return surface


def render_png(graph, path, width=1200, height=800, view=None):
    """Draw the graph onto an image surface and write it to ``path``."""
    surface = render_surface(graph, width, height, view=view)
    surface.write_to_png(path)
    logger.info(f"Graph image written to {path} ({width}x{height})")


def main(argv=None):
    from backend.force_directed_layout import force_directed_layout
    from backend.graph import GraphError
    from backend.graph_loader import load_graph
    from backend.preferences import layout_config_from, load_preferences

    parser = argparse.ArgumentParser(description="Lay out a graph and export it as PNG.")
    parser.add_argument("graph", help="topology JSON file")
    parser.add_argument("output", help="PNG file to write")
    parser.add_argument("--width", type=int, default=1200)
    parser.add_argument("--height", type=int, default=800)
    parser.add_argument("--iterations", type=int, default=600)
    parser.add_argument("--dt", type=float, default=0.016)
    parser.add_argument("--verbose", action="store_true")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format='%(asctime)s [%(levelname)s] %(message)s'
    )

    config = layout_config_from(load_preferences())
    try:
        graph = load_graph(args.graph, config=config)
    except (OSError, GraphError) as e:
        logger.error(f"Could not load {args.graph}: {e}")
        return 1

    force_directed_layout(graph, args.width, args.height, iterations=args.iterations, dt=args.dt)
    render_png(graph, args.output, args.width, args.height)
    return 0


if __name__ == '__main__':
    sys.exit(main())
