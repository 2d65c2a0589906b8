#!/usr/bin/env python3
"""
Tests for the frame driver, view transform and cairo renderer.
The GTK window itself is not exercised here.
"""
import os
import random
import shutil
import sys
import tempfile
import unittest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from backend.graph import Graph
from backend.vector import Vector
from frontend.driver import FrameClock, LayoutDriver
from frontend.renderer import MAX_ZOOM, MIN_ZOOM, ViewTransform, render_png, render_surface
from tests.mock_graphs import build_graph

PNG_SIGNATURE = b'\x89PNG\r\n\x1a\n'


class TestFrameClock(unittest.TestCase):

    def test_first_tick_is_zero(self):
        self.assertEqual(FrameClock().tick(12.0), 0.0)

    def test_regular_frames(self):
        clock = FrameClock()
        clock.tick(1.0)
        self.assertAlmostEqual(clock.tick(1.016), 0.016)
        self.assertAlmostEqual(clock.tick(1.05), 0.034)

    def test_stall_contributes_no_time(self):
        clock = FrameClock()
        clock.tick(1.0)
        self.assertEqual(clock.tick(2.0), 0.0)
        # Timing resumes from the stalled frame
        self.assertAlmostEqual(clock.tick(2.02), 0.02)

    def test_backwards_time_is_clamped(self):
        clock = FrameClock()
        clock.tick(5.0)
        self.assertEqual(clock.tick(4.0), 0.0)


class TestLayoutDriver(unittest.TestCase):

    def test_first_tick_places_nodes(self):
        graph = build_graph("abc")
        driver = LayoutDriver(graph)
        self.assertEqual(driver.tick(0.0, 800, 600), 0.0)
        self.assertTrue(driver.initialized)
        for node in graph.nodes.values():
            self.assertTrue(360 - 1e-9 <= node.pos.x < 440)
            self.assertTrue(270 - 1e-9 <= node.pos.y < 330)

    def test_steps_once_per_frame(self):
        graph = build_graph("triangle")
        driver = LayoutDriver(graph)
        for i in range(5):
            driver.tick(i * 0.016, 800, 600)
        self.assertEqual(driver.frames, 5)
        for node in graph.nodes.values():
            self.assertTrue(node.vel.is_finite())
            self.assertGreater(node.vel.magnitude(), 0)

    def test_zero_sized_surface_is_skipped(self):
        driver = LayoutDriver(build_graph("abc"))
        self.assertEqual(driver.tick(0.0, 0, 0), 0.0)
        self.assertFalse(driver.initialized)
        self.assertEqual(driver.frames, 0)

    def test_paused_driver_leaves_state_alone(self):
        graph = build_graph("abc")
        driver = LayoutDriver(graph)
        driver.tick(0.0, 800, 600)
        self.assertTrue(driver.toggle_pause())
        before = {label: (node.pos, node.vel) for label, node in graph.nodes.items()}
        self.assertEqual(driver.tick(0.016, 800, 600), 0.0)
        after = {label: (node.pos, node.vel) for label, node in graph.nodes.items()}
        self.assertEqual(before, after)
        self.assertFalse(driver.toggle_pause())

    def test_restart_clears_momentum(self):
        graph = build_graph("abc")
        driver = LayoutDriver(graph)
        driver.tick(0.0, 800, 600)
        driver.tick(0.016, 800, 600)
        driver.restart(800, 600)
        for node in graph.nodes.values():
            self.assertEqual(node.vel, Vector(0, 0))

    def test_reentrant_step_is_rejected(self):
        driver = None

        class ReentrantGraph(Graph):
            def step(self, width, height, dt):
                driver.tick(1.0, width, height)

        graph = ReentrantGraph()
        graph.add("A")
        driver = LayoutDriver(graph)
        with self.assertRaises(RuntimeError):
            driver.tick(0.0, 800, 600)


class TestViewTransform(unittest.TestCase):

    def test_round_trip(self):
        view = ViewTransform(zoom=2.0, offset_x=15, offset_y=-30)
        sx, sy = view.to_screen(100, 50)
        self.assertEqual((sx, sy), (215, 70))
        self.assertEqual(view.to_world(sx, sy), (100, 50))

    def test_pan_moves_offset(self):
        view = ViewTransform()
        view.pan(10, -4)
        view.pan(5, 4)
        self.assertEqual((view.offset_x, view.offset_y), (15, 0))

    def test_zoom_keeps_anchor_fixed(self):
        view = ViewTransform(offset_x=20, offset_y=10)
        anchor = view.to_world(300, 200)
        view.zoom_at(1.5, 300, 200)
        self.assertAlmostEqual(view.zoom, 1.5)
        world = view.to_world(300, 200)
        self.assertAlmostEqual(world[0], anchor[0])
        self.assertAlmostEqual(world[1], anchor[1])

    def test_zoom_is_clamped(self):
        view = ViewTransform()
        for _ in range(100):
            view.zoom_at(2.0, 0, 0)
        self.assertEqual(view.zoom, MAX_ZOOM)
        for _ in range(100):
            view.zoom_at(0.5, 0, 0)
        self.assertEqual(view.zoom, MIN_ZOOM)

    def test_reset(self):
        view = ViewTransform(zoom=3, offset_x=1, offset_y=2)
        view.reset()
        self.assertEqual((view.zoom, view.offset_x, view.offset_y), (1.0, 0.0, 0.0))


class TestRenderer(unittest.TestCase):

    def setUp(self):
        self.temp_dir = tempfile.mkdtemp()
        self.graph = build_graph("abc")
        self.graph.init(200, 150, rng=random.Random(2))

    def tearDown(self):
        shutil.rmtree(self.temp_dir)

    def test_surface_has_drawing(self):
        surface = render_surface(self.graph, 200, 150)
        self.assertEqual((surface.get_width(), surface.get_height()), (200, 150))
        data = bytes(surface.get_data())
        # Background is opaque white; anything else was drawn
        self.assertTrue(any(byte != 0xFF for byte in data))

    def test_empty_graph_is_blank(self):
        surface = render_surface(Graph(), 50, 40)
        self.assertTrue(all(byte == 0xFF for byte in bytes(surface.get_data())))

    def test_render_png(self):
        path = os.path.join(self.temp_dir, "graph.png")
        render_png(self.graph, path, 200, 150, view=ViewTransform(zoom=0.5))
        with open(path, 'rb') as f:
            self.assertEqual(f.read(8), PNG_SIGNATURE)

    def test_custom_painters(self):
        from frontend.renderer import draw_graph
        import cairo

        seen = {'nodes': [], 'edges': []}
        surface = cairo.ImageSurface(cairo.FORMAT_ARGB32, 10, 10)
        cr = cairo.Context(surface)
        draw_graph(cr, self.graph, 10, 10,
                   node_painter=lambda cr, node: seen['nodes'].append(node.label),
                   edge_painter=lambda cr, edge: seen['edges'].append(edge))
        self.assertEqual(seen['nodes'], ["A", "B", "C"])
        self.assertEqual(seen['edges'], self.graph.edges)


if __name__ == '__main__':
    unittest.main()
