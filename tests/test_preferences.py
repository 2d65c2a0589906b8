#!/usr/bin/env python3
"""
Tests for the JSON preferences file.
"""
import json
import os
import shutil
import sys
import tempfile
import unittest
from unittest import mock

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from backend import preferences
from backend.graph import Graph
from backend.preferences import (
    DEFAULT_PREFERENCES, layout_config_from, load_preferences, save_preferences,
)
from backend.vector import Vector


class TestPreferences(unittest.TestCase):

    def setUp(self):
        self.temp_dir = tempfile.mkdtemp()
        self.path = os.path.join(self.temp_dir, "preferences.json")

    def tearDown(self):
        shutil.rmtree(self.temp_dir)

    def _write(self, text):
        with open(self.path, 'w', encoding='utf-8') as f:
            f.write(text)

    def test_missing_file_gives_defaults(self):
        self.assertEqual(load_preferences(self.path), DEFAULT_PREFERENCES)

    def test_defaults_are_not_shared(self):
        prefs = load_preferences(self.path)
        prefs['window']['width'] = 1
        self.assertEqual(DEFAULT_PREFERENCES['window']['width'], 1200)

    def test_stored_values_override_defaults(self):
        self._write(json.dumps({'window': {'width': 640}, 'layout': {'spring_length': 45}}))
        prefs = load_preferences(self.path)
        self.assertEqual(prefs['window'], {'width': 640, 'height': 800})
        self.assertEqual(prefs['layout'], {'spring_length': 45})

    def test_malformed_file_is_logged(self):
        self._write("{not json")
        with self.assertLogs('backend.preferences', level='ERROR'):
            prefs = load_preferences(self.path)
        self.assertEqual(prefs, DEFAULT_PREFERENCES)

    def test_non_utf8_file_is_logged(self):
        with open(self.path, 'wb') as f:
            f.write(b'{"window": "\xff\xfe"}')
        with self.assertLogs('backend.preferences', level='ERROR'):
            prefs = load_preferences(self.path)
        self.assertEqual(prefs, DEFAULT_PREFERENCES)

    def test_non_object_section_is_ignored(self):
        self._write(json.dumps({'window': [1, 2]}))
        with self.assertLogs('backend.preferences', level='WARNING'):
            prefs = load_preferences(self.path)
        self.assertEqual(prefs['window'], DEFAULT_PREFERENCES['window'])

    def test_save_creates_directory(self):
        path = os.path.join(self.temp_dir, "nested", "preferences.json")
        prefs = load_preferences(path)
        prefs['window']['height'] = 480
        save_preferences(prefs, path)
        self.assertEqual(load_preferences(path)['window']['height'], 480)

    def test_path_follows_environment(self):
        with mock.patch.dict(os.environ, {preferences.CONFIG_DIR_ENV: self.temp_dir}):
            self.assertEqual(preferences.preferences_path(), self.path)


class TestLayoutOverrides(unittest.TestCase):

    def test_overrides_apply(self):
        config = layout_config_from({'layout': {'spring_length': 60, 'repulsion_mode': 'summed'}})
        self.assertEqual(config.spring_length, 60)
        self.assertEqual(config.repulsion_mode, 'summed')
        self.assertEqual(config.spring_constant, 1e2)

    def test_invalid_values_fall_back_to_defaults(self):
        with self.assertLogs('backend.preferences', level='ERROR'):
            config = layout_config_from({'layout': {'repulsion_mode': 'bogus'}})
        self.assertEqual(config.repulsion_mode, 'running')

    def test_non_numeric_values_fall_back_to_defaults(self):
        """A string parameter is rejected up front instead of failing mid-step."""
        with self.assertLogs('backend.preferences', level='ERROR'):
            config = layout_config_from({'layout': {'spring_length': "30"}})
        self.assertEqual(config.spring_length, 30)

        graph = Graph(config=config)
        graph.add("A").pos = Vector(0, 0)
        graph.add("B").pos = Vector(100, 0)
        graph.connect_nodes("A", "B")
        graph.step(800, 600, 0.016)
        self.assertTrue(graph.get_node("A").vel.is_finite())

    def test_missing_section(self):
        self.assertEqual(layout_config_from({}).to_dict(), layout_config_from({'layout': {}}).to_dict())


if __name__ == '__main__':
    unittest.main()
