"""Tests for configuration management."""

import tempfile
from pathlib import Path
from unittest import TestCase

import yaml

from imagegrid.config import Config, load_config


class TestConfig(TestCase):
    """Test configuration functionality."""

    def setUp(self):
        """Set up test fixtures."""
        self.config = Config()

    def test_default_config_loads(self):
        """Test that default configuration loads successfully."""
        self.assertEqual(self.config.extensions, ['.jpg', '.jpeg', '.png'])
        self.assertEqual(self.config.images_per_row, 25)
        self.assertEqual(self.config.resolution, '64x48')
        self.assertEqual(self.config.background, 'white')
        self.assertEqual(self.config.output_name, 'image-grid')
        self.assertEqual(self.config.output_format, '.jpg')
        self.assertEqual(self.config.compositor_backend, 'montage')

    def test_get_with_dot_notation(self):
        """Test getting values with dot notation."""
        per_row = self.config.get('grid.images_per_row')
        self.assertEqual(per_row, self.config.images_per_row)

    def test_get_with_default(self):
        """Test getting non-existent key returns default."""
        value = self.config.get('nonexistent.key', 'default_value')
        self.assertEqual(value, 'default_value')

    def test_set_with_dot_notation(self):
        """Test setting values with dot notation."""
        self.config.set('grid.images_per_row', 10)
        self.assertEqual(self.config.images_per_row, 10)

    def test_set_creates_missing_sections(self):
        """Test setting a key under a section that does not exist."""
        self.config.set('extra.section.value', 3)
        self.assertEqual(self.config.get('extra.section.value'), 3)

    def test_is_supported_extension(self):
        """Test extension support checking."""
        self.assertTrue(self.config.is_supported_extension('.jpg'))
        self.assertTrue(self.config.is_supported_extension('JPEG'))
        self.assertFalse(self.config.is_supported_extension('.gif'))

    def test_resolution_choices(self):
        """Test the resolutions offered for selection."""
        self.assertEqual(self.config.resolution_choices,
                         ['64x48', '120x90', '160x120', '320x240'])

    def test_load_config_function(self):
        """Test standalone config loading function."""
        config = load_config()
        self.assertIsInstance(config, Config)
        self.assertIsInstance(config.resolution, str)


class TestConfigFile(TestCase):
    """Test configuration file handling."""

    def test_config_with_custom_file(self):
        """Test loading configuration from custom file."""
        with tempfile.NamedTemporaryFile(mode='w', suffix='.yaml', delete=False) as f:
            f.write("""
grid:
  images_per_row: 10
  resolution: '120x90'
compositor:
  backend: 'pillow'
""")
            temp_path = f.name

        try:
            config = Config(temp_path)
            self.assertEqual(config.images_per_row, 10)
            self.assertEqual(config.resolution, '120x90')
            self.assertEqual(config.compositor_backend, 'pillow')
            # Keys missing from the file use property defaults
            self.assertEqual(config.output_format, '.jpg')
        finally:
            Path(temp_path).unlink()

    def test_config_with_nonexistent_file(self):
        """Test loading configuration from non-existent file."""
        config = Config('/nonexistent/config.yaml')
        self.assertEqual(config.images_per_row, 25)
        self.assertEqual(config.compositor_command, 'montage')

    def test_save_config(self):
        """Test saving configuration round trips through YAML."""
        config = Config()
        config.set('output.name', 'timeline')

        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / 'nested' / 'config.yaml'
            config.save_config(path)

            with open(path, 'r', encoding='utf-8') as f:
                saved = yaml.safe_load(f)
            self.assertEqual(saved['output']['name'], 'timeline')
            self.assertEqual(Config(path).output_name, 'timeline')
