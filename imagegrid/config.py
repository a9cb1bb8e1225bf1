"""Configuration management for ImageGrid."""

from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import yaml


class Config:
    """Configuration manager for ImageGrid."""

    def __init__(self, config_path: Optional[Union[str, Path]] = None):
        """Initialize configuration.

        Args:
            config_path: Path to configuration file. If None, uses default config.
        """
        self._config: Dict[str, Any] = {}
        self._load_config(config_path)

    def _load_config(self, config_path: Optional[Union[str, Path]] = None) -> None:
        """Load configuration from file or use defaults."""
        if config_path is None:
            default_config_path = Path(__file__).parent.parent / "config" / "default_config.yaml"
            config_path = default_config_path

        config_path = Path(config_path)

        if config_path.exists():
            with open(config_path, 'r', encoding='utf-8') as f:
                self._config = yaml.safe_load(f) or {}
        else:
            # Use minimal default if file doesn't exist
            self._config = self._get_minimal_default_config()

    def _get_minimal_default_config(self) -> Dict[str, Any]:
        """Get minimal default configuration when no config file is present."""
        return {
            'file_search': {
                'extensions': ['.jpg', '.jpeg', '.png'],
                'available_extensions': ['.jpg', '.jpeg', '.png'],
            },
            'grid': {
                'images_per_row': 25,
                'resolution': '64x48',
                'resolution_choices': ['64x48', '120x90', '160x120', '320x240'],
                'background': 'white',
            },
            'output': {
                'name': 'image-grid',
                'format': '.jpg',
                'formats': ['.jpg', '.png'],
                'verbosity': 1,
            },
            'compositor': {
                'backend': 'montage',
                'command': 'montage',
            },
        }

    def get(self, key: str, default: Any = None) -> Any:
        """Get configuration value using dot notation.

        Args:
            key: Configuration key in dot notation (e.g., 'grid.images_per_row')
            default: Default value if key not found

        Returns:
            Configuration value
        """
        keys = key.split('.')
        value = self._config

        try:
            for k in keys:
                value = value[k]
            return value
        except (KeyError, TypeError):
            return default

    def set(self, key: str, value: Any) -> None:
        """Set configuration value using dot notation.

        Args:
            key: Configuration key in dot notation
            value: Value to set
        """
        keys = key.split('.')
        config = self._config

        for k in keys[:-1]:
            if k not in config:
                config[k] = {}
            config = config[k]

        config[keys[-1]] = value

    @property
    def extensions(self) -> List[str]:
        """Get extensions searched by default."""
        return self.get('file_search.extensions', ['.jpg', '.jpeg', '.png'])

    @property
    def available_extensions(self) -> List[str]:
        """Get extensions offered for selection."""
        return self.get('file_search.available_extensions', ['.jpg', '.jpeg', '.png'])

    @property
    def images_per_row(self) -> int:
        """Get default number of images per grid row."""
        return int(self.get('grid.images_per_row', 25))

    @property
    def resolution(self) -> str:
        """Get default cell resolution."""
        return str(self.get('grid.resolution', '64x48'))

    @property
    def resolution_choices(self) -> List[str]:
        """Get cell resolutions offered for selection."""
        return self.get('grid.resolution_choices', ['64x48', '120x90', '160x120', '320x240'])

    @property
    def background(self) -> str:
        """Get grid background color."""
        return self.get('grid.background', 'white')

    @property
    def output_name(self) -> str:
        """Get default output file name (without extension)."""
        return self.get('output.name', 'image-grid')

    @property
    def output_format(self) -> str:
        """Get default output format extension."""
        return self.get('output.format', '.jpg')

    @property
    def output_formats(self) -> List[str]:
        """Get output formats offered for selection."""
        return self.get('output.formats', ['.jpg', '.png'])

    @property
    def verbosity(self) -> int:
        """Get verbosity level."""
        return self.get('output.verbosity', 1)

    @property
    def compositor_backend(self) -> str:
        """Get the grid compositor backend name."""
        return self.get('compositor.backend', 'montage')

    @property
    def compositor_command(self) -> str:
        """Get the external compositing command."""
        return self.get('compositor.command', 'montage')

    def is_supported_extension(self, extension: str) -> bool:
        """Check if an extension is one that may be searched for.

        Args:
            extension: Extension with or without the leading dot

        Returns:
            True if extension is available for selection
        """
        ext = extension.lower()
        if not ext.startswith('.'):
            ext = '.' + ext
        return ext in [e.lower() for e in self.available_extensions]

    def save_config(self, config_path: Union[str, Path]) -> None:
        """Save current configuration to file.

        Args:
            config_path: Path to save configuration
        """
        config_path = Path(config_path)
        config_path.parent.mkdir(parents=True, exist_ok=True)

        with open(config_path, 'w', encoding='utf-8') as f:
            yaml.dump(self._config, f, default_flow_style=False, sort_keys=False)


def load_config(config_path: Optional[Union[str, Path]] = None) -> Config:
    """Load configuration from file or use defaults.

    Args:
        config_path: Path to configuration file

    Returns:
        Configuration instance
    """
    return Config(config_path)
