#!/usr/bin/env python3
"""
Settings loader for Quire.
Supports configuration from quire.yml, quire.yaml, or quire.json files.
"""

import os
import json
import yaml
from typing import Dict, Any, Optional


class QuireSettings:
    """Load and manage Quire configuration settings."""

    # Default configuration
    DEFAULT_SETTINGS = {
        'output': 'dist',
        'posts': 'src/posts',
        'templates': 'src/templates',
        'styles': 'src/styles',
        'public': 'public',
        'site_title': 'Quire',
        'site_description': 'A minimalistic personal blog',
        'site_url': 'https://example.com',
        'base_path': '',
        'language': 'en-us',
        'posts_per_page': 5,
        'mode': 'development',
        'debounce_ms': 300,
        'log_dir': 'logs',
        'watch': False,
    }

    MODES = ('development', 'production')

    # Environment variable that switches style compilation to production
    MODE_ENV_VAR = 'QUIRE_ENV'

    # Config file names to look for (in order of preference)
    CONFIG_FILES = ['quire.yml', 'quire.yaml', 'quire.json']

    def __init__(self, config_dir: str = None):
        """
        Initialize settings loader.

        Args:
            config_dir: Directory to look for config files. Defaults to current directory.
        """
        self.config_dir = config_dir or os.getcwd()
        self.settings = self.DEFAULT_SETTINGS.copy()
        self.config_file_path = None

    def load_settings(self) -> Dict[str, Any]:
        """
        Load settings from configuration file if it exists.

        Returns:
            Dictionary of configuration settings
        """
        config_file = self._find_config_file()

        if config_file:
            self.config_file_path = config_file
            try:
                loaded_settings = self._load_config_file(config_file)
                if loaded_settings:
                    if not isinstance(loaded_settings, dict):
                        raise ValueError(f"Configuration file {config_file} must contain a mapping")
                    # Merge with defaults, giving preference to loaded settings
                    self.settings.update(loaded_settings)
                    print(f"Loaded configuration from: {os.path.relpath(config_file)}")
            except (ValueError, IOError, OSError) as e:
                print(f"Warning: Failed to load config file {config_file}: {e}")

        if os.environ.get(self.MODE_ENV_VAR) == 'production':
            self.settings['mode'] = 'production'

        return self.normalize(self.settings)

    def _find_config_file(self) -> Optional[str]:
        """
        Find the first available configuration file.

        Returns:
            Path to config file or None if not found
        """
        for filename in self.CONFIG_FILES:
            config_path = os.path.join(self.config_dir, filename)
            if os.path.exists(config_path):
                return config_path
        return None

    def _load_config_file(self, config_path: str) -> Dict[str, Any]:
        """
        Load configuration from a file.

        Args:
            config_path: Path to the configuration file

        Returns:
            Dictionary of configuration settings
        """
        file_ext = os.path.splitext(config_path)[1].lower()
        try:
            with open(config_path, 'r', encoding='utf-8') as f:
                if file_ext in ['.yml', '.yaml']:
                    return yaml.safe_load(f) or {}
                elif file_ext == '.json':
                    return json.load(f) or {}
                else:
                    raise ValueError(f"Unsupported config file format: {file_ext}")
        except FileNotFoundError:
            raise FileNotFoundError(f"Configuration file not found: {config_path}")
        except PermissionError:
            raise PermissionError(f"Permission denied reading configuration file: {config_path}")
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid YAML in configuration file {config_path}: {e}")
        except json.JSONDecodeError as e:
            raise ValueError(f"Invalid JSON in configuration file {config_path}: {e}")

    def create_sample_config(self) -> str:
        """
        Create a sample quire.yml unless one already exists.

        Returns:
            Path to the sample config file
        """
        config_path = os.path.join(self.config_dir, 'quire.yml')
        if os.path.exists(config_path):
            return config_path

        try:
            with open(config_path, 'w', encoding='utf-8') as f:
                f.write("# Quire Configuration File\n\n")
                f.write("# Site information\n")
                f.write("site_title: My Blog\n")
                f.write("site_description: Notes and essays\n")
                f.write("site_url: https://example.com\n")
                f.write("base_path: ''\n")
                f.write("language: en-us\n\n")
                f.write("# Source and output layout\n")
                f.write("posts: src/posts\n")
                f.write("templates: src/templates\n")
                f.write("styles: src/styles\n")
                f.write("public: public\n")
                f.write("output: dist\n\n")
                f.write("# Content settings\n")
                f.write("posts_per_page: 5\n\n")
                f.write("# Development settings\n")
                f.write("mode: development  # development or production\n")
                f.write("debounce_ms: 300\n")
        except PermissionError:
            raise PermissionError(f"Permission denied creating configuration file: {config_path}")
        except (IOError, OSError) as e:
            raise IOError(f"Error writing configuration file {config_path}: {e}")

        return config_path

    def merge_with_args(self, args_dict: Dict[str, Any]) -> Dict[str, Any]:
        """
        Merge configuration settings with command-line arguments.
        Command-line arguments take precedence over config file settings.

        Args:
            args_dict: Dictionary of command-line arguments

        Returns:
            Merged configuration dictionary
        """
        merged = self.settings.copy()

        # Override with non-None command line arguments
        for key, value in args_dict.items():
            if value is None:
                continue
            if key == 'production':
                if value:
                    merged['mode'] = 'production'
            else:
                merged[key] = value

        return self.normalize(merged)

    def normalize(self, settings: Dict[str, Any]) -> Dict[str, Any]:
        """Clamp and tidy values that the build relies on."""
        settings = settings.copy()
        settings['site_url'] = str(settings.get('site_url') or '').rstrip('/')
        base_path = str(settings.get('base_path') or '').strip().rstrip('/')
        if base_path and not base_path.startswith('/'):
            base_path = '/' + base_path
        settings['base_path'] = base_path
        try:
            settings['posts_per_page'] = max(1, int(settings.get('posts_per_page') or 1))
        except (TypeError, ValueError):
            settings['posts_per_page'] = self.DEFAULT_SETTINGS['posts_per_page']
        try:
            settings['debounce_ms'] = max(0, int(settings.get('debounce_ms')))
        except (TypeError, ValueError):
            settings['debounce_ms'] = self.DEFAULT_SETTINGS['debounce_ms']
        if settings.get('mode') not in self.MODES:
            settings['mode'] = 'development'
        return settings
