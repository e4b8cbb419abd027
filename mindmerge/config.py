"""
Configuration management for Mindmerge.

This module handles loading and accessing configuration values from config.yaml.
It provides a centralized way to manage merge settings, paths and logging
without changing code.
"""

import yaml
from pathlib import Path
from typing import Any, Dict, Optional
import logging


DEFAULT_TEMPLATE_DIR = Path(__file__).parent / "template"


class ConfigManager:
    """
    Manages configuration loading and access for Mindmerge.
    """
    
    def __init__(self, config_path: str = "config.yaml"):
        """
        Initialize the configuration manager.
        
        Args:
            config_path: Path to the configuration file
        """
        self.config_path = Path(config_path)
        self._config: Dict[str, Any] = {}
        self._load_config()
    
    def _load_config(self) -> None:
        """Load configuration from YAML file."""
        if not self.config_path.exists():
            logging.info(f"Configuration file not found: {self.config_path}, using defaults")
            self._config = self._get_default_config()
            return

        try:
            with open(self.config_path, 'r', encoding='utf-8') as f:
                self._config = yaml.safe_load(f) or {}
                
            logging.info(f"Configuration loaded from {self.config_path}")
            
        except (OSError, yaml.YAMLError) as e:
            logging.warning(f"Failed to load configuration: {e}")
            # Fall back to default configuration
            self._config = self._get_default_config()
            
    def _get_default_config(self) -> Dict[str, Any]:
        """Get default configuration values as fallback."""
        return {
            "merge": {
                "source_suffix": ".xmind",
                "attribution_tag": "Merge-Source: "
            },
            "paths": {
                "template_dir": None,
                "scratch_dir": None,
                "log_file": "mindmerge.log"
            },
            "logging": {
                "level": "INFO",
                "format": "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
            },
            "performance": {
                "max_workers": 4
            }
        }
    
    def get(self, key_path: str, default: Any = None) -> Any:
        """
        Get a configuration value using dot notation.
        
        Args:
            key_path: Dot-separated path to the configuration value (e.g., "merge.source_suffix")
            default: Default value if key is not found
            
        Returns:
            The configuration value
            
        Examples:
            config.get("merge.source_suffix")  # Returns ".xmind"
            config.get("performance.max_workers")  # Returns 4
        """
        keys = key_path.split('.')
        value = self._config
        
        for key in keys:
            if isinstance(value, dict) and key in value:
                value = value[key]
            else:
                return default
                
        return value
    
    # Convenience properties for commonly used values
    
    @property
    def source_suffix(self) -> str:
        """Get the file suffix that marks a mind-map source."""
        return self.get("merge.source_suffix", ".xmind")
    
    @property
    def attribution_tag(self) -> str:
        """Get the prefix of attribution note lines."""
        return self.get("merge.attribution_tag", "Merge-Source: ")
    
    @property
    def template_directory(self) -> Path:
        """Get the template directory, defaulting to the bundled template."""
        template_dir = self.get("paths.template_dir")
        return Path(template_dir) if template_dir else DEFAULT_TEMPLATE_DIR
    
    @property
    def scratch_directory(self) -> Optional[str]:
        """Get the parent directory for scratch space (None means system temp)."""
        return self.get("paths.scratch_dir")
    
    @property
    def log_filename(self) -> str:
        """Get log file name."""
        return self.get("paths.log_file", "mindmerge.log")
    
    @property
    def max_workers(self) -> int:
        """Get the number of worker threads for archive and resource I/O."""
        return int(self.get("performance.max_workers", 4))


# Global configuration instance
config = ConfigManager()

