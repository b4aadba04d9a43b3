"""
Configuration Loader Module

Reads the engine's YAML configuration (config/engine_config.yaml).
Values may reference environment variables, partial configs can be deep-merged
over a base, and files named engine_config are checked against the known
sections before the engine sees them.
"""

import os
import yaml
from pathlib import Path
from typing import Any, Dict, Union
from copy import deepcopy


class ConfigLoader:
    """
    Load, merge and validate engine configuration files.

    Example:
        >>> config = ConfigLoader.load_config('config/engine_config.yaml')
        >>> config['segmentation']['min_word_length']
        10
    """

    # section → {key: (accepted types, description)}
    ENGINE_SCHEMA = {
        'tables': {
            'dir': ((str, type(None)), "a directory path or null"),
            'rules_file': ((str,), "a file name"),
            'lexicon_file': ((str,), "a file name"),
            'abbreviations_file': ((str,), "a file name"),
            'preserve_words_file': ((str,), "a file name"),
        },
        'normalization': {
            'despace': ((bool,), "true or false"),
            'despace_min_letters': ((int,), "an integer"),
            'collapse_spaces': ((bool,), "true or false"),
            'tighten_punctuation': ((bool,), "true or false"),
        },
        'segmentation': {
            'min_word_length': ((int,), "an integer"),
            'min_segment_length': ((int,), "an integer"),
            'joiner': ((str,), "a string"),
        },
        'logging': {
            'level': ((str,), "a level name"),
            'file_output': ((bool,), "true or false"),
            'log_dir': ((str,), "a directory path"),
            'rotation': ((str,), "'size' or 'time'"),
        },
    }

    # (section, key) → inclusive lower bound
    ENGINE_MINIMUMS = {
        ('segmentation', 'min_word_length'): 2,
        ('segmentation', 'min_segment_length'): 1,
        ('normalization', 'despace_min_letters'): 2,
    }

    @staticmethod
    def load_config(
        config_path: Union[str, Path],
        validate: bool = True
    ) -> Dict[str, Any]:
        """
        Load a YAML configuration file.

        Args:
            config_path: Path to the YAML file
            validate: Check engine_config files against ENGINE_SCHEMA

        Returns:
            Parsed configuration ({} for an empty file)

        Raises:
            FileNotFoundError: If the file doesn't exist
            yaml.YAMLError: If the YAML is malformed
            ValueError: If validation fails
        """
        config_path = Path(config_path)

        if not config_path.exists():
            raise FileNotFoundError(f"Configuration file not found: {config_path}")

        try:
            with open(config_path, 'r', encoding='utf-8') as f:
                config = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise yaml.YAMLError(f"Error parsing YAML file {config_path}: {e}")

        if config is None:
            config = {}

        config = ConfigLoader._interpolate_env_vars(config)

        if validate and config_path.stem == 'engine_config':
            ConfigLoader.validate_engine_config(config)

        return config

    @staticmethod
    def load_all_configs(config_dir: Union[str, Path] = 'config') -> Dict[str, Dict[str, Any]]:
        """Load every *.yaml in ``config_dir``, keyed by file stem."""
        return {
            config_file.stem: ConfigLoader.load_config(config_file)
            for config_file in sorted(Path(config_dir).glob('*.yaml'))
        }

    @staticmethod
    def merge_configs(
        base_config: Dict[str, Any],
        override_config: Dict[str, Any]
    ) -> Dict[str, Any]:
        """
        Deep-merge ``override_config`` over ``base_config``.

        Nested sections are merged key by key; the base is not modified.
        """
        merged = deepcopy(base_config)

        for key, value in override_config.items():
            if key in merged and isinstance(merged[key], dict) and isinstance(value, dict):
                merged[key] = ConfigLoader.merge_configs(merged[key], value)
            else:
                merged[key] = value

        return merged

    @staticmethod
    def _interpolate_env_vars(config: Any) -> Any:
        """
        Recursively interpolate environment variables in config values.

        Format: ${ENV_VAR_NAME} or ${ENV_VAR_NAME:default_value}
        """
        if isinstance(config, dict):
            return {k: ConfigLoader._interpolate_env_vars(v) for k, v in config.items()}
        elif isinstance(config, list):
            return [ConfigLoader._interpolate_env_vars(item) for item in config]
        elif isinstance(config, str) and config.startswith('${') and config.endswith('}'):
            var_name, sep, default_value = config[2:-1].partition(':')
            return os.getenv(var_name, default_value if sep else config)
        return config

    @staticmethod
    def validate_engine_config(config: Any) -> None:
        """
        Check section names, key names, value types and numeric minimums.

        Raises:
            ValueError: On the first problem found
        """
        if not isinstance(config, dict):
            raise ValueError("engine_config must be a mapping")

        for section, values in config.items():
            schema = ConfigLoader.ENGINE_SCHEMA.get(section)
            if schema is None:
                raise ValueError(f"Unknown section in engine_config: {section}")
            if values is None:
                continue
            if not isinstance(values, dict):
                raise ValueError(f"Section '{section}' in engine_config must be a mapping")

            for key, value in values.items():
                if key not in schema:
                    raise ValueError(f"Unknown key in engine_config: {section}.{key}")
                types, description = schema[key]
                # bool is an int subclass; only accept it where bool is expected
                if not isinstance(value, types) or (isinstance(value, bool) and bool not in types):
                    raise ValueError(f"{section}.{key} must be {description}, got {value!r}")

                minimum = ConfigLoader.ENGINE_MINIMUMS.get((section, key))
                if minimum is not None and value < minimum:
                    raise ValueError(f"{section}.{key} must be >= {minimum}, got {value}")

        rotation = (config.get('logging') or {}).get('rotation', 'size')
        if rotation not in ('size', 'time'):
            raise ValueError(f"logging.rotation must be 'size' or 'time', got {rotation!r}")

    @staticmethod
    def save_config(
        config: Dict[str, Any],
        output_path: Union[str, Path]
    ) -> None:
        """Write ``config`` as YAML, keeping key order and Sinhala text readable."""
        output_path = Path(output_path)
        output_path.parent.mkdir(parents=True, exist_ok=True)

        with open(output_path, 'w', encoding='utf-8') as f:
            yaml.dump(config, f, default_flow_style=False, sort_keys=False, allow_unicode=True)


def load_config(config_path: Union[str, Path]) -> Dict[str, Any]:
    return ConfigLoader.load_config(config_path)
