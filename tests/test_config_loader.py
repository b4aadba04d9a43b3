"""
Test suite for configuration loader and logger
"""

import logging
import pytest
import yaml
from pathlib import Path
import tempfile
import shutil

# Add src to path
import sys
sys.path.insert(0, str(Path(__file__).parent.parent / 'src'))

from utils.config_loader import ConfigLoader, load_config
from utils.logger import Logger, get_logger

CONFIG_DIR = Path(__file__).parent.parent / 'config'


class TestConfigLoader:
    """Test cases for ConfigLoader class."""

    @pytest.fixture
    def temp_config_dir(self):
        """Create temporary directory for test configs."""
        temp_dir = tempfile.mkdtemp()
        yield Path(temp_dir)
        shutil.rmtree(temp_dir)

    @pytest.fixture
    def sample_config(self):
        """Sample engine configuration dictionary."""
        return {
            'normalization': {
                'despace': True,
                'collapse_spaces': True
            },
            'segmentation': {
                'min_word_length': 10,
                'joiner': ' '
            }
        }

    def test_load_valid_config(self, temp_config_dir, sample_config):
        """Test loading a valid configuration file."""
        config_file = temp_config_dir / 'engine_config.yaml'

        with open(config_file, 'w') as f:
            yaml.dump(sample_config, f)

        loaded_config = load_config(config_file)

        assert loaded_config == sample_config
        assert loaded_config['segmentation']['min_word_length'] == 10

    def test_load_nonexistent_config(self):
        """Test loading a non-existent configuration file."""
        with pytest.raises(FileNotFoundError):
            load_config('nonexistent_config.yaml')

    def test_load_empty_config(self, temp_config_dir):
        config_file = temp_config_dir / 'empty.yaml'
        config_file.write_text('', encoding='utf-8')
        assert load_config(config_file) == {}

    def test_load_malformed_yaml(self, temp_config_dir):
        config_file = temp_config_dir / 'broken.yaml'
        config_file.write_text('segmentation: [unclosed', encoding='utf-8')
        with pytest.raises(yaml.YAMLError):
            load_config(config_file)

    def test_packaged_engine_config_is_valid(self):
        config = load_config(CONFIG_DIR / 'engine_config.yaml')
        assert config['segmentation']['min_word_length'] == 10
        assert config['normalization']['despace'] is True

    def test_unknown_section_rejected(self, temp_config_dir):
        config_file = temp_config_dir / 'engine_config.yaml'
        with open(config_file, 'w') as f:
            yaml.dump({'suggestions': {'max_items': 5}}, f)
        with pytest.raises(ValueError, match="Unknown section"):
            load_config(config_file)

    @pytest.mark.parametrize("section,key,value", [
        ('segmentation', 'min_word_length', 1),
        ('segmentation', 'min_word_length', 'ten'),
        ('segmentation', 'min_segment_length', 0),
        ('normalization', 'despace_min_letters', 1),
        ('normalization', 'despace', 'yes'),
        ('segmentation', 'min_word_length', True),
        ('segmentation', 'max_segments', 4),
        ('tables', 'rules_file', 7),
        ('logging', 'rotation', 'weekly'),
    ])
    def test_invalid_values_rejected(self, temp_config_dir, section, key, value):
        config_file = temp_config_dir / 'engine_config.yaml'
        with open(config_file, 'w') as f:
            yaml.dump({section: {key: value}}, f)
        with pytest.raises(ValueError):
            load_config(config_file)

    def test_validation_only_for_engine_config(self, temp_config_dir):
        """Other file stems are loaded without engine validation."""
        config_file = temp_config_dir / 'other.yaml'
        with open(config_file, 'w') as f:
            yaml.dump({'suggestions': {'max_items': 5}}, f)
        assert load_config(config_file)['suggestions']['max_items'] == 5

    def test_merge_configs(self, sample_config):
        """Test merging two configuration dictionaries."""
        override_config = {
            'segmentation': {
                'min_word_length': 12  # Override
            },
            'normalization': {
                'tighten_punctuation': False  # Add new key
            }
        }

        merged = ConfigLoader.merge_configs(sample_config, override_config)

        assert merged['segmentation']['joiner'] == ' '  # Preserved
        assert merged['segmentation']['min_word_length'] == 12  # Overridden
        assert merged['normalization']['tighten_punctuation'] is False  # Added
        assert merged['normalization']['despace'] is True  # Preserved
        assert sample_config['segmentation']['min_word_length'] == 10  # Base untouched

    def test_env_var_interpolation(self, temp_config_dir, monkeypatch):
        """Test environment variable interpolation."""
        monkeypatch.setenv('TEST_TABLES_DIR', '/opt/tables')

        config_with_env = {
            'tables': {
                'dir': '${TEST_TABLES_DIR}',
                'rules_file': '${NONEXISTENT:rules.yaml}'
            }
        }

        config_file = temp_config_dir / 'env_config.yaml'
        with open(config_file, 'w') as f:
            yaml.dump(config_with_env, f)

        loaded_config = load_config(config_file)

        assert loaded_config['tables']['dir'] == '/opt/tables'
        assert loaded_config['tables']['rules_file'] == 'rules.yaml'

    def test_null_section_allowed(self, temp_config_dir):
        config_file = temp_config_dir / 'engine_config.yaml'
        config_file.write_text('logging:\ntables:\n  dir: null\n', encoding='utf-8')
        assert load_config(config_file) == {'logging': None, 'tables': {'dir': None}}

    def test_save_config(self, temp_config_dir, sample_config):
        """Test saving configuration to file."""
        output_file = temp_config_dir / 'output_config.yaml'

        ConfigLoader.save_config(sample_config, output_file)

        assert output_file.exists()

        # Load and verify
        loaded_config = load_config(output_file)
        assert loaded_config == sample_config

    def test_load_all_configs(self, temp_config_dir, sample_config):
        for name in ('b_config', 'a_config'):
            ConfigLoader.save_config(sample_config, temp_config_dir / f'{name}.yaml')
        configs = ConfigLoader.load_all_configs(temp_config_dir)
        assert list(configs) == ['a_config', 'b_config']


class TestLogger:
    """Test cases for Logger."""

    def test_logger_is_cached(self):
        assert get_logger('test_cached') is get_logger('test_cached')

    def test_console_handler_only_by_default(self):
        logger = get_logger('test_console_only')
        assert len(logger.handlers) == 1
        assert not isinstance(logger.handlers[0], logging.FileHandler)

    def test_configure_sets_level(self):
        logger = get_logger('test_configure_level')
        Logger.configure({'level': 'DEBUG'})
        assert logger.level == logging.DEBUG
        Logger.configure({'level': 'INFO'})
        assert logger.level == logging.INFO

    def test_configure_rejects_unknown_level(self):
        with pytest.raises(ValueError):
            Logger.configure({'level': 'LOUD'})

    def test_file_output(self):
        temp_dir = tempfile.mkdtemp()
        try:
            logger = get_logger('test_file_output', log_dir=temp_dir, file_output=True)
            logger.info("written to file")
            for handler in logger.handlers:
                handler.flush()
            assert list(Path(temp_dir).glob('test_file_output_*.log'))
        finally:
            for handler in get_logger('test_file_output').handlers:
                handler.close()
            shutil.rmtree(temp_dir)


if __name__ == "__main__":
    pytest.main([__file__, '-v'])
