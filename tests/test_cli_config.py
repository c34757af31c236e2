"""Tests for CLI configuration module."""

import json

from cli.config import Config


def test_config_creates_default_file(tmp_path):
    """Test that config file is created with defaults if missing."""
    config_path = tmp_path / '.filedrop' / 'config.json'
    config = Config(config_path)

    assert config_path.exists()
    assert config.data['timeout'] == 30
    assert config.data['max_retries'] == 3
    assert config.data['retry_backoff_multiplier'] == 2
    assert 'token' not in config.data


def test_config_loads_existing_file(tmp_path):
    """Test loading existing config file."""
    config_path = tmp_path / '.filedrop' / 'config.json'
    config_path.parent.mkdir(parents=True)
    with open(config_path, 'w') as f:
        json.dump({'token': 'abc', 'server_host': 'files.example.com', 'server_port': 8080}, f)

    config = Config(config_path)

    assert config.get_token() == 'abc'
    assert config.get_base_url() == 'http://files.example.com:8080'
    assert config.data['timeout'] == 30


def test_config_save_and_get_token(temp_config):
    """Test saving and retrieving the management token."""
    assert temp_config.get_token() is None

    temp_config.set_token('s3cret')

    assert temp_config.get_token() == 's3cret'
    with open(temp_config.config_path, 'r') as f:
        assert json.load(f)['token'] == 's3cret'


def test_config_corrupted_file_falls_back_to_defaults(tmp_path):
    """Test that a corrupted config is backed up and defaults are used."""
    config_path = tmp_path / '.filedrop' / 'config.json'
    config_path.parent.mkdir(parents=True)
    config_path.write_text('{not json')

    config = Config(config_path)

    assert config.get_token() is None
    assert config_path.with_suffix('.json.bak').exists()


def test_retry_config(temp_config):
    assert temp_config.get_retry_config() == {'max_retries': 3, 'retry_backoff_multiplier': 2}


def test_token_falls_back_to_environment(temp_config, monkeypatch):
    monkeypatch.setenv('FILEDROP_TOKEN', 'from-env')
    assert temp_config.get_token() == 'from-env'

    temp_config.set_token('saved')
    assert temp_config.get_token() == 'saved'


def test_server_url_overrides_host_and_port(temp_config):
    temp_config.data['server_url'] = 'https://files.example.com/'
    assert temp_config.get_base_url() == 'https://files.example.com'


def test_upload_config_defaults(temp_config):
    assert temp_config.get_upload_config() == {
        'chunk_size': 50 * 1024 * 1024,
        'chunked_threshold': 80 * 1024 * 1024,
    }
