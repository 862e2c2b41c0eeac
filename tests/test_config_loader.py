import pytest
import json

import config_loader
import constants


def _write_config(tmp_path, data, name="config.json"):
    config_file = tmp_path / name
    config_file.write_text(json.dumps(data) if not isinstance(data, str) else data)
    return str(config_file)


def test_load_config_valid(tmp_path):
    """Tests loading a configuration file that sets every key."""
    valid_config_data = {
        "output_dir": "test_store",
        "log_file": "test_archiver.log",
        "user_agent": "TestAgent/1.0",
        "request_timeout_content": 5,
        "capture_timeout_seconds": 30,
        "max_asset_bytes": 1024,
        "max_css_depth": 2,
        "log_level": "DEBUG",
    }
    config_path = _write_config(tmp_path, valid_config_data)

    loaded_config = config_loader.load_config(config_path)

    # Provided values are kept, not overwritten by defaults
    assert loaded_config == valid_config_data


def test_load_config_defaults(tmp_path):
    """Tests that default values are applied for missing optional keys."""
    config_path = _write_config(tmp_path, {"output_dir": "test_store", "log_file": "test.log"})

    loaded_config = config_loader.load_config(config_path)

    assert loaded_config['output_dir'] == "test_store"
    assert loaded_config['user_agent'] == constants.DEFAULT_USER_AGENT
    assert loaded_config['request_timeout_content'] == constants.DEFAULT_TIMEOUT_CONTENT
    assert loaded_config['capture_timeout_seconds'] == constants.DEFAULT_CAPTURE_TIMEOUT
    assert loaded_config['max_asset_bytes'] == constants.DEFAULT_MAX_ASSET_BYTES
    assert loaded_config['max_css_depth'] == constants.DEFAULT_MAX_CSS_DEPTH
    assert loaded_config['log_level'] == constants.DEFAULT_LOG_LEVEL


def test_load_config_missing_required_key(tmp_path):
    """Tests loading a config file missing a required key raises ValueError."""
    config_path = _write_config(tmp_path, {"output_dir": "test_store"})

    with pytest.raises(ValueError) as e:
        config_loader.load_config(config_path)

    assert "missing required keys: log_file" in str(e.value)


def test_load_config_invalid_json(tmp_path):
    """Tests loading a file with invalid JSON raises ValueError."""
    config_path = _write_config(tmp_path, '{"output_dir": "test_store", ...')

    with pytest.raises(ValueError) as e:
        config_loader.load_config(config_path)

    assert "Error decoding JSON" in str(e.value)


def test_load_config_not_an_object(tmp_path):
    config_path = _write_config(tmp_path, ["output_dir", "log_file"])

    with pytest.raises(ValueError) as e:
        config_loader.load_config(config_path)

    assert "must contain a JSON object" in str(e.value)


def test_load_config_file_not_found(tmp_path):
    """Tests that FileNotFoundError is raised if the config file doesn't exist."""
    with pytest.raises(FileNotFoundError):
        config_loader.load_config(str(tmp_path / "non_existent_config.json"))


@pytest.mark.parametrize("key, value, message", [
    ("output_dir", "", "'output_dir' must be a non-empty string"),
    ("output_dir", 42, "'output_dir' must be a non-empty string"),
    ("user_agent", "   ", "'user_agent' must be a non-empty string"),
    ("request_timeout_content", 0, "'request_timeout_content' must be a positive number"),
    ("capture_timeout_seconds", -5, "'capture_timeout_seconds' must be a positive number"),
    ("capture_timeout_seconds", "60", "'capture_timeout_seconds' must be a positive number"),
    ("max_asset_bytes", True, "'max_asset_bytes' must be a positive number"),
    ("max_css_depth", -1, "'max_css_depth' must be a non-negative integer"),
    ("max_css_depth", 1.5, "'max_css_depth' must be a non-negative integer"),
    ("log_level", "VERBOSE", "'log_level' must be one of"),
])
def test_load_config_invalid_values(tmp_path, key, value, message):
    data = {"output_dir": "test_store", "log_file": "test.log", key: value}
    config_path = _write_config(tmp_path, data)

    with pytest.raises(ValueError) as e:
        config_loader.load_config(config_path)

    assert message in str(e.value)


def test_load_config_zero_css_depth_allowed(tmp_path):
    config_path = _write_config(tmp_path, {"output_dir": "s", "log_file": "l", "max_css_depth": 0})
    assert config_loader.load_config(config_path)['max_css_depth'] == 0


def test_load_config_log_level_normalized(tmp_path):
    config_path = _write_config(tmp_path, {"output_dir": "s", "log_file": "l", "log_level": "warning"})
    assert config_loader.load_config(config_path)['log_level'] == "WARNING"


def test_load_config_float_timeouts_accepted(tmp_path):
    config_path = _write_config(tmp_path, {"output_dir": "s", "log_file": "l", "request_timeout_content": 2.5})
    assert config_loader.load_config(config_path)['request_timeout_content'] == 2.5
