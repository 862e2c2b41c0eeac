# Module for loading and validating configuration
import json
import constants # Import constants

VALID_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def _require_positive_number(config, key):
    value = config[key]
    # bool is an int subclass, reject it explicitly
    if isinstance(value, bool) or not isinstance(value, (int, float)) or value <= 0:
        raise ValueError(f"Config '{key}' must be a positive number.")


def load_config(config_path=constants.DEFAULT_CONFIG_FILE):
    """Loads configuration from a JSON file, validates, and sets defaults."""
    try:
        with open(config_path, 'r', encoding='utf-8') as f:
            config = json.load(f)

        if not isinstance(config, dict):
            raise ValueError(f"Config file '{config_path}' must contain a JSON object.")

        # --- Validation ---
        required_keys = ["output_dir", "log_file"]
        if not all(key in config for key in required_keys):
            missing_keys = [key for key in required_keys if key not in config]
            raise ValueError(f"Config file '{config_path}' is missing required keys: {', '.join(missing_keys)}")

        # --- Set Defaults for Optional Keys ---
        config['user_agent'] = config.get('user_agent', constants.DEFAULT_USER_AGENT)
        config['request_timeout_content'] = config.get('request_timeout_content', constants.DEFAULT_TIMEOUT_CONTENT)
        config['capture_timeout_seconds'] = config.get('capture_timeout_seconds', constants.DEFAULT_CAPTURE_TIMEOUT)
        config['max_asset_bytes'] = config.get('max_asset_bytes', constants.DEFAULT_MAX_ASSET_BYTES)
        config['max_css_depth'] = config.get('max_css_depth', constants.DEFAULT_MAX_CSS_DEPTH)
        config['log_level'] = config.get('log_level', constants.DEFAULT_LOG_LEVEL)

        # --- Further Validation ---
        if not isinstance(config['output_dir'], str) or not config['output_dir'].strip():
            raise ValueError("Config 'output_dir' must be a non-empty string.")
        if not isinstance(config['user_agent'], str) or not config['user_agent'].strip():
            raise ValueError("Config 'user_agent' must be a non-empty string.")
        for key in ('request_timeout_content', 'capture_timeout_seconds', 'max_asset_bytes'):
            _require_positive_number(config, key)
        if isinstance(config['max_css_depth'], bool) or not isinstance(config['max_css_depth'], int) or config['max_css_depth'] < 0:
            raise ValueError("Config 'max_css_depth' must be a non-negative integer.")

        level = str(config['log_level']).upper()
        if level not in VALID_LOG_LEVELS:
            raise ValueError(f"Config 'log_level' must be one of: {', '.join(VALID_LOG_LEVELS)}")
        config['log_level'] = level

        return config

    except FileNotFoundError:
        raise # Re-raise the FileNotFoundError
    except json.JSONDecodeError as e:
        raise ValueError(f"Error decoding JSON from config file '{config_path}': {e}") from e
    except ValueError:
        raise
    except Exception as e: # Catch any other unexpected errors during loading/validation
        raise RuntimeError(f"An unexpected error occurred loading configuration from '{config_path}': {e}") from e
