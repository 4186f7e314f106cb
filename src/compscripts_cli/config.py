"""Configuration management for compscripts."""

import os
import json
from pathlib import Path


DEFAULT_CONFIG = {
    "default_terminal": "x-terminal-emulator",
    "default_opener": "xdg-open",
}


def get_config_dir():
    """Get the configuration directory, honouring COMPSCRIPTS_CONFIG_DIR."""
    override = os.environ.get("COMPSCRIPTS_CONFIG_DIR")
    if override:
        return override
    return os.path.join(os.path.expanduser("~/.config"), "compscripts")


def get_config_file():
    return os.path.join(get_config_dir(), "config.json")


def ensure_config_exists():
    """Ensure the configuration directory and file exist."""
    config_dir = get_config_dir()
    config_file = get_config_file()

    if not os.path.exists(config_dir):
        os.makedirs(config_dir)

    if not os.path.exists(config_file):
        with open(config_file, "w") as f:
            json.dump(DEFAULT_CONFIG, f, indent=2)


def get_config():
    """Get the current configuration.

    Returns:
        dict: Current configuration, with defaults for missing keys.
    """
    ensure_config_exists()
    with open(get_config_file(), "r") as f:
        config = json.load(f)

    merged = dict(DEFAULT_CONFIG)
    merged.update(config)
    return merged


def update_config(updates):
    """Update the configuration with new values.

    Args:
        updates (dict): Dictionary of configuration values to update.
    """
    config = get_config()
    config.update(updates)

    with open(get_config_file(), "w") as f:
        json.dump(config, f, indent=2)


def get_default_terminal():
    """Get the terminal emulator used when no tty is attached.

    Returns:
        str: $TERMINAL when set, otherwise the configured default.
    """
    terminal = os.environ.get("TERMINAL")
    if terminal:
        return terminal
    return get_config().get("default_terminal", DEFAULT_CONFIG["default_terminal"])


def get_default_opener():
    """Get the program used to open URLs ($OPENER, then config)."""
    opener = os.environ.get("OPENER")
    if opener:
        return opener
    return get_config().get("default_opener", DEFAULT_CONFIG["default_opener"])


def get_data_dir() -> Path:
    """Get the base data directory (XDG_DATA_HOME, XDG_DATA_DIR, ~/.local/share)."""
    data_dir = os.environ.get("XDG_DATA_HOME") or os.environ.get("XDG_DATA_DIR")
    if data_dir:
        return Path(data_dir)
    return Path.home() / ".local" / "share"


def resolve_data_file(name, env_var, explicit=None) -> Path:
    """Resolve the data file used by one of the managers.

    Args:
        name (str): Tool name, used as the file name in the data directory.
        env_var (str): Environment variable that overrides the location.
        explicit (str, optional): Path given on the command line.

    Returns:
        Path: The data file path. An empty env var is treated as unset.
    """
    if explicit:
        return Path(explicit)

    from_env = os.environ.get(env_var)
    if from_env:
        return Path(from_env)

    return get_data_dir() / name
