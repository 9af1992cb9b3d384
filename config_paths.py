import json
import os

HOME = os.path.expanduser("~")
XDG_CONFIG_HOME = os.environ.get("XDG_CONFIG_HOME")
CONFIG_HOME = XDG_CONFIG_HOME if XDG_CONFIG_HOME else os.path.join(HOME, ".config")
CONFIG_DIR = os.path.join(CONFIG_HOME, "h5pivot")
CONFIG_JSON = os.path.join(CONFIG_DIR, "config.json")
LOG_DIR = os.path.join(CONFIG_DIR, "logs")
LOG_PATH = os.path.join(LOG_DIR, "h5pivot.log")

# default settings
SHOW_ZERO_AS_DASH_DEFAULT = True
PAGE_SIZE_DEFAULT = 20
COLUMN_WIDTH_DEFAULT = 10
LOG_LEVEL_DEFAULT = "WARNING"
LOG_LEVEL_ENV = "H5PIVOT_LOG_LEVEL"


def ensure_config_dirs():
    os.makedirs(CONFIG_DIR, exist_ok=True)
    os.makedirs(LOG_DIR, exist_ok=True)


def load_config():
    cfg = {
        "SHOW_ZERO_AS_DASH": SHOW_ZERO_AS_DASH_DEFAULT,
        "PAGE_SIZE": PAGE_SIZE_DEFAULT,
        "COLUMN_WIDTH": COLUMN_WIDTH_DEFAULT,
        "LOG_LEVEL": LOG_LEVEL_DEFAULT,
    }

    if os.path.exists(CONFIG_JSON):
        try:
            with open(CONFIG_JSON, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError):
            data = None
        if isinstance(data, dict):
            viewer = data.get("viewer")
            if isinstance(viewer, dict):
                dash = viewer.get("show_zero_as_dash")
                if isinstance(dash, bool):
                    cfg["SHOW_ZERO_AS_DASH"] = dash
                page = viewer.get("page_size")
                if isinstance(page, int) and not isinstance(page, bool) and page >= 1:
                    cfg["PAGE_SIZE"] = page
                width = viewer.get("column_width")
                if isinstance(width, int) and not isinstance(width, bool) and width >= 4:
                    cfg["COLUMN_WIDTH"] = width
            level = data.get("log_level")
            if isinstance(level, str) and level.strip():
                cfg["LOG_LEVEL"] = level.strip().upper()

    env_level = os.environ.get(LOG_LEVEL_ENV)
    if env_level and env_level.strip():
        cfg["LOG_LEVEL"] = env_level.strip().upper()

    return cfg
