# config_manager.py
import json
from pathlib import Path

from . import error as E

config_json = Path(__file__).resolve().parent.parent / "config.json"


DEFAULT_SETTINGS = {
    "repstyle": "SiSuffix",
    "autocalc_ident": "?",
    "precision": 256,
    "max_digits_after_zero": 3,
    "si_long_form": False,
    "debug": False,
    "begin_marker": "EQPY",
    "end_marker": "ENPY",
}


def _read(path, strict=False):
    try:
        with open(path, 'r', encoding='utf-8') as f:
            settings_dict = json.load(f)

    except (OSError, json.JSONDecodeError, UnicodeDecodeError) as e:
        # An explicitly named file has to be readable
        if strict:
            raise E.ConfigError(E.ERROR_MESSAGES["5002"] + str(path), code="5002") from e
        return {}

    if not isinstance(settings_dict, dict):
        if strict:
            raise E.ConfigError(E.ERROR_MESSAGES["5002"] + str(path), code="5002")
        return {}
    return settings_dict


def load_setting_value(key_value, path=None, strict=False):
    """Return one setting, or every setting merged over the defaults for "all".

    With strict set, a missing or malformed file raises ConfigError (5002)
    instead of falling back to the defaults.
    """
    settings_dict = dict(DEFAULT_SETTINGS)
    settings_dict.update(_read(path or config_json, strict))

    if key_value == "all":
        return settings_dict

    else:
        return settings_dict.get(key_value, 0)


def save_setting(settings_dict, path=None):
    try:
        with open(path or config_json, 'w', encoding='utf-8') as f:
            json.dump(settings_dict, f, indent=4)
            return settings_dict

    except (FileNotFoundError, PermissionError):
        return {}
