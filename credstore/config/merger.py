"""Deep merge logic for configuration layers."""

import copy


def deep_merge(base: dict, override: dict) -> dict:
    """
    Deep merge two config layers. Override wins on conflicts.

    Keys whose override value is None (a blank YAML key) keep the base
    value. Neither input is modified.

    Example:
        base = {"keystore": {"features": [], "modules": []}}
        override = {"keystore": {"features": ["linux-native"], "modules": None}}
        result = {"keystore": {"features": ["linux-native"], "modules": []}}
    """
    result = copy.deepcopy(base)

    for key, value in override.items():
        if value is None:
            continue
        if isinstance(result.get(key), dict) and isinstance(value, dict):
            result[key] = deep_merge(result[key], value)
        else:
            result[key] = copy.deepcopy(value)

    return result
