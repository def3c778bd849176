"""
Loads the optional constructlint.yaml configuration file.
"""
import os
from dataclasses import dataclass, field
from typing import List, Optional

import yaml

from constructlint.errors import ConfigError

DEFAULT_CONFIG_FILE = "constructlint.yaml"

DEFAULT_CFN_RESOURCE_BASES = [
    "aws-cdk-lib.CfnResource",
    "@aws-cdk/core.CfnResource",
]

DEFAULT_RESOURCE_BASES = [
    "aws-cdk-lib.Resource",
    "@aws-cdk/core.Resource",
]


@dataclass
class LintConfig:
    include: List[str] = field(default_factory=list)
    exclude: List[str] = field(default_factory=list)
    cfn_resource_bases: List[str] = field(default_factory=lambda: list(DEFAULT_CFN_RESOURCE_BASES))
    resource_bases: List[str] = field(default_factory=lambda: list(DEFAULT_RESOURCE_BASES))


def _string_list(config: dict, key: str, filepath: str) -> Optional[List[str]]:
    value = config.get(key)
    if value is None:
        return None
    if isinstance(value, str):
        return [value]
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        raise ConfigError(f"{filepath}: '{key}' must be a string or a list of strings")
    return list(value)


def load_config(filepath: Optional[str] = None) -> LintConfig:
    """
    Read ``filepath`` (or ./constructlint.yaml when it exists) into a LintConfig.
    A missing default file yields the defaults; a missing explicit file is an error.
    """
    explicit = filepath is not None
    filepath = filepath or DEFAULT_CONFIG_FILE
    if not os.path.exists(filepath):
        if explicit:
            raise ConfigError(f"config file '{filepath}' does not exist")
        return LintConfig()

    try:
        with open(filepath, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError) as exc:
        raise ConfigError(f"failed to read {filepath}: {exc}") from exc

    if not isinstance(data, dict):
        raise ConfigError(f"{filepath}: top level must be a mapping")

    cfg = LintConfig()
    for key in ("include", "exclude", "cfn_resource_bases", "resource_bases"):
        values = _string_list(data, key, filepath)
        if values is not None:
            setattr(cfg, key, values)
    return cfg
