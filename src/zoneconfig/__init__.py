"""
Loading of declared zone configurations.

Accepts the native YAML/JSON layout (hosted_zones -> rrsets) and Route53
list-resource-record-sets exports.

Public entrypoints: load_config, parse_config
"""

from .loader import ConfigError, load_config, parse_config
from .models import HostedZone, ZoneConfig

__all__ = ["load_config", "parse_config", "ConfigError", "HostedZone", "ZoneConfig"]
