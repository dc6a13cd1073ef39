"""Configuration management for pulse"""
from dataclasses import dataclass, field
from typing import Any, Dict
from urllib.parse import urlsplit

import yaml


@dataclass
class TransportConfig:
    """Configuration for the transport a sender opens.

    ``url`` selects the transport by scheme (``kafka://``, ``nats://``, ...).
    ``options`` is passed to the transport untouched.
    """
    url: str
    options: Dict[str, Any] = field(default_factory=dict)

    @property
    def scheme(self) -> str:
        return urlsplit(self.url).scheme.lower()

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'TransportConfig':
        """Build configuration from a mapping with ``url`` and optional ``options``"""
        if 'url' not in data:
            raise ValueError("Transport configuration requires a 'url'")
        options = data.get('options') or {}
        if not isinstance(options, dict):
            raise ValueError("Transport 'options' must be a mapping")
        return cls(url=data['url'], options=dict(options))

    @classmethod
    def from_yaml(cls, path: str) -> 'TransportConfig':
        """Load configuration from YAML file.

        The file either holds the mapping directly or under a ``transport`` key.
        """
        with open(path, 'r') as f:
            data = yaml.safe_load(f) or {}

        return cls.from_dict(data.get('transport', data))
