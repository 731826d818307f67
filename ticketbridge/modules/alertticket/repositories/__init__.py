"""Repository exports."""

from .base import PolicyRepository
from .memory import InMemoryPolicyRepository
from .yaml_config import (
    AlertTicketConfig,
    ReceiverConfig,
    YamlPolicyRepository,
    load_config,
    parse_config,
)

__all__ = [
    "PolicyRepository",
    "InMemoryPolicyRepository",
    "AlertTicketConfig",
    "ReceiverConfig",
    "YamlPolicyRepository",
    "load_config",
    "parse_config",
]
