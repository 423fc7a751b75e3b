"""Integer node status codes reported by MAAS."""
from enum import IntEnum


class NodeStatus(IntEnum):
    """Node status codes as exposed in the ``substatus`` field."""

    NEW = 0
    COMMISSIONING = 1
    FAILED_COMMISSIONING = 2
    MISSING = 3
    READY = 4
    RESERVED = 5
    DEPLOYED = 6
    RETIRED = 7
    BROKEN = 8
    DEPLOYING = 9
    ALLOCATED = 10
    FAILED_DEPLOYMENT = 11
    RELEASING = 12
    FAILED_RELEASING = 13
    DISK_ERASING = 14
    FAILED_DISK_ERASING = 15

    @property
    def state_name(self) -> str:
        """Lifecycle state label, e.g. ``FailedDeployment``."""
        return "".join(part.capitalize() for part in self.name.split("_"))


def state_name_for(code: int) -> str:
    """Map a status code to its lifecycle state label.

    Raises:
        ValueError: If the code is not a known status
    """
    return NodeStatus(code).state_name
