"""Read-only node records returned by the MAAS API."""
from dataclasses import dataclass, field
from typing import Any


class StatusReadError(Exception):
    """Raised when a node's status cannot be read from its record."""

    def __init__(self, hostname: str, reason: str):
        self.hostname = hostname
        self.reason = reason
        super().__init__(f"Unable to read status of node '{hostname}': {reason}")


@dataclass(frozen=True)
class MaasNode:
    """A machine as seen by the MAAS inventory."""
    system_id: str
    hostname: str
    zone: str
    data: dict[str, Any] = field(default_factory=dict, compare=False, repr=False)

    @classmethod
    def from_json(cls, data: dict[str, Any]) -> "MaasNode":
        """Build a node from a MAAS node object.

        The zone may be a nested ``{"name": ...}`` object (MAAS 1.x and later)
        or a bare string.
        """
        zone = data.get("zone") or ""
        if isinstance(zone, dict):
            zone = zone.get("name", "")
        return cls(
            system_id=str(data.get("system_id", "")),
            hostname=str(data.get("hostname", "")),
            zone=str(zone),
            data=dict(data),
        )

    def status_code(self) -> int:
        """Return the integer ``substatus`` of this node.

        Raises:
            StatusReadError: If the field is absent or not an integer
        """
        if "substatus" not in self.data:
            raise StatusReadError(self.hostname, "no 'substatus' field")
        value = self.data["substatus"]
        # bool is an int subclass but never a valid status
        if isinstance(value, int) and not isinstance(value, bool):
            return value
        # JSON numbers may decode as floats; only whole values are accepted
        if isinstance(value, float) and value.is_integer():
            return int(value)
        raise StatusReadError(self.hostname, f"'substatus' is not an integer: {value!r}")
