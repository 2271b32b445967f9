"""In-memory mirror of one provisioned remote object."""
from enum import Enum
from typing import Any, Dict, Mapping, Optional

from resource_acctest.domain.core.exceptions import InvalidStateTransitionError


class ResourceState(str, Enum):
    """Lifecycle state of a resource instance."""
    ABSENT = "absent"
    CREATING = "creating"
    PRESENT = "present"
    UPDATING = "updating"
    DELETING = "deleting"


# Present -> Absent is the out-of-band disappearance path.
# Creating -> Deleting tears down an object whose create never finished.
_TRANSITIONS = {
    ResourceState.ABSENT: {ResourceState.CREATING},
    ResourceState.CREATING: {ResourceState.PRESENT, ResourceState.DELETING, ResourceState.ABSENT},
    ResourceState.PRESENT: {ResourceState.UPDATING, ResourceState.DELETING, ResourceState.ABSENT},
    ResourceState.UPDATING: {ResourceState.PRESENT},
    ResourceState.DELETING: {ResourceState.ABSENT},
}


class ResourceInstance:
    """
    One provisioned object: its remote identifier and current attributes.

    Owned by the controller that produced it. Attribute values are kept in
    their native Python types; :meth:`flatten` renders the string map the
    orchestration engine stores in its state.
    """

    def __init__(self, resource_type: str, identifier: Optional[str] = None,
                 attributes: Optional[Mapping[str, Any]] = None,
                 state: ResourceState = ResourceState.ABSENT):
        self.resource_type = resource_type
        self.identifier = identifier
        self.attributes: Dict[str, Any] = dict(attributes or {})
        self._state = state

    @property
    def state(self) -> ResourceState:
        return self._state

    @property
    def is_present(self) -> bool:
        return self._state == ResourceState.PRESENT

    def transition(self, target: ResourceState) -> None:
        if target not in _TRANSITIONS[self._state]:
            raise InvalidStateTransitionError(self._state.value, target.value)
        self._state = target

    def get(self, name: str, default: Any = None) -> Any:
        return self.attributes.get(name, default)

    def flatten(self) -> Dict[str, str]:
        """Flatten attributes into ``key -> string`` form (``tags.%``, ``tags.key1``)."""
        flat: Dict[str, str] = {'id': self.identifier or ''}
        for name, value in self.attributes.items():
            if value is None:
                continue
            if isinstance(value, Mapping):
                flat[f"{name}.%"] = str(len(value))
                for key, item in value.items():
                    flat[f"{name}.{key}"] = str(item)
            elif isinstance(value, Enum):
                flat[name] = str(value.value)
            else:
                flat[name] = str(value)
        return flat

    def copy(self) -> 'ResourceInstance':
        attributes = {k: dict(v) if isinstance(v, Mapping) else v for k, v in self.attributes.items()}
        return ResourceInstance(self.resource_type, self.identifier, attributes, self._state)

    def __repr__(self) -> str:
        return f"ResourceInstance({self.resource_type!r}, {self.identifier!r}, state={self._state.value})"
