"""Per-scenario record of what the engine believes exists."""
from typing import Dict, Iterator, List, Optional, Set, Tuple

from resource_acctest.domain.core.exceptions import AccTestError
from resource_acctest.domain.resource import ResourceInstance


class State:
    """
    Address -> instance map for one scenario run.

    Every identifier ever stored is also remembered in ``tracked`` so the
    destroy check can verify nothing survived teardown, including objects
    that were replaced mid-scenario.
    """

    def __init__(self):
        self._resources: Dict[str, ResourceInstance] = {}
        self._tracked: Set[Tuple[str, str]] = set()

    def set(self, address: str, instance: ResourceInstance) -> None:
        self._resources[address] = instance
        if instance.identifier:
            self._tracked.add((instance.resource_type, instance.identifier))

    def get(self, address: str) -> Optional[ResourceInstance]:
        return self._resources.get(address)

    def require(self, address: str) -> ResourceInstance:
        instance = self._resources.get(address)
        if instance is None:
            raise AccTestError(f"Not found: {address} in state")
        return instance

    def remove(self, address: str) -> Optional[ResourceInstance]:
        return self._resources.pop(address, None)

    def addresses(self) -> List[str]:
        return list(self._resources)

    def items(self) -> Iterator[Tuple[str, ResourceInstance]]:
        return iter(list(self._resources.items()))

    def tracked_identifiers(self, resource_type: Optional[str] = None) -> List[str]:
        return sorted(identifier for rtype, identifier in self._tracked
                      if resource_type is None or rtype == resource_type)

    def __contains__(self, address: str) -> bool:
        return address in self._resources

    def __len__(self) -> int:
        return len(self._resources)
