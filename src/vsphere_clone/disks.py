"""Translation of declared storage into the driver's disk list."""

from typing import Iterable, List

from .config import StorageEntry
from .models import Disk


def map_disks(entries: Iterable[StorageEntry]) -> List[Disk]:
    """
    Map storage entries to driver disks, one to one.

    Order is preserved exactly: the driver assigns controller and unit
    numbers by position.
    """
    return [
        Disk(
            disk_size=entry.disk_size,
            disk_eagerly_scrub=entry.disk_eagerly_scrub,
            disk_thin_provisioned=entry.disk_thin_provisioned,
            controller_index=entry.disk_controller_index,
        )
        for entry in entries
    ]
