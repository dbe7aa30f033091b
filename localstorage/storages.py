"""Storage listings and notifications served by the v1 storage API."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Iterable

from localstorage.disks import BlockDevice, StorageMessage

SYSTEM_NAME = "System"
ADDED_VOLUME = "/media/"
EXCLUDED_SYSTEM_MOUNT_POINT = "/boot/efi"
EXCLUDED_SYSTEM_FS_TYPE = "swap"


def _base(path: str) -> str:
    """Return the last element of a slash-separated path."""
    if not path:
        return "."
    stripped = path.rstrip("/")
    if not stripped:
        return "/"
    return stripped.rsplit("/", 1)[-1]


@dataclass
class Storage:
    """A mounted file system on a disk."""

    uuid: str = ""
    mount_point: str = ""
    size: str = ""
    avail: str = ""
    used: str = ""
    path: str = ""
    type: str = ""
    drive_name: str = ""
    label: str = ""
    persisted_in: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {
            "uuid": self.uuid,
            "mount_point": self.mount_point,
            "size": self.size,
            "avail": self.avail,
            "used": self.used,
            "path": self.path,
            "type": self.type,
            "drive_name": self.drive_name,
            "label": self.label,
            "persisted_in": self.persisted_in,
        }


@dataclass
class StorageDisk:
    """A disk with the storages mounted from it."""

    disk_name: str = ""
    path: str = ""
    size: int = 0
    type: str = ""
    children: list[Storage] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "disk_name": self.disk_name,
            "path": self.path,
            "size": self.size,
            "type": self.type,
            "children": [c.to_dict() for c in self.children],
        }


def storage_label(mount_point: str, label: str) -> str:
    """Return the label shown for a storage.

    A file system without a label is named after its mount point, the root
    being called "System".
    """
    if label:
        return label
    if mount_point == "/":
        return SYSTEM_NAME
    return _base(mount_point)


def build_storage_list(
    devices: Iterable[BlockDevice],
    system_filesystem: str | None,
    persistent_type: Callable[[str], str],
    is_disk_supported: Callable[[BlockDevice], bool],
    system: str = "",
) -> list[StorageDisk]:
    """List disks with their mounted storages.

    ``system_filesystem`` is the device holding the root file system, or None
    when it could not be determined. The system disk is listed only when
    ``system`` is non-empty, and then without its EFI and swap storages.
    """
    found_system = False
    result: list[StorageDisk] = []

    for device in devices:
        is_system_disk = False
        disk = StorageDisk(
            disk_name=device.model,
            path=device.path,
            size=device.size,
            type=device.tran,
        )

        children = list(device.children)
        if not children and is_disk_supported(device):
            children.append(device)

        storages: list[Storage] = []
        for child in children:
            if system_filesystem is not None and child.path == system_filesystem:
                disk.disk_name = SYSTEM_NAME
                found_system = True
                is_system_disk = True

            if not child.mount_point:
                continue

            if not found_system and (
                child.mount_point == "/"
                or any(c.mount_point == "/" for c in child.children)
            ):
                disk.disk_name = SYSTEM_NAME
                found_system = True
                is_system_disk = True

            storages.append(
                Storage(
                    uuid=child.uuid,
                    mount_point=child.mount_point,
                    size=child.fs_size,
                    avail=child.fs_avail,
                    used=child.fs_used,
                    path=child.path,
                    type=child.fs_type,
                    drive_name=child.name,
                    label=storage_label(child.mount_point, child.label),
                    persisted_in=persistent_type(child.uuid),
                )
            )

        if not storages:
            continue

        if is_system_disk and system:
            disk.children = [
                s
                for s in storages
                if s.mount_point != EXCLUDED_SYSTEM_MOUNT_POINT
                and s.type != EXCLUDED_SYSTEM_FS_TYPE
            ]
            result.append(disk)
        elif not is_system_disk:
            disk.children = storages
            result.append(disk)

    return result


def mount_children(
    device: BlockDevice, is_disk_supported: Callable[[BlockDevice], bool]
) -> list[BlockDevice]:
    """Return the devices to mount when adding a disk.

    A supported disk without partitions is mounted as a whole.
    """
    if not device.children and is_disk_supported(device):
        return [device]
    return list(device.children)


def added_message(device: BlockDevice) -> dict[str, Any]:
    """Build the notification sent after a storage has been added."""
    message = StorageMessage(
        action="ADDED",
        path=device.path,
        volume=ADDED_VOLUME,
        size=device.size,
        type=device.tran,
    )
    return {"data": message.to_dict()}


def removed_message(path: str, volume: str = "") -> dict[str, Any]:
    """Build the notification sent after a storage has been removed."""
    message = StorageMessage(action="REMOVED", path=path, volume=volume, size=0, type="")
    return {"data": message.to_dict()}