"""Disk, USB and cloud-mount listings served by the v1 API."""

from __future__ import annotations

import threading
from contextlib import contextmanager
from dataclasses import dataclass, field, replace
from typing import Any, Callable, Iterable, Iterator, Mapping

from localstorage.httper import MountPoints

MESSAGE_PATH_SYS_USB = "sys_usb"

SYSTEM_MODEL = "System"
DISK_TYPE_HDD = "HDD"
DISK_TYPE_SSD = "SSD"
DISK_TYPE_USB = "USB"
DISK_TYPE_MMC = "MMC"

# How many levels below a disk are searched for the root file system.
SYSTEM_DISK_SEARCH_DEPTH = 5


class DiskBusyError(Exception):
    """Raised when an operation is already running on a disk."""

    def __init__(self, path: str) -> None:
        super().__init__(f"disk is busy: {path}")
        self.path = path


def _text(value: Any) -> str:
    return "" if value is None else str(value)


def _int(value: Any) -> int:
    if value is None or value == "":
        return 0
    try:
        return int(value)
    except (TypeError, ValueError):
        return 0


def _flag(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in ("1", "true")
    return bool(value)


def _uint(text: str) -> int:
    """Parse an unsigned decimal; anything else counts as zero."""
    return int(text) if text.isdigit() else 0


@dataclass
class BlockDevice:
    """A block device as reported by ``lsblk --json --output-all --bytes``."""

    name: str = ""
    path: str = ""
    model: str = ""
    serial: str = ""
    size: int = 0
    rota: bool = False
    tran: str = ""
    mount_point: str = ""
    sub_systems: str = ""
    fs_type: str = ""
    label: str = ""
    uuid: str = ""
    fs_size: str = ""
    fs_avail: str = ""
    fs_used: str = ""
    children: list[BlockDevice] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> BlockDevice:
        return cls(
            name=_text(data.get("name")),
            path=_text(data.get("path")),
            model=_text(data.get("model")),
            serial=_text(data.get("serial")),
            size=_int(data.get("size")),
            rota=_flag(data.get("rota")),
            tran=_text(data.get("tran")),
            mount_point=_text(data.get("mountpoint")),
            sub_systems=_text(data.get("subsystems")),
            fs_type=_text(data.get("fstype")),
            label=_text(data.get("label")),
            uuid=_text(data.get("uuid")),
            fs_size=_text(data.get("fssize")),
            fs_avail=_text(data.get("fsavail")),
            fs_used=_text(data.get("fsused")),
            children=[cls.from_dict(c) for c in data.get("children") or []],
        )


@dataclass
class DiskChild:
    name: str = ""
    size: int = 0
    format: str = ""
    supported: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "size": self.size,
            "format": self.format,
            "supported": self.supported,
        }


@dataclass
class Drive:
    """A physical disk as shown in the disk list."""

    serial: str = ""
    name: str = ""
    size: int = 0
    path: str = ""
    model: str = ""
    children_number: int = 0
    children: list[DiskChild] = field(default_factory=list)
    supported: bool = False
    disk_type: str = ""
    temperature: int = 0
    health: str = ""
    need_format: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {
            "serial": self.serial,
            "name": self.name,
            "size": self.size,
            "path": self.path,
            "model": self.model,
            "children_number": self.children_number,
            "children": [c.to_dict() for c in self.children],
            "supported": self.supported,
            "disk_type": self.disk_type,
            "temperature": self.temperature,
            "health": self.health,
            "need_format": self.need_format,
        }


@dataclass
class USBChild:
    mount_point: str = ""
    size: int = 0
    avail: int = 0
    name: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {
            "mount_point": self.mount_point,
            "size": self.size,
            "avail": self.avail,
            "name": self.name,
        }


@dataclass
class USBDriveStatus:
    name: str = ""
    size: int = 0
    model: str = ""
    avail: int = 0
    children: list[USBChild] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "size": self.size,
            "model": self.model,
            "avail": self.avail,
            "children": [c.to_dict() for c in self.children],
        }


@dataclass
class CloudMountPoint:
    """A cloud storage mount as reported to API clients."""

    mount_point: str = ""
    fs: str = ""
    icon: str = ""
    name: str = ""

    def to_dict(self) -> dict[str, str]:
        return {
            "mount_point": self.mount_point,
            "fs": self.fs,
            "icon": self.icon,
            "name": self.name,
        }


@dataclass
class StorageMessage:
    """Notification payload for a storage being added or removed."""

    type: str = ""
    action: str = ""
    path: str = ""
    volume: str = ""
    size: int = 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": self.type,
            "action": self.action,
            "path": self.path,
            "volume": self.volume,
            "size": self.size,
        }


class BusyDisks:
    """Tracks disks on which a long-running operation is in progress."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._busy: set[str] = set()

    def is_busy(self, path: str) -> bool:
        with self._lock:
            return path in self._busy

    @contextmanager
    def hold(self, path: str) -> Iterator[None]:
        """Mark a disk busy for the duration of the block.

        Raises DiskBusyError if the disk is already held.
        """
        with self._lock:
            if path in self._busy:
                raise DiskBusyError(path)
            self._busy.add(path)
        try:
            yield
        finally:
            with self._lock:
                self._busy.discard(path)


def walk_disk(
    device: BlockDevice, depth: int, predicate: Callable[[BlockDevice], bool]
) -> BlockDevice | None:
    """Return the first device, depth first, that satisfies ``predicate``.

    ``depth`` limits how many levels of children are searched below ``device``.
    """
    if predicate(device):
        return device
    if depth <= 0:
        return None
    for child in device.children:
        found = walk_disk(child, depth - 1, predicate)
        if found is not None:
            return found
    return None


def build_disk_list(
    devices: Iterable[BlockDevice],
    smart_passed: Callable[[str], tuple[int, bool] | None],
    is_disk_supported: Callable[[BlockDevice], bool],
    is_format_supported: Callable[[BlockDevice], bool],
) -> tuple[list[Drive], list[Drive]]:
    """Build the disk list and the list of disks available for use.

    ``smart_passed(path)`` gives ``(temperature, passed)`` from SMART data, or
    None when no data is available, in which case the disk counts as healthy.
    """
    disks: list[Drive] = []
    avail: list[Drive] = []

    for current in devices:
        children: list[DiskChild] = []
        supported = True
        if current.children:
            for child in current.children:
                child_ok = is_format_supported(child)
                if not child_ok:
                    supported = False
                children.append(
                    DiskChild(
                        name=child.name,
                        size=child.size,
                        format=child.fs_type,
                        supported=child_ok,
                    )
                )
        elif not is_format_supported(current):
            supported = False

        drive = Drive(
            serial=current.serial,
            name=current.name,
            size=current.size,
            path=current.path,
            model=current.model,
            children_number=len(current.children),
            children=children,
            supported=supported,
            disk_type=DISK_TYPE_HDD if current.rota else DISK_TYPE_SSD,
        )
        if current.tran == "usb":
            drive.disk_type = DISK_TYPE_USB

        smart = smart_passed(current.path)
        temperature, passed = smart if smart is not None else (0, True)
        drive.temperature = temperature

        system = walk_disk(
            current, SYSTEM_DISK_SEARCH_DEPTH, lambda blk: blk.mount_point == "/"
        )
        if system is not None:
            drive.model = SYSTEM_MODEL
            if "mmc" in system.sub_systems:
                drive.disk_type = DISK_TYPE_MMC
            elif "usb" in system.sub_systems:
                drive.disk_type = DISK_TYPE_USB
            drive.health = "true"
            disks.append(drive)
            continue

        if not is_disk_supported(current):
            continue

        is_avail = not current.mount_point and not any(
            child.mount_point for child in current.children
        )
        if is_avail:
            drive.need_format = False
            avail.append(replace(drive, children=list(drive.children)))

        drive.health = "true" if passed else "false"
        disks.append(drive)

    return disks, avail


def umount_targets(
    device: BlockDevice, is_disk_supported: Callable[[BlockDevice], bool]
) -> list[BlockDevice]:
    """Return the devices to unmount when removing a disk.

    A supported disk without partitions is unmounted as a whole.
    """
    if not device.children and is_disk_supported(device):
        return [replace(device, children=[])]
    return list(device.children)


def build_usb_list(devices: Iterable[BlockDevice]) -> list[USBDriveStatus]:
    """List USB disks with their mounted partitions."""
    result: list[USBDriveStatus] = []
    for device in devices:
        if device.tran != "usb":
            continue
        status = USBDriveStatus(
            model=device.model,
            name=device.label or device.name,
            size=device.size,
        )
        for child in device.children:
            if not child.mount_point:
                continue
            child_avail = _uint(child.fs_avail)
            status.children.append(
                USBChild(
                    mount_point=child.mount_point,
                    size=_uint(child.fs_size),
                    avail=child_avail,
                    name=child.label or child.mount_point.rstrip("/").rsplit("/", 1)[-1]
                    or "/",
                )
            )
            status.avail += child_avail
        result.append(status)
    return result


def usb_auto_mount_state(value: str) -> str:
    """Report the configured USB auto-mount flag as "True" or "False"."""
    return "True" if value.lower() == "true" else "False"


def usb_auto_mount_setting(state: str) -> str:
    """Turn a requested state ("on" or anything else) into the config value."""
    return "True" if state == "on" else "False"


def build_cloud_list(
    mount_points: Iterable[MountPoints],
    attribute: Callable[[str, str], str],
    icons: Mapping[str, str],
) -> list[CloudMountPoint]:
    """Describe cloud mounts, filling icon by remote type and name by user.

    ``attribute(fs, name)`` reads an attribute of the remote's configuration.
    """
    result: list[CloudMountPoint] = []
    for mount in mount_points:
        icon = icons.get(attribute(mount.fs, "type"), mount.icon)
        result.append(
            CloudMountPoint(
                mount_point=mount.mount_point,
                fs=mount.fs,
                icon=icon,
                name=attribute(mount.fs, "username"),
            )
        )
    return result


def cloud_config_name(mount_point: str) -> str:
    """Return the remote configuration name for a cloud mount point."""
    return mount_point.replace("/mnt/", "")