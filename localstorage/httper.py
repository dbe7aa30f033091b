"""Data shapes exchanged with the remote-mount service."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping

USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/87.0.4280.88 Safari/537.36"
)
DEFAULT_TIMEOUT = 30.0


@dataclass
class MountPoints:
    """One mount as listed by the remote service."""

    mount_point: str = ""
    fs: str = ""
    icon: str = ""
    name: str = ""

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> MountPoints:
        return cls(
            mount_point=data.get("MountPoint", ""),
            fs=data.get("Fs", ""),
            icon=data.get("Icon", ""),
            name=data.get("Name", ""),
        )


@dataclass
class MountList:
    mount_points: list[MountPoints] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> MountList:
        items = data.get("mountPoints") or []
        return cls(mount_points=[MountPoints.from_dict(item) for item in items])


@dataclass
class MountPoint:
    """One mount as reported to API clients."""

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
class MountResultInput:
    fs: str = ""
    mount_point: str = ""


@dataclass
class MountResult:
    error: str = ""
    input: MountResultInput = field(default_factory=MountResultInput)
    path: str = ""
    status: int = 0

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> MountResult:
        raw_input = data.get("input") or {}
        return cls(
            error=data.get("error", ""),
            input=MountResultInput(
                fs=raw_input.get("fs", ""),
                mount_point=raw_input.get("mountPoint", ""),
            ),
            path=data.get("path", ""),
            status=int(data.get("status", 0)),
        )


@dataclass
class RemotesResult:
    remotes: list[str] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> RemotesResult:
        return cls(remotes=list(data.get("remotes") or []))