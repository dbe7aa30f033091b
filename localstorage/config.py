"""Service configuration backed by an INI file."""

from __future__ import annotations

import configparser
import logging
import os
from dataclasses import dataclass, field, fields
from typing import Any

logger = logging.getLogger(__name__)

LOCAL_STORAGE_CONFIG_FILE_PATH = "/etc/dappsteros/local-storage.conf"

DEFAULT_RUNTIME_PATH = "/var/run/dappsteros"
DEFAULT_DATA_PATH = "/var/lib/dappsteros"
DEFAULT_LOG_PATH = "/var/log/dappsteros"


def _key(name: str, default: str) -> Any:
    return field(default=default, metadata={"key": name})


@dataclass
class CommonInfo:
    runtime_path: str = _key("RuntimePath", DEFAULT_RUNTIME_PATH)


@dataclass
class AppInfo:
    db_path: str = _key("DBPath", DEFAULT_DATA_PATH)
    log_path: str = _key("LogPath", DEFAULT_LOG_PATH)
    log_save_name: str = _key("LogSaveName", "local-storage")
    log_file_ext: str = _key("LogFileExt", "log")
    shell_path: str = _key("ShellPath", "/usr/share/dappsteros/shell")


@dataclass
class ServerInfo:
    usb_auto_mount: str = _key("USBAutoMount", "True")
    enable_merger_fs: str = _key("EnableMergerFS", "False")


def _new_parser() -> configparser.ConfigParser:
    parser = configparser.ConfigParser(interpolation=None)
    parser.optionxform = str  # keep key case as written
    return parser


@dataclass
class Settings:
    """The common, app and server sections of the configuration file."""

    common: CommonInfo = field(default_factory=CommonInfo)
    app: AppInfo = field(default_factory=AppInfo)
    server: ServerInfo = field(default_factory=ServerInfo)
    cfg: configparser.ConfigParser | None = None
    config_file_path: str = ""

    def _sections(self) -> tuple[tuple[str, Any], ...]:
        return (("common", self.common), ("app", self.app), ("server", self.server))

    def init_setup(self, config: str = "", sample: str = "") -> None:
        """Load the configuration, creating it from ``sample`` if absent."""
        self.config_file_path = config or LOCAL_STORAGE_CONFIG_FILE_PATH
        if not os.path.exists(self.config_file_path):
            print("config file not exist, create it")
            with open(self.config_file_path, "w", encoding="utf-8") as fh:
                fh.write(sample)

        parser = _new_parser()
        with open(self.config_file_path, encoding="utf-8") as fh:
            parser.read_file(fh)
        self.cfg = parser

        for section, target in self._sections():
            self._map_to(section, target)

    def save_setup(self, config: str = "") -> None:
        """Write the current values back to the configuration file."""
        if self.cfg is None:
            self.cfg = _new_parser()
        for section, source in self._sections():
            self._reflect_from(section, source)

        path = config or LOCAL_STORAGE_CONFIG_FILE_PATH
        try:
            with open(path, "w", encoding="utf-8") as fh:
                self.cfg.write(fh)
        except OSError:
            logger.error("error when saving to %s", path)
            raise

    def _map_to(self, section: str, target: Any) -> None:
        assert self.cfg is not None
        if not self.cfg.has_section(section):
            return
        for f in fields(target):
            key = f.metadata["key"]
            if self.cfg.has_option(section, key):
                setattr(target, f.name, self.cfg.get(section, key))

    def _reflect_from(self, section: str, source: Any) -> None:
        assert self.cfg is not None
        if not self.cfg.has_section(section):
            self.cfg.add_section(section)
        for f in fields(source):
            self.cfg.set(section, f.metadata["key"], str(getattr(source, f.name)))