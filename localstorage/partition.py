"""Parsing of lsblk and partx key/value output."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass
class Partition:
    """A partition as seen by both lsblk and partx."""

    lsblk_properties: dict[str, str] = field(default_factory=dict)
    partx_properties: dict[str, str] = field(default_factory=dict)


def _text(out: bytes | str) -> str:
    return out.decode("utf-8", errors="replace") if isinstance(out, bytes) else out


def parse_pairs(buf: bytes | str) -> dict[str, str]:
    """Parse whitespace-separated KEY="value" fields.

    Fields are split on whitespace before quotes are considered, so a quoted
    value containing spaces keeps only its first word.
    """
    pairs: dict[str, str] = {}
    for item in _text(buf).split():
        kv = item.split("=")
        if len(kv) != 2:
            continue
        pairs[kv[0]] = kv[1].strip('"')
    return pairs


def _parse_keyed(out: bytes | str, key: str) -> dict[str, dict[str, str]]:
    partitions: dict[str, dict[str, str]] = {}
    for line in _text(out).split("\n"):
        if not line:
            continue
        pairs = parse_pairs(line)
        ident = pairs.get(key, "")
        if ident:
            partitions[ident] = pairs
    return partitions


def parse_partx_output(out: bytes | str) -> dict[str, dict[str, str]]:
    """Index partx --pairs output by partition UUID."""
    return _parse_keyed(out, "UUID")


def parse_lsblk_output(out: bytes | str) -> dict[str, dict[str, str]]:
    """Index lsblk --pairs output by PARTUUID, skipping whole disks."""
    return _parse_keyed(out, "PARTUUID")


def merge_outputs(
    lsblk_partitions: dict[str, dict[str, str]],
    partx_partitions: dict[str, dict[str, str]],
) -> list[Partition]:
    """Pair partitions known to both tools by their UUID."""
    return [
        Partition(lsblk_properties=lsblk_partitions[uuid], partx_properties=partx)
        for uuid, partx in partx_partitions.items()
        if uuid in lsblk_partitions
    ]