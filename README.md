# localstorage

Building blocks for a service that manages local disks on a Linux host.
It parses `lsblk` and `partx` pair output, drives a mergerfs pool through
its control file, signs data with expiring HMAC signatures, keeps a small
SQLite store with lifecycle hooks, loads and saves an INI configuration,
and turns block-device listings into the disk, USB, storage and cloud-mount
views that an HTTP API returns.

## Modules

| Module | What it offers |
| --- | --- |
| `localstorage.pathutil` | `fix_and_clean_path`, `path_add_separator_suffix`, `path_equal`, `is_sub_path`, `ext`, `encode_path`, `join_base_path` |
| `localstorage.utils` | `is_bool`, `is_canceled`, `slice_equal`, `slice_contains`, `slice_convert`, `must_slice_convert`, `must_parse_cn_time`, debouncers `new_debounce` and `new_debounce2` |
| `localstorage.encryption` | `get_md5_by_str` |
| `localstorage.sign` | `HMACSign`, `new_hmac_sign` and the `SignError` family |
| `localstorage.cache` | `new_cache`, an unbounded in-memory cache whose entries expire (five minutes by default) |
| `localstorage.httper` | records for remote mount listings: `MountList`, `MountPoints`, `MountPoint`, `MountResult`, `RemotesResult` |
| `localstorage.mergecheck` | `is_mergerfs_installed` |
| `localstorage.config` | `Settings` with `CommonInfo`, `AppInfo` and `ServerInfo` sections, loaded from and saved to an INI file |
| `localstorage.mergerfs` | reading and changing mergerfs branches through extended attributes of the `.mergerfs` control file |
| `localstorage.partition` | `parse_pairs`, `parse_partx_output`, `parse_lsblk_output`, `merge_outputs`, `Partition` |
| `localstorage.hooks` | `Database`, `HookRegistry`, `Hook`, `get_db_by_file`, `get_global_db` |
| `localstorage.disks` | `BlockDevice`, disk and USB listings, `walk_disk`, busy-disk tracking with `BusyDisks`, cloud mount views |
| `localstorage.storages` | `build_storage_list`, `storage_label`, `mount_children` and add/remove notifications |
| `localstorage.router` | `CorsSettings`, token lookup (`v1_token`, `v2_token`), `is_local_address` and API/doc path helpers |

## Examples

Cleaning paths the way a request path is treated:

```python
from localstorage.pathutil import fix_and_clean_path, is_sub_path

fix_and_clean_path("..")             # "/"
is_sub_path("/media", "/media/usb")  # True
```

Signing and verifying data:

```python
from localstorage.sign import new_hmac_sign, SignInvalidError

signer = new_hmac_sign(b"secret")
signature = signer.sign("/media/file.txt", 0)   # expiry 0 never expires
signer.verify("/media/file.txt", signature)      # returns None when valid

try:
    signer.verify("/media/other.txt", signature)
except SignInvalidError:
    ...
```

`verify` raises `ExpireMissingError`, `ExpireInvalidError`,
`SignExpiredError` or `SignInvalidError`, all subclasses of `SignError`.

Pairing partitions seen by `lsblk --pairs` and `partx --pairs`:

```python
from localstorage.partition import parse_lsblk_output, parse_partx_output, merge_outputs

partitions = merge_outputs(parse_lsblk_output(lsblk_out), parse_partx_output(partx_out))
for partition in partitions:
    print(partition.lsblk_properties["PATH"], partition.partx_properties["NR"])
```

A database whose writes fire hooks:

```python
from localstorage.hooks import Hook, HookRegistry, get_db_by_file

registry = HookRegistry()
registry.register(Hook.AFTER_CREATE, lambda db, row: print("created", row))

with get_db_by_file(":memory:", registry) as db:
    db.insert("volume", {"uuid": "0000-0000", "mount_point": "/media/usb"})
    rows = db.select("volume", {"uuid": "0000-0000"})
```

Tables are created on the first insert and gain columns as new ones appear.

Loading the configuration, creating it from a sample when absent:

```python
from localstorage.config import Settings

settings = Settings()
settings.init_setup("/tmp/local-storage.conf", "[server]\nUSBAutoMount = True\n")
settings.server.enable_merger_fs = "true"
settings.save_setup("/tmp/local-storage.conf")
```

## What it does not do

- It has no command and starts no server. `localstorage.router` only
  computes CORS headers, token lookup and documentation paths; serving
  requests is left to the application.
- It runs no system tools. Listings are built from `lsblk` and `partx`
  output, SMART results and mount data that the caller supplies; it does not
  mount, unmount, partition or format disks itself.
- It does not read or edit `/etc/fstab`.
- It has no handling for merge points or mount requests beyond the mergerfs
  branch control in `localstorage.mergerfs` and the check in
  `localstorage.mergecheck`.

## Tests

The test suite uses pytest; install the `test` extra to get it.