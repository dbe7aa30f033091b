from unittest import mock

import pytest

from localstorage.mergerfs import (
    BRANCHES_KEY,
    add_path,
    add_source,
    control_file,
    get_source,
    list_values,
    remove_path,
    remove_source,
    set_source,
)

FSPATH = "/mnt/pool"


def test_control_file():
    assert control_file(FSPATH) == FSPATH + "/.mergerfs"


def test_list_values():
    stored = {
        "user.mergerfs.srcmounts": "/mnt/a:/mnt/b",
        "user.mergerfs.version": "2.33.5",
    }
    with mock.patch("os.listxattr", create=True, return_value=list(stored)) as lister, \
            mock.patch("os.getxattr", create=True,
                       side_effect=lambda path, key: stored[key].encode()):
        assert list_values(FSPATH) == stored
    lister.assert_called_once_with(control_file(FSPATH))


def test_get_source_splits_srcmounts():
    stored = {"user.mergerfs.srcmounts": "/mnt/a:/mnt/b"}
    with mock.patch("os.listxattr", create=True, return_value=list(stored)), \
            mock.patch("os.getxattr", create=True,
                       side_effect=lambda path, key: stored[key].encode()):
        assert get_source(FSPATH) == ["/mnt/a", "/mnt/b"]


def test_set_source_deduplicates():
    with mock.patch("os.setxattr", create=True) as setter:
        set_source(FSPATH, ["/mnt/a", "/mnt/b", "/mnt/a"])
    path, key, value, flags = setter.call_args.args
    assert path == control_file(FSPATH)
    assert key == BRANCHES_KEY
    assert flags == 0
    branches = value.decode().split(":")
    assert sorted(branches) == ["/mnt/a", "/mnt/b"]


def test_set_source_propagates_error():
    with mock.patch("os.setxattr", create=True, side_effect=PermissionError("denied")):
        with pytest.raises(PermissionError):
            set_source(FSPATH, ["/mnt/a"])


def test_add_and_remove_source():
    with mock.patch("os.setxattr", create=True) as setter:
        add_source(FSPATH, "/mnt/c")
        remove_source(FSPATH, "/mnt/c")
    assert setter.call_args_list == [
        mock.call(control_file(FSPATH), BRANCHES_KEY, b"+/mnt/c", 0),
        mock.call(control_file(FSPATH), BRANCHES_KEY, b"-/mnt/c", 0),
    ]


def test_add_and_remove_path_go_through_control_file():
    nested = control_file(control_file(FSPATH))
    with mock.patch("os.setxattr", create=True) as setter:
        add_path(FSPATH, "/mnt/d")
        remove_path(FSPATH, "/mnt/d")
    assert setter.call_args_list == [
        mock.call(nested, BRANCHES_KEY, b"+/mnt/d", 0),
        mock.call(nested, BRANCHES_KEY, b"-/mnt/d", 0),
    ]