from urllib.parse import unquote

import pytest

from localstorage.pathutil import (
    encode_path,
    ext,
    fix_and_clean_path,
    is_sub_path,
    join_base_path,
    path_add_separator_suffix,
    path_equal,
)


@pytest.mark.parametrize(
    "raw, cleaned",
    [
        ("..", "/"),
        (".", "/"),
        ("../...", "/..."),
        ("./...", "/..."),
        ("../.x.", "/.x."),
        ("./.x.", "/.x."),
    ],
)
def test_fix_and_clean_path_documented_examples(raw, cleaned):
    assert fix_and_clean_path(raw) == cleaned


@pytest.mark.parametrize("raw", ["a/b", "//a//b/", "a\\b\\..\\c", "/x/./y/../z", ""])
def test_fix_and_clean_path_is_idempotent_and_rooted(raw):
    once = fix_and_clean_path(raw)
    assert once.startswith("/")
    assert fix_and_clean_path(once) == once


def test_backslashes_behave_like_slashes():
    assert fix_and_clean_path("a\\b") == fix_and_clean_path("/a/b")


def test_leading_double_slash_collapses():
    assert fix_and_clean_path("//a") == fix_and_clean_path("/a")


def test_path_add_separator_suffix():
    assert path_add_separator_suffix("/root") == "/root/"
    assert path_add_separator_suffix("/root/") == "/root/"


def test_path_equal():
    assert path_equal("a/b", "/a//b/")
    assert not path_equal("/a", "/b")


@pytest.mark.parametrize(
    "parent, child, expected",
    [
        ("/a", "/a/b", True),
        ("/a", "/a", True),
        ("/a", "/ab", False),
        ("/", "/anything", True),
        ("/a/b", "/a", False),
    ],
)
def test_is_sub_path(parent, child, expected):
    assert is_sub_path(parent, child) is expected


def test_ext():
    assert ext("dir/file.txt") == "txt"
    assert ext("dir.d/file") == ""
    assert ext("noext") == ""


def test_encode_path_replaces_reserved_characters():
    encoded = encode_path("a?b/c#d")
    assert "%3F" in encoded
    assert "%23" in encoded
    assert "?" not in encoded and "#" not in encoded
    assert encoded.count("/") == 1


def test_encode_path_percent_is_replaced_twice():
    assert encode_path("%") == "%2525"


def test_encode_path_escape_all_round_trips():
    original = "dir with space/ä?b;c/plain"
    encoded = encode_path(original, escape_all=True)
    assert " " not in encoded
    assert encoded.count("/") == original.count("/")
    assert [unquote(part) for part in encoded.split("/")] == original.split("/")


def test_join_base_path():
    assert join_base_path("/base", "sub/file") == fix_and_clean_path("/base/sub/file")
    assert join_base_path("base/", "/x") == fix_and_clean_path("/base/x")


@pytest.mark.parametrize("req", ["../etc", "a/..", "..", "x/../y"])
def test_join_base_path_rejects_relative(req):
    with pytest.raises(ValueError):
        join_base_path("/base", req)