"""Helpers for slash-separated virtual paths."""

from urllib.parse import quote

_REPLACEMENTS = (
    ("%", "%25"),
    ("%", "%25"),
    ("?", "%3F"),
    ("#", "%23"),
)

# Characters a path segment may carry unescaped besides letters, digits and "-_.~".
_SEGMENT_SAFE = "$&+=:@"


def _clean(path: str) -> str:
    """Return the shortest equivalent of a slash-separated path."""
    if not path:
        return "."
    rooted = path.startswith("/")
    parts: list[str] = []
    for segment in path.split("/"):
        if segment in ("", "."):
            continue
        if segment == "..":
            if parts and parts[-1] != "..":
                parts.pop()
            elif not rooted:
                parts.append("..")
            continue
        parts.append(segment)
    joined = "/".join(parts)
    if rooted:
        return "/" + joined
    return joined or "."


def fix_and_clean_path(path: str) -> str:
    """Normalise a path to an absolute, cleaned form.

    Backslashes become slashes, the path is rooted at "/", and "." and ".."
    are resolved; the parent of the root is the root itself.
    """
    path = path.replace("\\", "/")
    if not path.startswith("/"):
        path = "/" + path
    return _clean(path)


def path_add_separator_suffix(path: str) -> str:
    """Make sure the path ends with a "/"."""
    return path if path.endswith("/") else path + "/"


def path_equal(path1: str, path2: str) -> bool:
    """Tell whether two paths name the same location."""
    return fix_and_clean_path(path1) == fix_and_clean_path(path2)


def is_sub_path(path: str, sub_path: str) -> bool:
    """Tell whether ``sub_path`` is ``path`` itself or lies beneath it."""
    path, sub_path = fix_and_clean_path(path), fix_and_clean_path(sub_path)
    return path == sub_path or sub_path.startswith(path_add_separator_suffix(path))


def ext(path: str) -> str:
    """Return the extension of the last path element, without the dot."""
    dot = path.rfind(".")
    if dot <= path.rfind("/"):
        return ""
    return path[dot + 1:]


def encode_path(path: str, escape_all: bool = False) -> str:
    """Escape each segment of a path.

    By default only "%", "?" and "#" are replaced; with ``escape_all`` every
    segment is percent-encoded as a URL path segment.
    """
    segments = path.split("/")
    encoded = []
    for segment in segments:
        if escape_all:
            segment = quote(segment, safe=_SEGMENT_SAFE)
        else:
            for src, dst in _REPLACEMENTS:
                segment = segment.replace(src, dst)
        encoded.append(segment)
    return "/".join(encoded)


def join_base_path(base_path: str, req_path: str) -> str:
    """Join a requested path onto a base path, refusing relative escapes."""
    if req_path.endswith("..") or "../" in req_path:
        raise ValueError("access using relative path is not allowed")
    return _clean(fix_and_clean_path(base_path) + "/" + fix_and_clean_path(req_path))