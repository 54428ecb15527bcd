"""Target URI composition."""


def compose_uri(root_uri: str, sub_path: str | None) -> str:
    """Append the matched sub-path to a resource's root URI.

    A single "/" is inserted only when neither side carries one at the
    junction. When both do, the result keeps the doubled "//".
    """
    if sub_path is None or not sub_path.strip():
        return root_uri
    if not root_uri.endswith("/") and not sub_path.startswith("/"):
        return f"{root_uri}/{sub_path}"
    return root_uri + sub_path
