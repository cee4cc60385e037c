def path_matches(path: str, allowed_paths: set[str]) -> bool:
    """Check if path matches any allowed path, ignoring a trailing slash."""
    if path in allowed_paths:
        return True

    if path.endswith("/"):
        return path[:-1] in allowed_paths

    return path + "/" in allowed_paths
