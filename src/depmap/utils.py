"""Small helpers shared by the registry and the command line."""

import logging

logger = logging.getLogger(__name__)


def extract_dependency_name_from_repo(repo: str) -> str | None:
    """Derive a dependency name from its repository URL.

    The name is the URL's last path segment with any ".git" suffix removed.

    Args:
        repo: Repository URL (e.g., "https://github.com/acme/widgets.git")

    Returns:
        Dependency name (e.g., "widgets") or None if the URL has no usable segment

    Examples:
        >>> extract_dependency_name_from_repo("https://github.com/acme/widgets.git")
        'widgets'
        >>> extract_dependency_name_from_repo("https://github.com/acme/widgets")
        'widgets'
        >>> extract_dependency_name_from_repo("https://github.com/")
    """
    segment = repo.rstrip().rsplit("/", 1)[-1]
    if segment.endswith(".git"):
        segment = segment[: -len(".git")]
    if not segment or ":" in segment:
        logger.debug(f"No dependency name in repo URL: {repo}")
        return None
    return segment
