"""Locate the page that belongs to a session."""

import logging

from devtools import DevToolsClient, DevToolsEndpoint, PageTarget

from .errors import TabNotFound

logger = logging.getLogger(__name__)

PAGE_TARGET_TYPE = "page"


def match_page(targets: list[PageTarget], session_marker: str) -> PageTarget | None:
    """Return the first top-level page whose URL contains the marker."""
    for target in targets:
        if target.type == PAGE_TARGET_TYPE and session_marker in target.url:
            return target
    return None


async def resolve_page(
    client: DevToolsClient,
    endpoint: DevToolsEndpoint,
    session_marker: str,
) -> PageTarget | TabNotFound:
    """Find the session's page among the targets open at the endpoint.

    No match is a normal transient result (the page may still be loading);
    callers decide whether to retry.
    """
    targets = await client.list_pages(endpoint)
    page = match_page(targets, session_marker)
    if page is None:
        logger.debug("No page for marker %r among %d targets", session_marker, len(targets))
        return TabNotFound(session_marker=session_marker)
    logger.info("Resolved marker %r to page %s (%s)", session_marker, page.id, page.url)
    return page
