"""Route classification for rate limit buckets.

Concrete request paths are reduced to route keys so that requests sharing a
server-side quota share a bucket. Major parameters (channel, guild and
webhook ids) stay in the key because each of them has its own quota.
"""

import re

MAJOR_PARAMETERS = frozenset(("channels", "guilds", "webhooks"))

SNOWFLAKE_SEGMENT = re.compile(r"/([a-z-]+)/(?:[0-9]{17,19})")
REACTION_SEGMENT = re.compile(r"/reactions/[^/]+")
WEBHOOK_TOKEN = re.compile(r"^/webhooks/(\d+)/[A-Za-z0-9_-]{64,}")

REACTION_ROUTE_MARKER = "/reactions/:id"
MESSAGE_ROUTE_SUFFIX = "/messages/:id"


def _collapse_snowflake(match: re.Match) -> str:
    label = match.group(1)
    if label in MAJOR_PARAMETERS:
        return match.group(0)
    return f"/{label}/:id"


def routify(path: str, method: str) -> str:
    """Return the rate limit route key for a request.

    Args:
        path: Request path, e.g. ``/channels/266277541646434305/messages/266277541646434305``
        method: HTTP method, compared case-insensitively

    Returns:
        Route key, e.g. ``/channels/266277541646434305/messages/:id``
    """
    route = SNOWFLAKE_SEGMENT.sub(_collapse_snowflake, path)
    route = REACTION_SEGMENT.sub(REACTION_ROUTE_MARKER, route)
    route = WEBHOOK_TOKEN.sub(r"/webhooks/\1/:token", route, count=1)
    # Deleting a message has its own, stricter quota
    if method.upper() == "DELETE" and route.endswith(MESSAGE_ROUTE_SUFFIX):
        route = "DELETE" + route
    return route


def is_reaction_route(route: str) -> bool:
    """Whether a route key belongs to the reaction endpoints (1 per 250ms)."""
    return REACTION_ROUTE_MARKER in route
