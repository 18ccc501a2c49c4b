"""REST request execution and resource methods.

This package provides:
- Request execution with retries (RequestHandler)
- Endpoint descriptors and path templates (Endpoint)
- Resource method groups (ChannelMethods, GuildMethods, ...)
"""

from snowrest.rest.endpoints import Endpoint
from snowrest.rest.methods import (
    AuditLogMethods,
    BotMethods,
    ChannelMethods,
    EmojiMethods,
    GuildMethods,
    InviteMethods,
    ResourceMethods,
    UserMethods,
    VoiceMethods,
    WebhookMethods,
)
from snowrest.rest.request_handler import (
    JSON,
    MULTIPART,
    RequestHandler,
    offset_now_ms,
    parse_ratelimit_headers,
)

__all__ = [
    # Execution
    "JSON",
    "MULTIPART",
    "RequestHandler",
    "offset_now_ms",
    "parse_ratelimit_headers",
    # Endpoints
    "Endpoint",
    "ResourceMethods",
    "AuditLogMethods",
    "BotMethods",
    "ChannelMethods",
    "EmojiMethods",
    "GuildMethods",
    "InviteMethods",
    "UserMethods",
    "VoiceMethods",
    "WebhookMethods",
]
