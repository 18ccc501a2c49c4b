"""REST endpoint path templates and the Endpoint descriptor.

Every API operation is a path template, an HTTP method and a body kind.
Declared as a class attribute of a ``ResourceMethods`` group, an
``Endpoint`` becomes a bound coroutine function that formats the path and
hands the call to the request handler.
"""

from dataclasses import dataclass
from functools import partial
from string import Formatter
from typing import TYPE_CHECKING, Any
from urllib.parse import quote

if TYPE_CHECKING:
    from snowrest.rest.request_handler import RequestHandler

# Bots
GATEWAY = "/gateway"
GATEWAY_BOT = "/gateway/bot"

# Channels
CHANNEL = "/channels/{channel_id}"
CHANNEL_MESSAGES = "/channels/{channel_id}/messages"
CHANNEL_MESSAGE = "/channels/{channel_id}/messages/{message_id}"
CHANNEL_BULK_DELETE = "/channels/{channel_id}/messages/bulk-delete"
CHANNEL_MESSAGE_REACTIONS = "/channels/{channel_id}/messages/{message_id}/reactions"
CHANNEL_MESSAGE_REACTION = "/channels/{channel_id}/messages/{message_id}/reactions/{emoji}"
CHANNEL_MESSAGE_REACTION_USER = (
    "/channels/{channel_id}/messages/{message_id}/reactions/{emoji}/{user_id}"
)
CHANNEL_PERMISSION = "/channels/{channel_id}/permissions/{overwrite_id}"
CHANNEL_INVITES = "/channels/{channel_id}/invites"
CHANNEL_TYPING = "/channels/{channel_id}/typing"
CHANNEL_PINS = "/channels/{channel_id}/pins"
CHANNEL_PIN = "/channels/{channel_id}/pins/{message_id}"
CHANNEL_WEBHOOKS = "/channels/{channel_id}/webhooks"

# Guilds
GUILDS = "/guilds"
GUILD = "/guilds/{guild_id}"
GUILD_AUDIT_LOGS = "/guilds/{guild_id}/audit-logs"
GUILD_CHANNELS = "/guilds/{guild_id}/channels"
GUILD_MEMBERS = "/guilds/{guild_id}/members"
GUILD_MEMBER = "/guilds/{guild_id}/members/{member_id}"
GUILD_MEMBER_NICK = "/guilds/{guild_id}/members/@me/nick"
GUILD_MEMBER_ROLE = "/guilds/{guild_id}/members/{member_id}/roles/{role_id}"
GUILD_BANS = "/guilds/{guild_id}/bans"
GUILD_BAN = "/guilds/{guild_id}/bans/{member_id}"
GUILD_ROLES = "/guilds/{guild_id}/roles"
GUILD_ROLE = "/guilds/{guild_id}/roles/{role_id}"
GUILD_PRUNE = "/guilds/{guild_id}/prune"
GUILD_INTEGRATIONS = "/guilds/{guild_id}/integrations"
GUILD_INTEGRATION = "/guilds/{guild_id}/integrations/{integration_id}"
GUILD_INTEGRATION_SYNC = "/guilds/{guild_id}/integrations/{integration_id}/sync"
GUILD_EMBED = "/guilds/{guild_id}/embed"
GUILD_INVITES = "/guilds/{guild_id}/invites"
GUILD_VOICE_REGIONS = "/guilds/{guild_id}/regions"
GUILD_EMOJIS = "/guilds/{guild_id}/emojis"
GUILD_EMOJI = "/guilds/{guild_id}/emojis/{emoji_id}"
GUILD_WEBHOOKS = "/guilds/{guild_id}/webhooks"

# Users
USER = "/users/{user_id}"
USER_GUILDS = "/users/{user_id}/guilds"
USER_GUILD = "/users/{user_id}/guilds/{guild_id}"
USER_CHANNELS = "/users/{user_id}/channels"

# Webhooks
WEBHOOK = "/webhooks/{webhook_id}"
WEBHOOK_TOKEN = "/webhooks/{webhook_id}/{token}"
WEBHOOK_TOKEN_SLACK = "/webhooks/{webhook_id}/{token}/slack"

# Misc
INVITE = "/invites/{invite_id}"
VOICE_REGIONS = "/voice/regions"


@dataclass(frozen=True)
class Endpoint:
    """A REST operation: method, path template and body kind.

    Example:
        >>> GET_CHANNEL = Endpoint("get", CHANNEL)
        >>> GET_CHANNEL.format("266277541646434305")
        '/channels/266277541646434305'
    """

    method: str
    path: str
    body_kind: str = "json"

    @property
    def placeholders(self) -> tuple[str, ...]:
        return tuple(name for _, name, _, _ in Formatter().parse(self.path) if name)

    def format(self, *args: Any, **kwargs: Any) -> str:
        """Fill the path template from positional and keyword arguments.

        Values are URL-quoted, so emoji and other unicode are safe to pass.

        Raises:
            TypeError: On missing, duplicate or unexpected path arguments
        """
        names = self.placeholders
        if len(args) > len(names):
            raise TypeError(f"{self.path} takes {len(names)} path arguments, got {len(args)}")
        values = dict(zip(names, args))
        for key, value in kwargs.items():
            if key not in names:
                raise TypeError(f"Unexpected path argument {key!r} for {self.path}")
            if key in values:
                raise TypeError(f"Path argument {key!r} given twice for {self.path}")
            values[key] = value
        missing = [name for name in names if name not in values]
        if missing:
            raise TypeError(f"Missing path arguments for {self.path}: {', '.join(missing)}")
        return self.path.format(
            **{name: quote(str(value), safe="@:") for name, value in values.items()}
        )

    async def call(
        self, handler: "RequestHandler", *args: Any, data: Any = None, **kwargs: Any
    ) -> Any:
        return await handler.request(self.format(*args, **kwargs), self.method, self.body_kind, data)

    def __get__(self, instance: Any, owner: type) -> Any:
        if instance is None:
            return self
        return partial(self.call, instance.request_handler)
