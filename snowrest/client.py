"""REST client entry point.

Example:
    >>> async with RestClient("TOKEN") as client:
    ...     message = await client.channel.create_message(channel_id, "hello")
"""

from typing import Optional

import httpx

from snowrest.core.config import VERSION, Settings, settings as default_settings
from snowrest.core.http_client import create_http_client
from snowrest.core.logging import get_logger
from snowrest.exceptions import ErrorReporter, MissingTokenError
from snowrest.ratelimit.limiter import Ratelimiter
from snowrest.rest.methods import (
    AuditLogMethods,
    BotMethods,
    ChannelMethods,
    EmojiMethods,
    GuildMethods,
    InviteMethods,
    UserMethods,
    VoiceMethods,
    WebhookMethods,
)
from snowrest.rest.request_handler import RequestHandler

logger = get_logger(__name__)


class RestClient:
    """Rate limited client for the REST API.

    Attributes:
        channel, user, emoji, webhook, guild, invite, voice, bot, audit_log:
            Resource method groups
        ratelimiter: Ratelimiter shared by every request of this client
        request_handler: Handler executing the queued requests
    """

    def __init__(
        self,
        token: str,
        *,
        base_host: Optional[str] = None,
        error_reporter: Optional[ErrorReporter] = None,
        http_client: Optional[httpx.AsyncClient] = None,
        config: Optional[Settings] = None,
        **http_options,
    ):
        """Create a new REST client.

        Args:
            token: Bot token; ``Bot `` is prepended when missing
            base_host: Host to send requests to, e.g. a local proxy
            error_reporter: Optional object with ``capture_exception``
                (e.g. the ``sentry_sdk`` module)
            http_client: Pre-built client; it must already carry the base URL
                and authorization header and is not closed by ``aclose()``
            config: Settings to use instead of the environment settings
            **http_options: Overrides forwarded to ``create_http_client``

        Raises:
            MissingTokenError: If the token is empty
        """
        if not token:
            raise MissingTokenError()
        if not token.startswith("Bot"):
            token = f"Bot {token}"
        self.token = token
        self.settings = config or default_settings
        if base_host:
            self.settings = self.settings.model_copy(update={"base_host": base_host})
        self.base_url = self.settings.base_url

        self._owns_http_client = http_client is None
        if http_client is None:
            http_client = create_http_client(
                self.base_url,
                headers={
                    "Authorization": self.token,
                    "User-Agent": f"DiscordBot ({self.settings.user_agent_url}, {VERSION})",
                },
                config=self.settings,
                **http_options,
            )
        self.http_client = http_client

        self.ratelimiter = Ratelimiter(self.settings)
        self.request_handler = RequestHandler(
            self.ratelimiter, self.http_client, error_reporter, self.settings
        )

        self.channel = ChannelMethods(self.request_handler)
        self.user = UserMethods(self.request_handler)
        self.emoji = EmojiMethods(self.request_handler)
        self.webhook = WebhookMethods(self.request_handler)
        self.guild = GuildMethods(self.request_handler)
        self.invite = InviteMethods(self.request_handler)
        self.voice = VoiceMethods(self.request_handler)
        self.bot = BotMethods(self.request_handler)
        self.audit_log = AuditLogMethods(self.request_handler)

        logger.debug(f"RestClient initialized for {self.base_url}")

    @property
    def latency_ms(self) -> float:
        return self.request_handler.latency_ms

    async def aclose(self) -> None:
        """Close the HTTP client if this instance created it."""
        if self._owns_http_client:
            await self.http_client.aclose()

    async def __aenter__(self) -> "RestClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()
