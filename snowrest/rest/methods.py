"""Resource method groups.

Plain pass-through operations are declared as ``Endpoint`` class attributes;
operations that validate or reshape their input are regular coroutines
built on top of them. Path arguments may be passed positionally or by
name, the body or query data as ``data=``.

Example:
    >>> client = RestClient("TOKEN")
    >>> await client.channel.get_channel("266277541646434305")
    >>> await client.guild.get_guild_members(guild_id, data={"limit": 100})
"""

from collections.abc import Mapping
from typing import Any, Optional, Union

from snowrest.exceptions import ValidationError
from snowrest.rest import endpoints as ep
from snowrest.rest.endpoints import Endpoint
from snowrest.rest.request_handler import MULTIPART, RequestHandler

MessageData = Union[str, Mapping[str, Any]]


def _message_payload(data: MessageData) -> dict:
    """Normalize message data and reject messages without any content."""
    if isinstance(data, str):
        return {"content": data}
    payload = dict(data)
    if not (payload.get("content") or payload.get("embed") or payload.get("embeds")
            or payload.get("file")):
        raise ValidationError("Missing content or embed")
    return payload


class ResourceMethods:
    """Base class for method groups; holds the request handler."""

    def __init__(self, request_handler: RequestHandler):
        self.request_handler = request_handler


class BotMethods(ResourceMethods):
    """Methods for bot specific endpoints (gateway discovery)."""

    get_gateway = Endpoint("get", ep.GATEWAY)
    get_gateway_bot = Endpoint("get", ep.GATEWAY_BOT)


class ChannelMethods(ResourceMethods):
    """Methods for interacting with channels, messages, reactions and pins."""

    get_channel = Endpoint("get", ep.CHANNEL)
    update_channel = Endpoint("patch", ep.CHANNEL)
    delete_channel = Endpoint("delete", ep.CHANNEL)
    get_channel_messages = Endpoint("get", ep.CHANNEL_MESSAGES)
    get_channel_message = Endpoint("get", ep.CHANNEL_MESSAGE)
    delete_message = Endpoint("delete", ep.CHANNEL_MESSAGE)
    get_reactions = Endpoint("get", ep.CHANNEL_MESSAGE_REACTION)
    delete_all_reactions = Endpoint("delete", ep.CHANNEL_MESSAGE_REACTIONS)
    delete_reaction = Endpoint("delete", ep.CHANNEL_MESSAGE_REACTION_USER)
    edit_channel_permission = Endpoint("put", ep.CHANNEL_PERMISSION)
    delete_channel_permission = Endpoint("delete", ep.CHANNEL_PERMISSION)
    get_channel_invites = Endpoint("get", ep.CHANNEL_INVITES)
    create_channel_invite = Endpoint("post", ep.CHANNEL_INVITES)
    start_typing = Endpoint("post", ep.CHANNEL_TYPING)
    get_pinned_messages = Endpoint("get", ep.CHANNEL_PINS)
    add_pinned_message = Endpoint("put", ep.CHANNEL_PIN)
    remove_pinned_message = Endpoint("delete", ep.CHANNEL_PIN)

    _create_message = Endpoint("post", ep.CHANNEL_MESSAGES)
    _create_message_with_file = Endpoint("post", ep.CHANNEL_MESSAGES, MULTIPART)
    _edit_message = Endpoint("patch", ep.CHANNEL_MESSAGE)
    _bulk_delete = Endpoint("post", ep.CHANNEL_BULK_DELETE)
    _reaction_user = Endpoint("put", ep.CHANNEL_MESSAGE_REACTION_USER)

    async def create_message(self, channel_id: str, data: MessageData) -> Any:
        """Create a message in a channel.

        Args:
            channel_id: Id of the channel
            data: Message content as a string, or a mapping with
                ``content``, ``embed(s)``, ``tts`` and optionally
                ``file`` (``{"name": str, "file": bytes}``)

        Raises:
            ValidationError: If neither content, embed nor file is given
        """
        payload = _message_payload(data)
        if payload.get("file"):
            return await self._create_message_with_file(channel_id, data=payload)
        return await self._create_message(channel_id, data=payload)

    async def edit_message(self, channel_id: str, message_id: str, data: MessageData) -> Any:
        payload = {"content": data} if isinstance(data, str) else dict(data)
        return await self._edit_message(channel_id, message_id, data=payload)

    async def bulk_delete_messages(
        self, channel_id: str, message_ids: list[str], reason: Optional[str] = None
    ) -> Any:
        """Delete 2 to 100 messages at once."""
        if not 2 <= len(message_ids) <= 100:
            raise ValidationError("Amount of messages to delete has to be between 2 and 100")
        data: dict[str, Any] = {"messages": list(message_ids)}
        if reason:
            data["reason"] = reason
        return await self._bulk_delete(channel_id, data=data)

    async def create_reaction(self, channel_id: str, message_id: str, emoji: str) -> Any:
        """React to a message; ``emoji`` is a unicode emoji or ``name:id``."""
        return await self._reaction_user(channel_id, message_id, emoji, "@me")

    async def delete_reaction_self(self, channel_id: str, message_id: str, emoji: str) -> Any:
        return await self.delete_reaction(channel_id, message_id, emoji, "@me")


class GuildMethods(ResourceMethods):
    """Methods for interacting with guilds, members, roles and bans."""

    create_guild = Endpoint("post", ep.GUILDS)
    get_guild = Endpoint("get", ep.GUILD)
    update_guild = Endpoint("patch", ep.GUILD)
    delete_guild = Endpoint("delete", ep.GUILD)
    get_guild_channels = Endpoint("get", ep.GUILD_CHANNELS)
    create_guild_channel = Endpoint("post", ep.GUILD_CHANNELS)
    update_channel_positions = Endpoint("patch", ep.GUILD_CHANNELS)
    get_guild_member = Endpoint("get", ep.GUILD_MEMBER)
    get_guild_members = Endpoint("get", ep.GUILD_MEMBERS)
    add_guild_member = Endpoint("put", ep.GUILD_MEMBER)
    update_guild_member = Endpoint("patch", ep.GUILD_MEMBER)
    update_self_nick = Endpoint("patch", ep.GUILD_MEMBER_NICK)
    remove_guild_member = Endpoint("delete", ep.GUILD_MEMBER)
    add_guild_member_role = Endpoint("put", ep.GUILD_MEMBER_ROLE)
    remove_guild_member_role = Endpoint("delete", ep.GUILD_MEMBER_ROLE)
    get_guild_bans = Endpoint("get", ep.GUILD_BANS)
    create_guild_ban = Endpoint("put", ep.GUILD_BAN)
    remove_guild_ban = Endpoint("delete", ep.GUILD_BAN)
    get_guild_roles = Endpoint("get", ep.GUILD_ROLES)
    create_guild_role = Endpoint("post", ep.GUILD_ROLES)
    update_guild_role = Endpoint("patch", ep.GUILD_ROLE)
    update_guild_role_positions = Endpoint("patch", ep.GUILD_ROLES)
    remove_guild_role = Endpoint("delete", ep.GUILD_ROLE)
    get_guild_prune_count = Endpoint("get", ep.GUILD_PRUNE)
    start_guild_prune = Endpoint("post", ep.GUILD_PRUNE)
    get_guild_invites = Endpoint("get", ep.GUILD_INVITES)
    get_guild_voice_regions = Endpoint("get", ep.GUILD_VOICE_REGIONS)
    get_guild_integrations = Endpoint("get", ep.GUILD_INTEGRATIONS)
    create_guild_integration = Endpoint("post", ep.GUILD_INTEGRATIONS)
    update_guild_integration = Endpoint("patch", ep.GUILD_INTEGRATION)
    remove_guild_integration = Endpoint("delete", ep.GUILD_INTEGRATION)
    sync_guild_integration = Endpoint("post", ep.GUILD_INTEGRATION_SYNC)
    get_guild_embed = Endpoint("get", ep.GUILD_EMBED)
    update_guild_embed = Endpoint("patch", ep.GUILD_EMBED)


class UserMethods(ResourceMethods):
    """Methods for interacting with users."""

    get_user = Endpoint("get", ep.USER)
    _get_self = Endpoint("get", ep.USER)
    _update_self = Endpoint("patch", ep.USER)
    _get_guilds = Endpoint("get", ep.USER_GUILDS)
    _leave_guild = Endpoint("delete", ep.USER_GUILD)
    _get_direct_messages = Endpoint("get", ep.USER_CHANNELS)
    _create_direct_message_channel = Endpoint("post", ep.USER_CHANNELS)

    async def get_self(self) -> Any:
        return await self._get_self("@me")

    async def update_self(self, data: Mapping[str, Any]) -> Any:
        return await self._update_self("@me", data=data)

    async def get_guilds(self) -> Any:
        return await self._get_guilds("@me")

    async def leave_guild(self, guild_id: str) -> Any:
        return await self._leave_guild("@me", guild_id)

    async def get_direct_messages(self) -> Any:
        return await self._get_direct_messages("@me")

    async def create_direct_message_channel(self, user_id: str) -> Any:
        return await self._create_direct_message_channel("@me", data={"recipient_id": user_id})


class WebhookMethods(ResourceMethods):
    """Methods for managing and executing webhooks.

    Passing a webhook token uses the token route, which needs no bot
    permissions.
    """

    create_webhook = Endpoint("post", ep.CHANNEL_WEBHOOKS)
    get_webhooks_channel = Endpoint("get", ep.CHANNEL_WEBHOOKS)
    get_webhooks_guild = Endpoint("get", ep.GUILD_WEBHOOKS)

    _webhook = {
        method: Endpoint(method, ep.WEBHOOK) for method in ("get", "patch", "delete")
    }
    _webhook_token = {
        method: Endpoint(method, ep.WEBHOOK_TOKEN) for method in ("get", "patch", "delete")
    }
    _execute = Endpoint("post", ep.WEBHOOK_TOKEN)
    _execute_with_file = Endpoint("post", ep.WEBHOOK_TOKEN, MULTIPART)

    # Body uses Slack's incoming webhook format
    execute_webhook_slack = Endpoint("post", ep.WEBHOOK_TOKEN_SLACK)

    async def _call(self, method: str, webhook_id: str, token: Optional[str], data: Any = None) -> Any:
        if token:
            endpoint = self._webhook_token[method]
            return await endpoint.call(self.request_handler, webhook_id, token, data=data)
        return await self._webhook[method].call(self.request_handler, webhook_id, data=data)

    async def get_webhook(self, webhook_id: str, token: Optional[str] = None) -> Any:
        return await self._call("get", webhook_id, token)

    async def update_webhook(
        self, webhook_id: str, token: Optional[str], data: Mapping[str, Any]
    ) -> Any:
        return await self._call("patch", webhook_id, token, data)

    async def delete_webhook(self, webhook_id: str, token: Optional[str] = None) -> Any:
        return await self._call("delete", webhook_id, token)

    async def execute_webhook(self, webhook_id: str, token: str, data: MessageData) -> Any:
        """Send a message via webhook.

        Raises:
            ValidationError: If neither content, embeds nor file is given
        """
        payload = _message_payload(data)
        if payload.get("file"):
            return await self._execute_with_file(webhook_id, token, data=payload)
        return await self._execute(webhook_id, token, data=payload)


class InviteMethods(ResourceMethods):
    """Methods for interacting with invites."""

    delete_invite = Endpoint("delete", ep.INVITE)
    _get_invite = Endpoint("get", ep.INVITE)

    async def get_invite(self, invite_id: str, with_counts: Optional[bool] = None) -> Any:
        return await self._get_invite(invite_id, data={"with_counts": with_counts})


class VoiceMethods(ResourceMethods):
    get_voice_regions = Endpoint("get", ep.VOICE_REGIONS)


class AuditLogMethods(ResourceMethods):
    """Methods for reading the audit log of a guild.

    ``data`` accepts the ``user_id``, ``action_type``, ``before`` and
    ``limit`` query filters.
    """

    get_audit_log = Endpoint("get", ep.GUILD_AUDIT_LOGS)


class EmojiMethods(ResourceMethods):
    """Methods for managing guild emojis."""

    get_emojis = Endpoint("get", ep.GUILD_EMOJIS)
    get_emoji = Endpoint("get", ep.GUILD_EMOJI)
    create_emoji = Endpoint("post", ep.GUILD_EMOJIS)
    update_emoji = Endpoint("patch", ep.GUILD_EMOJI)
    delete_emoji = Endpoint("delete", ep.GUILD_EMOJI)
