"""Tests for the resource method groups."""

from unittest.mock import AsyncMock

import pytest

from snowrest.exceptions import ValidationError
from snowrest.rest.methods import (
    AuditLogMethods,
    BotMethods,
    ChannelMethods,
    GuildMethods,
    InviteMethods,
    UserMethods,
    WebhookMethods,
)

CHANNEL = "266277541646434305"
MESSAGE = "266277541646434306"
GUILD = "81384788765712384"
USER = "80351110224678912"
WEBHOOK = "223704706495545344"
TOKEN = "3d89bb7572e0fb30d8128367b3b1b44fecd1726de135cbe28a41f8b2f777c372ba2939e72279b94526ff5d1bd4358d65cf11"


@pytest.fixture
def handler():
    return AsyncMock()


class TestChannelMethods:
    """Test channel, message and reaction methods."""

    @pytest.mark.asyncio
    async def test_create_message_from_string(self, handler):
        await ChannelMethods(handler).create_message(CHANNEL, "hello")

        handler.request.assert_awaited_once_with(
            f"/channels/{CHANNEL}/messages", "post", "json", {"content": "hello"}
        )

    @pytest.mark.asyncio
    async def test_create_message_with_file(self, handler):
        """Test that a file switches the request to multipart."""
        data = {"file": {"name": "a.png", "file": b"\x89PNG"}}

        await ChannelMethods(handler).create_message(CHANNEL, data)

        handler.request.assert_awaited_once_with(
            f"/channels/{CHANNEL}/messages", "post", "multipart", data
        )

    @pytest.mark.asyncio
    async def test_create_message_with_embed(self, handler):
        data = {"embeds": [{"title": "Status"}]}

        await ChannelMethods(handler).create_message(CHANNEL, data)

        assert handler.request.await_args.args[2] == "json"

    @pytest.mark.asyncio
    async def test_create_message_empty_rejected(self, handler):
        """Test that empty messages fail before any request."""
        with pytest.raises(ValidationError, match="Missing content or embed"):
            await ChannelMethods(handler).create_message(CHANNEL, {"tts": True})

        handler.request.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_edit_message(self, handler):
        await ChannelMethods(handler).edit_message(CHANNEL, MESSAGE, "edited")

        handler.request.assert_awaited_once_with(
            f"/channels/{CHANNEL}/messages/{MESSAGE}", "patch", "json", {"content": "edited"}
        )

    @pytest.mark.asyncio
    async def test_delete_message(self, handler):
        await ChannelMethods(handler).delete_message(CHANNEL, MESSAGE)

        handler.request.assert_awaited_once_with(
            f"/channels/{CHANNEL}/messages/{MESSAGE}", "delete", "json", None
        )

    @pytest.mark.asyncio
    async def test_bulk_delete(self, handler):
        await ChannelMethods(handler).bulk_delete_messages(
            CHANNEL, [MESSAGE, USER], reason="spam"
        )

        handler.request.assert_awaited_once_with(
            f"/channels/{CHANNEL}/messages/bulk-delete",
            "post",
            "json",
            {"messages": [MESSAGE, USER], "reason": "spam"},
        )

    @pytest.mark.asyncio
    @pytest.mark.parametrize("count", [1, 101])
    async def test_bulk_delete_bounds(self, handler, count):
        with pytest.raises(ValidationError):
            await ChannelMethods(handler).bulk_delete_messages(CHANNEL, [MESSAGE] * count)

        handler.request.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_create_reaction(self, handler):
        """Test that reactions are added as the current user with a quoted emoji."""
        await ChannelMethods(handler).create_reaction(CHANNEL, MESSAGE, "😀")

        handler.request.assert_awaited_once_with(
            f"/channels/{CHANNEL}/messages/{MESSAGE}/reactions/%F0%9F%98%80/@me",
            "put",
            "json",
            None,
        )

    @pytest.mark.asyncio
    async def test_delete_reaction_self(self, handler):
        await ChannelMethods(handler).delete_reaction_self(CHANNEL, MESSAGE, "blob:123")

        path, method = handler.request.await_args.args[:2]
        assert path.endswith("/reactions/blob:123/@me")
        assert method == "delete"


class TestGuildMethods:
    """Test guild methods."""

    @pytest.mark.asyncio
    async def test_get_members_with_query(self, handler):
        await GuildMethods(handler).get_guild_members(GUILD, data={"limit": 100})

        handler.request.assert_awaited_once_with(
            f"/guilds/{GUILD}/members", "get", "json", {"limit": 100}
        )

    @pytest.mark.asyncio
    async def test_create_ban(self, handler):
        await GuildMethods(handler).create_guild_ban(
            GUILD, USER, data={"delete_message_days": 1, "reason": "raid"}
        )

        handler.request.assert_awaited_once_with(
            f"/guilds/{GUILD}/bans/{USER}",
            "put",
            "json",
            {"delete_message_days": 1, "reason": "raid"},
        )

    @pytest.mark.asyncio
    async def test_update_role_positions(self, handler):
        positions = [{"id": "1", "position": 2}]

        await GuildMethods(handler).update_guild_role_positions(GUILD, data=positions)

        handler.request.assert_awaited_once_with(
            f"/guilds/{GUILD}/roles", "patch", "json", positions
        )

    @pytest.mark.asyncio
    async def test_integrations(self, handler):
        """Test the integration endpoints of a guild."""
        guild = GuildMethods(handler)

        await guild.get_guild_integrations(GUILD)
        await guild.create_guild_integration(GUILD, data={"type": "twitch", "id": "7"})
        await guild.update_guild_integration(GUILD, "7", data={"expire_grace_period": 1})
        await guild.remove_guild_integration(GUILD, "7")
        await guild.sync_guild_integration(GUILD, "7")

        calls = [call.args[:2] for call in handler.request.await_args_list]
        assert calls == [
            (f"/guilds/{GUILD}/integrations", "get"),
            (f"/guilds/{GUILD}/integrations", "post"),
            (f"/guilds/{GUILD}/integrations/7", "patch"),
            (f"/guilds/{GUILD}/integrations/7", "delete"),
            (f"/guilds/{GUILD}/integrations/7/sync", "post"),
        ]

    @pytest.mark.asyncio
    async def test_guild_embed(self, handler):
        guild = GuildMethods(handler)

        await guild.get_guild_embed(GUILD)
        await guild.update_guild_embed(GUILD, data={"enabled": True, "channel_id": CHANNEL})

        handler.request.assert_awaited_with(
            f"/guilds/{GUILD}/embed", "patch", "json", {"enabled": True, "channel_id": CHANNEL}
        )
        assert handler.request.await_args_list[0].args[:2] == (f"/guilds/{GUILD}/embed", "get")


class TestUserMethods:
    """Test methods acting on the current user."""

    @pytest.mark.asyncio
    async def test_get_self(self, handler):
        await UserMethods(handler).get_self()

        handler.request.assert_awaited_once_with("/users/@me", "get", "json", None)

    @pytest.mark.asyncio
    async def test_get_user(self, handler):
        await UserMethods(handler).get_user(USER)

        handler.request.assert_awaited_once_with(f"/users/{USER}", "get", "json", None)

    @pytest.mark.asyncio
    async def test_leave_guild(self, handler):
        await UserMethods(handler).leave_guild(GUILD)

        handler.request.assert_awaited_once_with(
            f"/users/@me/guilds/{GUILD}", "delete", "json", None
        )

    @pytest.mark.asyncio
    async def test_create_direct_message_channel(self, handler):
        await UserMethods(handler).create_direct_message_channel(USER)

        handler.request.assert_awaited_once_with(
            "/users/@me/channels", "post", "json", {"recipient_id": USER}
        )


class TestWebhookMethods:
    """Test webhook methods with and without a token."""

    @pytest.mark.asyncio
    async def test_get_webhook_without_token(self, handler):
        await WebhookMethods(handler).get_webhook(WEBHOOK)

        handler.request.assert_awaited_once_with(f"/webhooks/{WEBHOOK}", "get", "json", None)

    @pytest.mark.asyncio
    async def test_get_webhook_with_token(self, handler):
        await WebhookMethods(handler).get_webhook(WEBHOOK, TOKEN)

        handler.request.assert_awaited_once_with(
            f"/webhooks/{WEBHOOK}/{TOKEN}", "get", "json", None
        )

    @pytest.mark.asyncio
    async def test_update_webhook(self, handler):
        await WebhookMethods(handler).update_webhook(WEBHOOK, None, {"name": "alerts"})

        handler.request.assert_awaited_once_with(
            f"/webhooks/{WEBHOOK}", "patch", "json", {"name": "alerts"}
        )

    @pytest.mark.asyncio
    async def test_execute_webhook(self, handler):
        await WebhookMethods(handler).execute_webhook(WEBHOOK, TOKEN, "deployed")

        handler.request.assert_awaited_once_with(
            f"/webhooks/{WEBHOOK}/{TOKEN}", "post", "json", {"content": "deployed"}
        )

    @pytest.mark.asyncio
    async def test_execute_webhook_with_file(self, handler):
        data = {"content": "log", "file": {"name": "log.txt", "file": b"x"}}

        await WebhookMethods(handler).execute_webhook(WEBHOOK, TOKEN, data)

        assert handler.request.await_args.args[2] == "multipart"

    @pytest.mark.asyncio
    async def test_execute_webhook_slack(self, handler):
        data = {"text": "build passed"}

        await WebhookMethods(handler).execute_webhook_slack(WEBHOOK, TOKEN, data=data)

        handler.request.assert_awaited_once_with(
            f"/webhooks/{WEBHOOK}/{TOKEN}/slack", "post", "json", data
        )

    @pytest.mark.asyncio
    async def test_execute_webhook_empty_rejected(self, handler):
        with pytest.raises(ValidationError):
            await WebhookMethods(handler).execute_webhook(WEBHOOK, TOKEN, {})


class TestOtherMethods:
    """Test the small method groups."""

    @pytest.mark.asyncio
    async def test_get_gateway_bot(self, handler):
        await BotMethods(handler).get_gateway_bot()

        handler.request.assert_awaited_once_with("/gateway/bot", "get", "json", None)

    @pytest.mark.asyncio
    async def test_get_invite_with_counts(self, handler):
        await InviteMethods(handler).get_invite("discord-api", with_counts=True)

        handler.request.assert_awaited_once_with(
            "/invites/discord-api", "get", "json", {"with_counts": True}
        )

    @pytest.mark.asyncio
    async def test_get_audit_log(self, handler):
        await AuditLogMethods(handler).get_audit_log(GUILD, data={"limit": 10})

        handler.request.assert_awaited_once_with(
            f"/guilds/{GUILD}/audit-logs", "get", "json", {"limit": 10}
        )
