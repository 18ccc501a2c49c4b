"""Tests for route classification."""

import pytest

from snowrest.ratelimit.routes import is_reaction_route, routify

CHANNEL = "266277541646434305"
MESSAGE = "266277541646434306"
GUILD = "81384788765712384"
USER = "80351110224678912"
WEBHOOK_TOKEN = "a" * 32 + "-B_" + "c" * 33


class TestRoutify:
    """Test reduction of request paths to bucket route keys."""

    def test_major_parameter_kept(self):
        """Test that channel ids stay in the route key."""
        assert routify(f"/channels/{CHANNEL}", "get") == f"/channels/{CHANNEL}"

    def test_minor_id_collapsed(self):
        """Test that non-major ids collapse to :id."""
        route = routify(f"/channels/{CHANNEL}/messages/{MESSAGE}", "get")

        assert route == f"/channels/{CHANNEL}/messages/:id"

    def test_different_messages_share_route(self):
        """Test that messages of one channel share a bucket."""
        first = routify(f"/channels/{CHANNEL}/messages/{MESSAGE}", "patch")
        second = routify(f"/channels/{CHANNEL}/messages/{USER}", "patch")

        assert first == second

    def test_different_channels_do_not_share_route(self):
        """Test that each major parameter gets its own route."""
        first = routify(f"/channels/{CHANNEL}/messages", "post")
        second = routify(f"/channels/{MESSAGE}/messages", "post")

        assert first != second

    def test_guild_member_route(self):
        route = routify(f"/guilds/{GUILD}/members/{USER}", "get")

        assert route == f"/guilds/{GUILD}/members/:id"

    def test_user_id_collapsed(self):
        assert routify(f"/users/{USER}", "get") == "/users/:id"

    def test_reaction_segment_collapsed(self):
        """Test that the emoji segment of reaction routes collapses."""
        route = routify(
            f"/channels/{CHANNEL}/messages/{MESSAGE}/reactions/%F0%9F%98%80/@me", "put"
        )

        assert route == f"/channels/{CHANNEL}/messages/:id/reactions/:id/@me"

    def test_reaction_segment_with_short_ids(self):
        """Test that reactions collapse even when the other ids are not snowflakes."""
        route = routify("/channels/1/messages/2/reactions/%F0%9F%98%80/@me", "put")

        assert route == "/channels/1/messages/2/reactions/:id/@me"

    def test_reaction_custom_emoji_collapsed(self):
        """Test that name:id emojis collapse like unicode emojis."""
        unicode_route = routify(
            f"/channels/{CHANNEL}/messages/{MESSAGE}/reactions/%F0%9F%98%80", "get"
        )
        custom_route = routify(
            f"/channels/{CHANNEL}/messages/{MESSAGE}/reactions/blob:{GUILD}", "get"
        )

        assert unicode_route == custom_route

    def test_webhook_token_collapsed(self):
        """Test that the webhook token is replaced by :token."""
        route = routify(f"/webhooks/{CHANNEL}/{WEBHOOK_TOKEN}", "post")

        assert route == f"/webhooks/{CHANNEL}/:token"

    def test_slack_webhook_token_collapsed(self):
        route = routify(f"/webhooks/{CHANNEL}/{WEBHOOK_TOKEN}/slack", "post")

        assert route == f"/webhooks/{CHANNEL}/:token/slack"

    def test_short_webhook_segment_kept(self):
        route = routify(f"/webhooks/{CHANNEL}/short", "post")

        assert route == f"/webhooks/{CHANNEL}/short"

    @pytest.mark.parametrize("method", ["delete", "DELETE", "Delete"])
    def test_delete_message_prefixed(self, method):
        """Test that message deletion gets its own route key."""
        route = routify(f"/channels/{CHANNEL}/messages/{MESSAGE}", method)

        assert route == f"DELETE/channels/{CHANNEL}/messages/:id"

    def test_delete_other_route_not_prefixed(self):
        route = routify(f"/channels/{CHANNEL}/pins/{MESSAGE}", "delete")

        assert route == f"/channels/{CHANNEL}/pins/:id"

    def test_patch_message_not_prefixed(self):
        route = routify(f"/channels/{CHANNEL}/messages/{MESSAGE}", "patch")

        assert not route.startswith("DELETE")

    def test_unmatched_path_unchanged(self):
        """Test paths without ids pass through untouched."""
        assert routify("/gateway/bot", "get") == "/gateway/bot"
        assert routify("/voice/regions", "get") == "/voice/regions"

    def test_short_numbers_not_collapsed(self):
        """Test that numbers shorter than a snowflake are left alone."""
        assert routify("/users/12345", "get") == "/users/12345"

    def test_uppercase_label_not_collapsed(self):
        assert routify(f"/Users/{USER}", "get") == f"/Users/{USER}"

    def test_idempotent(self):
        """Test that routifying a route key again does not change it."""
        route = routify(f"/channels/{CHANNEL}/messages/{MESSAGE}/reactions/x/@me", "put")

        assert routify(route, "put") == route


class TestIsReactionRoute:
    """Test detection of reaction routes."""

    def test_reaction_route(self):
        route = routify(f"/channels/{CHANNEL}/messages/{MESSAGE}/reactions/x/@me", "put")

        assert is_reaction_route(route) is True

    def test_message_route(self):
        route = routify(f"/channels/{CHANNEL}/messages/{MESSAGE}", "get")

        assert is_reaction_route(route) is False

    def test_raw_path_not_reaction_route(self):
        """Test that detection works on route keys, not raw paths."""
        assert is_reaction_route(f"/channels/{CHANNEL}/messages/{MESSAGE}/reactions/x") is False
