"""Unit tests for the shared domain types.

Covers:
- canonical_channel() lowercases
- Credentials.is_complete and a repr that hides the token
- StreamStatus.offline() placeholders and identifier
- thumbnail_url() placeholder substitution
- formatted_viewers abbreviations
- initial and accessibility_description
"""

from __future__ import annotations

import pytest

from twitch_launcher.models import Credentials, StreamStatus, canonical_channel

TEMPLATE = "https://static-cdn.jtvnw.net/previews-ttv/live_user_zizaran-{width}x{height}.jpg"


def _online(viewers: int = 100, game: str = "Path of Exile") -> StreamStatus:
    return StreamStatus(
        name="zizaran",
        display_name="Zizaran",
        is_online=True,
        viewer_count=viewers,
        game_name=game,
        title="League start",
        thumbnail_template=TEMPLATE,
    )


class TestCanonicalChannel:
    @pytest.mark.parametrize("name", ["ChannelA", "channela", "CHANNELA"])
    def test_casings_collapse(self, name: str) -> None:
        """All casings of a login map to the same identifier."""
        assert canonical_channel(name) == "channela"


class TestCredentials:
    def test_complete_when_both_values_set(self) -> None:
        assert Credentials("id", "token").is_complete

    @pytest.mark.parametrize(("client_id", "token"), [("", "token"), ("id", ""), ("", "")])
    def test_incomplete_when_either_value_empty(self, client_id: str, token: str) -> None:
        """An empty client id or token is not usable."""
        assert not Credentials(client_id, token).is_complete

    def test_repr_hides_access_token(self) -> None:
        """The token never appears in repr() output, e.g. in tracebacks."""
        text = repr(Credentials("my-client", "super-secret"))
        assert "super-secret" not in text
        assert "my-client" in text


class TestStreamStatus:
    def test_offline_placeholder(self) -> None:
        """offline() keeps the requested casing and empties every live field."""
        status = StreamStatus.offline("ChannelB")

        assert status.name == "ChannelB"
        assert status.display_name == "ChannelB"
        assert status.is_online is False
        assert status.viewer_count == 0
        assert status.game_name == ""
        assert status.title == ""
        assert status.thumbnail_template is None

    def test_identifier_is_canonical(self) -> None:
        assert StreamStatus.offline("ChannelB").identifier == "channelb"

    def test_thumbnail_url_substitutes_size(self) -> None:
        """Default size is 440x248; explicit sizes replace both placeholders."""
        status = _online()
        assert status.thumbnail_url() == TEMPLATE.replace("{width}x{height}", "440x248")
        assert status.thumbnail_url(1280, 720).endswith("-1280x720.jpg")

    def test_thumbnail_url_none_when_offline(self) -> None:
        assert StreamStatus.offline("x").thumbnail_url() is None

    @pytest.mark.parametrize(
        ("viewers", "expected"),
        [
            (0, "0"),
            (950, "950"),
            (1_000, "1.0K"),
            (1_234, "1.2K"),
            (999_999, "1000.0K"),
            (1_000_000, "1.0M"),
            (3_460_000, "3.5M"),
        ],
    )
    def test_formatted_viewers(self, viewers: int, expected: str) -> None:
        assert _online(viewers).formatted_viewers == expected

    def test_initial(self) -> None:
        assert StreamStatus.offline("mathil1").initial == "M"
        assert StreamStatus.offline("").initial == ""

    def test_accessibility_description_online(self) -> None:
        """Live entries mention game and abbreviated viewer count."""
        assert (
            _online(12_300).accessibility_description
            == "Zizaran, live, playing Path of Exile, 12.3K viewers"
        )

    def test_accessibility_description_single_viewer_without_game(self) -> None:
        assert _online(1, game="").accessibility_description == "Zizaran, live, streaming, 1 viewer"

    def test_accessibility_description_offline(self) -> None:
        assert StreamStatus.offline("Mathil1").accessibility_description == "Mathil1, offline"

    def test_is_immutable(self) -> None:
        """Statuses are frozen value objects."""
        status = StreamStatus.offline("x")
        with pytest.raises(AttributeError):
            status.viewer_count = 5  # type: ignore[misc]
