"""Tests for the canned-reply table and its exact-match lookup."""

import pytest

from axtarget.memory.persona import (
    CANNED_REPLIES,
    CannedReplies,
    CannedReply,
    normalize_phrase,
    render_canned_replies,
)


class TestNormalizePhrase:
    def test_strips_case_and_punctuation(self):
        assert normalize_phrase("  Adın nədir?! ") == "adın nədir"

    def test_dotted_capital_i(self):
        assert normalize_phrase("İbadulla") == normalize_phrase("ibadulla")


class TestCannedReplies:
    @pytest.fixture
    def canned(self):
        return CannedReplies()

    def test_identity_question(self, canned):
        assert canned.match("adın nədir?") == (
            "Mən AxtarGet AI-yam. Dostların məni Axtar deyə çağırır."
        )

    @pytest.mark.parametrize("message", ["Bro", "bro!", "DOSTUM", "qardaş"])
    def test_greeting_triggers(self, canned, message):
        assert canned.match(message) == "Salam dostum! Necəsən?"

    def test_contact_triggers(self, canned):
        assert "060-600-61-62" in canned.match("telefon")

    @pytest.mark.parametrize("message", ["salam bro", "adın nədir və yaşın?", ""])
    def test_non_exact_messages_do_not_match(self, canned, message):
        assert canned.match(message) is None

    def test_custom_table(self):
        canned = CannedReplies((CannedReply(triggers=("ping",), reply="pong"),))
        assert canned.match("Ping.") == "pong"
        assert canned.match("bro") is None


class TestRenderCannedReplies:
    def test_every_reply_is_rendered(self):
        block = render_canned_replies()
        assert block.startswith("XÜSUSİ CAVABLAR:")
        for canned in CANNED_REPLIES:
            assert canned.reply in block
            for trigger in canned.triggers:
                assert f'"{trigger}"' in block

    def test_greeting_rule_format(self):
        assert '- "Bro" / "dostum" / "qardaş" → "Salam dostum! Necəsən?"' in render_canned_replies()
