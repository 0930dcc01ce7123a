"""
Tests for parsing Gemini mood answers.
"""
import os
import sys

# Add parent directory to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from sentilight.processing.parser import (
    parse_response,
    extract_command,
    extract_explanation,
    sanitize_command,
    FALLBACK_NO_COMMAND,
    FALLBACK_INVALID_COMMAND,
)


class TestExtractCommand:
    """Test [COMMAND: ...] extraction."""

    def test_command_and_explanation(self):
        """Well-formed answer parses cleanly."""
        text = "[COMMAND: HSBCOLOR 60,100,100;Dimmer 70;CT 250] [EXPLANATION: warm yellow]"
        parsed = parse_response(text)

        assert parsed.command == "HSBCOLOR 60,100,100;Dimmer 70;CT 250"
        assert parsed.explanation == "warm yellow"

    def test_missing_block_uses_lights_off_fallback(self):
        assert extract_command("Sure! Try a warm yellow light.") == "HSBCOLOR 0,0,0;Dimmer 0;CT 500"
        assert extract_command("") == FALLBACK_NO_COMMAND
        assert extract_command(None) == FALLBACK_NO_COMMAND

    def test_block_without_hsbcolor_uses_second_fallback(self):
        assert extract_command("[COMMAND: Dimmer 40;CT 300]") == FALLBACK_INVALID_COMMAND

    def test_tag_is_case_sensitive(self):
        assert extract_command("[command: HSBCOLOR 1,2,3]") == FALLBACK_NO_COMMAND

    def test_hsbcolor_keyword_is_case_insensitive(self):
        assert extract_command("[COMMAND: hsbcolor 10,20,30;Dimmer 5]") == "hsbcolor 10,20,30;Dimmer 5"

    def test_multiline_block(self):
        text = "[COMMAND:\n  HSBCOLOR 200,50,80;\n  Dimmer 40;\n  CT 300\n]"
        assert extract_command(text) == "HSBCOLOR 200,50,80; Dimmer 40; CT 300"

    def test_disallowed_characters_stripped(self):
        text = "[COMMAND: HSBCOLOR 10,20,30;Dimmer 50&Power=off;CT 300]"
        assert extract_command(text) == "HSBCOLOR 10,20,30;Dimmer 50Poweroff;CT 300"

    def test_surrounding_text_ignored(self):
        text = "Here you go:\n[COMMAND: HSBCOLOR 240,80,60;Dimmer 30;CT 400]\nEnjoy."
        assert extract_command(text) == "HSBCOLOR 240,80,60;Dimmer 30;CT 400"

    def test_first_block_wins(self):
        text = "[COMMAND: HSBCOLOR 1,1,1] [COMMAND: HSBCOLOR 2,2,2]"
        assert extract_command(text) == "HSBCOLOR 1,1,1"


class TestSanitize:

    def test_collapses_whitespace(self):
        assert sanitize_command("  HSBCOLOR   1,2,3 ;\tDimmer 4 ") == "HSBCOLOR 1,2,3 ; Dimmer 4"

    def test_strips_url_metacharacters(self):
        assert sanitize_command("HSBCOLOR 1,2,3?x=1#y/z") == "HSBCOLOR 1,2,3x1yz"


class TestExtractExplanation:

    def test_present(self):
        assert extract_explanation("[EXPLANATION:  calm blue \n]", "X") == "calm blue"

    def test_missing_mentions_command(self):
        explanation = extract_explanation("[COMMAND: HSBCOLOR 1,2,3]", "HSBCOLOR 1,2,3")
        assert "HSBCOLOR 1,2,3" in explanation
        assert "no explanation" in explanation

    def test_parse_response_default_explanation_uses_fallback_command(self):
        parsed = parse_response("nothing useful")
        assert parsed.command == FALLBACK_NO_COMMAND
        assert parsed.explanation.startswith(FALLBACK_NO_COMMAND)
