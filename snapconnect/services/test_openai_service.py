# snapconnect/services/test_openai_service.py
"""
AI 제안 응답 정리/파싱/대체값 테스트 (실제 OpenAI 호출 없음)
"""

from types import SimpleNamespace
from unittest.mock import MagicMock

import httpx
import openai
import pytest

from snapconnect.services.openai_service import (
    OpenAIService, AIServiceBusyError, AIConfigurationError,
    clean_completion, parse_caption_suggestions, parse_tag_suggestions,
    fallback_captions, FALLBACK_CAPTIONS, FALLBACK_REPLIES,
    FALLBACK_CONFIDENCE, PARSED_CONFIDENCE
)


def completion(content):
    return SimpleNamespace(choices=[SimpleNamespace(message=SimpleNamespace(content=content))])


def api_error(error_cls, status_code):
    request = httpx.Request("POST", "https://api.openai.com/v1/chat/completions")
    response = httpx.Response(status_code, request=request)
    return error_cls("error", response=response, body=None)


@pytest.fixture
def service():
    svc = OpenAIService()
    svc.client = MagicMock()
    return svc


def test_clean_completion_strips_fences_and_fixes_typo():
    raw = '```json\n[{"text": "hi", "mood": "casual", "leength": "short"}]\n```'
    assert clean_completion(raw) == '[{"text": "hi", "mood": "casual", "length": "short"}]'

def test_parse_caption_suggestions_fills_missing_fields():
    suggestions = parse_caption_suggestions('[{"text": "Golden hour"}, {"mood": "weird"}]')
    assert suggestions[0] == {"text": "Golden hour", "mood": "casual", "length": "short"}
    assert suggestions[1]["text"] == "Caption 2"

@pytest.mark.parametrize("content", ["not json", "[]", '{"text": "x"}'])
def test_parse_caption_suggestions_rejects_malformed(content):
    with pytest.raises(ValueError):
        parse_caption_suggestions(content)

def test_parse_tag_suggestions_normalizes_and_dedupes():
    content = '[{"tag": "#Sunset", "relevance": "high"}, "sunset", {"tag": "  Beach "}, {"nope": 1}]'
    suggestions = parse_tag_suggestions(content)
    assert [s["tag"] for s in suggestions] == ["sunset", "beach"]
    assert suggestions[1]["relevance"] == "medium"
    assert suggestions[1]["category"] == "general"

def test_fallback_captions_unknown_filter_uses_none():
    assert fallback_captions("sepia") == FALLBACK_CAPTIONS["none"]
    assert fallback_captions("noir") == FALLBACK_CAPTIONS["noir"]

def test_caption_suggestions_parsed(service):
    service.client.chat.completions.create.return_value = completion(
        '```json\n[{"text": "a", "mood": "creative", "leength": "medium"}]\n```'
    )
    result = service.generate_caption_suggestions("aGk=", "vintage")
    assert result["confidence"] == PARSED_CONFIDENCE
    assert result["suggestions"] == [{"text": "a", "mood": "creative", "length": "medium"}]

def test_caption_suggestions_fallback_on_malformed_output(service):
    service.client.chat.completions.create.return_value = completion("Sorry, I can't help with that.")
    result = service.generate_caption_suggestions("aGk=", "cyberpunk")
    assert result["confidence"] == FALLBACK_CONFIDENCE
    assert result["suggestions"] == FALLBACK_CAPTIONS["cyberpunk"]

def test_caption_suggestions_fallback_on_network_failure(service):
    service.client.chat.completions.create.side_effect = ConnectionError("offline")
    result = service.generate_caption_suggestions("aGk=")
    assert result["suggestions"] == FALLBACK_CAPTIONS["none"]

def test_rate_limit_is_reported_as_busy(service):
    service.client.chat.completions.create.side_effect = api_error(openai.RateLimitError, 429)
    with pytest.raises(AIServiceBusyError):
        service.generate_caption_suggestions("aGk=")

def test_authentication_failure_is_configuration_error(service):
    service.client.chat.completions.create.side_effect = api_error(openai.AuthenticationError, 401)
    with pytest.raises(AIConfigurationError):
        service.generate_tag_suggestions("aGk=")

def test_quick_reply_falls_back(service):
    service.client.chat.completions.create.side_effect = ConnectionError("offline")
    assert service.quick_reply("beach day") in FALLBACK_REPLIES

def test_quick_reply_strips_whitespace(service):
    service.client.chat.completions.create.return_value = completion("  so jealous 🌊 \n")
    assert service.quick_reply("beach day") == "so jealous 🌊"
