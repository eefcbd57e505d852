# snapconnect/services/openai_service.py
import json
import logging
import random
import re
import time
from typing import Optional, Dict, Any, List

import openai
from flask import Flask
from openai import OpenAI

from snapconnect.feed.tags import normalize_tags


class AIServiceBusyError(Exception):
    """OpenAI가 요청 한도 초과(429)를 반환한 경우"""


class AIConfigurationError(Exception):
    """OpenAI 인증(401) 등 서버 설정 문제로 호출할 수 없는 경우"""


FALLBACK_CONFIDENCE = 0.2
PARSED_CONFIDENCE = 0.85

# 필터별 대체 캡션 (AI 응답을 쓸 수 없을 때)
FALLBACK_CAPTIONS: Dict[str, List[Dict[str, str]]] = {
    "none": [
        {"text": "Capturing the moment ✨", "mood": "casual", "length": "short"},
        {"text": "Life through my lens 📸", "mood": "creative", "length": "short"},
        {"text": "Vibes on point today 😎", "mood": "humorous", "length": "short"},
    ],
    "vintage": [
        {"text": "Vintage vibes only ✨", "mood": "casual", "length": "short"},
        {"text": "Old soul, timeless moments 📺", "mood": "creative", "length": "medium"},
        {"text": "Retro mood activated 📸", "mood": "humorous", "length": "short"},
    ],
    "noir": [
        {"text": "Dramatic lighting ✨", "mood": "casual", "length": "short"},
        {"text": "Life in black and white 🎬", "mood": "creative", "length": "medium"},
        {"text": "Film noir protagonist energy 🕶️", "mood": "humorous", "length": "medium"},
    ],
    "cyberpunk": [
        {"text": "Neon dreams ⚡", "mood": "casual", "length": "short"},
        {"text": "Future meets present 🌃", "mood": "creative", "length": "medium"},
        {"text": "Cyberpunk main character 🤖✨", "mood": "humorous", "length": "medium"},
    ],
}

FALLBACK_TAGS: List[Dict[str, str]] = [
    {"tag": "photography", "relevance": "high", "category": "activity"},
    {"tag": "moment", "relevance": "medium", "category": "mood"},
    {"tag": "creative", "relevance": "medium", "category": "style"},
    {"tag": "memory", "relevance": "medium", "category": "mood"},
]

FALLBACK_REPLIES = [
    "Looks amazing! 😍",
    "Love this! ✨",
    "So cool! 🔥",
    "Great shot! 📸",
    "This is awesome! 👏",
]

CAPTION_MOODS = {"casual", "professional", "creative", "humorous"}
CAPTION_LENGTHS = {"short", "medium", "long"}
TAG_RELEVANCE = {"high", "medium", "low"}

_FENCE_START = re.compile(r"^```(?:json)?\s*", re.IGNORECASE)
_FENCE_END = re.compile(r"\s*```$")


def fallback_captions(filter_name: Optional[str]) -> List[Dict[str, str]]:
    """필터 이름에 맞는 대체 캡션. 모르는 필터는 'none'을 사용합니다."""
    options = FALLBACK_CAPTIONS.get(filter_name or "none", FALLBACK_CAPTIONS["none"])
    return [dict(option) for option in options]


def clean_completion(content: str) -> str:
    """마크다운 코드 블록을 벗겨내고 자주 나오는 오타("leength")를 고칩니다."""
    cleaned = content.strip()
    if cleaned.startswith("```"):
        cleaned = _FENCE_END.sub("", _FENCE_START.sub("", cleaned))
    return cleaned.replace('"leength":', '"length":')


def _load_array(content: str) -> List[Any]:
    try:
        data = json.loads(clean_completion(content))
    except json.JSONDecodeError as e:
        raise ValueError(f"JSON 파싱 실패: {e}")
    if not isinstance(data, list) or not data:
        raise ValueError("응답이 비어 있지 않은 JSON 배열이 아닙니다.")
    return data


def parse_caption_suggestions(content: str) -> List[Dict[str, str]]:
    """
    캡션 제안 응답을 검증합니다. 빠진 필드는 기본값으로 채웁니다.

    :raises ValueError: JSON 배열로 해석할 수 없는 경우
    """
    suggestions = []
    for index, item in enumerate(_load_array(content)):
        item = item if isinstance(item, dict) else {}
        text = item.get("text")
        mood = item.get("mood")
        length = item.get("length")
        suggestions.append({
            "text": text.strip() if isinstance(text, str) and text.strip() else f"Caption {index + 1}",
            "mood": mood if mood in CAPTION_MOODS else "casual",
            "length": length if length in CAPTION_LENGTHS else "short",
        })
    return suggestions


def parse_tag_suggestions(content: str) -> List[Dict[str, str]]:
    """
    태그 제안 응답을 검증하고 태그를 정규화합니다. 쓸 수 있는 태그가 없으면 ValueError.
    """
    suggestions = []
    seen = set()
    for item in _load_array(content):
        if isinstance(item, str):
            item = {"tag": item}
        if not isinstance(item, dict) or not isinstance(item.get("tag"), str):
            continue
        normalized = normalize_tags([item["tag"].lstrip("#")])
        if not normalized or normalized[0] in seen:
            continue
        tag = normalized[0]
        seen.add(tag)
        relevance = item.get("relevance")
        category = item.get("category")
        suggestions.append({
            "tag": tag,
            "relevance": relevance if relevance in TAG_RELEVANCE else "medium",
            "category": category if isinstance(category, str) and category else "general",
        })
    if not suggestions:
        raise ValueError("유효한 태그 제안이 없습니다.")
    return suggestions


def _context_prefix(filter_name: Optional[str], interests: Optional[List[str]]) -> str:
    prefix = ""
    if filter_name and filter_name != "none":
        prefix += f'The image has a "{filter_name}" filter applied, which affects its visual style. '
    if interests:
        prefix += f"The user is interested in: {', '.join(interests)}. "
    return prefix


class OpenAIService:
    """
    OpenAI API 연동을 담당하는 서비스 클래스.
    스냅 캡션 제안, 태그 제안, 빠른 답장 생성을 제공합니다.
    AI 응답이 잘못되었거나 호출이 실패하면 고정된 대체 목록을 반환합니다.
    """

    def __init__(self):
        """실제 클라이언트는 init_app 메서드를 통해 설정됩니다."""
        self.client = None
        self.vision_model = "gpt-4o-mini"
        self.reply_model = "gpt-3.5-turbo"

    def init_app(self, app: Flask):
        """
        Flask 앱 초기화 과정에서 호출되어 OpenAI 클라이언트를 설정합니다.

        :param app: Flask 애플리케이션 객체
        """
        api_key = app.config.get('OPENAI_API_KEY')
        if not api_key:
            raise ValueError("OPENAI_API_KEY 설정이 .env 파일에 필요합니다.")

        self.client = OpenAI(api_key=api_key)
        self.vision_model = app.config.get('OPENAI_VISION_MODEL', self.vision_model)
        self.reply_model = app.config.get('OPENAI_REPLY_MODEL', self.reply_model)
        logging.info("OpenAIService: OpenAI API 서비스가 성공적으로 초기화되었습니다.")

    def _complete(self, model: str, content: Any, max_tokens: int, temperature: float = 0.8) -> str:
        """
        chat completion을 호출하고 응답 텍스트를 반환합니다.
        429/401은 호출자가 구분할 수 있는 예외로 바꿔서 던집니다.
        """
        if not self.client:
            raise RuntimeError("OpenAIService가 초기화되지 않았습니다. init_app을 먼저 호출해주세요.")

        try:
            response = self.client.chat.completions.create(
                model=model,
                messages=[{"role": "user", "content": content}],
                max_tokens=max_tokens,
                temperature=temperature,
            )
        except openai.RateLimitError as e:
            raise AIServiceBusyError("AI service is busy. Please try again in a moment.") from e
        except openai.AuthenticationError as e:
            raise AIConfigurationError("AI service configuration error.") from e

        text = response.choices[0].message.content if response.choices else None
        if not text:
            raise RuntimeError("OpenAI 응답이 비어 있습니다.")
        return text

    def _vision_content(self, prompt: str, image_base64: str) -> List[Dict[str, Any]]:
        return [
            {"type": "text", "text": prompt},
            {
                "type": "image_url",
                "image_url": {
                    "url": f"data:image/jpeg;base64,{image_base64}",
                    "detail": "low",
                },
            },
        ]

    def generate_caption_suggestions(self, image_base64: str, filter_name: Optional[str] = None,
                                     interests: Optional[List[str]] = None) -> Dict[str, Any]:
        """
        사진을 분석해 스타일이 다른 캡션 3개를 제안합니다.

        :return: {"suggestions": [...], "confidence": float, "processing_time": ms}
        """
        start = time.monotonic()
        prompt = (
            f"{_context_prefix(filter_name, interests)}Analyze this photo and create 3 engaging "
            "social media captions. Make them diverse in style:\n\n"
            "1. Casual/relatable (20-40 chars)\n"
            "2. Creative/artistic (40-60 chars)\n"
            "3. Fun/humorous with emoji (30-50 chars)\n\n"
            "Consider the image content, mood, colors, and composition. "
            "Make captions shareable and authentic.\n\n"
            "Return ONLY a JSON array of objects like this:\n"
            '[{"text": "Living the moment ✨", "mood": "casual", "length": "short"}]'
        )

        try:
            content = self._complete(self.vision_model, self._vision_content(prompt, image_base64), max_tokens=500)
            suggestions = parse_caption_suggestions(content)
            confidence = PARSED_CONFIDENCE
            logging.info(f"AI 캡션 제안 생성 완료: {len(suggestions)}개")
        except (AIServiceBusyError, AIConfigurationError):
            raise
        except ValueError as e:
            logging.warning(f"AI 캡션 응답 파싱 실패, 대체 캡션을 사용합니다: {e}")
            suggestions, confidence = fallback_captions(filter_name), FALLBACK_CONFIDENCE
        except Exception as e:
            logging.error(f"AI 캡션 생성 실패, 대체 캡션을 사용합니다: {e}", exc_info=True)
            suggestions, confidence = fallback_captions(filter_name), FALLBACK_CONFIDENCE

        return {
            "suggestions": suggestions,
            "confidence": confidence,
            "processing_time": int((time.monotonic() - start) * 1000),
        }

    def generate_tag_suggestions(self, image_base64: str, filter_name: Optional[str] = None,
                                 interests: Optional[List[str]] = None) -> Dict[str, Any]:
        """사진에 어울리는 태그를 제안합니다. 태그는 소문자로 정규화됩니다."""
        start = time.monotonic()
        prompt = (
            f"{_context_prefix(filter_name, interests)}Suggest 5 short, lowercase, single-word "
            "hashtags (without the # sign) that describe this photo so other people can discover it.\n\n"
            "Return ONLY a JSON array of objects like this:\n"
            '[{"tag": "sunset", "relevance": "high", "category": "scene"}]'
        )

        try:
            content = self._complete(self.vision_model, self._vision_content(prompt, image_base64), max_tokens=300)
            suggestions = parse_tag_suggestions(content)
            confidence = PARSED_CONFIDENCE
        except (AIServiceBusyError, AIConfigurationError):
            raise
        except Exception as e:
            logging.warning(f"AI 태그 제안 실패, 대체 태그를 사용합니다: {e}")
            suggestions = [dict(item) for item in FALLBACK_TAGS]
            confidence = FALLBACK_CONFIDENCE

        return {
            "suggestions": suggestions,
            "confidence": confidence,
            "processing_time": int((time.monotonic() - start) * 1000),
        }

    def quick_reply(self, caption: str) -> str:
        """스냅 캡션에 대한 한 줄짜리 가벼운 답장을 생성합니다."""
        prompt = f'You are a college student. Reply in one fun/casual line to this snap: "{caption}"'
        try:
            return self._complete(self.reply_model, prompt, max_tokens=30).strip()
        except (AIServiceBusyError, AIConfigurationError):
            raise
        except Exception as e:
            reply = random.choice(FALLBACK_REPLIES)
            logging.warning(f"빠른 답장 생성 실패, 대체 답장을 사용합니다 ({reply}): {e}")
            return reply
