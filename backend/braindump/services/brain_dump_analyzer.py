"""Language-model analysis of brain dumps."""
from __future__ import annotations

import json
import logging
from typing import List, Optional

import httpx
import openai
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from braindump.core.config import settings
from braindump.core.errors import AnalysisFailure

logger = logging.getLogger(__name__)

LLM_MODEL = "gpt-4.1-nano"
LLM_TEMPERATURE = 0.7

PROMPT_TEMPLATE = """
Analyze this brain dump and help the person find clarity. Extract:

1. A brief, empathetic summary (2-3 sentences)
2. What matters most (3-5 key points that are important/actionable)
3. What doesn't matter right now (2-4 things that are distractions or less urgent)
4. One clear, specific actionable focus for today

Be compassionate and practical. Help them feel heard while providing clarity.

Brain dump:
"{original_text}"

Respond in this exact JSON format:
{{
  "summary": "Brief empathetic summary here",
  "whatMatters": ["Important point 1", "Important point 2", "Important point 3"],
  "whatDoesnt": ["Distraction 1", "Less urgent item 2"],
  "actionableFocus": "One specific action they can take today"
}}"""


class BrainDumpAnalysis(BaseModel):
    """Structured analysis, keyed the way the model is asked to answer."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    summary: str
    what_matters: List[str] = Field(alias="whatMatters")
    what_doesnt: List[str] = Field(alias="whatDoesnt")
    actionable_focus: str = Field(alias="actionableFocus")


FALLBACK_ANALYSIS = BrainDumpAnalysis(
    summary="I can see you have a lot on your mind. Let's break this down into manageable pieces.",
    what_matters=["Take a deep breath", "Focus on one thing at a time"],
    what_doesnt=["Overwhelming yourself with everything at once"],
    actionable_focus="Choose the most important item and spend 15 minutes on it",
)


def build_prompt(original_text: str) -> str:
    return PROMPT_TEMPLATE.format(original_text=original_text)


def build_llm_client(http_client: Optional[httpx.Client] = None) -> openai.OpenAI:
    """OpenAI-compatible client for the configured endpoint, with SDK retries off."""
    return openai.OpenAI(
        api_key=settings.openai_api_key,
        base_url=settings.openai_base_url,
        max_retries=0,
        http_client=http_client,
    )


def parse_analysis(content: Optional[str]) -> BrainDumpAnalysis:
    """Parse the model's message content into an analysis or raise AnalysisFailure."""
    if not content:
        raise AnalysisFailure("Language model returned an empty message")
    try:
        payload = json.loads(content)
    except Exception as exc:
        # Decoding can also fail with RecursionError or a plain ValueError (oversized ints).
        raise AnalysisFailure("Language model response is not valid JSON") from exc
    try:
        return BrainDumpAnalysis.model_validate(payload)
    except ValidationError as exc:
        raise AnalysisFailure(f"Language model response has the wrong shape: {exc.error_count()} error(s)") from exc
    except Exception as exc:
        raise AnalysisFailure("Language model response could not be validated") from exc


def request_analysis(original_text: str) -> BrainDumpAnalysis:
    """Ask the language model for an analysis of ``original_text``.

    Every failure mode (missing credentials, transport errors, non-2xx
    responses, unparsable or incomplete content) surfaces as AnalysisFailure.
    """
    prompt = build_prompt(original_text)
    try:
        client = build_llm_client()
        completion = client.chat.completions.create(
            model=LLM_MODEL,
            messages=[{"role": "user", "content": prompt}],
            temperature=LLM_TEMPERATURE,
        )
        content = completion.choices[0].message.content
    except Exception as exc:
        raise AnalysisFailure(f"Language model call failed: {exc}") from exc

    analysis = parse_analysis(content)
    logger.debug(
        "Model analysis parsed (matters=%s, doesnt=%s)",
        len(analysis.what_matters),
        len(analysis.what_doesnt),
    )
    return analysis
