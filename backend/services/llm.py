import re
import json
import logging

from openai import OpenAI, OpenAIError

from config import (get_api_key, MOCK_MODE, LLM_BASE_URL, LLM_MODEL, LLM_TEMPERATURE,
                    LLM_TIMEOUT_SECONDS, LLM_MAX_DOCUMENT_CHARS)
from models import utcnow
from prompts.brd import BRD_SYSTEM_PROMPT, BRD_USER_PROMPT
from services.errors import AppError, UpstreamServiceError
from services.reports import coerce_hours

logger = logging.getLogger(__name__)

ANALYSIS_FAILED = "Failed to analyze document. Please try again."

LIST_SECTIONS = (
    "functionalRequirements",
    "nonFunctionalRequirements",
    "frontendRequirements",
    "roleRequirements",
    "userStories",
    "taskBreakdown",
    "apiEndpoints",
    "recommendations",
    "businessRules",
    "contractStates",
    "useCaseFlows",
    "features",
)

FENCED_JSON = re.compile(r"```(?:json)?\s*([\s\S]*?)\s*```")


# Lazy client initialization
_client = None


def get_client():
    global _client
    if MOCK_MODE:
        return None  # Mock mode doesn't need a client
    if _client is None:
        api_key = get_api_key()
        if not api_key:
            raise AppError("LLM API key not configured. Set LLM_API_KEY (or GROQ_API_KEY / OPENAI_API_KEY).", 500)
        _client = OpenAI(api_key=api_key, base_url=LLM_BASE_URL, timeout=LLM_TIMEOUT_SECONDS)
    return _client


def clean_llm_response(response_text: str) -> str:
    """Strip a ```json``` fence if the model wrapped its answer in one"""
    match = FENCED_JSON.search(response_text)
    if match:
        return match.group(1).strip()
    return response_text.strip()


def parse_llm_json(response_text: str) -> dict:
    try:
        data = json.loads(response_text)
    except json.JSONDecodeError:
        try:
            data = json.loads(clean_llm_response(response_text))
        except json.JSONDecodeError as e:
            logger.error("LLM returned unparseable JSON: %s", e)
            raise UpstreamServiceError(ANALYSIS_FAILED) from e
    if not isinstance(data, dict):
        raise UpstreamServiceError(ANALYSIS_FAILED)
    return data


def count_requirements(requirements: dict) -> int:
    return sum(len(requirements.get(key) or []) for key in (
        "functionalRequirements",
        "nonFunctionalRequirements",
        "frontendRequirements",
        "roleRequirements",
    ))


def _normalize_item(key: str, item):
    """A section entry as a dict; bare strings become the entry's text, anything else is dropped"""
    if isinstance(item, dict):
        item = dict(item)
    elif isinstance(item, str) and item.strip():
        text = item.strip()
        item = {"story": text} if key == "userStories" else {"title": text, "description": text}
    else:
        return None
    if "estimatedHours" in item:
        item["estimatedHours"] = coerce_hours(item["estimatedHours"])
    return item


def normalize_requirements(data: dict, document_name: str) -> dict:
    """Default every section of the result and stamp its metadata"""
    result = dict(data)
    summary = result.get("businessRequirementsSummary")
    result["businessRequirementsSummary"] = summary if isinstance(summary, str) else ""
    for key in LIST_SECTIONS:
        value = result.get(key)
        items = [_normalize_item(key, item) for item in value] if isinstance(value, list) else []
        result[key] = [item for item in items if item is not None]

    result["metadata"] = {
        "documentName": document_name,
        "processedAt": utcnow().isoformat() + "Z",
        "totalRequirements": count_requirements(result),
    }
    return result


def analyze_brd(text: str, document_name: str, client=None) -> dict:
    """Send the BRD text to the LLM and return the normalized requirements"""
    if MOCK_MODE and client is None:
        from services.mock.brd import mock_brd_analysis
        return normalize_requirements(mock_brd_analysis(text), document_name)

    client = client or get_client()
    user_prompt = BRD_USER_PROMPT.replace("<<DOCUMENT>>", text[:LLM_MAX_DOCUMENT_CHARS])

    try:
        response = client.chat.completions.create(
            model=LLM_MODEL,
            messages=[
                {"role": "system", "content": BRD_SYSTEM_PROMPT},
                {"role": "user", "content": user_prompt},
            ],
            response_format={"type": "json_object"},
            temperature=LLM_TEMPERATURE,
        )
    except OpenAIError as e:
        logger.error("LLM request failed for %s: %s", document_name, e)
        raise UpstreamServiceError(ANALYSIS_FAILED) from e

    content = response.choices[0].message.content if response.choices else None
    if not content:
        logger.error("LLM returned an empty response for %s", document_name)
        raise UpstreamServiceError(ANALYSIS_FAILED)

    return normalize_requirements(parse_llm_json(content), document_name)
