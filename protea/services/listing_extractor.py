"""Pre-fill listing form fields from free-text descriptions.

Agents paste WhatsApp-style listing copy ("LT 120 LB 90 KT 3+1 KM 2
Harga: Rp 1.725 M"). A regex pass extracts the common abbreviations; an
optional LLM pass (LangChain structured output) fills in the rest. All
results are suggestions for the form and are never saved directly.
"""

import json
import os
import re
import time
from decimal import Decimal, InvalidOperation
from typing import Optional

from langchain_anthropic import ChatAnthropic
from langchain_openai import ChatOpenAI

from protea.models.extraction import ExtractedListingFields
from protea.models.listing import PropertyType, TransactionType
from protea.utils.config import AppConfig
from protea.utils.errors import ExtractionError
from protea.utils.logging import get_structured_logger, log_timing, mask_sensitive_data

logger = get_structured_logger(__name__)

_LT_PATTERNS = (r"\bLT\.?\s*[:：]?\s*(\d+)", r"Luas\s*Tanah\s*[:：]?\s*(\d+)")
_LB_PATTERNS = (r"\bLB\.?\s*[:：]?\s*(\d+)", r"Luas\s*Bangunan\s*[:：]?\s*(\d+)")
_KT_PATTERNS = (r"\bKT\.?\s*[:：]?\s*(\d+)(?:\s*\+\s*(\d+))?", r"(\d+)\s*Kamar\s*Tidur")
_KM_PATTERNS = (r"\bKM\.?\s*[:：]?\s*(\d+)(?:\s*\+\s*(\d+))?", r"(\d+)\s*Kamar\s*Mandi")
_PRICE_PATTERN = re.compile(r"Harga\s*[:：]?\s*(?:Rp\.?)?\s*([\d.,]+)\s*(M|Miliar|Milyar|jt|juta)?\b", re.IGNORECASE)

_PRICE_MULTIPLIERS = {
    "m": 1_000_000_000,
    "miliar": 1_000_000_000,
    "milyar": 1_000_000_000,
    "jt": 1_000_000,
    "juta": 1_000_000,
}


def _search(patterns: tuple[str, ...], text: str) -> Optional[re.Match]:
    for pattern in patterns:
        match = re.search(pattern, text, re.IGNORECASE)
        if match:
            return match
    return None


def _room_count(patterns: tuple[str, ...], text: str) -> Optional[int]:
    """Room counts like ``3+1`` add the extra (maid's) room."""
    match = _search(patterns, text)
    if not match:
        return None
    count = int(match.group(1))
    if match.lastindex and match.lastindex >= 2 and match.group(2):
        count += int(match.group(2))
    return count


def parse_price_text(amount: str, unit: Optional[str] = None) -> Optional[str]:
    """Convert ``1.725`` + ``M`` into ``"1725000000"``.

    With a unit, a single ``.`` or ``,`` is a decimal separator. Without
    one, every separator is a thousands separator.
    """
    amount = amount.strip(".,")
    if not amount:
        return None

    if not unit:
        digits = re.sub(r"\D", "", amount)
        return digits or None

    normalized = amount.replace(",", ".")
    if normalized.count(".") > 1:
        normalized = normalized.replace(".", "")
    try:
        value = Decimal(normalized) * _PRICE_MULTIPLIERS[unit.lower()]
    except (InvalidOperation, KeyError):
        return None
    return str(int(value))


def parse_description(text: str) -> ExtractedListingFields:
    """Deterministic extraction of LT, LB, KT, KM and Harga."""
    if not text:
        return ExtractedListingFields()

    land = _search(_LT_PATTERNS, text)
    building = _search(_LB_PATTERNS, text)
    price_match = _PRICE_PATTERN.search(text)

    return ExtractedListingFields(
        land_area=int(land.group(1)) if land else None,
        building_area=int(building.group(1)) if building else None,
        bedrooms=_room_count(_KT_PATTERNS, text),
        bathrooms=_room_count(_KM_PATTERNS, text),
        price=parse_price_text(price_match.group(1), price_match.group(2)) if price_match else None,
    )


def build_extraction_prompt(text: str) -> str:
    property_types = ", ".join(t.value for t in PropertyType)
    transaction_types = ", ".join(t.value for t in TransactionType)
    return f"""You extract structured fields from Indonesian real-estate listing descriptions.
Return JSON only, matching the schema. Never guess: use null for anything not stated.

Field rules
• property_type: one of {property_types} (Kavling = land plot).
• transaction_type: one of {transaction_types} (Jual = sale, Sewa = rent).
• land_area = LT / Luas Tanah in m2; building_area = LB / Luas Bangunan in m2.
• bedrooms = KT / Kamar Tidur; bathrooms = KM / Kamar Mandi. "3+1" means 4.
• price: rupiah as digits only. "1.7 M" / "1,7 Miliar" = 1700000000; "850 jt" = 850000000.
• province, city, district (kecamatan): only if named in the text.
• title: a short headline (max 8 words) in the description's language.

Description:
{mask_sensitive_data(text)}"""


def get_llm_model():
    """Get configured LLM model."""
    provider = AppConfig.llm_provider()
    model_name = AppConfig.llm_model()

    if provider == "anthropic":
        api_key = os.environ.get("ANTHROPIC_API_KEY")
        if not api_key:
            raise ExtractionError("ANTHROPIC_API_KEY not set")
        return ChatAnthropic(model=model_name, api_key=api_key)
    elif provider == "openai":
        api_key = os.environ.get("OPENAI_API_KEY")
        if not api_key:
            raise ExtractionError("OPENAI_API_KEY not set")
        return ChatOpenAI(model=model_name, api_key=api_key)
    else:
        raise ExtractionError(f"Unsupported LLM provider: {provider}")


def _parse_llm_json(content: str) -> ExtractedListingFields:
    start_idx = content.find("{")
    end_idx = content.rfind("}") + 1
    if start_idx < 0 or end_idx <= start_idx:
        raise ExtractionError("No JSON found in LLM response")
    try:
        return ExtractedListingFields(**json.loads(content[start_idx:end_idx]))
    except (json.JSONDecodeError, ValueError) as e:
        raise ExtractionError(f"Failed to parse LLM response: {e}")


async def llm_extract(text: str) -> ExtractedListingFields:
    """Ask the configured model for field guesses. Raises ExtractionError."""
    model = get_llm_model()
    prompt = build_extraction_prompt(text)
    started = time.perf_counter()

    try:
        structured_llm = model.with_structured_output(ExtractedListingFields)
        result = await structured_llm.ainvoke(prompt)
        if isinstance(result, dict):
            result = ExtractedListingFields(**result)
    except NotImplementedError:
        response = await model.ainvoke(prompt)
        content = response.content if hasattr(response, "content") else str(response)
        result = _parse_llm_json(content if isinstance(content, str) else json.dumps(content))
    except ExtractionError:
        raise
    except Exception as e:
        raise ExtractionError(f"LLM extraction failed: {e}")

    logger.info(
        "LLM extraction response received",
        llm_provider=AppConfig.llm_provider(),
        llm_model=AppConfig.llm_model(),
        llm_latency_ms=round((time.perf_counter() - started) * 1000, 2),
        fields_found=sorted(result.form_values()),
    )
    return result


async def extract_listing_fields(text: str) -> ExtractedListingFields:
    """
    Best-effort field guesses for a description.

    The regex result is always available; LLM guesses, when enabled, fill
    the fields the regex could not and otherwise defer to it. LLM failures
    are logged and fall back to the regex result.
    """
    parsed = parse_description(text)
    if not text or not AppConfig.use_llm_extraction():
        return parsed

    try:
        with log_timing("llm_extract", logger=logger, text_length=len(text)):
            guessed = await llm_extract(text)
    except ExtractionError as e:
        logger.warning("LLM extraction unavailable, using regex result", error=str(e))
        return parsed

    return parsed.merged_over(guessed)
