# =============================================================================
# Narrative Service — Prompted Commentary Over Report Data
# =============================================================================
#
# Wraps an LLMProvider with the four prompt shapes the reporting pipeline
# uses:
#   - analyze_financial_data() : general commentary on one response
#   - explain_data_pattern() : is N records of this type plausible?
#   - analyze_employee_report() : full employee portfolio analysis
#   - generate_investment_summary() : compact investment summary
#
# FAILURE POLICY: generate_content() NEVER raises. A missing API key, a
# network error, an API error or an empty reply all come back as a
# human-readable string that is shown in place of the narrative. Report
# and analysis endpoints stay usable without any LLM configured.
# =============================================================================

from __future__ import annotations

import json
import logging
from typing import Any, Callable

from finreport.services.llm import LLMProvider, get_llm_provider

logger = logging.getLogger(__name__)

NO_RESPONSE_MESSAGE = "No response received from the narrative service."

NARRATIVE_SYSTEM_PROMPT = (
    "You are a financial reporting analyst. Answer concisely and base every "
    "statement on the data provided. Do not invent figures."
)


def _to_json(value: Any) -> str:
    # default=str covers Decimal, date and datetime
    return json.dumps(value, indent=2, ensure_ascii=False, default=str)


class NarrativeService:
    """
    Turns report data into narrative text via the configured LLM provider.

    The provider is resolved lazily on first use, so constructing the service
    never fails even when no API key is set. Tests pass `provider_factory`
    returning a mock.
    """

    def __init__(
        self,
        provider_factory: Callable[[], LLMProvider] = get_llm_provider,
    ):
        self._provider_factory = provider_factory

    async def generate_content(self, prompt: str) -> str:
        """Send one user message and return the reply text, or an error string."""
        try:
            provider = self._provider_factory()
            response = await provider.complete(
                messages=[{"role": "user", "content": prompt}],
                system=NARRATIVE_SYSTEM_PROMPT,
            )
        except Exception as exc:
            logger.exception("Narrative generation failed")
            return f"Narrative generation failed: {exc}"

        if not response.content or not response.content.strip():
            logger.warning("Narrative provider returned an empty reply (model=%s)", response.model)
            return NO_RESPONSE_MESSAGE

        logger.info(
            "Narrative generated (model=%s, in=%d, out=%d tokens)",
            response.model, response.input_tokens, response.output_tokens,
        )
        return response.content

    # -----------------------------------------------------------------------
    # Prompt shapes
    # -----------------------------------------------------------------------

    async def analyze_financial_data(
        self, data: dict[str, Any], prompt: str | None = None,
    ) -> str:
        text = (
            "Analyse the following financial data and provide insights.\n\n"
            f"Data:\n{_to_json(data)}\n\n"
            "Please provide:\n"
            "1. A data summary\n"
            "2. Key findings\n"
            "3. Potential risks or opportunities\n"
            "4. Recommended actions\n\n"
            "Keep the answer short and clear."
        )
        if prompt:
            text += f"\n\nAdditional instructions from the requester:\n{prompt}"
        return await self.generate_content(text)

    async def explain_data_pattern(self, data_type: str, record_count: int) -> str:
        text = (
            f"In a financial reporting system, {data_type} has {record_count} records.\n"
            "Explain whether this count is plausible and describe what this kind "
            "of data is typically used for. Answer in no more than 100 words."
        )
        return await self.generate_content(text)

    async def analyze_employee_report(
        self,
        employee_id: str,
        employee: dict[str, Any],
        transactions: list[dict[str, Any]],
        announcements: list[dict[str, Any]],
    ) -> str:
        text = (
            f"Analyse the complete investment report for employee {employee_id}.\n\n"
            f"Employee profile:\n{_to_json(employee)}\n\n"
            f"Stock transactions:\n{_to_json(transactions)}\n\n"
            f"Related company announcements:\n{_to_json(announcements)}\n\n"
            "Provide a professional investment analysis covering:\n"
            "1. Portfolio analysis: the employee's current holdings\n"
            "2. Performance: gains and losses across buy and sell transactions\n"
            "3. Risk: concentration and exposure\n"
            "4. Market news impact: how the announcements affect these positions\n"
            "5. Recommendations: concrete next steps"
        )
        return await self.generate_content(text)

    async def generate_investment_summary(
        self,
        employee_id: str,
        transaction_count: int,
        total_investment: Any,
        stock_codes: list[str],
    ) -> str:
        text = (
            f"Investment summary for employee {employee_id}:\n"
            f"- Total transactions: {transaction_count}\n"
            f"- Total invested: {total_investment}\n"
            f"- Stocks traded: {', '.join(stock_codes) or 'none'}\n\n"
            "Write a concise summary covering trading activity, diversification, "
            "investment style and an overall assessment. Answer in no more than "
            "200 words."
        )
        return await self.generate_content(text)
