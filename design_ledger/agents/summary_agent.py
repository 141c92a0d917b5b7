"""
AI Summary Agent for Design Ledger

DESIGN DECISION: The AI summary is an optional extra. The ledger keeps
working (read, write, sync, transfer) whether or not Gemini is configured
or reachable; every failure turns into a friendly "unavailable" message.

CRITICAL BOUNDARIES:
- CAN: Describe the charges, payments and totals it is given
- CANNOT: Change the ledger
- CANNOT: Invent entries; totals are computed here, not by the model
- An empty ledger is answered locally without calling the model
"""

import json
from typing import Any, Optional

import google.generativeai as genai
from pydantic import BaseModel, Field

from design_ledger.audit import LedgerEventLogger
from design_ledger.config import GeminiSettings, get_settings
from design_ledger.ledger import compute_totals
from design_ledger.models import LedgerState


EMPTY_LEDGER_MESSAGE = (
    "The ledger is currently empty. "
    "Start adding charges or payments to see insights."
)
UNAVAILABLE_MESSAGE = "AI Analysis is temporarily unavailable."
NO_ANALYSIS_MESSAGE = "No analysis available."


class LedgerSummary(BaseModel):
    """What the dashboard shows in the AI analyst panel."""

    text: str
    available: bool = Field(
        description="False when the model could not be reached"
    )
    used_model: bool = Field(
        description="Whether the text came from the model"
    )


class LedgerSummaryAgent:
    """
    Produces a three-sentence financial summary of the ledger.

    The designer and job giver names are only used to make the prompt read
    naturally; they do not affect the numbers.
    """

    def __init__(
        self,
        model: Optional[Any] = None,
        settings: Optional[GeminiSettings] = None,
        designer_name: str = "the designer",
        job_giver_name: str = "the job giver",
        currency_label: str = "Rs.",
        audit_logger: Optional[LedgerEventLogger] = None,
    ):
        """
        Args:
            model: A ready GenerativeModel (tests pass a double). If None,
                   one is built from GEMINI_* settings on first use.
        """
        self._model = model
        self._settings = settings
        self._designer_name = designer_name
        self._job_giver_name = job_giver_name
        self._currency_label = currency_label
        self._audit_logger = audit_logger or LedgerEventLogger()

    def _get_model(self):
        """Configure Google Generative AI lazily."""
        if self._model is None:
            settings = self._settings or get_settings().gemini
            genai.configure(api_key=settings.api_key)
            self._model = genai.GenerativeModel(
                model_name=settings.model_name,
                generation_config={
                    "temperature": settings.temperature,
                    "max_output_tokens": settings.max_tokens,
                }
            )
        return self._model

    def build_prompt(self, state: LedgerState) -> str:
        """Prompt text for a non-empty ledger."""
        totals = compute_totals(state)
        charges = [c.model_dump(mode="json", by_alias=True) for c in state.charges]
        payments = [p.model_dump(mode="json", by_alias=True) for p in state.payments]
        cur = self._currency_label

        return f"""Analyze this design project ledger between {self._designer_name} (Designer) and {self._job_giver_name} (Job Giver).
Costs: {json.dumps(charges)}
Payments: {json.dumps(payments)}
Total Costs: {cur} {totals.costs}
Total Paid: {cur} {totals.paid}
Balance (paid minus costs): {cur} {totals.balance}

Provide a concise 3-sentence professional summary:
1. Overall financial health of the project.
2. Payment status (is {self._job_giver_name} paying on time?).
3. A quick action recommendation for either party.
Keep it professional yet friendly. Use emojis sparingly.
Use ONLY the figures above; do not invent entries."""

    async def summarize(self, state: LedgerState) -> LedgerSummary:
        """Summarize the ledger. Never raises."""
        if not state.charges and not state.payments:
            return LedgerSummary(text=EMPTY_LEDGER_MESSAGE, available=True, used_model=False)

        try:
            model = self._get_model()
            response = await model.generate_content_async(self.build_prompt(state))
            text = (response.text or "").strip()
        except Exception as e:
            self._audit_logger.log_summary_unavailable("gemini", f"{type(e).__name__}: {e}")
            return LedgerSummary(text=UNAVAILABLE_MESSAGE, available=False, used_model=False)

        return LedgerSummary(
            text=text or NO_ANALYSIS_MESSAGE,
            available=True,
            used_model=bool(text),
        )
