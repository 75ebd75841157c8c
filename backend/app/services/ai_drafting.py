# app/services/ai_drafting.py
"""
Cover letter drafting collaborator.

The cover letter service only depends on the narrow `CoverLetterDrafter`
contract (`generate_cover_letter` / `refine_cover_letter`). The OpenAI-backed
implementation owns prompt construction; tests swap in a deterministic stub
through the `get_cover_letter_drafter` dependency.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Protocol

from app.core.config import settings
from app.core.errors import AIGenerationFailed
from app.services.openai_client import OpenAIClient, OpenAIClientError

logger = logging.getLogger(__name__)

REFINE_FAILED_MESSAGE = "Failed to refine cover letter. Please try again."

SYSTEM_PROMPT = (
    "You are an expert German job application writer. "
    "You write professional German cover letters (Anschreiben)."
)


@dataclass(frozen=True)
class CoverLetterFacts:
    job_description: str
    company_name: str
    position_title: str
    applicant_name: str
    applicant_email: str
    applicant_phone: str
    experience: str | None = None
    skills: str | None = None
    education: str | None = None
    motivation: str | None = None


class CoverLetterDrafter(Protocol):
    @property
    def is_configured(self) -> bool: ...

    def generate_cover_letter(self, facts: CoverLetterFacts) -> str: ...

    def refine_cover_letter(self, text: str, instructions: str) -> str: ...


def build_generation_prompt(facts: CoverLetterFacts) -> str:
    optional_lines = [
        f"- Relevant Experience: {facts.experience}" if facts.experience else "",
        f"- Key Skills: {facts.skills}" if facts.skills else "",
        f"- Education: {facts.education}" if facts.education else "",
        f"- Motivation: {facts.motivation}" if facts.motivation else "",
    ]
    applicant_extra = "\n".join(line for line in optional_lines if line)

    return f"""Generate a professional German cover letter (Anschreiben) for the following job application.

**Job Information:**
- Company: {facts.company_name}
- Position: {facts.position_title}
- Job Description: {facts.job_description}

**Applicant Information:**
- Name: {facts.applicant_name}
- Email: {facts.applicant_email}
- Phone: {facts.applicant_phone}
{applicant_extra}

**Instructions:**
1. Follow German business letter standards (DIN 5008 style)
2. Use the formal "Sie" form throughout
3. Structure: sender block, recipient block, date, subject line (Betreff),
   salutation ("Sehr geehrte Damen und Herren,"), introduction, 2-3 body
   paragraphs on matching experience and skills, closing paragraph,
   "Mit freundlichen Grüßen" and a signature placeholder
4. Professional but not overly stiff, personalized rather than generic
5. Approximately 300-400 words
6. Correct German grammar, spelling and business conventions

Return ONLY the cover letter text, without explanations or comments."""


def build_refine_prompt(text: str, instructions: str) -> str:
    return f"""Improve the following German cover letter (Anschreiben) based on these instructions.

**Improvement Instructions:**
{instructions}

**Original Cover Letter:**
{text}

**Instructions:**
1. Keep the formal German business letter structure and the "Sie" form
2. Preserve the professional tone
3. Apply the requested improvements with correct German grammar and spelling

Return ONLY the improved cover letter text, without explanations."""


class OpenAICoverLetterDrafter:
    def __init__(self, client: OpenAIClient | None = None) -> None:
        self._client = client

    @property
    def is_configured(self) -> bool:
        return self._client is not None or settings.ai_configured

    def _get_client(self) -> OpenAIClient:
        if self._client is None:
            self._client = OpenAIClient()
        return self._client

    def _complete(self, prompt: str) -> str:
        response = self._get_client().chat_completion(
            messages=[
                {"role": "system", "content": SYSTEM_PROMPT},
                {"role": "user", "content": prompt},
            ],
            temperature=settings.AI_TEMPERATURE,
            max_tokens=settings.AI_MAX_TOKENS,
        )
        text = response.message or ""
        if not text.strip():
            raise OpenAIClientError("Empty completion")
        logger.info(
            "AI completion ok model=%s response_id=%s tokens=%s",
            response.model,
            response.response_id,
            response.usage.total_tokens,
        )
        return text

    def generate_cover_letter(self, facts: CoverLetterFacts) -> str:
        try:
            return self._complete(build_generation_prompt(facts))
        except OpenAIClientError as exc:
            logger.exception("Cover letter generation failed")
            raise AIGenerationFailed() from exc

    def refine_cover_letter(self, text: str, instructions: str) -> str:
        try:
            return self._complete(build_refine_prompt(text, instructions))
        except OpenAIClientError as exc:
            logger.exception("Cover letter refinement failed")
            raise AIGenerationFailed(REFINE_FAILED_MESSAGE) from exc


def get_cover_letter_drafter() -> CoverLetterDrafter:
    return OpenAICoverLetterDrafter()
