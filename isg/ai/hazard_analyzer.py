"""
AI hazard analysis — Fine-Kinney assessment of an observed hazard.

The model proposes factor values and a score; the band is always
re-derived by the scoring engine so AI and manual results agree.

Photo batches are analysed one photo at a time with a pause in between to
stay under the provider's rate limit. A failed photo is skipped, not fatal.
"""

from __future__ import annotations

import asyncio
import logging
import time
import uuid

from isg.config import settings
from isg.core.risk_scorer import assess_score, describe
from isg.llm.gateway import LLMGateway
from isg.llm.prompt_builder import build_hazard_prompt
from isg.llm.response_parser import parse_hazard_response
from isg.models.hazard_models import (
    HazardAnalysisRequest,
    HazardAnalysisResult,
    HazardBatchResult,
    HazardBatchSummary,
)
from isg.models.risk_models import RiskFactors

logger = logging.getLogger("isg.hazard")


class HazardAnalyzer:
    def __init__(self, gateway: LLMGateway) -> None:
        self.gateway = gateway

    async def analyze(self, request: HazardAnalysisRequest) -> HazardAnalysisResult | None:
        """Returns None when the model fails or its output cannot be used."""
        request_id = uuid.uuid4().hex[:8]
        return await self._run(
            request_id, build_hazard_prompt(request), request.image_url
        )

    async def analyze_photos(self, request: HazardAnalysisRequest) -> HazardBatchResult | None:
        """
        Analyse every photo in ``request.images`` in order.

        Returns None when no photo produced a usable analysis.
        """
        request_id = uuid.uuid4().hex[:8]
        started = time.monotonic()
        total = len(request.images)
        logger.info(f"[{request_id}] Analysing {total} photo(s)")

        results: list[HazardAnalysisResult] = []
        for number, image in enumerate(request.images, start=1):
            if number > 1 and settings.photo_delay_seconds > 0:
                await asyncio.sleep(settings.photo_delay_seconds)

            prompt = build_hazard_prompt(request, photo_number=number, photo_count=total)
            result = await self._run(f"{request_id}/{number}", prompt, image)
            if result is None:
                logger.warning(f"[{request_id}] Photo {number}/{total} skipped")
                continue
            results.append(result.model_copy(update={"photo_number": number}))

        if not results:
            logger.error(f"[{request_id}] No photo could be analysed")
            return None

        highest = max(results, key=lambda r: r.assessment.score)
        return HazardBatchResult(
            photo_analyses=results,
            summary=HazardBatchSummary(
                total_photos=total,
                analyzed_photos=len(results),
                highest_risk=highest.assessment,
                processing_seconds=round(time.monotonic() - started, 2),
            ),
        )

    async def _run(
        self, request_id: str, prompt: str, image_url: str | None
    ) -> HazardAnalysisResult | None:
        response = await self.gateway.complete(prompt, image_url=image_url)
        if not response.get("success"):
            logger.error(f"[{request_id}] Hazard analysis failed: {response.get('error', 'empty response')}")
            return None

        analysis, repaired = parse_hazard_response(response.get("content", ""))
        if analysis is None:
            logger.error(f"[{request_id}] Hazard analysis output unusable")
            return None

        assessment = assess_score(
            analysis.risk_score,
            factors=RiskFactors(
                probability=analysis.probability,
                severity=analysis.severity,
                frequency=analysis.frequency,
            ),
            source="ai",
        )

        if analysis.reported_level and analysis.reported_level.strip().lower() not in (
            assessment.label.lower(),
            describe(assessment.band).local_label.lower(),
            assessment.band.value,
        ):
            logger.info(
                f"[{request_id}] Model reported level '{analysis.reported_level}', "
                f"score {assessment.score:g} bands as '{assessment.label}'"
            )

        return HazardAnalysisResult(
            analysis=analysis,
            assessment=assessment,
            model=getattr(self.gateway, "model", ""),
            tokens_used=response.get("tokens_used", 0),
            repaired=repaired,
        )
