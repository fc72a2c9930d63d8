"""Optional prose brief over a computed execution package."""

import logging

from google import genai
from pydantic import ValidationError

from models.responses import NarrativeBrief
from models.schemas.execution import FeatureExecutionPackage
from services.gemini_client import generate_json
from services.prompt_builder import build_execution_brief_prompt

logger = logging.getLogger(__name__)


async def build_execution_brief(
    package: FeatureExecutionPackage,
    client: genai.Client | None,
) -> NarrativeBrief | None:
    if client is None:
        return None

    data = await generate_json(build_execution_brief_prompt(package), client=client)
    if data is None:
        logger.warning("Narrative brief unavailable for %s", package.feature_id)
        return None

    try:
        return NarrativeBrief.model_validate(data)
    except ValidationError as e:
        logger.warning("Narrative brief for %s failed validation: %s", package.feature_id, e)
        return None
