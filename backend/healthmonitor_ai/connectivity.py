from __future__ import annotations

import asyncio

from loguru import logger

from .config import Settings, load_settings
from .dispatcher import GenerativeLanguageClient
from .errors import AssistantError
from .extraction import GeneratedText, extract_generated_text

TEST_PROMPT = 'Say "Connection Successful"'


async def check_models(client: GenerativeLanguageClient) -> bool:
    version = client.settings.api_version
    logger.info("--- Testing {} listModels ---", version)
    try:
        models = await client.list_models()
    except AssistantError as exc:
        logger.error("Error listing models ({}): {}", version, exc)
        return False
    logger.info("Available models ({}): {}", version, models[:3])
    return bool(models)


async def check_generation(client: GenerativeLanguageClient) -> bool:
    settings = client.settings
    logger.info("--- Testing {}/{} generateContent ---", settings.api_version, settings.model)
    try:
        envelope = await client.generate_content({"contents": [{"parts": [{"text": TEST_PROMPT}]}]})
    except AssistantError as exc:
        logger.error("FAILURE ({}/{}): {}", settings.api_version, settings.model, exc)
        return False
    extraction = extract_generated_text(envelope)
    if not isinstance(extraction, GeneratedText):
        logger.error("FAILURE ({}/{}): {}", settings.api_version, settings.model, extraction)
        return False
    logger.info("SUCCESS ({}/{}): {}", settings.api_version, settings.model, extraction.text)
    return True


async def run_connectivity_check(settings: Settings, *, client: GenerativeLanguageClient | None = None) -> int:
    """Return the process exit code: 0 when a test prompt round-trips, 1 otherwise."""
    logger.info("Using API Key: {}", settings.masked_key())
    if not settings.configured:
        logger.error("Checking failed: API Key not found.")
        return 1

    client = client or GenerativeLanguageClient(settings)
    # Model listing is informational; only generation decides the outcome.
    await check_models(client)
    if await check_generation(client):
        logger.info(">>> VERIFICATION PASSED: API Key is valid and {} is working. <<<", settings.model)
        return 0
    logger.error(">>> VERIFICATION FAILED: Could not connect with the provided key. <<<")
    return 1


def main() -> int:
    return asyncio.run(run_connectivity_check(load_settings()))
