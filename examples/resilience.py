#!/usr/bin/env python3
"""
Error handling and retry example.

Usage:
    export GEMINI_API_KEY="your-api-key"
    export GEMINI_MAX_RETRIES=5
    python examples/resilience.py
"""

import asyncio

from gemini_kit import (
    ErrorKind,
    GeminiClient,
    GeminiError,
    ModelNotFound,
    RateLimitExceeded,
    configure_logging,
)


async def main() -> None:
    """Run error handling example."""
    # Retries are logged at WARNING, with the API key masked
    configure_logging(level="WARNING", format="json")

    async with GeminiClient.from_environment(timeout=30) as client:
        print(f"Configuration: {client.config!r}")

        try:
            await client.generate_text("gemini-does-not-exist", "Hello")
        except ModelNotFound as e:
            print(f"Model not found: {e.name}")
            print(f"  see {e.help_url}")

        try:
            response = await client.generate_text("gemini-2.5-flash", "Say hi.")
            print(response.text)
        except RateLimitExceeded as e:
            print(f"Rate limited (not retried): {e.recovery_suggestion}")
        except GeminiError as e:
            if e.kind in (ErrorKind.NETWORK_ERROR, ErrorKind.TIMEOUT):
                print(f"Gave up after {client.config.max_retries} attempts: {e}")
            else:
                raise


if __name__ == "__main__":
    asyncio.run(main())
