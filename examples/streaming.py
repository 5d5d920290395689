#!/usr/bin/env python3
"""
Streaming response example.

Prints the response as it is generated.

Usage:
    export GEMINI_API_KEY="your-api-key"
    export GEMINI_TRANSPORT="streaming"   # or buffered / buffered-events
    python examples/streaming.py
"""

import asyncio

from gemini_kit import GeminiClient, GeminiError


async def main() -> None:
    """Run streaming example."""
    async with GeminiClient.from_environment() as client:
        print("Streaming response:\n")
        print("-" * 50)

        finish_reason = None
        try:
            async for chunk in client.stream_text(
                "gemini-2.5-flash",
                "Tell me a very short story about a robot learning to paint.",
                system_instruction="You are a creative storyteller.",
            ):
                print(chunk.text, end="", flush=True)
                finish_reason = chunk.finish_reason or finish_reason
        except GeminiError as e:
            print(f"\n\n[Error: {e}]")
            print(f"Suggestion: {e.recovery_suggestion}")
        else:
            print(f"\n\n[Stream ended: {finish_reason}]")

        print("-" * 50)


if __name__ == "__main__":
    asyncio.run(main())
