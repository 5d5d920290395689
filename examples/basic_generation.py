#!/usr/bin/env python3
"""
Basic generation example.

Usage:
    export GEMINI_API_KEY="your-api-key"
    python examples/basic_generation.py
"""

import asyncio

from gemini_kit import Content, GeminiClient, GenerateContentRequest, GenerationConfig


async def main() -> None:
    """Run basic generation example."""
    async with GeminiClient.from_environment() as client:
        # Single prompt
        response = await client.generate_text(
            "gemini-2.5-flash",
            "What is the capital of France?",
            system_instruction="Answer in one short sentence.",
        )
        print(f"Response: {response.text}")
        if response.usage_metadata:
            print(f"Tokens: {response.usage_metadata.total_token_count}")

        # Multi-turn conversation with an explicit request
        request = GenerateContentRequest(
            contents=[
                Content.user("My name is Ada."),
                Content.model("Nice to meet you, Ada!"),
                Content.user("What is my name?"),
            ],
            generation_config=GenerationConfig(temperature=0.2, max_output_tokens=50),
        )
        response = await client.generate_content("gemini-2.5-flash", request)
        print(f"\nConversation: {response.text}")

        count = await client.count_tokens("gemini-2.5-flash", request)
        print(f"Prompt tokens: {count.total_tokens}")


if __name__ == "__main__":
    asyncio.run(main())
