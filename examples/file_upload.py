#!/usr/bin/env python3
"""
File upload example.

Uploads a local file, references it in a prompt and cleans up afterwards.

Usage:
    export GEMINI_API_KEY="your-api-key"
    python examples/file_upload.py path/to/image.png
"""

import asyncio
import sys

from gemini_kit import Content, GeminiClient, GenerateContentRequest, Part, configure_logging


async def main(path: str) -> None:
    """Run file upload example."""
    configure_logging(level="INFO")

    async with GeminiClient.from_environment() as client:
        file = await client.upload_file_from_path(path)
        print(f"Uploaded {file.name} ({file.mime_type}, state={file.state})")

        while not file.is_active:
            await asyncio.sleep(2)
            file = await client.get_file(file.name)

        request = GenerateContentRequest(
            contents=[
                Content(
                    role="user",
                    parts=[
                        Part.from_file(file.uri or "", file.mime_type),
                        Part.from_text("Describe this file in two sentences."),
                    ],
                )
            ]
        )
        response = await client.generate_content("gemini-2.5-flash", request)
        print(response.text)

        print("\nYour files:")
        async for item in client.iter_files(page_size=20):
            print(f"  {item.name}  {item.display_name}")

        await client.delete_file(file.name)


if __name__ == "__main__":
    if len(sys.argv) != 2:
        sys.exit("usage: file_upload.py <path>")
    asyncio.run(main(sys.argv[1]))
