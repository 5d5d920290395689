"""
Client layer - the user-facing GeminiClient.
"""

from gemini_kit.client.core import GeminiClient, model_path, resource_path

__all__ = ["GeminiClient", "model_path", "resource_path"]
