"""
Provider Registry — pick the stream provider for a descriptor's api family.

Add a new api family? Just add an elif.
"""

from __future__ import annotations

from tierbridge.core.errors import UnknownProviderError
from tierbridge.providers.base import StreamProvider

OPENAI_APIS = ("openai-completions", "openai-responses", "openai")


def get_stream_provider(api: str) -> StreamProvider:
    family = (api or "").lower()
    if family in OPENAI_APIS:
        from tierbridge.providers.openai_stream import OpenAIStreamProvider

        return OpenAIStreamProvider()
    elif family == "scripted":
        from tierbridge.providers.scripted import ScriptedStreamProvider

        return ScriptedStreamProvider()
    raise UnknownProviderError(f"Unknown stream provider api: {api}")
