"""Example: Analyze a call recording using the call analyzer library."""

import asyncio
import json
import os

from call_analyzer import AnalyzerConfig, ValidationSuccess, analyze_call


async def main():
    """Analyze an MP3 call recording and print the result."""
    # Configure the analyzer
    config = AnalyzerConfig(api_key=os.environ.get("GEMINI_API_KEY"))

    # Read audio file
    audio_path = "path/to/your/call.mp3"
    with open(audio_path, "rb") as f:
        audio_bytes = f.read()

    print("Analyzing call...")
    outcome = await analyze_call(audio_bytes, config)

    if isinstance(outcome, ValidationSuccess):
        print(json.dumps(outcome.value.to_payload(), indent=2, ensure_ascii=False))
    else:
        print(f"Analysis rejected ({outcome.error_kind.value}):")
        print(outcome.detail)


if __name__ == "__main__":
    asyncio.run(main())
