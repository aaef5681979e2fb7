"""Quick check of the Gemini key: lists the models it can use and sends one prompt."""

import asyncio

from docrelay.application.services.prompt_builder import build_prompt
from docrelay.application.services.response_parser import parse_response
from docrelay.config.settings import Settings
from docrelay.domain.models import Document
from docrelay.infrastructure.gemini_adapter import GeminiAdapter


async def main():
    settings = Settings()
    adapter = GeminiAdapter(settings)

    try:
        models = await adapter.list_models()
        print(f"Available models: {len(models)}")
        for name in models:
            marker = "  <- configured" if name.endswith(settings.GEMINI_MODEL) else ""
            print(f"  {name}{marker}")

        prompt = build_prompt(
            "How many vacation days do new employees get?",
            [
                Document(
                    name="handbook.txt",
                    content="New employees receive 15 vacation days per year.",
                )
            ],
        )
        print(f"\nSending a {len(prompt)}-char prompt to {adapter.model}...")
        result = parse_response(await adapter.generate(prompt))
    finally:
        await adapter.aclose()

    print(f"Answer:      {result.answer[:200]}")
    print(f"Confidence:  {result.confidence}")
    print(f"Coverage:    {result.coverage}%")
    print(f"Sources:     {[s.doc_name for s in result.sources]}")
    print(f"Suggestions: {len(result.suggestions)}")

    if result.answer:
        print("\n==> Gemini verified OK")
    else:
        print("\n==> Reply parsed but no ANSWER section was found")


if __name__ == "__main__":
    asyncio.run(main())
