#!/usr/bin/env python
"""
Gemini API connection check.

Run:
    python scripts/check_api_connection.py
    python scripts/check_api_connection.py --image   # also generate an image
"""

import argparse
import asyncio
import os
import sys
from pathlib import Path

# project root on sys.path for a plain checkout
sys.path.insert(0, str(Path(__file__).parent.parent))

# load .env
from dotenv import load_dotenv
load_dotenv()


def _api_key() -> str | None:
    api_key = os.environ.get("GOOGLE_API_KEY")
    if not api_key or api_key.startswith("AI..."):
        print("❌ GOOGLE_API_KEY is not set.")
        print("   Put a real key in .env (see .env.example).")
        return None
    print(f"✅ API key found: {api_key[:10]}...")
    return api_key


async def check_chat(config: dict) -> bool:
    """Gemini chat round trip."""
    print("\n" + "=" * 60)
    print("🧪 Gemini chat")
    print("=" * 60)

    api_key = _api_key()
    if api_key is None:
        return False

    try:
        from lingofy.app.providers.gemini import GeminiProvider
        from lingofy.domain.schemas import ChatTurn

        provider = GeminiProvider.from_config(config)
        provider.api_key = api_key

        print(f"📤 Sending a test message to {provider.chat_model}...")
        reply = await provider.chat(
            [ChatTurn(role="user", content="Say 'Lingofy API test successful!'")]
        )

        print(f"📥 Reply: {reply}")
        print("✅ Chat OK")
        return True

    except Exception as e:
        print(f"❌ Chat error: {type(e).__name__}: {e}")
        return False


async def check_image(config: dict) -> bool:
    """Gemini image generation with the default product prompt."""
    print("\n" + "=" * 60)
    print("🧪 Gemini image generation")
    print("=" * 60)

    api_key = _api_key()
    if api_key is None:
        return False

    try:
        from lingofy.app.providers.gemini import GeminiProvider
        from lingofy.core.images import build_image_prompt
        from lingofy.domain.schemas import StoreProfile

        provider = GeminiProvider.from_config(config)
        provider.api_key = api_key

        prompt = build_image_prompt(StoreProfile(), "studio lighting")
        print(f"📤 Requesting an image from {provider.image_model}...")
        image = await provider.generate_image(prompt)

        print(f"📥 Image: {image.mime_type}, {image.size} bytes")
        print("✅ Image generation OK")
        return True

    except Exception as e:
        print(f"❌ Image generation error: {type(e).__name__}: {e}")
        import traceback
        traceback.print_exc()
        return False


async def main(with_image: bool) -> int:
    from lingofy.app.main import load_config

    config = load_config()

    print("🚀 API connection check")
    print("=" * 60)

    results = {"chat": await check_chat(config)}
    if with_image:
        results["image"] = await check_image(config)

    print("\n" + "=" * 60)
    print("📊 Summary")
    print("=" * 60)

    all_passed = True
    for name, passed in results.items():
        status = "✅ PASS" if passed else "❌ FAIL"
        print(f"  {name}: {status}")
        if not passed:
            all_passed = False

    print("=" * 60)
    if all_passed:
        print("🎉 All checks passed")
    else:
        print("⚠️ Some checks failed. Check your .env file.")

    return 0 if all_passed else 1


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Check Gemini API access")
    parser.add_argument("--image", action="store_true", help="also generate an image")
    args = parser.parse_args()
    sys.exit(asyncio.run(main(args.image)))
