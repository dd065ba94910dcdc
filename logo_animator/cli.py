#!/usr/bin/env python3
"""
Generate (or load) a logo and animate it without the Streamlit UI.
"""

from __future__ import annotations

import argparse
import asyncio
import sys
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

from .config import AspectRatio, Settings
from .gemini_client import GeminiBackend, MissingApiKeyError
from .orchestrator import JobOrchestrator
from .presentation import Presentation
from .session import SessionStore
from .utils import get_logger

logger = get_logger("cli")


def _fail(msg: str) -> int:
    print(f"ERROR: {msg}", file=sys.stderr)
    return 1


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="logo-animator", description=__doc__.strip())
    source = parser.add_mutually_exclusive_group(required=True)
    source.add_argument("--prompt", help="Describe the logo to generate")
    source.add_argument("--image", type=Path, help="Animate an existing image instead")
    parser.add_argument(
        "--aspect-ratio",
        choices=[r.value for r in AspectRatio],
        default=AspectRatio.WIDE.value,
    )
    parser.add_argument("--output", type=Path, default=Path("animated-logo.mp4"))
    return parser


async def run(args: argparse.Namespace, backend=None, settings: Optional[Settings] = None) -> int:
    settings = settings or Settings.from_env()
    if backend is None:
        backend = GeminiBackend.from_env(settings)
    store = SessionStore()
    presentation = Presentation(store, share_url=settings.share_url)
    orchestrator = JobOrchestrator(store, backend, settings)

    def on_change(previous, current):
        if current.progress_message and current.progress_message != previous.progress_message:
            print(f"⏳ {current.progress_message}")

    unsubscribe = store.subscribe(on_change)
    try:
        if args.image is not None:
            if not args.image.exists():
                return _fail(f"Image not found: {args.image}")
            with args.image.open("rb") as f:
                presentation.upload_image(f)
        else:
            print("🎨 Generating logo...")
            await orchestrator.generate_logo(args.prompt)
        if store.session.error_message:
            return _fail(store.session.error_message)

        print("🎬 Animating logo...")
        video = await orchestrator.generate_animation(AspectRatio(args.aspect_ratio))
        if video is None:
            return _fail(store.session.error_message or "No video was generated.")

        args.output.write_bytes(video.read())
        print(f"✅ Saved {args.output} ({video.size} bytes)")
        return 0
    finally:
        unsubscribe()
        store.reset()


def main(argv: Optional[list] = None) -> int:
    load_dotenv()
    args = build_parser().parse_args(argv)
    try:
        return asyncio.run(run(args))
    except MissingApiKeyError as exc:
        return _fail(str(exc))


if __name__ == "__main__":
    raise SystemExit(main())
