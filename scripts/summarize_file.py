from __future__ import annotations

import argparse
import asyncio
import mimetypes
import sys
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from app.ai.config import load_ai_config  # noqa: E402
from app.ai.factory import get_ai_client  # noqa: E402
from app.core.config import settings  # noqa: E402
from app.services.summarizer import Summarizer  # noqa: E402


def _build_summarizer() -> Summarizer:
    ai_cfg = load_ai_config(settings)
    return Summarizer(
        get_ai_client(ai_cfg),
        poll_interval_s=ai_cfg.poll_interval_s,
        poll_max_attempts=ai_cfg.poll_max_attempts,
        tmp_dir=settings.upload_tmp_dir,
    )


async def _run(args: argparse.Namespace) -> int:
    summarizer = _build_summarizer()
    if args.url:
        result = await summarizer.summarize_url(args.url)
    else:
        path = Path(args.file)
        if not path.is_file():
            print(f"File not found: {path}", file=sys.stderr)
            return 2
        mime_type = args.mime_type or mimetypes.guess_type(path.name)[0]
        result = await summarizer.summarize_file(
            content=path.read_bytes(),
            filename=path.name,
            mime_type=mime_type,
        )

    if not result.success:
        print(f"[{result.error_kind}] {result.error}", file=sys.stderr)
        return 1

    if args.out:
        out_path = Path(args.out)
        out_path.parent.mkdir(parents=True, exist_ok=True)
        out_path.write_text(result.summary or "", encoding="utf-8")
        print(f"Wrote summary to {out_path}")
    else:
        print(result.summary)
    return 0


def main() -> None:
    parser = argparse.ArgumentParser(description="Summarize a local file or a YouTube video with Gemini.")
    source = parser.add_mutually_exclusive_group(required=True)
    source.add_argument("--file", help="Path to a PDF, image or video file")
    source.add_argument("--url", help="YouTube video URL")
    parser.add_argument("--mime-type", default=None, help="Override the detected MIME type")
    parser.add_argument("--out", default=None, help="Write the markdown summary to this path")
    args = parser.parse_args()
    raise SystemExit(asyncio.run(_run(args)))


if __name__ == "__main__":
    main()
