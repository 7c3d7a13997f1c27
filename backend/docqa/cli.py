from __future__ import annotations

import argparse
import asyncio
import logging
import sys

from docqa.client.session import DEFAULT_ENDPOINT, ChatSession, ConsoleView
from docqa.core.config import settings
from docqa.core.log import configure_logging

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="docqa", description="Ask questions about a text or PDF document.")
    parser.add_argument("--log-level", default=settings.log_level)
    sub = parser.add_subparsers(dest="command", required=True)

    ask = sub.add_parser("ask", help="Upload a document and ask one question")
    ask.add_argument("file", help="Path to a text or PDF file")
    ask.add_argument("question", help="Question about the document")
    ask.add_argument("--url", default=DEFAULT_ENDPOINT, help=f"Chat endpoint (default: {DEFAULT_ENDPOINT})")
    ask.add_argument("--content-type", default=None, help="Override the guessed MIME type")

    serve = sub.add_parser("serve", help="Run the HTTP API")
    serve.add_argument("--host", default="127.0.0.1")
    serve.add_argument("--port", type=int, default=8000)

    return parser


async def run_ask(file: str, question: str, *, url: str, content_type: str | None = None) -> int:
    session = ChatSession(ConsoleView(), endpoint=url, max_upload_bytes=settings.max_upload_bytes)
    if not await session.load_file(file, content_type):
        return 1
    answer = await session.send(question)
    return 0 if answer is not None else 1


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(args.log_level)

    if args.command == "ask":
        return asyncio.run(run_ask(args.file, args.question, url=args.url, content_type=args.content_type))

    import uvicorn

    logger.info("Serving on http://%s:%d", args.host, args.port)
    uvicorn.run("docqa.main:app", host=args.host, port=args.port, log_level=args.log_level.lower())
    return 0


if __name__ == "__main__":
    sys.exit(main())
