"""CLI for the flowchart explainer.

  flowchart-explainer serve --port 8000
  flowchart-explainer analyze diagram.png --url http://localhost:8000/api/analyze-flowchart --speak
"""
import argparse
import sys
from typing import List, Optional

import uvicorn

import config
from viewer.gateway_client import GatewayClient
from viewer.session import ViewerSession


def serve(args: argparse.Namespace) -> int:
    uvicorn.run("main:app", host=args.host, port=args.port, log_level=config.LOG_LEVEL.lower())
    return 0


def make_client(url: str) -> GatewayClient:
    return GatewayClient(url=url)


def analyze(args: argparse.Namespace) -> int:
    with make_client(args.url) as client:
        session = ViewerSession(client=client)
        ok = session.upload(args.image)

    for i, item in enumerate(session.explanations, 1):
        print(f"{i}. {item.term}\n   {item.explanation}\n")
    for note in session.notifications:
        print(f"[{note.variant.upper()}] {note.title}: {note.description}")

    if ok and args.speak and session.play_all_toggle is not None:
        session.play_all_toggle.toggle()

    return 0 if ok else 1


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="flowchart-explainer")
    sub = parser.add_subparsers(dest="command", required=True)

    p_serve = sub.add_parser("serve", help="Run the analysis gateway")
    p_serve.add_argument("--host", type=str, default="0.0.0.0")
    p_serve.add_argument("--port", type=int, default=8000)
    p_serve.set_defaults(func=serve)

    p_analyze = sub.add_parser("analyze", help="Upload a flowchart image and print its explanations")
    p_analyze.add_argument("image", type=str, help="JPG or PNG flowchart image")
    p_analyze.add_argument("--url", type=str, default=config.GATEWAY_URL, help="Gateway endpoint")
    p_analyze.add_argument("--speak", action="store_true", help="Read all explanations aloud")
    p_analyze.set_defaults(func=analyze)
    return parser


def main(argv: Optional[List[str]] = None) -> None:
    config.configure_logging()
    args = build_parser().parse_args(argv)
    sys.exit(args.func(args))


if __name__ == "__main__":
    main()
