from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from .storage import HandStore, JsonlHandStore, store_from_env
from .ui.presenters import RichPresenter
from .wizard_play import run_record


def _store(args: argparse.Namespace) -> HandStore:
    if args.store:
        return JsonlHandStore(Path(args.store).expanduser())
    return store_from_env()


def _cmd_record(args: argparse.Namespace) -> int:
    result = run_record(_store(args), no_color=args.no_color)
    if result is None:
        return 0
    return 0 if result.ok else 1


def _cmd_list(args: argparse.Namespace) -> int:
    RichPresenter(no_color=args.no_color).hands(_store(args).list_hands())
    return 0


def _cmd_show(args: argparse.Namespace) -> int:
    presenter = RichPresenter(no_color=args.no_color)
    hand = _store(args).get_hand(args.hand_id)
    if hand is None:
        presenter.warn(f"hand '{args.hand_id}' not found")
        return 1
    presenter.hand(hand)
    return 0


def _cmd_serve(_args: argparse.Namespace) -> int:  # pragma: no cover - runner
    from .web.app import main as serve

    serve()
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="hand-recorder", description="Record poker hands street by street")
    parser.add_argument(
        "--store",
        type=str,
        default=None,
        metavar="PATH",
        help="JSONL file holding saved hands (defaults to $HANDRECORDER_STORE, else memory only)",
    )
    parser.add_argument("--no-color", action="store_true", help="Disable colored output (default is colored)")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log engine decisions to stderr")
    sub = parser.add_subparsers(dest="command")

    sub.add_parser("record", help="Record a new hand (default)").set_defaults(func=_cmd_record)
    sub.add_parser("list", help="List saved hands").set_defaults(func=_cmd_list)
    show = sub.add_parser("show", help="Show one saved hand")
    show.add_argument("hand_id")
    show.set_defaults(func=_cmd_show)
    sub.add_parser("serve", help="Run the HTTP API").set_defaults(func=_cmd_serve)
    return parser


def main(argv: list[str] | None = None) -> None:
    parser = build_parser()
    args = parser.parse_args(sys.argv[1:] if argv is None else argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )
    handler = getattr(args, "func", _cmd_record)
    raise SystemExit(handler(args))


if __name__ == "__main__":
    main()
