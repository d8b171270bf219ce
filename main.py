"""CLI entrypoint for the narrated training briefing."""
import argparse

import config
import web_remote
from insights import generate_insights
from log_setup import setup_logging
from scene_catalog import build_catalog
from training_summary import load_summary


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Present training results as a narrated briefing")
    parser.add_argument("--metrics", default=config.METRICS_PATH, help="Metric records (JSON / JSON-lines)")
    parser.add_argument("--fullscreen", action="store_true")
    parser.add_argument("--no-remote", action="store_true", help="Do not start the HTTP remote")
    parser.add_argument("--port", type=int, default=config.WEB_PORT)
    parser.add_argument("--insights", action="store_true", help="Print Gemini insights for the run and exit")
    return parser


def main(argv=None) -> None:
    args = build_parser().parse_args(argv)
    setup_logging()

    summary = load_summary(args.metrics)
    if args.insights:
        print(generate_insights(summary))
        return

    if args.fullscreen:
        config.FULLSCREEN = True

    from app import PresenterApp            # pulls in pygame / sounddevice

    catalog = build_catalog(summary)
    presenter = PresenterApp(catalog)
    if not args.no_remote:
        web_remote.start(presenter.orch, summary, port=args.port)
    presenter.run()


if __name__ == "__main__":
    main()
