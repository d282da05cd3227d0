"""
Command line entry point.

    metar-wallpaper --airport KBFI --background ~/bg.png --output ~/wall.png --name Sam
    metar-wallpaper once --no-apply
    metar-wallpaper parse "KBFI 261853Z 18015G22KT 10SM FEW020 22/15 A2992"
    metar-wallpaper serve --port 8000
"""

import argparse
import logging
import sys
import threading

from metar_wallpaper.config import Settings
from metar_wallpaper.errors import ConfigError, MalformedReport, PipelineError
from metar_wallpaper.services.metar import parse_metar
from metar_wallpaper.services.pipeline import run_cycle
from metar_wallpaper.services.scheduler import run_forever

logger = logging.getLogger("metar_wallpaper")


def build_parser():
    parser = argparse.ArgumentParser(
        prog="metar-wallpaper",
        description="Keep the desktop wallpaper annotated with the latest METAR.",
    )
    parser.add_argument("--airport", help="ICAO airport code (default: KBFI)")
    parser.add_argument("--background", help="Path to the base background image")
    parser.add_argument("--output", help="Path to save the output image")
    parser.add_argument("--name", help="The name to call you")
    parser.add_argument("--interval", type=int, help="Minutes between updates (default: 15)")
    parser.add_argument("--no-apply", action="store_true", help="Render the image but leave the desktop alone")
    parser.add_argument("--env-file", help="Read settings from this .env file")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")

    sub = parser.add_subparsers(dest="command")
    sub.add_parser("run", help="Update now, then every interval (default)")
    sub.add_parser("once", help="Update once and exit")
    parse_cmd = sub.add_parser("parse", help="Parse a raw METAR and print it as JSON")
    parse_cmd.add_argument("raw", help="Raw METAR text")
    serve_cmd = sub.add_parser("serve", help="Serve the status API, updating in the background")
    serve_cmd.add_argument("--host", default="127.0.0.1")
    serve_cmd.add_argument("--port", type=int, default=8000)
    return parser


def settings_from_args(args) -> Settings:
    return Settings.from_env(
        args.env_file,
        airport=args.airport,
        background_image=args.background,
        output_image=args.output,
        user_name=args.name,
        interval_minutes=args.interval,
        apply_wallpaper=False if args.no_apply else None,
    )


def update(settings: Settings, on_success=None):
    """One scheduled cycle; PipelineError propagates to the scheduler."""
    result = run_cycle(settings)
    if on_success is not None:
        on_success(result)
    return result


def cmd_parse(args):
    try:
        report = parse_metar(args.raw)
    except MalformedReport as e:
        logger.error(f"❌ {e}")
        return 1
    print(report.model_dump_json(indent=2))
    return 0


def cmd_once(settings: Settings):
    settings.require_paths()
    try:
        update(settings)
    except PipelineError as e:
        logger.error(f"❌ Update failed: {e}")
        return 1
    return 0


def cmd_run(settings: Settings):
    settings.require_paths()

    # Initial wallpaper set on program start
    try:
        update(settings)
    except PipelineError as e:
        logger.error(f"❌ Initial update failed, will retry next cycle: {e}")

    try:
        run_forever(lambda: update(settings), settings.interval_minutes)
    except KeyboardInterrupt:
        logger.info("Interrupted, exiting")
    return 0


def cmd_serve(settings: Settings, host: str, port: int):
    import uvicorn
    from metar_wallpaper.main import create_app

    app = create_app(settings)
    stop = threading.Event()

    if settings.background_image and settings.output_image:
        # Initial wallpaper set on startup, so /latest is populated right away
        try:
            update(settings, app.state.latest.set)
        except PipelineError as e:
            logger.error(f"❌ Initial update failed, will retry next cycle: {e}")

        worker = threading.Thread(
            target=run_forever,
            args=(lambda: update(settings, app.state.latest.set), settings.interval_minutes, stop),
            name="wallpaper-scheduler",
            daemon=True,
        )
        worker.start()
    else:
        logger.warning("Background/output not configured, serving parse endpoints only")

    try:
        uvicorn.run(app, host=host, port=port)
    finally:
        stop.set()
    return 0


def main(argv=None):
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )

    if args.command == "parse":
        return cmd_parse(args)

    try:
        settings = settings_from_args(args)
        if args.command == "once":
            return cmd_once(settings)
        if args.command == "serve":
            return cmd_serve(settings, args.host, args.port)
        return cmd_run(settings)
    except ConfigError as e:
        logger.error(f"❌ {e}")
        return 2


if __name__ == "__main__":
    sys.exit(main())
