"""qrframe CLI: render framed QR codes and scan them back."""

import argparse
import sys
from pathlib import Path

from PIL import Image

from qrframe.logging import audit, get_logger, setup_logging

log = get_logger("cli")


def cmd_render(args):
    """Render a framed QR code to a PNG file."""
    from qrframe.config import CLASSIC_CONFIG, DEFAULT_CONFIG
    from qrframe.errors import LogoUnavailable
    from qrframe.models import FrameSpec, LogoSpec, RenderRequest
    from qrframe.render import render_qr_code

    output = Path(args.output)
    output.parent.mkdir(parents=True, exist_ok=True)

    frame = None
    if args.frame is not None:
        frame = FrameSpec(
            style=args.frame,
            position=args.position,
            text=args.caption.replace("\\n", "\n") if args.caption else None,
            title=args.title,
            color=args.border_color,
            background_color=args.background,
        )
    request = RenderRequest(
        text=args.data,
        width=args.width,
        dark_color=args.dark,
        light_color=args.light,
        frame=frame,
        logo=LogoSpec(url=args.logo) if args.logo else None,
    )
    config = CLASSIC_CONFIG if args.classic else DEFAULT_CONFIG

    try:
        img = render_qr_code(request, config)
    except LogoUnavailable as exc:
        if exc.canvas is None:
            raise
        exc.canvas.save(output)
        print(f"Logo unavailable ({exc.message}); saved code without logo: {output}", file=sys.stderr)
        sys.exit(2)

    img.save(output)
    print(f"Generated: {output} ({img.size[0]}x{img.size[1]})")


def cmd_scan(args):
    """Decode a QR code image."""
    from qrframe.verify import scan

    result = scan(Image.open(args.image))
    ok = result.success and (args.expected is None or result.decoded_data == args.expected)
    status = "PASS" if ok else "FAIL"
    print(f"  [{result.decoder:8s}] {status} | {result.decode_time_ms:6.1f}ms | {result.decoded_data or result.error}")
    sys.exit(0 if ok else 1)


def main(argv=None):
    parser = argparse.ArgumentParser(prog="qrframe", description="Framed, captioned QR code renderer")

    parser.add_argument("-V", "--verbose", action="store_true", help="Enable DEBUG-level logging")
    parser.add_argument("--log-file", default=None, help="Write JSON logs to file")

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # --- render ---
    p_render = subparsers.add_parser("render", help="Render a QR code")
    p_render.add_argument("data", help="URL or text to encode")
    p_render.add_argument("-o", "--output", default="output/qr.png", help="Output file path")
    p_render.add_argument("-w", "--width", type=int, default=300, help="QR width in pixels")
    p_render.add_argument("--dark", default=None, help="Dark module colour (e.g. '#000000')")
    p_render.add_argument("--light", default=None, help="Light module colour")
    p_render.add_argument("--frame", default=None, choices=["none", "square", "rounded"], help="Frame style")
    p_render.add_argument("--position", default="bottom", choices=["top", "bottom"], help="Caption position")
    p_render.add_argument("--caption", default=None, help="Caption text; '\\n' separates lines")
    p_render.add_argument("--title", default=None, help="Title badge text")
    p_render.add_argument("--border-color", default=None, help="Frame border and text colour")
    p_render.add_argument("--background", default=None, help="Frame background colour")
    p_render.add_argument("--logo", default=None, help="Logo URL or file path")
    p_render.add_argument("--classic", action="store_true", help="No outer padding, full-size grid, no title band")

    # --- scan ---
    p_scan = subparsers.add_parser("scan", help="Decode a QR code image")
    p_scan.add_argument("image", help="Path to QR code image")
    p_scan.add_argument("--expected", default=None, help="Expected decoded data (fails if mismatch)")

    args = parser.parse_args(argv)

    setup_logging(level="DEBUG" if args.verbose else "INFO", log_file=args.log_file)
    audit("cli.start", logger=log, command=args.command, verbose=args.verbose)

    if args.command is None:
        parser.print_help()
        sys.exit(1)

    commands = {
        "render": cmd_render,
        "scan": cmd_scan,
    }
    commands[args.command](args)
    audit("cli.done", logger=log, command=args.command)


if __name__ == "__main__":
    main()
