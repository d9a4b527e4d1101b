#!/usr/bin/env python3
"""
spiritvis CLI
=============

An audio-reactive flow-field companion. Speak with an ancestral spirit in
the terminal while particles drift through a noise field that answers the
microphone, the camera and the conversation.

Usage:
    python -m spiritvis serve                      # chat proxy on :3000
    python -m spiritvis live --mic --camera        # visualisation window
    python -m spiritvis live --audio-file song.wav
    python -m spiritvis -h (for help)

Environment (.env is read too):
    OPENAI_API_KEY   required by the proxy
    OPENAI_MODEL     optional, defaults to gpt-3.5-turbo
    PORT             optional, defaults to 3000
"""

import argparse
import logging
import os
import sys

from spiritvis.config import DEFAULT_HOST, DEFAULT_PROXY_URL, ProxySettings, load_env
from spiritvis.constants import DEFAULT_FPS, DEFAULT_RESOLUTION

logger = logging.getLogger("spiritvis")


def serve(args):
    import uvicorn

    from spiritvis.server import create_app

    if args.static_dir and not os.path.isdir(args.static_dir):
        sys.exit(f"[!] Static directory not found: {args.static_dir}")

    try:
        settings = ProxySettings.from_env()
    except ValueError as e:
        sys.exit(f"[!] Invalid configuration: {e}")
    port = args.port or settings.port
    if not settings.api_key:
        logger.warning("[!] OPENAI_API_KEY is not set; /api/chat will answer 500")

    app = create_app(static_dir=args.static_dir)
    logger.info(f"[+] Chat proxy on http://{args.host}:{port} (model {settings.model})")
    uvicorn.run(app, host=args.host, port=port)


def live(args):
    from spiritvis.devices import open_audio_file, open_camera, open_microphone
    from spiritvis.live import LiveApp

    if args.audio_file and not os.path.exists(args.audio_file):
        sys.exit(f"[!] Input file not found: {args.audio_file}")

    logger.info(f"[+] Preparing window: {args.width}x{args.height} @ {args.fps}fps")
    app = LiveApp(args.width, args.height, fps=args.fps, proxy_url=args.proxy_url)

    if args.audio_file:
        app.enable_audio(open_audio_file, args.audio_file, args.fps)
    elif args.mic:
        device = args.mic_device
        if device is not None and device.isdigit():
            device = int(device)
        app.enable_audio(open_microphone, device)
    if args.camera:
        app.enable_camera(open_camera, args.camera_index)

    app.run()


def build_parser():
    parser = argparse.ArgumentParser(
        prog="spiritvis",
        description="Audio-reactive flow field with an ancestral spirit chat.",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    parser.add_argument("--env-file", help="Path to a .env file (defaults to ./.env)")
    commands = parser.add_subparsers(dest="command", required=True)

    serve_cmd = commands.add_parser("serve", help="Run the chat proxy")
    serve_cmd.add_argument("--host", default=DEFAULT_HOST, help="Bind address")
    serve_cmd.add_argument("--port", type=int, help="Port (defaults to $PORT or 3000)")
    serve_cmd.add_argument("--static-dir", help="Directory served at / (optional)")
    serve_cmd.set_defaults(func=serve)

    live_cmd = commands.add_parser("live", help="Open the visualisation window")
    live_cmd.add_argument("--width", type=int, default=DEFAULT_RESOLUTION[0], help="Window width")
    live_cmd.add_argument("--height", type=int, default=DEFAULT_RESOLUTION[1], help="Window height")
    live_cmd.add_argument("--fps", type=int, default=DEFAULT_FPS, help="Frames per second")
    live_cmd.add_argument("--mic", action="store_true", help="Enable the microphone")
    live_cmd.add_argument("--mic-device", help="Input device name or index (optional)")
    live_cmd.add_argument("--camera", action="store_true", help="Enable the camera")
    live_cmd.add_argument("--camera-index", type=int, default=0, help="Camera index")
    live_cmd.add_argument("--audio-file", help="Drive the bands from an audio file instead of the mic")
    live_cmd.add_argument("--proxy-url", default=DEFAULT_PROXY_URL, help="Chat proxy endpoint")
    live_cmd.set_defaults(func=live)
    return parser


def main(argv=None):
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    load_env(args.env_file)
    args.func(args)


if __name__ == "__main__":
    main()
