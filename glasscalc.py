"""
GlassCalc
Main application entry point
"""
import argparse
import logging
import socket

import config
from logging_config import setup_logging


def get_local_ip():
    try:
        s = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
        # doesn't even have to be reachable
        s.connect(('10.255.255.255', 1))
        IP = s.getsockname()[0]
        s.close()
    except OSError:
        IP = '127.0.0.1'
    return IP


def run_gui(theme):
    """Start the desktop calculator"""
    import tkinter as tk
    from gui import GlassCalcGUI

    root = tk.Tk()
    GlassCalcGUI(root, theme=theme)
    root.mainloop()


def run_web(host, port):
    """Start the Flask API server"""
    from api import app

    ip = get_local_ip()
    print("="*60)
    print(f"{config.APP_NAME} API SERVER IS LIVE")
    print(f"Access on this PC:    http://localhost:{port}/api")
    print(f"Access on network:    http://{ip}:{port}/api")
    print("="*60)
    # One calculator instance is shared by all requests; serve them one at a time
    app.run(host=host, port=port, debug=False, threaded=False)


def main(argv=None):
    parser = argparse.ArgumentParser(prog="glasscalc", description=f"{config.APP_NAME} {config.VERSION}")
    parser.add_argument("mode", nargs="?", choices=["gui", "web"], default="gui",
                        help="desktop calculator (default) or JSON web API")
    parser.add_argument("--theme", choices=sorted(config.THEMES), default="default")
    parser.add_argument("--host", default=config.WEB_HOST)
    parser.add_argument("--port", type=int, default=config.WEB_PORT)
    parser.add_argument("--log-file", default=config.LOG_FILE)
    parser.add_argument("--debug", action="store_true", help="verbose logging")
    args = parser.parse_args(argv)

    setup_logging(logging.DEBUG if args.debug else config.LOG_LEVEL, args.log_file)

    if args.mode == "web":
        run_web(args.host, args.port)
    else:
        run_gui(args.theme)


if __name__ == "__main__":
    main()
