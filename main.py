"""Adventure Engine — dev launcher. Starts the API server in watch mode."""

import argparse
import os
import subprocess
import sys
from pathlib import Path

from dotenv import load_dotenv

ROOT = Path(__file__).parent
load_dotenv(ROOT / ".env")

HOST = os.getenv("HOST", "0.0.0.0")
PORT = os.getenv("PORT", "13013")
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")


def main():
    parser = argparse.ArgumentParser(description="Adventure Engine dev launcher")
    parser.add_argument("--host", default=HOST, help=f"Bind address (default: {HOST})")
    parser.add_argument("--port", default=PORT, help=f"Port (default: {PORT})")
    parser.add_argument("--no-reload", action="store_true",
                        help="Disable auto-reload on code changes")
    parser.add_argument("--echo", action="store_true",
                        help="Use the offline echo provider instead of Gemini")
    args = parser.parse_args()

    # Build env for the subprocess so the app factory picks up the same choices
    env = os.environ.copy()
    env["LOG_LEVEL"] = LOG_LEVEL
    if args.echo:
        env["ECHO_PROVIDER"] = "1"

    cmd = [sys.executable, "-m", "uvicorn", "backend.app:create_app", "--factory",
           "--host", args.host, "--port", str(args.port), "--log-level", LOG_LEVEL.lower()]
    if not args.no_reload:
        cmd.append("--reload")

    print(f"Starting backend on http://localhost:{args.port} ...")
    try:
        sys.exit(subprocess.call(cmd, cwd=ROOT, env=env))
    except KeyboardInterrupt:
        print("\nShutting down...")


if __name__ == "__main__":
    main()
