"""Convenience launcher for the dirserve development server.

Usage:
    Windows: python start_dev.py [DIRECTORY]
    Linux:   python3 start_dev.py [DIRECTORY]

Serves DIRECTORY (default: the current directory) under /files with
Uvicorn --reload. Press Ctrl+C to stop. A backend virtual environment in
backend/.venv is used when present.
"""

from __future__ import annotations

import os
import signal
import subprocess
import sys
from pathlib import Path

ROOT_DIR = Path(__file__).resolve().parent
BACKEND_DIR = ROOT_DIR / "backend"

BACKEND_VENV = BACKEND_DIR / (
    ".venv\\Scripts\\python.exe" if os.name == "nt" else ".venv/bin/python"
)

# ANSI colors (disabled on Windows without VT support)
if os.name == "nt":
    os.system("")  # enable VT100 on Windows 10+

CYAN = "\033[36m"
GREEN = "\033[32m"
YELLOW = "\033[33m"
RED = "\033[31m"
RESET = "\033[0m"


def log(level: str, msg: str) -> None:
    colors = {"info": CYAN, "start": GREEN, "stop": YELLOW, "error": RED}
    color = colors.get(level, "")
    print(f"{color}[{level}]{RESET} {msg}")


def resolve_backend_python() -> str:
    """Prefer the backend venv, fall back to the running interpreter."""
    if BACKEND_VENV.exists():
        return str(BACKEND_VENV)

    log("info", "No venv found, using system Python")
    return sys.executable


def check_dependencies(python: str) -> bool:
    """Verify critical packages are importable."""
    result = subprocess.run(
        [python, "-c", "import fastapi; import uvicorn; import jinja2; import pydantic_settings"],
        capture_output=True,
        text=True,
    )
    if result.returncode != 0:
        log("error", "Missing dependencies. Run:")
        log("error", f"  cd {ROOT_DIR} && pip install -e '.[test]'")
        return False
    return True


def main(argv: list[str]) -> int:
    python = resolve_backend_python()
    served = Path(argv[0] if argv else ".").resolve()

    log("info", f"Python: {python}")
    log("info", f"Serving: {served}")

    if not check_dependencies(python):
        return 1
    if not served.is_dir():
        log("error", f"{served} is not a directory")
        return 1

    env = dict(os.environ)
    env.setdefault("DIRSERVE_DEBUG", "true")
    env.setdefault("DIRSERVE_LOG_LEVEL", "DEBUG")
    env["DIRSERVE_ROOT"] = str(served)

    cmd = [
        python, "-m", "uvicorn", "dirserve.main:app",
        "--reload", "--app-dir", str(BACKEND_DIR),
        "--host", "127.0.0.1", "--port", "8000",
    ]
    log("start", " ".join(cmd))
    log("info", "  Files:   http://localhost:8000/files/")
    log("info", "  Health:  http://localhost:8000/api/health")
    log("info", "Press Ctrl+C to stop")

    if os.name == "nt":
        proc = subprocess.Popen(
            cmd, cwd=ROOT_DIR, env=env, creationflags=subprocess.CREATE_NEW_PROCESS_GROUP
        )
    else:
        proc = subprocess.Popen(cmd, cwd=ROOT_DIR, env=env, start_new_session=True)
    try:
        return proc.wait()
    except KeyboardInterrupt:
        print()
        log("stop", "Ctrl+C received, shutting down...")
        if os.name == "nt":
            proc.send_signal(signal.CTRL_BREAK_EVENT)
        else:
            proc.terminate()
        try:
            proc.wait(timeout=10)
        except subprocess.TimeoutExpired:
            proc.kill()
        return 0


if __name__ == "__main__":
    raise SystemExit(main(sys.argv[1:]))
