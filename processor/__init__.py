"""CasanovaStudy content processing package.

Loads environment variables from a local .env file so the processor app can
run on its own during development.
"""

from pathlib import Path

from dotenv import load_dotenv


def _load_local_env():
    # processor/.env first, then the project root .env
    pkg_dir = Path(__file__).resolve().parent
    candidates = [
        pkg_dir / ".env",
        pkg_dir.parent / ".env",
    ]
    for p in candidates:
        if p.exists():
            load_dotenv(dotenv_path=p, override=False)


_load_local_env()
