import os
import logging
from pathlib import Path

try:
	from dotenv import load_dotenv
except ImportError:
	logging.warning("python-dotenv not available; using environment variables only")
else:
	loaded = load_dotenv()
	if not loaded and Path(".env").exists():
		raise RuntimeError(".env file present but failed to load")


def get_str_env(name: str, default: str) -> str:
	raw = os.getenv(name)
	if raw is None or raw == "":
		return default
	return raw


def get_int_env(name: str, default: int) -> int:
	raw = os.getenv(name)
	if raw is None or raw == "":
		return default
	try:
		return int(raw)
	except Exception:
		logging.exception("Invalid %s: %r", name, raw)
		return default


def get_bool_env(name: str, default: bool = False) -> bool:
	raw = os.getenv(name)
	if raw is None or raw.strip() == "":
		return default
	return raw.strip().lower() in ("1", "true", "yes", "on")


DEFAULT_USER_AGENT = "Mozilla/5.0 (compatible; BrokenLinkChecker/1.0)"

USER_AGENT = get_str_env("USER_AGENT", DEFAULT_USER_AGENT)
HTTP_TIMEOUT_MS = get_int_env("HTTP_TIMEOUT_MS", 10_000)
VERIFY_BATCH_SIZE = get_int_env("LINKHEALTH_VERIFY_BATCH_SIZE", 10)
MAX_LINKS_PER_PAGE = get_int_env("LINKHEALTH_MAX_LINKS_PER_PAGE", 10)


def headless_wait_until() -> str:
	return (os.getenv("LINKHEALTH_HEADLESS_WAIT_UNTIL", "networkidle") or "networkidle").strip().lower()


def max_completed_records() -> int:
	return get_int_env("LINKHEALTH_MAX_COMPLETED_RECORDS", 1000)


def block_localhost() -> bool:
	return get_bool_env("LINKHEALTH_BLOCK_LOCALHOST", False)
