"""
Google Fonts Downloader Configuration Loader
Loads values from environment variables (optionally via a .env file).
Command-line options override everything defined here.
"""
import os
import sys
from pathlib import Path
from dotenv import load_dotenv

# ==========================================
# Path Configuration
# ==========================================
if "__compiled__" in globals() or getattr(sys, 'frozen', False):
    ROOT_DIR = Path(sys.executable).parent
else:
    ROOT_DIR = Path(__file__).parent

# ==========================================
# Version
# ==========================================
VERSION = "1.0.0"

# Only load .env if it exists. The working directory wins over the install dir.
for env_file in (Path.cwd() / '.env', ROOT_DIR / '.env'):
    if env_file.exists():
        load_dotenv(env_file)
        break

# Helper to prefer Env Var > Default
def conf(key, default=None):
    # "downloader.timeout" -> GFD_DOWNLOADER_TIMEOUT
    env_val = os.getenv("GFD_" + key.upper().replace('.', '_'))
    if env_val is not None:
        return env_val
    return default

def _conf_int(key: str, default: int) -> int:
    try:
        return int(conf(key, default))
    except (TypeError, ValueError):
        print(f"Warning: Invalid integer for {key}, using {default}")
        return default

def _conf_float(key: str, default: float) -> float:
    try:
        return float(conf(key, default))
    except (TypeError, ValueError):
        print(f"Warning: Invalid number for {key}, using {default}")
        return default

# ==========================================
# EXPORTED CONFIG DICTS
# ==========================================

# Google Fonts only sends woff2 files and the "/* latin */" subset comments
# to modern browsers, so the CSS request has to look like one.
DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
)

DOWNLOADER = {
    "timeout": _conf_float("downloader.timeout", 30.0),
    "max_concurrency": max(1, _conf_int("downloader.max_concurrency", 8)),
    "user_agent": conf("downloader.user_agent", DEFAULT_USER_AGENT),
    "output_dir": conf("downloader.output_dir", "./fonts"),
    "fonts_prefix": conf("downloader.fonts_prefix", "./"),
}

LOGS_DIR = Path(conf("logs_dir", str(Path.cwd() / "logs")))

DEBUG = {
    # No log file unless asked for; the tool should not litter the working directory
    "log_file": conf("debug.log_file"),
    "log_level": conf("debug.log_level", "DEBUG"),
    "log_rotation": {
        "max_bytes": _conf_int("debug.log_rotation.max_bytes", 1 * 1024 * 1024),
        "backup_count": _conf_int("debug.log_rotation.backup_count", 10),
    },
}
