"""Configuration constants and logging setup."""

import logging
import string
from pathlib import Path

ROOT_DIR = Path(".")
MANIFEST_FILE = Path("pages.csv")
DIR_COLUMN = "directory"
NAME_COLUMN = "name"
FOLDER_KEYS = tuple(string.ascii_lowercase)

PAGE_SUFFIX = ".html"
INDEX_FILE = "index.html"
MARKER_FILE = ".gitkeep"

HOME_URL = "/"
ABOUT_URL = "/about.html"
CONTACT_URL = "/contact.html"

GIT_REMOTE = "origin"
COMMIT_MESSAGE = "Update pages from manifest"
GIT_TIMEOUT = 120  # seconds

REQUEST_TIMEOUT = 30  # seconds
MAX_RETRIES = 3
RETRY_BASE_DELAY = 1.0  # seconds
USER_AGENT = "pagesync/1.0"

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s  %(levelname)-8s  %(message)s",
    datefmt="%H:%M:%S",
)
log = logging.getLogger("pagesync")
