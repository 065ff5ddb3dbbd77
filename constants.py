"""
Constants for the Scoop VirusTotal checker.
Centralized location for all static configuration values.
"""

# Exit code flags (OR-combined across every app and hash)
EXIT_SUCCESS = 0
EXIT_USAGE = 1
EXIT_UNSAFE = 2
EXIT_EXCEPTION = 4
EXIT_NO_INFO = 8

# VirusTotal UI endpoints (no API key required)
VT_FILE_LOOKUP_URL = "https://www.virustotal.com/ui/files/{hash}"
VT_URL_SUBMIT_URL = "https://www.virustotal.com/ui/urls"
VT_FILE_REPORT_URL = "https://www.virustotal.com/#/file/{hash}/detection"
VT_URL_REPORT_URL = "https://www.virustotal.com/#/url/{id}/detection"
VT_MANUAL_SUBMIT_URL = "https://www.virustotal.com/#/home/url"

# Hash algorithms VirusTotal can look up
SUPPORTED_ALGORITHMS = frozenset(["md5", "sha1", "sha256"])
DEFAULT_ALGORITHM = "sha256"

# Architectures a manifest can declare
ARCHITECTURES = ("32bit", "64bit")

# Redirect chains longer than this are treated as a loop
MAX_REDIRECTS = 10

# Timeout configuration
VT_REQUEST_TIMEOUT = 30  # seconds for every HTTP request

# The UI endpoints reject requests without a browser-like agent
VT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) "
    "AppleWebKit/537.36 (KHTML, like Gecko) Chrome/120.0 Safari/537.36"
)

# Scoop layout
DEFAULT_BUCKET = "main"
