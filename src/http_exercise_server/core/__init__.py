# Core shared modules for the app, the routers and the CLI
from .config import Config, setup_logging
from .cookies import parse_cookies
from .body import MalformedBodyError, read_json_body
from .responses import PrettyJSONResponse, error_response, render_json

__all__ = [
    # Config
    "Config",
    "setup_logging",
    # Request parsing
    "parse_cookies",
    "MalformedBodyError",
    "read_json_body",
    # Responses
    "PrettyJSONResponse",
    "error_response",
    "render_json",
]
