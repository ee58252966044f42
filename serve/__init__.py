"""
serve

Embedded static file server for the vasu toolkit.

Modules:
  mime.py      : extension -> content-type table
  decode.py    : %XX path decoding
  request.py   : request line parsing
  resolver.py  : request path -> filesystem target
  listing.py   : HTML index for directory targets
  response.py  : HTTP response model and wire serialization
  handler.py   : one request/response cycle per connection
  server.py    : listening socket and accept loop
"""

from serve.errors import BindError, ServeError
from serve.handler import build_response, handle_connection
from serve.server import ServerConfig, StaticFileServer, serve_directory

__all__ = [
    "BindError",
    "ServeError",
    "ServerConfig",
    "StaticFileServer",
    "build_response",
    "handle_connection",
    "serve_directory",
]
