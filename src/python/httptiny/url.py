import re

from .errors import InvalidSchemeError, InvalidPortError
from .http_protocol import HttpRequest, DEFAULT_PORT


_SCHEME = "http://"
_PORT_DIGITS = re.compile(r"\s*[+-]?\d+")


def parse_url(url: str, request: HttpRequest | None = None) -> HttpRequest:
    """Split ``http://host[:port][/path]`` into a request descriptor.

    When ``request`` is given its host, port and path are replaced in place and
    its proxy settings and user agent are kept. The port defaults to 80, the
    path to "" and the path never keeps its leading slash.
    """
    if url[:len(_SCHEME)].lower() != _SCHEME:
        raise InvalidSchemeError(f"URL must start with '{_SCHEME}': {url!r}")

    rest = url[len(_SCHEME):]
    delimiter_pos = next((i for i, c in enumerate(rest) if c in ":/"), len(rest))
    host = rest[:delimiter_pos]
    port = DEFAULT_PORT
    path_start = delimiter_pos

    if rest[delimiter_pos:delimiter_pos + 1] == ":":
        digits = _PORT_DIGITS.match(rest, delimiter_pos + 1)
        if digits is None:
            raise InvalidPortError(f"Missing or non-numeric port in URL: {url!r}")
        port = int(digits.group())
        if not 1 <= port <= 65535:
            raise InvalidPortError(f"Port {port} is out of range in URL: {url!r}")
        slash_pos = rest.find("/", digits.end())
        path_start = slash_pos if slash_pos != -1 else len(rest)

    path = rest[path_start + 1:]

    if request is None:
        return HttpRequest(host=host, port=port, path=path)

    request.host = host
    request.port = port
    request.path = path
    return request
