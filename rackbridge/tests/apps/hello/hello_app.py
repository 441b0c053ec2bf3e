"""Small WSGI application used by the servlet tests."""

from urllib.parse import parse_qs


class HelloApp:
    """Echoes a query parameter and stores a posted body in memory."""

    def __init__(self) -> None:
        self.stored = b""

    def __call__(self, environ, start_response):
        method = environ["REQUEST_METHOD"]
        path = environ["PATH_INFO"]

        if path == "/name-echo" and method in ("GET", "HEAD"):
            name = parse_qs(environ["QUERY_STRING"]).get("name", [""])[0]
            environ["rackbridge.logger"].info(f"name-echo was called with {name}")
            return self._respond(start_response, "200 OK", name.encode("utf-8"))

        if path == "/temp-store" and method == "POST":
            self.stored = environ["wsgi.input"].read()
            return self._respond(start_response, "200 OK", b"")

        if path == "/temp-store" and method == "GET":
            return self._respond(start_response, "200 OK", self.stored)

        if path == "/boom":
            raise RuntimeError("boom")

        return self._respond(start_response, "404 Not Found", b"Not Found")

    @staticmethod
    def _respond(start_response, status, body):
        start_response(
            status,
            [("Content-Type", "text/plain"), ("Content-Length", str(len(body)))],
        )
        return [body]
