"""
adept resilient fetcher.

Fetcher.fetch(url) issues blocking HTTP GET requests and follows redirects by hand:

    requesting ──► evaluating ──► success            (200)
        ▲              │
        └─ redirecting ◄┘ (3xx with a Location)       ──► failed (anything else)

Failures are never raised from fetch(); they come back inside the FetchResult as
a fault (TransportFailureError, UnhandledStatusError, BrokenRedirectError,
TooManyRedirectsError, FetchCancelledError) so the caller must check the result
before using the body. Progress lines are printed to a rich console as a side channel.
"""
import threading
from typing import NamedTuple
from urllib.parse import urljoin

import requests
from rich.console import Console
from rich.text import Text

from .faults import (
    FetchError,
    TransportFailureError,
    UnhandledStatusError,
    BrokenRedirectError,
    TooManyRedirectsError,
    FetchCancelledError,
)
from .utils import Unset, coalesce, ensure_scheme

DEFAULT_TIMEOUT = 30.0
DEFAULT_HOPS = 10


class FetchResult(NamedTuple):
    """
    Outcome of a fetch.

    - url: final URL (the one answering 200, or the one that failed).
    - body: response body on success, None on failure.
    - code: last HTTP status code seen (0 when no response was received).
    - trail: redirect targets in visiting order.
    - fault: None on success, otherwise the FetchError describing the failure.

    A result is truthy only on success.
    """
    url: str
    body: bytes | None = None
    code: int = 0
    trail: tuple = ()
    fault: FetchError | None = None

    def __bool__(self):
        return self.fault is None


def _status(response):
    """Status code of a response, 0 when it carries none."""
    code = getattr(response, "status_code", None)
    return code if isinstance(code, int) and not isinstance(code, bool) else 0


class Fetcher:
    """
    Follow-redirects HTTP client built on a requests session.

    Parameters
    - session: requests.Session-like object (anything with get()); one is created
      (and owned, i.e. closed by close()) when omitted.
    - timeout: seconds (or a (connect, read) tuple) passed to every request.
    - hops: maximum number of redirects followed before giving up.
    - console: rich console receiving progress lines (stderr by default).
    - cancel: threading.Event; when set, the fetch stops before its next request.
    - colorful: style progress lines.
    """

    def __init__(self, session=Unset, /, *, timeout=DEFAULT_TIMEOUT, hops=DEFAULT_HOPS, console=Unset, cancel=Unset, colorful=True):
        if isinstance(hops, bool) or not isinstance(hops, int):
            raise TypeError("fetcher 'hops' must be an integer")
        if hops < 0:
            raise ValueError("fetcher 'hops' cannot be negative")
        if cancel is not Unset and not isinstance(cancel, threading.Event):
            raise TypeError("fetcher 'cancel' must be a threading event")

        self._owned = session is Unset
        self._session = requests.Session() if session is Unset else session
        self._timeout = timeout
        self._hops = hops
        self._console = coalesce(console, Console(stderr=True))
        self._cancel = coalesce(cancel)
        self._colorful = bool(colorful)

    @property
    def session(self):
        return self._session

    @property
    def timeout(self):
        return self._timeout

    @property
    def hops(self):
        return self._hops

    def _report(self, message, target="", style=""):
        if not self._colorful:
            style = ""
        self._console.print(Text.assemble((message, style), " " * bool(target), (target, "bold" if style else "")), highlight=False)

    def _fail(self, fault, url, code, trail):
        self._report("failed to fetch", url, "red")
        self._report(str(fault), style="dim red")
        return FetchResult(url, None, code, tuple(trail), fault)

    def fetch(self, url):
        """
        Fetch url, following redirects.

        Returns
        - FetchResult: truthy with body/url/code/trail on success; falsy with a fault otherwise.
        """
        if not isinstance(url, str):
            raise TypeError("fetch() argument must be a string")

        url = ensure_scheme(url.strip())
        trail = []
        code = 0
        self._report("attempting to fetch", url, "cyan")

        while True:
            if self._cancel is not None and self._cancel.is_set():
                return self._fail(FetchCancelledError(
                    "fetch of %r was cancelled" % url,
                    title="fetch cancelled",
                    url=url,
                ), url, code, trail)

            try:
                response = self._session.get(url, allow_redirects=False, timeout=self._timeout)
            except requests.RequestException as exception:
                return self._fail(TransportFailureError(
                    "could not complete the request to %r: %s" % (url, exception),
                    title="transport failure",
                    hint="check the repository address and your network connection",
                    url=url,
                    exception=exception,
                ), url, 0, trail)

            try:
                code = _status(response)
                if code == 200:
                    body = response.content
                    self._report("success!", style="green")
                    return FetchResult(url, body, code, tuple(trail))

                if 300 <= code < 400:
                    location = (response.headers.get("Location") or "").strip()
                    if not location:
                        return self._fail(BrokenRedirectError(
                            "server answered %d for %r without a redirect target" % (code, url),
                            title="broken redirect",
                            hint="the server did not send a 'Location' header",
                            url=url,
                            code=code,
                        ), url, code, trail)
                    if len(trail) >= self._hops:
                        return self._fail(TooManyRedirectsError(
                            "gave up on %r after %d redirects" % (url, len(trail)),
                            title="too many redirects",
                            hint="the server may be redirecting in a loop",
                            url=url,
                            code=code,
                            trail=tuple(trail),
                        ), url, code, trail)
                    url = urljoin(url, location)
                    trail.append(url)
                    self._report("redirecting to", url, "yellow")
                    continue

                return self._fail(UnhandledStatusError(
                    "server returned code %d for %r" % (code, url),
                    title="unhandled status",
                    hint="make sure the repository and index names are correct",
                    url=url,
                    code=code,
                ), url, code, trail)
            finally:
                close = getattr(response, "close", None)
                if callable(close):
                    close()

    def close(self):
        """Close the session if this fetcher created it."""
        if self._owned:
            self._session.close()

    def __enter__(self):
        return self

    def __exit__(self, *unused):
        self.close()

    def __repr__(self):
        return "fetcher(timeout=%r, hops=%r)" % (self._timeout, self._hops)


__all__ = (
    "DEFAULT_TIMEOUT",
    "DEFAULT_HOPS",
    "FetchResult",
    "Fetcher",
)
