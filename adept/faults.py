"""
adept faults (errors) and rendering.

Scope
- FaultCode: canonical, stable numeric identifiers for every user-facing failure.
  Codes are grouped by domain (options, packages, fetching, output).
- AdeptException: base type that carries message + options and knows how to
  render itself in a short, lowercased and actionable way.
- trigger(): central entry point to surface any fault (respecting shell/deferred/fancy/colorful).

Integration
- The option parser, the fetcher and the driver build faults and either hand them
  back inside a result (Match, FetchResult) or surface them with trigger(fault, **ctx).
- In non-shell mode, faults are raised; in shell mode, they are rendered via rich
  and, unless deferred, the process exits with the fault's status.
"""
import sys
from collections import defaultdict
from enum import IntEnum
from types import MappingProxyType

from rich.console import Console, Group
from rich.panel import Panel
from rich.text import Text

from .utils import Unset

console = Console(stderr=True)


class FaultCode(IntEnum):
    """
    canonical fault codes used across adept (stable identifiers).

    grouping (by high-level domain)
    - options (111xx)
      • MALFORMED_OPTION, OPTION_INDEX
    - packages (112xx)
      • INVALID_PACKAGE_SPEC, PACKAGE_NOT_FOUND, MALFORMED_INDEX
    - fetching (113xx)
      • TRANSPORT_FAILURE, UNHANDLED_STATUS, BROKEN_REDIRECT,
        TOO_MANY_REDIRECTS, FETCH_CANCELLED
    - output (114xx)
      • OUTPUT_FAILURE
    """
    # --- option errors (111xx) ---
    MALFORMED_OPTION            = 11101
    OPTION_INDEX                = 11102

    # --- package errors (112xx) ---
    INVALID_PACKAGE_SPEC        = 11201
    PACKAGE_NOT_FOUND           = 11202
    MALFORMED_INDEX             = 11203

    # --- fetch errors (113xx) ---
    TRANSPORT_FAILURE           = 11301
    UNHANDLED_STATUS            = 11302
    BROKEN_REDIRECT             = 11303
    TOO_MANY_REDIRECTS          = 11304
    FETCH_CANCELLED             = 11305

    # --- output errors (114xx) ---
    OUTPUT_FAILURE              = 11401

    def normalize(self):
        """
        return a host-normalized string for this code.

        the host application can provide a __codes__ mapping in __main__
        to override numeric ids with friendlier labels.
        """
        return str(getattr(__import__("__main__"), "__codes__", {}).get(self, self.value))


class AdeptException(Exception):
    """
    base fault: a message plus read-only rendering/runtime options.

    class attributes
    - status: process exit status used when the fault ends a run.
    - code: default FaultCode, used when no 'code' option is given.
    """
    status = 1
    code = Unset

    def __init__(self, message=Unset, /, **options):
        assert isinstance(message, str | Unset)
        super().__init__(message)
        self.message = message
        self.options = MappingProxyType(options)

    def __str__(self):
        return str(self.message) if self.message else type(self).__name__

    def __rich__(self):
        main = __import__("__main__")
        colorful = self.options.get("colorful", True)
        fancy = self.options.get("fancy", False)

        styles = defaultdict(str, {
            # header parts
            "prog-name": "bold #E6E6F0",  # near-white program name
            "code": "bold #00E5FF",  # neon cyan fault code
            "error-title": "bold #FF4DA6",  # friendly pinky title

            # body
            "error-message": "#C8C8D0",  # soft light gray message
            "hint-arrow": "#9CE19C dim",  # gentle green arrow
            "hint": "italic #9CE19C",  # gentle green hint text
        } | getattr(main, "__styles__", {}))

        def styler(style):
            return styles[style] if colorful else ""

        def text(fragment, style=""):
            if not fragment:
                return Text("")
            if not colorful:
                return Text(str(fragment))
            if isinstance(fragment, Text):
                return fragment
            return Text(str(fragment), style)

        code = self.options.get("code", type(self).code)
        prog = text(getattr(main, "__prog__", "adept"), styler("prog-name"))

        header = Text.assemble(
            "[ ",
            prog,
            " — ",
            text(code.normalize() if code else "", styler("code")),
            " | ",
            text(self.options.get("title", type(self).__name__).title(), styler("error-title")),
            " ]"
        )
        message = text(self.message, styler("error-message"))
        parts = [message]
        if self.options.get("hint"):
            parts.append(Text.assemble(text(" → ", styler("hint-arrow")), text(self.options["hint"], styler("hint"))))

        if fancy:
            return Panel(Group(*parts), title=header, title_align="left")

        return Group(header, *parts)

    def __trigger__(self) -> None:
        if not self.options.get("shell", False):
            raise self from None
        self.options.get("console", console).print(self)
        if self.options.get("deferred", False):
            return
        sys.exit(self.status)

    def __replace__(self, *unused, **overrides):
        assert not unused, "unused arguments are not allowed"
        return type(self)(self.message, **{**self.options, **overrides})


class MalformedOptionError(AdeptException):
    code = FaultCode.MALFORMED_OPTION


class OptionIndexError(AdeptException, IndexError):
    code = FaultCode.OPTION_INDEX


class InvalidPackageSpecError(AdeptException):
    status = -1
    code = FaultCode.INVALID_PACKAGE_SPEC


class PackageNotFoundError(AdeptException):
    status = -2
    code = FaultCode.PACKAGE_NOT_FOUND


class MalformedIndexError(AdeptException):
    status = -3
    code = FaultCode.MALFORMED_INDEX


class FetchError(AdeptException):
    """Base for every failure reported by the fetcher."""
    status = -3


class TransportFailureError(FetchError):
    code = FaultCode.TRANSPORT_FAILURE


class UnhandledStatusError(FetchError):
    code = FaultCode.UNHANDLED_STATUS


class BrokenRedirectError(FetchError):
    code = FaultCode.BROKEN_REDIRECT


class TooManyRedirectsError(FetchError):
    code = FaultCode.TOO_MANY_REDIRECTS


class FetchCancelledError(FetchError):
    code = FaultCode.FETCH_CANCELLED


class OutputError(AdeptException):
    """Downloaded files could not be written to the output directory."""
    status = -4
    code = FaultCode.OUTPUT_FAILURE


def trigger(fault, /, **options):
    """
    surface a fault with the given runtime options.

    contract
    - fault must provide __trigger__ and __replace__ methods (see AdeptException).
    - options are merged into the fault via __replace__(**options) before triggering.
    - in shell mode, rendering happens via rich console; otherwise, the fault is raised.

    typical options
    - shell, fancy, colorful, deferred, console, title, code, hint, and any other
      context the reporter may want to keep (e.g., url, token, spec).
    """
    if (
        not hasattr(fault, "__trigger__") or
        not callable(fault.__trigger__) or
        not hasattr(fault, "__replace__") or
        not callable(fault.__replace__)
    ):
        raise TypeError("trigger() argument must have a __trigger__ and __replace__ methods")
    fault.__replace__(**options).__trigger__()


__all__ = (
    "FaultCode",
    "AdeptException",
    "MalformedOptionError",
    "OptionIndexError",
    "InvalidPackageSpecError",
    "PackageNotFoundError",
    "MalformedIndexError",
    "FetchError",
    "TransportFailureError",
    "UnhandledStatusError",
    "BrokenRedirectError",
    "TooManyRedirectsError",
    "FetchCancelledError",
    "OutputError",
    "trigger",
)
