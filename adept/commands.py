"""
adept command layer: the command-line driver.

What this module provides
- ReturnCode: process exit statuses.
- build_options(): the option table of the adept command (order = help order).
- Context: explicit run configuration (options, consoles, fetcher, rendering
  switches) passed through the call chain instead of process-wide state.
- show_help(context): intro + formatted help of every option.
- run(prompt): parse, validate packages, fetch the master index, locate every
  package and download it. Returns an exit status.
- main(): console-script entry point.

Flow of run()
    tokens ─► option table ─► --help? ─► package specs ─► master index ─► group indexes ─► downloads

Faults raised along the way (see adept.faults) are surfaced through
Context.fail(): rendered on stderr in shell mode, raised otherwise. The run stops
at the first fault and returns its status.
"""
import contextlib
import pathlib
import shlex
import sys
from collections import defaultdict
from collections.abc import Iterable
from enum import IntEnum

from rich.console import Console
from rich.text import Text

from .faults import *
from .fetching import Fetcher, DEFAULT_TIMEOUT, DEFAULT_HOPS
from .index import MasterIndex, GroupIndex, parse_spec, group_path, packaging
from .options import Option, OptionTable
from .utils import Unset, ensure_scheme


class ReturnCode(IntEnum):
    OK = 0
    INVALID_PACKAGE = InvalidPackageSpecError.status
    PACKAGE_NOT_FOUND = PackageNotFoundError.status
    FETCH_FAILED = FetchError.status
    MALFORMED_INDEX = MalformedIndexError.status  # alias of FETCH_FAILED
    OUTPUT_FAILED = OutputError.status
    MALFORMED_OPTION = MalformedOptionError.status


HELP_INTRO = (
    "\nadept\n\n"
    "A simple command line utility for managing Android dependencies.\n\n"
    "Usage: adept [options] <packages>, where each package is formatted as <path>:<version>.\n"
    "For example, to fetch com.google.android.material version 1.4.0, use: adept com.google.android.material:1.4.0\n\n"
    "Available options:"
)

# Help layout: labels at column 0, text at column 25, wrapped at column 100
HELP_LAYOUT = (0, 25, 100)


def build_options():
    """
    Build the option table of the adept command.

    New command-line options are added here; declaration order is help order.
    """
    return OptionTable(
        Option("-h", "--help", 0, "Displays this help menu."),
        Option("-d", "--out-dir", 1, "Specifies the directory to which the fetched libraries will be written.",
               default=["."], metavars=["path"]),
        Option("-D", "--deps", 1, "If this option is specified, all subdependencies will also be fetched.",
               default=["."], metavars=["path"]),
        Option("-r", "--repo", 1, "Specifies the url of the repository to download the libraries from. "
                                  "Current default: %0",
               default=["maven.google.com"], metavars=["url"]),
        Option("-f", "--force", 0, "Forces the action to complete, overwriting existing files even if they "
                                   "are up-to-date."),
        Option("-i", "--index", 1, "Specifies an alternate master index file to search for in the repository. "
                                   "Current default: %0",
               default=["master-index.xml"], metavars=["index"]),
    )


class Context:
    """
    Configuration and collaborators of one adept run.

    Parameters
    - options: OptionTable (build_options() when omitted).
    - console: rich console for regular output (stdout).
    - errors: rich console for faults and progress (stderr).
    - fetcher: Fetcher used for every request (created, and closed by close(), when omitted).
    - shell: render faults instead of raising them.
    - colorful: style output; fancy: wrap faults in panels.
    - timeout/hops: forwarded to the fetcher created when none is given.
    """

    def __init__(
            self,
            options=Unset,
            /,
            *,
            console=Unset,
            errors=Unset,
            fetcher=Unset,
            shell=True,
            colorful=True,
            fancy=False,
            timeout=DEFAULT_TIMEOUT,
            hops=DEFAULT_HOPS,
    ):
        self._options = build_options() if options is Unset else options
        if not isinstance(self._options, OptionTable):
            raise TypeError("context 'options' must be an option table")
        self._console = Console() if console is Unset else console
        self._errors = Console(stderr=True) if errors is Unset else errors
        self._shell = bool(shell)
        self._colorful = bool(colorful)
        self._fancy = bool(fancy)
        self._owned = fetcher is Unset
        self._fetcher = Fetcher(timeout=timeout, hops=hops, console=self._errors, colorful=colorful) if fetcher is Unset else fetcher

    options = property(lambda self: self._options)
    console = property(lambda self: self._console)
    errors = property(lambda self: self._errors)
    fetcher = property(lambda self: self._fetcher)
    shell = property(lambda self: self._shell)
    colorful = property(lambda self: self._colorful)
    fancy = property(lambda self: self._fancy)

    @property
    def repo(self):
        return ensure_scheme(self._options["--repo"][0]).rstrip("/")

    @property
    def index(self):
        return self._options["--index"][0].lstrip("/")

    @property
    def out_dir(self):
        return pathlib.Path(self._options["--out-dir"][0]).expanduser()

    @property
    def force(self):
        return self._options["--force"].bound

    def url(self, *parts):
        """Absolute repository URL of the given path parts."""
        return "/".join((self.repo, *(part.strip("/") for part in parts)))

    def fail(self, fault, /, **options):
        """
        Surface a fault for this run and return the exit status it maps to.

        In shell mode the fault is rendered on the error console; otherwise it is raised.
        """
        trigger(
            fault,
            **options,
            shell=self._shell,
            deferred=True,
            fancy=self._fancy,
            colorful=self._colorful,
            console=self._errors,
        )
        return fault.status

    def close(self):
        if self._owned:
            self._fetcher.close()

    def __enter__(self):
        return self

    def __exit__(self, *unused):
        self.close()


def show_help(context, /):
    """
    Print the intro and the formatted help of every option to the context console.

    Palette keys
    - intro, option-name, metavar
    Define a mapping named __styles__ in __main__ to override any palette entry.
    """
    styles = defaultdict(str, {
        "intro": "",
        "option-name": "bold #00E6FF",  # CYAN for option labels
        "metavar": "bold #FFD600",  # AMBER for parameters
    } | getattr(__import__("__main__"), "__styles__", {}))

    def styler(style):
        return styles[style] if context.colorful else ""

    context.console.print(Text(HELP_INTRO, styler("intro")), highlight=False, soft_wrap=True)
    for option, rendered in zip(context.options, context.options.help(*HELP_LAYOUT)):
        text = Text(rendered)
        if context.colorful:
            offset = 0
            for label in option.labels:
                offset = rendered.index(label, offset)
                text.stylize(styler("option-name"), offset, offset + len(label))
                offset += len(label)
            for metavar in option.metavars:
                offset = rendered.index("<%s>" % metavar, offset)
                text.stylize(styler("metavar"), offset, offset + len(metavar) + 2)
                offset += len(metavar) + 2
        context.console.print(text, highlight=False, soft_wrap=True)


def _fetch(context, url):
    """Fetch url, raising the fetch fault when it failed."""
    result = context.fetcher.fetch(url)
    if not result:
        raise result.fault
    return result


def locate(context, master, spec, groups, /):
    """
    Resolve a package spec against the master index and its group index.

    groups caches the group indexes fetched during this run.
    """
    group, artifact = master.locate(spec)
    if group not in groups:
        groups[group] = GroupIndex.parse(_fetch(context, context.url(group_path(group), "group-index.xml")).body)
    return groups[group].resolve(artifact, spec.version)


def _output_error(action, path, error):
    return OutputError(
        "could not %s %s: %s" % (action, path, error.strerror or error),
        title="output failure",
        hint="make sure --out-dir points to a writable directory",
        path=path,
        exception=error,
    )


def _write(path, data):
    """
    Write data to path through a ".part" sibling replaced into place on success.

    A failed write leaves no partial file under the final name.
    """
    part = path.with_name(path.name + ".part")
    try:
        part.write_bytes(data)
        part.replace(path)
    except OSError as error:
        with contextlib.suppress(OSError):
            part.unlink(missing_ok=True)
        raise _output_error("write", path, error) from None


def download(context, package, /):
    """
    Write the POM and the artifact file of a package into the output directory.

    Existing files are kept unless --force was given. Returns the written paths.

    Raises
    - OutputError: the output directory cannot be created, read or written.
    """
    directory = context.out_dir
    try:
        directory.mkdir(parents=True, exist_ok=True)
    except OSError as error:
        raise _output_error("create", directory, error) from None

    written = []
    pom = directory / (package.stem + ".pom")
    if pom.exists() and not context.force:
        try:
            descriptor = pom.read_bytes()
        except OSError as error:
            raise _output_error("read", pom, error) from None
        context.console.print("skipping %s (already exists, use --force to overwrite)" % pom, highlight=False)
    else:
        descriptor = _fetch(context, context.url(package.path, package.stem + ".pom")).body
        _write(pom, descriptor)
        written.append(pom)

    name = "%s.%s" % (package.stem, packaging(descriptor))
    artifact = directory / name
    if artifact.exists() and not context.force:
        context.console.print("skipping %s (already exists, use --force to overwrite)" % artifact, highlight=False)
    else:
        _write(artifact, _fetch(context, context.url(package.path, name)).body)
        written.append(artifact)

    for path in written:
        context.console.print("wrote %s" % path, highlight=False)
    return written


def _tokens(prompt):
    """Normalize a prompt (Unset, shell-like string, or iterable of strings) to a list of tokens."""
    if prompt is Unset:
        return sys.argv[1:]
    if isinstance(prompt, str):
        return shlex.split(prompt)
    if isinstance(prompt, Iterable):
        tokens = list(prompt)
        for token in tokens:
            if not isinstance(token, str):
                raise TypeError("run() argument must be a string or an iterable of strings")
        return tokens
    raise TypeError("run() argument must be a string or an iterable of strings")


def run(prompt=Unset, /, *, context=Unset):
    """
    Run adept with a token stream and return its exit status.

    Parameters
    - prompt:
      • Unset: read tokens from sys.argv[1:].
      • str: shell-like string; split via shlex.split.
      • Iterable[str]: pre-tokenized arguments (command name excluded).
    - context: Context to run with (a fresh one, closed afterwards, when omitted).
    """
    tokens = _tokens(prompt)
    if context is Unset:
        with Context() as context:
            return _run(context, tokens)
    return _run(context, tokens)


def _run(context, tokens):
    # If no arguments have been passed, just display the help text.
    if not tokens:
        show_help(context)
        return ReturnCode.OK

    try:
        remaining = context.options.parse(tokens)
    except MalformedOptionError as fault:
        return context.fail(fault)

    if context.options["--help"].bound:
        show_help(context)
        return ReturnCode.OK

    if context.options["--deps"].bound:
        context.errors.print("note: sub-dependency fetching is not supported, ignoring --deps", highlight=False)

    try:
        # Any remaining arguments are the packages to download
        specs = [parse_spec(token) for token in remaining]

        master = MasterIndex.parse(_fetch(context, context.url(context.index)).body)
        if not specs:
            context.console.print("%s lists %d groups" % (context.url(context.index), len(master)), highlight=False)
            return ReturnCode.OK

        groups = {}
        packages = [locate(context, master, spec, groups) for spec in specs]
        for package in packages:
            download(context, package)
    except AdeptException as fault:
        return context.fail(fault)

    return ReturnCode.OK


def main():
    """Console-script entry point."""
    sys.exit(run())


__all__ = (
    "ReturnCode",
    "HELP_INTRO",
    "HELP_LAYOUT",
    "build_options",
    "Context",
    "show_help",
    "locate",
    "download",
    "run",
    "main",
)
