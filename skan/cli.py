"""Command-line interface for scanning and auto-cropping."""

import argparse
import sys
from pathlib import Path

from .config import Settings
from .exceptions import SkanError, UsageError
from .models import DEFAULT_RESOLUTION, VALID_RESOLUTIONS, DocumentType, ScanJob, Tone

MAX_ARGS = 7
PROG = "skan"

USAGE = f"Usage: {PROG} <filename> <opt1> <opt2> <opt3> <opt4> <opt5> <opt6>"

OPTIONS_HELP = """Options:
\t-d  | --document
\t-p  | --photo
\t-lt | --light
\t-dk | --dark
\t-r  | --resolution <dpi> (150 OR 300)
\t-s  | --show
\t-v  | --verbose
\t-m  | --manual
"""

HELP_TEXT = f"{USAGE}\n\n{OPTIONS_HELP}"

RESOLUTION_FLAGS = ("-r", "--resolution")
FLAG_TOKENS = frozenset(
    [
        "-d", "--document",
        "-p", "--photo",
        "-lt", "--light",
        "-dk", "--dark",
        *RESOLUTION_FLAGS,
        "-s", "--show",
        "-v", "--verbose",
        "-m", "--manual",
    ]
)


class _ArgumentParser(argparse.ArgumentParser):
    """ArgumentParser that raises UsageError instead of exiting."""

    def error(self, message):
        raise UsageError("Invalid Argument", HELP_TEXT)


class _DocumentAction(argparse.Action):
    """Select the document preset: grayscale, fixed at 150 dpi."""

    def __init__(self, option_strings, dest, **kwargs):
        super().__init__(option_strings, dest, nargs=0, **kwargs)

    def __call__(self, parser, namespace, values, option_string=None):
        namespace.document_type = DocumentType.DOCUMENT
        namespace.resolution = DEFAULT_RESOLUTION


class _ResolutionAction(argparse.Action):
    """Store a supported resolution, or warn and fall back to the default."""

    def __call__(self, parser, namespace, values, option_string=None):
        namespace.resolution = parse_resolution(values)


class _ManualAction(argparse.Action):
    """Manual cropping replaces the preview, so it also turns --show off."""

    def __init__(self, option_strings, dest, **kwargs):
        super().__init__(option_strings, dest, nargs=0, **kwargs)

    def __call__(self, parser, namespace, values, option_string=None):
        namespace.manual_crop = True
        namespace.show_result = False


class _VerboseAction(argparse.Action):
    """Print the settings resolved so far. Later flags are not reflected."""

    def __init__(self, option_strings, dest, **kwargs):
        super().__init__(option_strings, dest, nargs=0, **kwargs)

    def __call__(self, parser, namespace, values, option_string=None):
        namespace.verbose = True
        print_settings(namespace)


def parse_resolution(value: str) -> int:
    """Return value as a supported dpi, warning and defaulting to 150 otherwise."""
    try:
        dpi = int(value)
    except ValueError:
        dpi = None

    if dpi not in VALID_RESOLUTIONS:
        print(
            f"\n{value} is not a valid resolution. Defaulting to {DEFAULT_RESOLUTION}\n",
            file=sys.stderr,
        )
        return DEFAULT_RESOLUTION
    return dpi


def print_settings(namespace: argparse.Namespace) -> None:
    print(f"  Filename:  {namespace.output_base}")
    print(f" Scan Type:  {namespace.document_type.value}")
    print(f"Image Tone:  {namespace.tone.value}")
    print(f"Resolution:  {effective_resolution(namespace)} dpi")


def effective_resolution(namespace: argparse.Namespace) -> int:
    """Resolution the scan will use. The document preset is fixed at 150 dpi."""
    if namespace.document_type is DocumentType.DOCUMENT:
        return DEFAULT_RESOLUTION
    return namespace.resolution


def build_parser() -> argparse.ArgumentParser:
    parser = _ArgumentParser(prog=PROG, add_help=False, allow_abbrev=False)
    parser.add_argument("-d", "--document", action=_DocumentAction, dest="document_type")
    parser.add_argument(
        "-p", "--photo", action="store_const", const=DocumentType.PHOTO, dest="document_type"
    )
    parser.add_argument("-lt", "--light", action="store_const", const=Tone.LIGHT, dest="tone")
    parser.add_argument("-dk", "--dark", action="store_const", const=Tone.DARK, dest="tone")
    parser.add_argument("-r", "--resolution", action=_ResolutionAction, metavar="DPI")
    parser.add_argument("-s", "--show", action="store_const", const=True, dest="show_result")
    parser.add_argument("-v", "--verbose", action=_VerboseAction, dest="verbose")
    parser.add_argument("-m", "--manual", action=_ManualAction, dest="manual_crop")
    return parser


def _check_tokens(tokens: list[str]) -> list[str]:
    """Reject anything that is not spelled exactly like a known flag.

    argparse would otherwise accept prefixes (-l for -lt) and bundled
    short flags (-dp). The token after -r is always its value, even when it
    looks like a flag, so it is handed to argparse in --resolution=VALUE form.
    """
    checked = []
    remaining = iter(tokens)
    for token in remaining:
        if token not in FLAG_TOKENS:
            raise UsageError("Invalid Argument", HELP_TEXT)
        if token in RESOLUTION_FLAGS:
            value = next(remaining, None)
            if value is None:
                raise UsageError(f"Missing value for {token} (150 OR 300)", HELP_TEXT)
            token = f"--resolution={value}"
        checked.append(token)
    return checked


def resolve_args(argv: list[str], scans_dir: Path) -> ScanJob:
    """Turn the raw argument list into a ScanJob.

    Raises:
        UsageError: if the argument count, filename, or a flag is invalid
    """
    if len(argv) < 1:
        raise UsageError("Missing Filename", USAGE)
    if len(argv) > MAX_ARGS:
        raise UsageError("Too many arguments", USAGE)

    filename, tokens = argv[0], argv[1:]
    if filename.startswith("-"):
        raise UsageError(
            f"Invalid Filename: {filename}",
            f"(leading '{filename[0]}' is used for <opt> flags)",
        )

    tokens = _check_tokens(tokens)

    namespace = argparse.Namespace(
        output_base=scans_dir / filename,
        document_type=DocumentType.DOCUMENT,
        tone=Tone.LIGHT,
        resolution=DEFAULT_RESOLUTION,
        show_result=False,
        manual_crop=False,
        verbose=False,
    )
    build_parser().parse_args(tokens, namespace=namespace)

    return ScanJob(
        output_base=namespace.output_base,
        document_type=namespace.document_type,
        tone=namespace.tone,
        resolution=effective_resolution(namespace),
        show_result=namespace.show_result and not namespace.manual_crop,
        manual_crop=namespace.manual_crop,
        verbose=namespace.verbose,
    )


def main(argv: list[str] | None = None) -> None:
    from .pipeline import run_job

    if argv is None:
        argv = sys.argv[1:]

    try:
        settings = Settings.from_env()
    except ValueError as e:
        sys.exit(str(e))

    try:
        job = resolve_args(argv, settings.scans_dir)
        run_job(job, settings=settings)
    except SkanError as e:
        sys.exit(e.user_message)
    except Exception as e:
        sys.exit(f"Unexpected error: {e}")


if __name__ == "__main__":
    main()
