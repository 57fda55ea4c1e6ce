"""Custom exceptions for scanning and cropping."""


class SkanError(Exception):
    """Base exception for skan errors."""

    def __init__(self, message: str, user_message: str | None = None):
        super().__init__(message)
        self.user_message = user_message or message


class UsageError(SkanError):
    """Malformed command line. Raised before anything touches the scanner."""

    def __init__(self, message: str, help_text: str = ""):
        user_message = f"\n{message}\n\n{help_text}" if help_text else message
        super().__init__(message, user_message)
        self.help_text = help_text


class ToolNotFoundError(SkanError):
    """External program is not installed or not on PATH."""

    def __init__(self, tool: str):
        super().__init__(
            f"Executable not found: {tool}",
            f"Could not run '{tool}'. Make sure it is installed and on your PATH.",
        )
        self.tool = tool


class ExternalToolError(SkanError):
    """External program exited with a nonzero status."""

    def __init__(self, tool: str, returncode: int, stderr: str = ""):
        detail = stderr.strip()
        msg = f"{tool} failed with exit code {returncode}"
        if detail:
            msg = f"{msg}: {detail}"
        super().__init__(msg)
        self.tool = tool
        self.returncode = returncode
        self.stderr = stderr


class ImageReadError(SkanError):
    """Failed to read an image file."""

    def __init__(self, path: str):
        super().__init__(
            f"Could not read image: {path}",
            "Could not read image file. The file may be corrupted or in an unsupported format.",
        )


class InvalidCropGeometryError(SkanError):
    """Auto-trim produced no usable crop box."""

    def __init__(self, detail: str = ""):
        msg = f"Invalid crop geometry: {detail}" if detail else "Invalid crop geometry"
        super().__init__(
            msg,
            "Could not locate the document on the scanner bed. Try --manual to crop by hand.",
        )


class ImageWriteError(SkanError):
    """Failed to write an image file."""

    def __init__(self, path: str):
        super().__init__(
            f"Could not write image: {path}",
            f"Could not write image file {path}. Check the scans directory is writable.",
        )
