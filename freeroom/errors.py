"""Error values that carry a response code and message."""

from __future__ import annotations


class Errno(Exception):
    """A fixed error with a numeric code and a message."""

    def __init__(self, code: int, message: str) -> None:
        super().__init__(message)
        self.code = code
        self.message = message

    def __str__(self) -> str:
        return self.message

    def __repr__(self) -> str:
        return f"Errno(code={self.code!r}, message={self.message!r})"


class Err(Exception):
    """An error built from an :class:`Errno`, with an underlying cause."""

    def __init__(self, errno: Errno, err: BaseException | None = None) -> None:
        super().__init__(errno.message)
        self.code = errno.code
        self.message = errno.message
        self.err = err

    def add(self, message: str) -> Err:
        """Append a space and ``message`` to the message; return self."""
        self.message += " " + message
        return self

    def addf(self, fmt: str, *args: object) -> Err:
        """Append a space and ``fmt % args`` to the message; return self."""
        return self.add(fmt % args)

    def __str__(self) -> str:
        cause = "<nil>" if self.err is None else str(self.err)
        return f"Err - code: {self.code}, message: {self.message}, error: {cause}"


def decode_err(err: BaseException | None, ok: Errno, fallback: Errno) -> tuple[int, str]:
    """Return the code and message to report for ``err``.

    ``ok`` answers for no error; other exceptions get ``fallback``'s code and
    their own text.
    """
    if err is None:
        return ok.code, ok.message
    if isinstance(err, (Err, Errno)):
        return err.code, err.message
    return fallback.code, str(err)