"""
Caller-location extraction.

Turns a stack trace captured inside the logger into the call site of the
application code that asked for the log entry, as a `CallerInfo`.

Traces are handled as text, one frame per line, most recent call first.
Three frame dialects are understood::

    File "/srv/project/src/payment.py", line 123, in process_payment
    at processPayment (/srv/project/src/payment.ts:123:12)
    at http://localhost:3000/src/payment.ts:45:3
"""
from __future__ import annotations

import re
from re import Match, Pattern
from traceback import StackSummary, extract_stack
from typing import Callable, Iterable, Sequence

from ._log import LOG
from ._models import CallerInfo


# Trace layout when captured from `LogDockLogger._log`, most recent first:
#
#   [0] header line
#   [1] get_caller_info
#   [2] LogDockLogger._log
#   [3] LogDockLogger.debug / info / warn / error / log
#   [4] application code  <- the frame we want
#
# Changing the depth of that call chain means changing this constant.
CALLER_FRAME_INDEX = 4

TRACE_HEADER = 'Stack (most recent call first):'

_NAMED_FRAME_RE = re.compile(r'at\s+(.+?)\s+\((.+?):(\d+):\d+\)')
_BARE_FRAME_RE = re.compile(r'at\s+(.+?):(\d+):\d+')
_PYTHON_FRAME_RE = re.compile(r'File\s+"(.+?)",\s+line\s+(\d+),\s+in\s+(\S.*?)\s*$')

_URL_HOST_RE = re.compile(r'^https?://[^/]+/')
_BUNDLER_PREFIX_RE = re.compile(r'^webpack(?:-internal)?:///(?:\./)?')

# Directories taken as the root of a project, in order of preference
PROJECT_ROOT_MARKERS = ('src', 'app')


def format_trace(stack: StackSummary | Iterable) -> str:
    """Render frames (oldest first, as `extract_stack` returns them) as text."""
    lines = [TRACE_HEADER]
    for frame in reversed(list(stack)):
        lines.append(f'  File "{frame.filename}", line {frame.lineno}, in {frame.name}')
    return '\n'.join(lines)


def select_frame(lines: Sequence[str], index: int = CALLER_FRAME_INDEX) -> str | None:
    """
    Return the line at ``index``, or the one just above it when the trace
    is one frame shorter than expected; `None` when neither exists.
    """
    if 0 <= index < len(lines):
        return lines[index]
    if 0 <= index - 1 < len(lines):
        return lines[index - 1]
    return None


# -- path and method cleanup


def strip_url_host(path: str) -> str:
    """'http://localhost:3000/src/app.ts' -> 'src/app.ts'"""
    return _URL_HOST_RE.sub('', path, count=1)


def strip_bundler_prefix(path: str) -> str:
    """'webpack-internal:///./src/app.tsx' -> 'src/app.tsx'"""
    return _BUNDLER_PREFIX_RE.sub('', path, count=1)


def to_posix_separators(path: str) -> str:
    return path.replace('\\', '/')


def to_project_relative(path: str) -> str:
    """
    Trim ``path`` to start at the first ``src/`` segment, else the first
    ``app/`` segment, else keep only the file name.

    '/Users/foo/project/src/payment.ts' -> 'src/payment.ts'
    '/usr/lib/node/helper.js'           -> 'helper.js'
    """
    # a leading 'src/' counts as a segment too
    rooted = path if path.startswith('/') else f'/{path}'

    for marker in PROJECT_ROOT_MARKERS:
        idx = rooted.find(f'/{marker}/')
        if idx >= 0:
            return rooted[idx + 1:]

    return path.rsplit('/', 1)[-1]


FILE_PATH_STEPS: tuple[Callable[[str], str], ...] = (
    strip_url_host,
    strip_bundler_prefix,
    to_posix_separators,
    to_project_relative,
)


def clean_file_path(path: str) -> str:
    for step in FILE_PATH_STEPS:
        path = step(path)
    return path


def clean_method_name(method: str) -> str:
    """'Object.processPayment' -> 'processPayment'"""
    return method.rsplit('.', 1)[-1]


# -- frame matchers


def _named_frame(m: Match) -> tuple[str | None, str, str]:
    return m.group(1), m.group(2), m.group(3)


def _bare_frame(m: Match) -> tuple[str | None, str, str]:
    return None, m.group(1), m.group(2)


def _python_frame(m: Match) -> tuple[str | None, str, str]:
    return m.group(3), m.group(1), m.group(2)


# Tried in order; the first match wins
FRAME_MATCHERS: tuple[tuple[Pattern, Callable[[Match], tuple[str | None, str, str]]], ...] = (
    (_NAMED_FRAME_RE, _named_frame),
    (_BARE_FRAME_RE, _bare_frame),
    (_PYTHON_FRAME_RE, _python_frame),
)


def parse_frame(line: str | None) -> CallerInfo:
    """
    Parse a single stack frame line into a `CallerInfo`.

    An unrecognized line, or one whose line number is not an integer,
    gives an empty `CallerInfo`.
    """
    if not line:
        return CallerInfo()

    for pattern, unpack in FRAME_MATCHERS:
        m = pattern.search(line)
        if m is None:
            continue

        method, file, line_no = unpack(m)
        try:
            line_number = int(line_no)
        except ValueError:
            return CallerInfo()

        return CallerInfo(
            method=clean_method_name(method) if method is not None else None,
            file=clean_file_path(file),
            line_number=line_number,
        )

    return CallerInfo()


def extract_caller_info(trace: str | None,
                        index: int = CALLER_FRAME_INDEX) -> CallerInfo:
    """Pick the caller frame out of a full trace and parse it."""
    if not trace:
        return CallerInfo()
    return parse_frame(select_frame(trace.splitlines(), index))


def get_caller_info(*, debug: bool = False) -> CallerInfo:
    """
    Capture the current stack and return the application call site.

    Must be called directly from `LogDockLogger._log`; see
    `CALLER_FRAME_INDEX`. Never raises.
    """
    try:
        # this frame and the ones above it; nothing older is needed
        trace = format_trace(extract_stack(limit=CALLER_FRAME_INDEX))
        return extract_caller_info(trace)
    except Exception:
        if debug:
            LOG.error('Failed to extract caller info', exc_info=True)
        return CallerInfo()
