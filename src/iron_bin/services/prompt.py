# Filename: prompt.py
# Author: Rich Lewis @RichLewis007
# Description: Interactive yes/no confirmation for the command line. Questions go to stderr
#              so that listing output on stdout stays machine-readable.

from __future__ import annotations

import sys
from typing import TextIO


def confirm(question: str, *, stdin: TextIO | None = None, stderr: TextIO | None = None) -> bool:
    # Ask ``question`` and return True only for an answer starting with "y".
    in_stream = stdin if stdin is not None else sys.stdin
    out_stream = stderr if stderr is not None else sys.stderr
    out_stream.write(f"{question} [y/N] ")
    out_stream.flush()
    answer = in_stream.readline()
    return answer.strip().lower().startswith("y")
