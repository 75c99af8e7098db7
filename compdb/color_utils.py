#!/usr/bin/env python3
# -*- coding: utf-8 -*-
# ****************************************************************************************************************************************************
# * BSD 3-Clause License
# *
# * Copyright (c) 2025, Mana Battery
# * All rights reserved.
# *
# * Redistribution and use in source and binary forms, with or without modification, are permitted provided that the following conditions are met:
# *
# * 1. Redistributions of source code must retain the above copyright notice, this list of conditions and the following disclaimer.
# * 2. Redistributions in binary form must reproduce the above copyright notice, this list of conditions and the following disclaimer in the
# *    documentation and/or other materials provided with the distribution.
# * 3. Neither the name of the copyright holder nor the names of its contributors may be used to endorse or promote products derived from this
# *    software without specific prior written permission.
# *
# * THIS SOFTWARE IS PROVIDED BY THE COPYRIGHT HOLDERS AND CONTRIBUTORS "AS IS" AND ANY EXPRESS OR IMPLIED WARRANTIES, INCLUDING, BUT NOT LIMITED TO,
# * THE IMPLIED WARRANTIES OF MERCHANTABILITY AND FITNESS FOR A PARTICULAR PURPOSE ARE DISCLAIMED. IN NO EVENT SHALL THE COPYRIGHT HOLDER OR
# * CONTRIBUTORS BE LIABLE FOR ANY DIRECT, INDIRECT, INCIDENTAL, SPECIAL, EXEMPLARY, OR CONSEQUENTIAL DAMAGES (INCLUDING, BUT NOT LIMITED TO,
# * PROCUREMENT OF SUBSTITUTE GOODS OR SERVICES; LOSS OF USE, DATA, OR PROFITS; OR BUSINESS INTERRUPTION) HOWEVER CAUSED AND ON ANY THEORY OF
# * LIABILITY, WHETHER IN CONTRACT, STRICT LIABILITY, OR TORT (INCLUDING NEGLIGENCE OR OTHERWISE) ARISING IN ANY WAY OUT OF THE USE OF THIS SOFTWARE,
# * EVEN IF ADVISED OF THE POSSIBILITY OF SUCH DAMAGE.
# ****************************************************************************************************************************************************
"""Terminal coloring for compdb command line output (colorama)."""

import os
import sys
from typing import Optional, TextIO

from colorama import Fore, Style, init

# Escape codes are always emitted; the CLI calls Colors.disable() for plain output
init(autoreset=False, strip=False)


class Colors:
    """ANSI codes used by the CLI; all become empty strings after disable()."""

    RED = Fore.RED
    GREEN = Fore.GREEN
    YELLOW = Fore.YELLOW
    CYAN = Fore.CYAN
    RESET = Style.RESET_ALL
    BRIGHT = Style.BRIGHT
    DIM = Style.DIM

    @staticmethod
    def disable() -> None:
        """Turn every code into an empty string."""
        for name in [attr for attr in vars(Colors) if attr.isupper()]:
            setattr(Colors, name, "")


def colored(text: str, color: str = "", style: str = "") -> str:
    """Wrap text in style and color codes followed by a reset.

    Text without a color is returned unchanged.
    """
    if not color:
        return text
    return f"{style}{color}{text}{Colors.RESET}"


def print_colored(text: str, color: str = "", style: str = "", file: Optional[TextIO] = None) -> None:
    """Print colored text to file (default: stdout)."""
    print(colored(text, color, style), file=file if file is not None else sys.stdout)


def _prefixed(label: str, text: str, prefix: bool) -> str:
    return f"{label}: {text}" if prefix else text


def print_success(text: str, file: Optional[TextIO] = None, prefix: bool = False) -> None:
    """Print a green message to stdout, optionally labelled "Success"."""
    print_colored(_prefixed("Success", text, prefix), Colors.GREEN, file=file)


def print_error(text: str, file: Optional[TextIO] = None, prefix: bool = True) -> None:
    """Print a red message to stderr, labelled "Error" unless prefix is False."""
    print_colored(_prefixed("Error", text, prefix), Colors.RED, file=file if file is not None else sys.stderr)


def print_warning(text: str, file: Optional[TextIO] = None, prefix: bool = True) -> None:
    """Print a yellow message to stderr, labelled "Warning" unless prefix is False."""
    print_colored(_prefixed("Warning", text, prefix), Colors.YELLOW, file=file if file is not None else sys.stderr)


def print_info(text: str, file: Optional[TextIO] = None) -> None:
    print_colored(text, Colors.CYAN, file=file)


def should_use_color(force_color: bool = False, no_color: bool = False) -> bool:
    """Decide whether CLI output gets color codes.

    --no-color always wins, then force_color. Otherwise color is used only on
    a terminal and only when NO_COLOR (no-color.org) is unset.
    """
    if no_color:
        return False
    if force_color:
        return True
    return sys.stdout.isatty() and not os.environ.get("NO_COLOR")
