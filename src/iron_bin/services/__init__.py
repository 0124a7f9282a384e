# Filename: __init__.py
# Author: Rich Lewis @RichLewis007
# Description: Service helpers for the trash core and CLI: path codec, location resolver,
#              metadata store, configuration, logging and formatting.

__all__ = [
    "codec",
    "config",
    "dir_sizes",
    "errors",
    "formatting",
    "location",
    "logger",
    "prompt",
    "trashinfo",
]
