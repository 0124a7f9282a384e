# Filename: __init__.py
# Author: Rich Lewis @RichLewis007
# Description: Trash data model package. Exports the trash engine and the item types it
#              produces.

__all__ = ["trash_engine", "trash_item"]
