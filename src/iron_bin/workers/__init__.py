# Filename: __init__.py
# Author: Rich Lewis @RichLewis007
# Description: Worker components package for multi-path operations. Exports the batch
#              worker used to trash and restore several paths at once.

__all__ = ["batch_worker"]
