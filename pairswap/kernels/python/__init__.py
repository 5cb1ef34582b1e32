"""
Pure-Python pool kernels.

Each module is integer-only and returns frozen result records; versions are
suffixed (``_v1``) so a changed rounding rule ships as a new module.
"""
