"""
Core Package.

Diagnostic models, the await rewriter, the fix coordinator and the
file-level engine that ties parsing, detection and fixing together.
"""
