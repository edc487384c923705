"""
Static Analysis Package.

Read-only passes over LibCST trees.

Modules:
    - ``classifier``: Context-capture state of a single awaited operand.
    - ``detector``: Tree walk emitting diagnostics for non-conforming awaits.
"""
