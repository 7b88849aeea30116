"""
Identifier blocklist for the expression language.

Names in this set can never become an Identifier node: the tokenizer
rejects them before the parser sees the token stream.
"""

from __future__ import annotations

# Self-reference / prototype-style names
_OBJECT_MODEL = {
    "__proto__",
    "prototype",
    "constructor",
    "__defineGetter__",
    "__defineSetter__",
    "__lookupGetter__",
    "__lookupSetter__",
    "__class__",
    "__bases__",
    "__mro__",
    "__subclasses__",
    "__dict__",
    "__globals__",
    "__code__",
    "__closure__",
    "__getattribute__",
    "__reduce__",
    "__reduce_ex__",
    "self",
    "this",
}

# Runtime and global-object names
_RUNTIME = {
    "eval",
    "exec",
    "compile",
    "Function",
    "Object",
    "Array",
    "String",
    "Number",
    "Boolean",
    "Symbol",
    "Proxy",
    "Reflect",
    "globalThis",
    "window",
    "global",
    "globals",
    "locals",
    "vars",
    "getattr",
    "setattr",
    "delattr",
    "breakpoint",
    "open",
    "process",
    "__builtins__",
    "builtins",
}

# Module / import-system names
_IMPORT_SYSTEM = {
    "require",
    "module",
    "exports",
    "import",
    "__import__",
    "importlib",
    "__loader__",
    "__spec__",
    "os",
    "sys",
    "subprocess",
}

BLOCKED_IDENTIFIERS: frozenset[str] = frozenset(_OBJECT_MODEL | _RUNTIME | _IMPORT_SYSTEM)


def is_blocked(name: str) -> bool:
    """Return True if name may not be used as a variable."""
    return name in BLOCKED_IDENTIFIERS
