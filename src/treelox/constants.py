"""Named constants shared by the resolver, the evaluator and the CLI."""

from __future__ import annotations

INITIALIZER_NAME = "init"
THIS_NAME = "this"
SUPER_NAME = "super"

NIL_TEXT = "nil"
NATIVE_FN_TEXT = "<native fn>"
FUNCTION_TEXT_TEMPLATE = "<fn {name}>"
INSTANCE_TEXT_TEMPLATE = "{name} instance"

# Process exit codes (sysexits.h)
EXIT_OK = 0
EXIT_USAGE = 64
EXIT_STATIC_ERROR = 65
EXIT_RUNTIME_ERROR = 70
