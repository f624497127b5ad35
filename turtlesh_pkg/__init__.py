"""turtlesh package: operator scanner, process connector, built-ins and expression evaluator."""

__all__ = [
    "api",
    "cli",
    "config",
    "connector",
    "dispatcher",
    "evaluator",
    "executor",
    "history",
    "launcher",
    "logging_config",
    "memwatch",
    "session",
    "tokenizer",
    "types",
]

# Public API exports

__api_exports__ = [
    "evaluate",
    "create_executor",
    "run_command",
]
