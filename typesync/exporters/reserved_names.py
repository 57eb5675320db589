"""
Reserved words per target syntax.

TypeScript keywords come from the TypeScript compiler's list of reserved
and contextual keywords (src/compiler/types.ts).
"""

TYPESCRIPT_RESERVED_NAMES = frozenset(
    {
        "break",
        "case",
        "catch",
        "class",
        "const",
        "continue",
        "debugger",
        "default",
        "delete",
        "do",
        "else",
        "enum",
        "export",
        "extends",
        "false",
        "finally",
        "for",
        "function",
        "if",
        "import",
        "in",
        "instanceof",
        "new",
        "null",
        "return",
        "super",
        "switch",
        "this",
        "throw",
        "true",
        "try",
        "typeof",
        "var",
        "void",
        "while",
        "with",
        "as",
        "implements",
        "interface",
        "let",
        "package",
        "private",
        "protected",
        "public",
        "static",
        "yield",
        "any",
        "boolean",
        "constructor",
        "declare",
        "get",
        "module",
        "require",
        "number",
        "set",
        "string",
        "symbol",
        "type",
        "from",
        "of",
    }
)

# Built-in type names a declaration would shadow
TYPESCRIPT_BUILTIN_TYPES = frozenset(
    {
        "never",
        "unknown",
        "object",
        "bigint",
        "undefined",
        "Record",
        "Partial",
        "Array",
    }
)

# Zod declarations are value bindings, and `z` is the imported namespace
ZOD_RESERVED_NAMES = TYPESCRIPT_RESERVED_NAMES | {"z"}

# Definition keys in a JSON Schema are free-form strings
JSONSCHEMA_RESERVED_NAMES = frozenset()
