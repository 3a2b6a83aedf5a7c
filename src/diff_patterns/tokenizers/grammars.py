"""Per-language vocabularies driving the lexical scanner."""

from __future__ import annotations

import builtins
import keyword
import re
from dataclasses import dataclass, field

_C_STYLE_IDENTIFIER = re.compile(r"[A-Za-z_][A-Za-z0-9_]*")
_JS_IDENTIFIER = re.compile(r"[A-Za-z_$][A-Za-z0-9_$]*")

_C_FAMILY_OPERATORS = (
    "<<=",
    ">>=",
    "...",
    "->",
    "++",
    "--",
    "==",
    "!=",
    "<=",
    ">=",
    "&&",
    "||",
    "+=",
    "-=",
    "*=",
    "/=",
    "%=",
    "&=",
    "|=",
    "^=",
    "<<",
    ">>",
    "::",
    "+",
    "-",
    "*",
    "/",
    "%",
    "=",
    "<",
    ">",
    "!",
    "~",
    "&",
    "|",
    "^",
    "?",
    ":",
)


@dataclass(slots=True, frozen=True)
class LexicalRules:
    """Configurable lexical markers for comments and strings."""

    line_comment_prefixes: tuple[str, ...] = ("//", "#")
    block_comment_pairs: tuple[tuple[str, str], ...] = (("/*", "*/"),)
    string_delimiters: tuple[str, ...] = ("'''", '"""', "'", '"', "`")
    multiline_string_delimiters: tuple[str, ...] = ("'''", '"""', "`")
    escape_char: str = "\\"


@dataclass(slots=True, frozen=True)
class LexicalGrammar:
    """Vocabulary and lexical rules for one language."""

    name: str
    scope_suffix: str
    rules: LexicalRules = field(default_factory=LexicalRules)
    identifier_pattern: re.Pattern[str] = _C_STYLE_IDENTIFIER
    keywords: frozenset[str] = frozenset()
    storage: frozenset[str] = frozenset()
    builtins: frozenset[str] = frozenset()
    constants: frozenset[str] = frozenset()
    operators: tuple[str, ...] = _C_FAMILY_OPERATORS
    accessors: tuple[str, ...] = (".",)
    string_prefixes: frozenset[str] = frozenset()


def classify_identifier(
    grammar: LexicalGrammar,
    value: str,
    *,
    previous: str | None,
    next_char: str | None,
) -> str:
    """Return the innermost scope for an identifier-shaped lexeme."""
    suffix = grammar.scope_suffix
    if previous is not None and previous in grammar.accessors:
        if next_char == "(":
            return f"entity.name.function.method.{suffix}"
        return f"variable.other.property.{suffix}"
    if value in grammar.keywords:
        return f"keyword.control.{suffix}"
    if value in grammar.storage:
        return f"storage.type.{suffix}"
    if value in grammar.constants:
        return f"constant.language.builtin.{suffix}"
    if value in grammar.builtins:
        return f"support.function.builtin.{suffix}"
    if next_char == "(":
        return f"entity.name.function.{suffix}"
    return f"variable.other.readwrite.{suffix}"


def operator_scope(grammar: LexicalGrammar, value: str) -> str:
    """Return the innermost scope for an operator or punctuation lexeme."""
    if value in grammar.accessors:
        return f"punctuation.accessor.{grammar.scope_suffix}"
    if value in grammar.operators:
        return f"keyword.operator.{grammar.scope_suffix}"
    return f"punctuation.{grammar.scope_suffix}"


_JS_KEYWORDS = frozenset(
    {
        "as",
        "async",
        "await",
        "break",
        "case",
        "catch",
        "continue",
        "debugger",
        "default",
        "delete",
        "do",
        "else",
        "export",
        "extends",
        "finally",
        "for",
        "from",
        "if",
        "import",
        "in",
        "instanceof",
        "new",
        "of",
        "return",
        "super",
        "switch",
        "this",
        "throw",
        "try",
        "typeof",
        "void",
        "while",
        "with",
        "yield",
    }
)
_JS_STORAGE = frozenset({"class", "const", "enum", "function", "let", "static", "var"})
_JS_BUILTINS = frozenset(
    {
        "Array",
        "Boolean",
        "Date",
        "Error",
        "JSON",
        "Map",
        "Math",
        "Number",
        "Object",
        "Promise",
        "RegExp",
        "Set",
        "String",
        "Symbol",
        "console",
        "document",
        "isNaN",
        "parseFloat",
        "parseInt",
        "require",
        "window",
    }
)
_JS_CONSTANTS = frozenset({"Infinity", "NaN", "false", "null", "true", "undefined"})
_JS_OPERATORS = (
    ">>>=",
    "===",
    "!==",
    "**=",
    "...",
    ">>>",
    "<<=",
    ">>=",
    "&&=",
    "||=",
    "??=",
    "=>",
    "?.",
    "??",
    "**",
) + _C_FAMILY_OPERATORS

JAVASCRIPT_GRAMMAR = LexicalGrammar(
    name="javascript",
    scope_suffix="js",
    rules=LexicalRules(
        line_comment_prefixes=("//",),
        string_delimiters=("'", '"', "`"),
        multiline_string_delimiters=("`",),
    ),
    identifier_pattern=_JS_IDENTIFIER,
    keywords=_JS_KEYWORDS,
    storage=_JS_STORAGE,
    builtins=_JS_BUILTINS,
    constants=_JS_CONSTANTS,
    operators=_JS_OPERATORS,
    accessors=(".", "?."),
)

TYPESCRIPT_GRAMMAR = LexicalGrammar(
    name="typescript",
    scope_suffix="ts",
    rules=JAVASCRIPT_GRAMMAR.rules,
    identifier_pattern=_JS_IDENTIFIER,
    keywords=_JS_KEYWORDS
    | frozenset({"implements", "is", "keyof", "namespace", "satisfies", "type"}),
    storage=_JS_STORAGE
    | frozenset(
        {
            "abstract",
            "declare",
            "interface",
            "private",
            "protected",
            "public",
            "readonly",
        }
    ),
    builtins=_JS_BUILTINS
    | frozenset({"any", "boolean", "never", "number", "object", "string", "unknown"}),
    constants=_JS_CONSTANTS,
    operators=_JS_OPERATORS,
    accessors=(".", "?."),
)

_PYTHON_STORAGE = frozenset({"class", "def", "global", "lambda", "nonlocal"})
_PYTHON_CONSTANTS = frozenset({"False", "None", "True", "Ellipsis", "NotImplemented"})

PYTHON_GRAMMAR = LexicalGrammar(
    name="python",
    scope_suffix="python",
    rules=LexicalRules(
        line_comment_prefixes=("#",),
        block_comment_pairs=(),
        string_delimiters=("'''", '"""', "'", '"'),
        multiline_string_delimiters=("'''", '"""'),
    ),
    keywords=frozenset(keyword.kwlist) - _PYTHON_STORAGE - _PYTHON_CONSTANTS,
    storage=_PYTHON_STORAGE,
    builtins=frozenset(name for name in dir(builtins) if not name.startswith("_"))
    - _PYTHON_CONSTANTS,
    constants=_PYTHON_CONSTANTS,
    operators=(
        "**=",
        "//=",
        ">>=",
        "<<=",
        "->",
        ":=",
        "**",
        "//",
        "==",
        "!=",
        "<=",
        ">=",
        "<<",
        ">>",
        "+=",
        "-=",
        "*=",
        "/=",
        "%=",
        "&=",
        "|=",
        "^=",
        "@=",
        "+",
        "-",
        "*",
        "/",
        "%",
        "@",
        "&",
        "|",
        "^",
        "~",
        "<",
        ">",
        "=",
    ),
    string_prefixes=frozenset(
        {"b", "br", "f", "fr", "r", "rb", "rf", "u"}
    ),
)

GO_GRAMMAR = LexicalGrammar(
    name="go",
    scope_suffix="go",
    rules=LexicalRules(
        line_comment_prefixes=("//",),
        string_delimiters=('"', "'", "`"),
        multiline_string_delimiters=("`",),
    ),
    keywords=frozenset(
        {
            "break",
            "case",
            "chan",
            "continue",
            "default",
            "defer",
            "else",
            "fallthrough",
            "for",
            "go",
            "goto",
            "if",
            "import",
            "interface",
            "map",
            "package",
            "range",
            "return",
            "select",
            "struct",
            "switch",
            "type",
        }
    ),
    storage=frozenset({"const", "func", "var"}),
    builtins=frozenset(
        {
            "any",
            "append",
            "bool",
            "byte",
            "cap",
            "clear",
            "close",
            "complex",
            "copy",
            "delete",
            "error",
            "float32",
            "float64",
            "imag",
            "int",
            "int16",
            "int32",
            "int64",
            "int8",
            "len",
            "make",
            "max",
            "min",
            "new",
            "panic",
            "print",
            "println",
            "real",
            "recover",
            "rune",
            "string",
            "uint",
            "uint16",
            "uint32",
            "uint64",
            "uint8",
            "uintptr",
        }
    ),
    constants=frozenset({"false", "iota", "nil", "true"}),
    operators=("&^=", ":=", "<-", "&^") + _C_FAMILY_OPERATORS,
)

_JVM_MODIFIERS = frozenset(
    {
        "abstract",
        "final",
        "native",
        "private",
        "protected",
        "public",
        "static",
        "synchronized",
        "transient",
        "volatile",
    }
)

JAVA_GRAMMAR = LexicalGrammar(
    name="java",
    scope_suffix="java",
    rules=LexicalRules(
        line_comment_prefixes=("//",),
        string_delimiters=('"""', '"', "'"),
        multiline_string_delimiters=('"""',),
    ),
    keywords=frozenset(
        {
            "assert",
            "break",
            "case",
            "catch",
            "continue",
            "default",
            "do",
            "else",
            "extends",
            "finally",
            "for",
            "if",
            "implements",
            "import",
            "instanceof",
            "new",
            "package",
            "return",
            "super",
            "switch",
            "this",
            "throw",
            "throws",
            "try",
            "while",
            "yield",
        }
    ),
    storage=_JVM_MODIFIERS
    | frozenset(
        {
            "boolean",
            "byte",
            "char",
            "class",
            "double",
            "enum",
            "float",
            "int",
            "interface",
            "long",
            "record",
            "short",
            "var",
            "void",
        }
    ),
    builtins=frozenset(
        {
            "Boolean",
            "Character",
            "Double",
            "Exception",
            "Integer",
            "Long",
            "Math",
            "Object",
            "RuntimeException",
            "String",
            "System",
        }
    ),
    constants=frozenset({"false", "null", "true"}),
)

RUST_GRAMMAR = LexicalGrammar(
    name="rust",
    scope_suffix="rust",
    rules=LexicalRules(
        line_comment_prefixes=("//",),
        string_delimiters=('"',),
        multiline_string_delimiters=('"',),
    ),
    keywords=frozenset(
        {
            "as",
            "async",
            "await",
            "break",
            "continue",
            "crate",
            "dyn",
            "else",
            "extern",
            "for",
            "if",
            "impl",
            "in",
            "loop",
            "match",
            "mod",
            "move",
            "ref",
            "return",
            "self",
            "Self",
            "super",
            "trait",
            "unsafe",
            "use",
            "where",
            "while",
        }
    ),
    storage=frozenset({"const", "enum", "fn", "let", "mut", "pub", "static", "struct", "type"}),
    builtins=frozenset(
        {
            "Box",
            "Err",
            "None",
            "Ok",
            "Option",
            "Result",
            "Some",
            "String",
            "Vec",
            "assert",
            "assert_eq",
            "bool",
            "char",
            "f32",
            "f64",
            "format",
            "i128",
            "i16",
            "i32",
            "i64",
            "i8",
            "isize",
            "panic",
            "print",
            "println",
            "str",
            "u128",
            "u16",
            "u32",
            "u64",
            "u8",
            "usize",
            "vec",
        }
    ),
    constants=frozenset({"false", "true"}),
    operators=("..=", "=>", "..") + _C_FAMILY_OPERATORS,
    accessors=(".", "::"),
)

_C_KEYWORDS = frozenset(
    {
        "break",
        "case",
        "continue",
        "default",
        "define",
        "do",
        "else",
        "endif",
        "for",
        "goto",
        "if",
        "ifdef",
        "ifndef",
        "include",
        "pragma",
        "return",
        "sizeof",
        "switch",
        "while",
    }
)
_C_STORAGE = frozenset(
    {
        "auto",
        "char",
        "const",
        "double",
        "enum",
        "extern",
        "float",
        "inline",
        "int",
        "long",
        "register",
        "short",
        "signed",
        "static",
        "struct",
        "typedef",
        "union",
        "unsigned",
        "void",
        "volatile",
    }
)
_C_BUILTINS = frozenset(
    {
        "calloc",
        "fprintf",
        "free",
        "malloc",
        "memcpy",
        "memset",
        "printf",
        "realloc",
        "strcmp",
        "strcpy",
        "strlen",
    }
)
_C_RULES = LexicalRules(
    line_comment_prefixes=("//",),
    string_delimiters=('"', "'"),
    multiline_string_delimiters=(),
)

C_GRAMMAR = LexicalGrammar(
    name="c",
    scope_suffix="c",
    rules=_C_RULES,
    keywords=_C_KEYWORDS,
    storage=_C_STORAGE,
    builtins=_C_BUILTINS,
    constants=frozenset({"NULL", "false", "true"}),
)

CPP_GRAMMAR = LexicalGrammar(
    name="cpp",
    scope_suffix="cpp",
    rules=_C_RULES,
    keywords=_C_KEYWORDS
    | frozenset(
        {
            "catch",
            "delete",
            "namespace",
            "new",
            "operator",
            "template",
            "this",
            "throw",
            "try",
            "typename",
            "using",
        }
    ),
    storage=_C_STORAGE
    | frozenset(
        {
            "bool",
            "class",
            "constexpr",
            "explicit",
            "friend",
            "mutable",
            "override",
            "private",
            "protected",
            "public",
            "virtual",
        }
    ),
    builtins=_C_BUILTINS | frozenset({"cerr", "cout", "endl", "std", "string", "vector"}),
    constants=frozenset({"NULL", "false", "nullptr", "true"}),
    accessors=(".", "->", "::"),
)

CSHARP_GRAMMAR = LexicalGrammar(
    name="csharp",
    scope_suffix="cs",
    rules=LexicalRules(
        line_comment_prefixes=("//",),
        string_delimiters=('"', "'"),
        multiline_string_delimiters=(),
    ),
    keywords=frozenset(
        {
            "as",
            "await",
            "base",
            "break",
            "case",
            "catch",
            "continue",
            "default",
            "do",
            "else",
            "finally",
            "for",
            "foreach",
            "if",
            "in",
            "is",
            "namespace",
            "new",
            "return",
            "switch",
            "this",
            "throw",
            "try",
            "using",
            "while",
            "yield",
        }
    ),
    storage=_JVM_MODIFIERS
    | frozenset(
        {
            "async",
            "bool",
            "byte",
            "char",
            "class",
            "const",
            "decimal",
            "double",
            "enum",
            "float",
            "int",
            "interface",
            "internal",
            "long",
            "object",
            "override",
            "readonly",
            "record",
            "sealed",
            "short",
            "string",
            "struct",
            "var",
            "virtual",
            "void",
        }
    ),
    builtins=frozenset({"Console", "Convert", "Math", "String", "nameof", "typeof"}),
    constants=frozenset({"false", "null", "true"}),
    operators=("??=", "=>", "??", "?.") + _C_FAMILY_OPERATORS,
    accessors=(".", "?."),
)

GENERIC_GRAMMAR = LexicalGrammar(name="generic", scope_suffix="generic")

LANGUAGE_GRAMMARS: tuple[LexicalGrammar, ...] = (
    JAVASCRIPT_GRAMMAR,
    TYPESCRIPT_GRAMMAR,
    PYTHON_GRAMMAR,
    GO_GRAMMAR,
    JAVA_GRAMMAR,
    RUST_GRAMMAR,
    C_GRAMMAR,
    CPP_GRAMMAR,
    CSHARP_GRAMMAR,
)
