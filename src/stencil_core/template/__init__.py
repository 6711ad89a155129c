"""Template engine: $-delimited templates applied to content items."""

from .compiler import compile_item, compile_template, read_template
from .context import (
    Context,
    body_field,
    bool_field,
    chain,
    const_field,
    default_context,
    field,
    function_field,
    lexical_list_field,
    lexical_list_field_with,
    list_field,
    list_field_with,
    map_context,
    mapping_context,
    metadata_field,
    missing_field,
    path_field,
    title_field,
)
from .elements import (
    Call,
    Chunk,
    Escaped,
    Expr,
    For,
    Ident,
    If,
    Partial,
    StringLiteral,
    Template,
    TemplateElement,
    TemplateExpr,
    TrimL,
    TrimR,
    make_template,
)
from .engine import TemplateEngine
from .evaluator import TemplateEvaluator
from .fields import ContextField, EmptyField, LexicalListField, ListField, StringField
from .item import Item
from .outcome import NOT_FOUND, Failed, Found, NotFound, Outcome
from .parser import parse_template_elements
from .store import DirectoryTemplateStore, InMemoryTemplateStore, TemplateStore

__all__ = [
    # Engine
    "TemplateEngine",
    "TemplateEvaluator",
    # Model
    "Template",
    "TemplateElement",
    "TemplateExpr",
    "Chunk",
    "Escaped",
    "Expr",
    "If",
    "For",
    "Partial",
    "TrimL",
    "TrimR",
    "Ident",
    "Call",
    "StringLiteral",
    "make_template",
    "Item",
    # Compilation
    "parse_template_elements",
    "compile_template",
    "compile_item",
    "read_template",
    # Outcomes and fields
    "Outcome",
    "Found",
    "NotFound",
    "Failed",
    "NOT_FOUND",
    "ContextField",
    "EmptyField",
    "StringField",
    "ListField",
    "LexicalListField",
    # Contexts
    "Context",
    "chain",
    "field",
    "const_field",
    "bool_field",
    "function_field",
    "list_field",
    "list_field_with",
    "lexical_list_field",
    "lexical_list_field_with",
    "map_context",
    "mapping_context",
    "metadata_field",
    "body_field",
    "path_field",
    "title_field",
    "missing_field",
    "default_context",
    # Stores
    "TemplateStore",
    "InMemoryTemplateStore",
    "DirectoryTemplateStore",
]
