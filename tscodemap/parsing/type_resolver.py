import re
from typing import List, Optional
from tree_sitter import Node

from tscodemap.parsing.source_file import node_text

ANNOTATION_TYPES = {
    "type_annotation",
    "opting_type_annotation",
    "omitting_type_annotation",
    "asserts_annotation",
    "type_predicate_annotation",
}

RETURN_TYPED_NODES = {
    "function_declaration",
    "generator_function_declaration",
    "function_signature",
    "method_definition",
    "method_signature",
    "abstract_method_signature",
    "arrow_function",
    "function_expression",
    "function",
    "generator_function",
}

BOOLEAN_OPERATORS = {"==", "===", "!=", "!==", "<", ">", "<=", ">=", "instanceof", "in"}
NUMERIC_OPERATORS = {"-", "*", "/", "%", "**", "<<", ">>", ">>>", "&", "|", "^"}


def _collapse(text: str) -> str:
    text = re.sub(r"\s+", " ", text).strip()
    # multi-line unions are often written with a leading bar
    if text.startswith("|") or text.startswith("&"):
        text = text[1:].strip()
    return text


def _named(node: Node) -> List[Node]:
    return [c for c in node.named_children if c.type != "comment"]


class TypeResolver:
    """Maps declarations and type annotations to display strings.

    Declared annotations are rendered as written, whitespace-normalised.
    Without an annotation the type is inferred from the initializer for the
    literal shapes whose type is unambiguous; anything else is unresolved.
    """

    def __init__(self, strict_null_checks: bool = False):
        self.strict_null_checks = strict_null_checks

    def declared_annotation(self, node: Node) -> Optional[Node]:
        if node.type in RETURN_TYPED_NODES:
            return node.child_by_field_name("return_type")
        return node.child_by_field_name("type")

    def annotation_text(self, annotation: Node) -> str:
        text = node_text(annotation)
        if annotation.type in ANNOTATION_TYPES:
            text = text.lstrip()[1:] if text.lstrip().startswith(":") else text
        return _collapse(text)

    def resolve_type(self, node: Node) -> Optional[str]:
        if node.type in ANNOTATION_TYPES:
            return self.annotation_text(node)
        annotation = self.declared_annotation(node)
        if annotation is not None:
            return self.annotation_text(annotation)
        value = node.child_by_field_name("value")
        if value is None:
            return None
        return self.infer_expression_type(value)

    def infer_expression_type(self, value: Node) -> Optional[str]:
        kind = value.type
        if kind in ("string", "template_string"):
            return "string"
        if kind == "number":
            return "number"
        if kind in ("true", "false"):
            return "boolean"
        if kind == "regex":
            return "RegExp"
        if kind in ("null", "undefined"):
            return kind if self.strict_null_checks else "any"
        if kind == "parenthesized_expression":
            inner = _named(value)
            return self.infer_expression_type(inner[0]) if inner else None
        if kind == "as_expression":
            parts = _named(value)
            if not parts:
                return None
            # `x as const` has no named type node
            if len(parts) == 1:
                return self.infer_expression_type(parts[0])
            return _collapse(node_text(parts[-1]))
        if kind in ("satisfies_expression", "non_null_expression"):
            parts = _named(value)
            return self.infer_expression_type(parts[0]) if parts else None
        if kind == "unary_expression":
            return self._infer_unary(value)
        if kind == "binary_expression":
            return self._infer_binary(value)
        if kind == "new_expression":
            ctor = value.child_by_field_name("constructor")
            if ctor is None:
                return None
            type_args = value.child_by_field_name("type_arguments")
            return _collapse(node_text(ctor) + (node_text(type_args) if type_args else ""))
        if kind == "array":
            return self._infer_array(value)
        if kind == "object":
            return self._infer_object(value)
        if kind in ("arrow_function", "function_expression", "function"):
            return self._infer_function(value)
        return None

    def _infer_unary(self, value: Node) -> Optional[str]:
        operator = value.child_by_field_name("operator")
        op = node_text(operator) if operator is not None else ""
        if op == "!":
            return "boolean"
        if op in ("-", "+", "~"):
            return "number"
        if op == "typeof":
            return "string"
        return None

    def _infer_binary(self, value: Node) -> Optional[str]:
        operator = value.child_by_field_name("operator")
        op = node_text(operator) if operator is not None else ""
        if op in BOOLEAN_OPERATORS:
            return "boolean"
        if op in NUMERIC_OPERATORS:
            return "number"
        if op == "+":
            left = value.child_by_field_name("left")
            right = value.child_by_field_name("right")
            sides = [self.infer_expression_type(s) if s is not None else None for s in (left, right)]
            if "string" in sides:
                return "string"
            if sides == ["number", "number"]:
                return "number"
        return None

    def _infer_array(self, value: Node) -> Optional[str]:
        elements = _named(value)
        if not elements:
            return "never[]" if self.strict_null_checks else "any[]"
        element_types = []
        for element in elements:
            element_type = self.infer_expression_type(element)
            if element_type is None:
                return None
            if element_type not in element_types:
                element_types.append(element_type)
        if len(element_types) == 1:
            return f"{element_types[0]}[]"
        return f"({' | '.join(element_types)})[]"

    def _infer_object(self, value: Node) -> str:
        members = []
        for child in _named(value):
            if child.type == "pair":
                key = child.child_by_field_name("key")
                member_value = child.child_by_field_name("value")
                member_type = self.infer_expression_type(member_value) if member_value is not None else None
                members.append(f"{node_text(key)}: {member_type or 'any'};")
            elif child.type == "shorthand_property_identifier":
                members.append(f"{node_text(child)}: any;")
        if not members:
            return "{}"
        return "{ " + " ".join(members) + " }"

    def _infer_function(self, value: Node) -> str:
        params = []
        parameters = value.child_by_field_name("parameters")
        if parameters is not None:
            for param in _named(parameters):
                pattern = param.child_by_field_name("pattern")
                name = node_text(pattern) if pattern is not None else node_text(param)
                if param.type == "optional_parameter":
                    name += "?"
                annotation = param.child_by_field_name("type")
                params.append(f"{name}: {self.annotation_text(annotation) if annotation else 'any'}")
        else:
            single = value.child_by_field_name("parameter")
            if single is not None:
                params.append(f"{node_text(single)}: any")
        return_type = value.child_by_field_name("return_type")
        returns = self.annotation_text(return_type) if return_type is not None else "any"
        return f"({', '.join(params)}) => {returns}"
