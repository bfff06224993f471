from enum import Enum
from typing import Optional, Tuple, Union
from tree_sitter import Node

from tscodemap.extractors.declarations import DeclarationExtractor
from tscodemap.logger import log_errors
from tscodemap.models import ClassInfo, ModuleInfo
from tscodemap.parsing import ParsedFile, node_text
from tscodemap.result import Result

Container = Union[ClassInfo, ModuleInfo]


class NodeCategory(Enum):
    FUNCTION = "function"
    PROPERTY = "property"
    ACCESSOR = "accessor"
    INTERFACE = "interface"
    ENUM = "enum"
    CLASS = "class"
    OTHER = "other"


FUNCTION_NODE_TYPES = {
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
CLASS_NODE_TYPES = {"class_declaration", "abstract_class_declaration", "class"}
ACCESSOR_KEYWORDS = ("get", "set")


def unwrap_declaration(node: Node) -> Node:
    """The declaration inside an ``export`` or ``declare`` statement."""
    if node.type == "export_statement":
        inner = node.child_by_field_name("declaration") or node.child_by_field_name("value")
        return inner if inner is not None else node
    if node.type == "ambient_declaration":
        for child in node.named_children:
            if child.type != "comment":
                return child
    return node


def accessor_kind(node: Node) -> Optional[str]:
    for child in node.children:
        if not child.is_named and child.type in ACCESSOR_KEYWORDS:
            return child.type
    return None


def _is_constructor(node: Node) -> bool:
    name = node.child_by_field_name("name")
    return name is not None and node_text(name) == "constructor"


def classify_node(node: Node) -> Tuple[NodeCategory, Node]:
    """Exactly one category per node, with export/declare wrappers removed."""
    node = unwrap_declaration(node)
    kind = node.type
    if kind in ("method_definition", "method_signature"):
        if accessor_kind(node):
            return NodeCategory.ACCESSOR, node
        if _is_constructor(node):
            return NodeCategory.OTHER, node
        return NodeCategory.FUNCTION, node
    if kind in FUNCTION_NODE_TYPES:
        return NodeCategory.FUNCTION, node
    if kind == "public_field_definition":
        return NodeCategory.PROPERTY, node
    if kind == "interface_declaration":
        return NodeCategory.INTERFACE, node
    if kind == "enum_declaration":
        return NodeCategory.ENUM, node
    if kind in CLASS_NODE_TYPES:
        return NodeCategory.CLASS, node
    return NodeCategory.OTHER, node


_HANDLERS = {
    NodeCategory.FUNCTION: "_add_function",
    NodeCategory.PROPERTY: "_add_property",
    NodeCategory.ACCESSOR: "_add_accessor",
    NodeCategory.INTERFACE: "_add_interface",
    NodeCategory.ENUM: "_add_enum",
    NodeCategory.CLASS: "_add_class",
    NodeCategory.OTHER: "_ignore",
}
if set(_HANDLERS) != set(NodeCategory):
    raise RuntimeError(f"Unhandled node categories: {set(NodeCategory) - set(_HANDLERS)}")


class MemberAggregator:
    def __init__(self, extractor: DeclarationExtractor):
        self.extractor = extractor

    def process_member(self, container: Container, node: Node, parsed_file: ParsedFile) -> NodeCategory:
        category, declaration = classify_node(node)
        getattr(self, _HANDLERS[category])(container, declaration, parsed_file)
        return category

    def aggregate_module(self, module_info: ModuleInfo, parsed_file: ParsedFile) -> ModuleInfo:
        for node in parsed_file.root_node.named_children:
            self.process_member(module_info, node, parsed_file)
        return module_info

    @log_errors("extract_class_metadata")
    def extract_class_metadata(self, node: Node, parsed_file: ParsedFile) -> Result[ClassInfo]:
        """Aggregates the direct members of a class body, without recursing."""
        name_node = node.child_by_field_name("name")
        class_info = ClassInfo(name=parsed_file.get_text(name_node) if name_node is not None else None)
        body = node.child_by_field_name("body")
        if body is not None:
            for member in body.named_children:
                self.process_member(class_info, member, parsed_file)
        return Result.ok(class_info)

    def _add_function(self, container: Container, node: Node, parsed_file: ParsedFile) -> None:
        details = self.extractor.get_function_details(node, parsed_file)
        if details is not None:
            container.functions.append(details.get_value())

    def _add_property(self, container: Container, node: Node, parsed_file: ParsedFile) -> None:
        container.properties.append(self.extractor.extract_property(node, parsed_file).get_value())

    def _add_accessor(self, container: Container, node: Node, parsed_file: ParsedFile) -> None:
        kind = accessor_kind(node)
        container.functions.append(self.extractor.get_accessor_details(node, parsed_file, kind).get_value())

    def _add_interface(self, container: Container, node: Node, parsed_file: ParsedFile) -> None:
        container.interfaces.append(self.extractor.extract_interface_info(node, parsed_file).get_value())

    def _add_enum(self, container: Container, node: Node, parsed_file: ParsedFile) -> None:
        container.enums.append(self.extractor.extract_enum_info(node, parsed_file).get_value())

    def _add_class(self, container: Container, node: Node, parsed_file: ParsedFile) -> None:
        # class bodies cannot declare classes, only modules own them
        if isinstance(container, ModuleInfo):
            container.classes.append(self.extract_class_metadata(node, parsed_file).get_value())

    def _ignore(self, container: Container, node: Node, parsed_file: ParsedFile) -> None:
        pass
