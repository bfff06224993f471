from typing import List, Optional
from tree_sitter import Node

from tscodemap.errors import MalformedNodeError
from tscodemap.logger import log_errors
from tscodemap.models import EnumInfo, EnumMember, FunctionInfo, InterfaceInfo, PropertyInfo
from tscodemap.parsing import ParsedFile, TypeScriptProgram
from tscodemap.parsing.printer import outer_declaration
from tscodemap.result import Result

PARAMETER_TYPES = ("required_parameter", "optional_parameter")


class DeclarationExtractor:
    """Turns single declaration nodes into records.

    Each method handles one node shape and resolves types through the
    program. Failures are logged with the node identity and re-raised as
    ``MalformedNodeError``.
    """

    def __init__(self, program: TypeScriptProgram):
        self.program = program

    def _name(self, node: Node, parsed_file: ParsedFile) -> str:
        name_node = node.child_by_field_name("name")
        if name_node is None:
            raise MalformedNodeError(
                f"{node.type} at line {node.start_point[0] + 1} of {parsed_file.path} has no name"
            )
        return parsed_file.get_text(name_node)

    @log_errors("extract_property")
    def extract_property(self, node: Node, parsed_file: ParsedFile) -> Result[PropertyInfo]:
        """Declared type if annotated, otherwise the type inferred from the initializer."""
        name = self._name(node, parsed_file)
        annotation = node.child_by_field_name("type")
        if annotation is not None:
            property_type = self.program.resolve_type(annotation)
        else:
            property_type = self.program.resolve_type(node)
        return Result.ok(PropertyInfo(name=name, type=property_type))

    @log_errors("extract_function_parameters")
    def extract_function_parameters(self, node: Node, parsed_file: ParsedFile) -> Result[List[PropertyInfo]]:
        return Result.ok(self._parameters(node, parsed_file))

    def _parameters(self, node: Node, parsed_file: ParsedFile) -> List[PropertyInfo]:
        # parameters are never inferred, only annotated types are resolved
        properties = []
        parameters = node.child_by_field_name("parameters")
        if parameters is None:
            single = node.child_by_field_name("parameter")
            if single is not None:
                properties.append(PropertyInfo(name=parsed_file.get_text(single)))
            return properties

        for param in parameters.named_children:
            if param.type not in PARAMETER_TYPES:
                continue
            pattern = param.child_by_field_name("pattern")
            if pattern is None:
                raise MalformedNodeError(f"parameter at line {param.start_point[0] + 1} has no name")
            if pattern.type == "rest_pattern" and pattern.named_children:
                pattern = pattern.named_children[0]
            annotation = param.child_by_field_name("type")
            param_type = self.program.resolve_type(annotation) if annotation is not None else None
            properties.append(PropertyInfo(name=parsed_file.get_text(pattern), type=param_type))
        return properties

    @log_errors("get_function_details")
    def get_function_details(self, node: Node, parsed_file: ParsedFile) -> Optional[Result[FunctionInfo]]:
        """Returns None for anonymous function-like nodes."""
        name_node = node.child_by_field_name("name")
        if name_node is None:
            return None
        name = parsed_file.get_text(name_node)
        content = self.program.print_node(outer_declaration(node), parsed_file)
        parameters = self._parameters(node, parsed_file)
        return Result.ok(self._function_details_mapper(name, content, parameters, node, parsed_file))

    @log_errors("get_accessor_details")
    def get_accessor_details(self, node: Node, parsed_file: ParsedFile, kind: str) -> Result[FunctionInfo]:
        if kind not in ("get", "set"):
            raise ValueError(f"Unknown accessor kind: {kind}")
        name = self._name(node, parsed_file)
        content = self.program.print_node(outer_declaration(node), parsed_file)
        if kind == "get":
            details = self._function_details_mapper(name, content, [], node, parsed_file)
        else:
            parameters = self._parameters(node, parsed_file)[:1]
            details = self._function_details_mapper(
                name, content, parameters, node, parsed_file, return_type="void"
            )
        return Result.ok(details)

    def _function_details_mapper(
        self,
        name: str,
        content: str,
        parameters: List[PropertyInfo],
        node: Node,
        parsed_file: ParsedFile,
        return_type: Optional[str] = None,
    ) -> FunctionInfo:
        if return_type is None:
            annotation = node.child_by_field_name("return_type")
            return_type = (self.program.resolve_type(annotation) if annotation is not None else None) or "any"
        return FunctionInfo(
            name=name,
            content=content,
            parameters=parameters,
            return_type=return_type,
            comments=self.get_comment(node, parsed_file),
        )

    @log_errors("extract_interface_info")
    def extract_interface_info(self, node: Node, parsed_file: ParsedFile) -> Result[InterfaceInfo]:
        name = self._name(node, parsed_file)
        properties = []
        body = node.child_by_field_name("body")
        if body is not None:
            # method signatures are not captured
            for member in body.named_children:
                if member.type != "property_signature":
                    continue
                annotation = member.child_by_field_name("type")
                prop_type = self.program.resolve_type(annotation) if annotation is not None else None
                properties.append(PropertyInfo(name=self._name(member, parsed_file), type=prop_type or "any"))
        return Result.ok(InterfaceInfo(
            name=name,
            properties=properties,
            summary=self.get_comment(node, parsed_file),
        ))

    @log_errors("extract_enum_info")
    def extract_enum_info(self, node: Node, parsed_file: ParsedFile) -> Result[EnumInfo]:
        name = self._name(node, parsed_file)
        members = []
        body = node.child_by_field_name("body")
        if body is not None:
            for member in body.named_children:
                if member.type == "comment":
                    continue
                if member.type == "enum_assignment":
                    member_name = member.child_by_field_name("name") or member.named_children[0]
                    value = member.child_by_field_name("value")
                    members.append(EnumMember(
                        name=parsed_file.get_text(member_name),
                        value=parsed_file.get_text(value) if value is not None else None,
                    ))
                else:
                    members.append(EnumMember(name=parsed_file.get_text(member)))
        return Result.ok(EnumInfo(
            name=name,
            members=members,
            summary=self.get_comment(node, parsed_file),
        ))

    def get_comment(self, node: Node, parsed_file: ParsedFile) -> str:
        return self.program.get_doc_comment(node, parsed_file)
