import pytest

from tscodemap.extractors import DeclarationExtractor, MemberAggregator, NodeCategory, classify_node
from tscodemap.extractors.member_aggregator import _HANDLERS
from tscodemap.models import ModuleInfo


@pytest.fixture(scope="module")
def aggregator(sample_program):
    return MemberAggregator(DeclarationExtractor(sample_program))


def _aggregate(aggregator, pf):
    return aggregator.aggregate_module(ModuleInfo(path=pf.path), pf)


def test_every_category_has_a_handler():
    assert set(_HANDLERS) == set(NodeCategory)


@pytest.mark.parametrize(
    "code, category, node_type",
    [
        ("export function f() {}", NodeCategory.FUNCTION, "function_declaration"),
        ("export class A {}", NodeCategory.CLASS, "class_declaration"),
        ("interface I { a: string }", NodeCategory.INTERFACE, "interface_declaration"),
        ("enum E { A }", NodeCategory.ENUM, "enum_declaration"),
        ("const x = 1;", NodeCategory.OTHER, "lexical_declaration"),
        ("import { a } from './a';", NodeCategory.OTHER, "import_statement"),
        ("type Id = string;", NodeCategory.OTHER, "type_alias_declaration"),
    ],
)
def test_classify_top_level(parse, code, category, node_type):
    pf = parse(code + "\n")
    got_category, node = classify_node(pf.root_node.named_children[0])
    assert got_category is category
    assert node.type == node_type


def test_classify_class_members(parse):
    code = (
        "class A {\n"
        "  x = 1;\n"
        "  constructor() {}\n"
        "  get y(): number { return 1; }\n"
        "  set y(v: number) {}\n"
        "  run(): void {}\n"
        "}\n"
    )
    pf = parse(code)
    body = pf.root_node.named_children[0].child_by_field_name("body")
    categories = [classify_node(member)[0] for member in body.named_children]
    assert categories == [
        NodeCategory.PROPERTY,
        NodeCategory.OTHER,
        NodeCategory.ACCESSOR,
        NodeCategory.ACCESSOR,
        NodeCategory.FUNCTION,
    ]


def test_class_members_stay_on_class(aggregator, parse):
    code = (
        "export class Counter {\n"
        "  private total = 0;\n"
        "  label: string;\n"
        "  increment(by: number): number {\n"
        "    return (this.total += by);\n"
        "  }\n"
        "  reset(): void {}\n"
        "}\n"
        "export function makeCounter(): Counter {\n"
        "  return new Counter();\n"
        "}\n"
    )
    module = _aggregate(aggregator, parse(code))
    (counter,) = module.classes
    assert counter.name == "Counter"
    assert [f.name for f in counter.functions] == ["increment", "reset"]
    assert [p.name for p in counter.properties] == ["total", "label"]
    assert [f.name for f in module.functions] == ["makeCounter"]
    assert module.functions[0].return_type == "Counter"


def test_nested_declarations_are_not_collected(aggregator, parse):
    code = (
        "function outer() {\n"
        "  class Inner {}\n"
        "  function helper() {}\n"
        "}\n"
    )
    module = _aggregate(aggregator, parse(code))
    assert module.classes == []
    assert [f.name for f in module.functions] == ["outer"]


def test_abstract_and_ambient_declarations(aggregator, parse):
    code = (
        "export abstract class Shape {\n"
        "  abstract area(): number;\n"
        "}\n"
        "declare function ext(a: string): void;\n"
    )
    module = _aggregate(aggregator, parse(code))
    (shape,) = module.classes
    assert shape.name == "Shape"
    assert [(f.name, f.return_type) for f in shape.functions] == [("area", "number")]
    assert [(f.name, f.return_type) for f in module.functions] == [("ext", "void")]


def test_tsx_module(aggregator, parse):
    code = (
        "export function Button(props: { label: string }): JSX.Element {\n"
        "  return <button>{props.label}</button>;\n"
        "}\n"
    )
    module = _aggregate(aggregator, parse(code, "Button.tsx"))
    (button,) = module.functions
    assert button.name == "Button"
    assert button.parameters[0].type == "{ label: string }"
    assert button.return_type == "JSX.Element"
