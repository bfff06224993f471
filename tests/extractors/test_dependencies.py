from tscodemap.extractors import build_dependency_graph


def test_imports_in_order_with_semicolons(sample_program, parse):
    code = (
        "import './polyfills'\n"
        "import React, { useState } from 'react';\n"
        "import type { Props } from './props';\n"
        "\n"
        "export function noop() {}\n"
        "import { late } from './late';\n"
    )
    assert build_dependency_graph(parse(code), sample_program) == [
        "import './polyfills';",
        "import React, { useState } from 'react';",
        "import type { Props } from './props';",
        "import { late } from './late';",
    ]


def test_comments_inside_imports_are_kept(sample_program, parse):
    code = "import {\n  a, // first\n  b,\n} from './x';\n"
    assert build_dependency_graph(parse(code), sample_program) == [code.strip()]


def test_only_top_level_imports(sample_program, parse):
    code = (
        "export { a } from './a';\n"
        "import { b } from './b';\n"
        "import { b } from './b';\n"
        "async function load() {\n"
        "  return import('./lazy');\n"
        "}\n"
    )
    # duplicates are kept, re-exports and dynamic imports are not
    assert build_dependency_graph(parse(code), sample_program) == [
        "import { b } from './b';",
        "import { b } from './b';",
    ]


def test_no_imports(sample_program, parse):
    assert build_dependency_graph(parse("const a = 1;\n"), sample_program) == []


def test_semicolon_goes_before_trailing_comment(sample_program, parse):
    code = (
        "import a from 'a' // default export\n"
        "import { b } from 'b' /* named */\n"
        "import c from 'c'; // already terminated\n"
        "const x = 1;\n"
    )
    assert build_dependency_graph(parse(code), sample_program) == [
        "import a from 'a'; // default export",
        "import { b } from 'b'; /* named */",
        "import c from 'c';",
    ]
