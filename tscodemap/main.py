import os
import sys
import argparse

from tscodemap.adapters.typescript_adapter import adapt_codebase_map
from tscodemap.logger import setup_logging
from tscodemap.mapper import TypeScriptCodeMapper
from tscodemap.path import describe_module
from tscodemap.utils.networkx_graph import GPICKLE_NAME, build_graph_from_schema, write_graph


def create_codebase_map(
    root_dir=None,
    tsconfig_path=None,
    output_path: str = "./output/codebase_map.json",
    graph_dir: str = "./output/graph",
    skip_graph: bool = False,
):
    mapper = TypeScriptCodeMapper(root_dir=root_dir, tsconfig_path=tsconfig_path)
    result = mapper.build_codebase_map_sync()
    codebase_map = result.get_value()

    mapper.write_to_file(output_path)
    module_count = sum(len(project.modules) for project in codebase_map.values())
    print(f"Mapped {module_count} modules. Wrote {output_path}")
    if skip_graph:
        return codebase_map

    config = mapper.program.config
    schema = adapt_codebase_map(
        codebase_map,
        root_dir=mapper.root_dir,
        paths_base=config.paths_base,
        alias_paths=config.paths,
    )
    G = build_graph_from_schema(schema)
    graph_ml, graph_gp = write_graph(G, graph_dir)
    print(f"Wrote {graph_ml} and {graph_gp}")
    return codebase_map


def main():
    parser = argparse.ArgumentParser(description="TypeScript codebase mapper")
    parser.add_argument("--log_level", default=None,
                        help="Log level (default: $TSCODEMAP_LOG_LEVEL or info)")
    subparsers = parser.add_subparsers(dest="function", help="Available functions")

    parser_build = subparsers.add_parser("build", help="Build the codebase map of a TypeScript project")
    parser_build.add_argument("root_dir", nargs="?", default=None,
                              help="Project root (default: nearest directory with a package.json)")
    parser_build.add_argument("--tsconfig", default=None,
                              help="Path to tsconfig.json (default: <root_dir>/tsconfig.json)")
    parser_build.add_argument("--output", default="./output/codebase_map.json",
                              help="Output JSON file (default: ./output/codebase_map.json)")
    parser_build.add_argument("--graph_dir", default="./output/graph",
                              help="Graph output directory (default: ./output/graph)")
    parser_build.add_argument("--no_graph", action="store_true",
                              help="Only write the codebase map JSON")

    parser_deps = subparsers.add_parser("deps", help="Show the imports of a module")
    parser_deps.add_argument("module", help="Module path relative to the project root")
    parser_deps.add_argument("--graph", default=os.path.join("./output/graph", GPICKLE_NAME),
                             help="Graph file (.gpickle or .graphml)")
    parser_deps.add_argument("--source", default=None,
                             help="Show the shortest import chain from this module instead")

    args = parser.parse_args()

    if not args.function:
        parser.print_help()
        return

    setup_logging(args.log_level)
    try:
        if args.function == "build":
            print(f"Building codebase map for: {args.root_dir or os.getcwd()}")
            print(f"Output: {args.output}")
            if not args.no_graph:
                print(f"Graph directory: {args.graph_dir}")

            create_codebase_map(
                root_dir=args.root_dir,
                tsconfig_path=args.tsconfig,
                output_path=args.output,
                graph_dir=args.graph_dir,
                skip_graph=args.no_graph,
            )
        elif args.function == "deps":
            describe_module(args.graph, args.module, source=args.source)

    except Exception as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
