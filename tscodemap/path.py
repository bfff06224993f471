import pickle
import networkx as nx

from tscodemap.utils.networkx_graph import import_subgraph


def load_graph(graph_path):
    if graph_path.endswith(".gpickle"):
        with open(graph_path, "rb") as f:
            return pickle.load(f)
    elif graph_path.endswith(".graphml"):
        return nx.read_graphml(graph_path)
    else:
        raise RuntimeError(f"Unsupported graph format: {graph_path}")


def format_path(node_list):
    return " -> ".join(node_list)


def module_imports(G, module):
    return sorted(
        target for target in G.successors(module)
        if G.get_edge_data(module, target).get("relation") == "imports"
    )


def module_importers(G, module):
    return sorted(
        source for source in G.predecessors(module)
        if G.get_edge_data(source, module).get("relation") == "imports"
    )


def find_import_path(G, source, target):
    """Shortest chain of imports from ``source`` to ``target``, or None."""
    try:
        return nx.shortest_path(import_subgraph(G), source=source, target=target)
    except (nx.NetworkXNoPath, nx.NodeNotFound):
        return None


def describe_module(graph_path, module, source=None, return_obj=False):
    G = load_graph(graph_path)

    if module not in G:
        print(f"Error: module '{module}' not in graph.")
        return None

    if source:
        if source not in G:
            print(f"Error: source '{source}' not in graph.")
            return None
        path = find_import_path(G, source, module)
        if return_obj:
            return path
        if path:
            print("  " + format_path(path))
        else:
            print(f"No import path from '{source}' to '{module}'.")
        return path

    imports = module_imports(G, module)
    importers = module_importers(G, module)
    if return_obj:
        return {"imports": imports, "imported_by": importers}

    if imports:
        print(f"\n'{module}' imports ({len(imports)}):")
        for target in imports:
            print(f"  {module} --[imports]--> {target}")
    else:
        print(f"\n'{module}' imports no project modules.")

    if importers:
        print(f"\nModules importing '{module}' ({len(importers)}):")
        for src in importers:
            print(f"  {src} --[imports]--> {module}")
    else:
        print(f"\nNo project module imports '{module}'.")
    return {"imports": imports, "imported_by": importers}
