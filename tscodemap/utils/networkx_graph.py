import os
import json
import pickle
import networkx as nx
from typing import Tuple

GRAPHML_NAME = "module_graph.graphml"
GPICKLE_NAME = "module_graph.gpickle"


def _graph_attrs(item, skip):
    # GraphML only stores scalars
    attrs = {}
    for k, v in item.items():
        if k in skip:
            continue
        if v is None:
            attrs[k] = ""
        elif isinstance(v, (str, int, float, bool)):
            attrs[k] = v
        else:
            attrs[k] = json.dumps(v)
    return attrs


def build_graph_from_schema(schema) -> nx.DiGraph:
    G = nx.DiGraph()
    for node in schema["nodes"]:
        G.add_node(node["id"], **_graph_attrs(node, {"id"}))
    for edge in schema["edges"]:
        G.add_edge(edge["from"], edge["to"], **_graph_attrs(edge, {"from", "to"}))
    return G


def import_subgraph(G: nx.DiGraph) -> nx.DiGraph:
    """Module nodes joined by ``imports`` edges only."""
    modules = [n for n, data in G.nodes(data=True) if data.get("category") == "module"]
    H = nx.DiGraph()
    H.add_nodes_from((n, G.nodes[n]) for n in modules)
    H.add_edges_from(
        (u, v, data) for u, v, data in G.edges(data=True) if data.get("relation") == "imports"
    )
    return H


def write_graph(G: nx.DiGraph, graph_dir: str) -> Tuple[str, str]:
    os.makedirs(graph_dir, exist_ok=True)
    graph_ml = os.path.join(graph_dir, GRAPHML_NAME)
    graph_gp = os.path.join(graph_dir, GPICKLE_NAME)
    nx.write_graphml(G, graph_ml)
    with open(graph_gp, "wb") as f:
        pickle.dump(G, f)
    return graph_ml, graph_gp
