from tscodemap.extractors.declarations import DeclarationExtractor
from tscodemap.extractors.dependencies import build_dependency_graph
from tscodemap.extractors.member_aggregator import MemberAggregator, NodeCategory, classify_node

__all__ = [
    "DeclarationExtractor",
    "MemberAggregator",
    "NodeCategory",
    "build_dependency_graph",
    "classify_node",
]
