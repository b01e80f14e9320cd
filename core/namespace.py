from dataclasses import dataclass, field
from typing import Dict, List, Optional

from sdf_types import IncludeMap

SEPARATOR = "::"


def split_name(qualified_name: str) -> List[str]:
    return qualified_name.split(SEPARATOR) if qualified_name else []


def prefix_name(prefix: Optional[str], name: str) -> str:
    return f"{prefix}{SEPARATOR}{name}" if prefix else name


@dataclass
class NamespaceNode:
    name: str
    source_path: Optional[str] = None
    children: Dict[str, "NamespaceNode"] = field(default_factory=dict)


def build_namespace_tree(includes: IncludeMap, root_path: Optional[str] = None) -> NamespaceNode:
    """Build a NamespaceNode tree from include provenance.

    - includes: mapping included document path -> qualified names where it was spliced
    - root_path: path of the top-level document, stored on the tree's root
    """
    root = NamespaceNode(name="__root__", source_path=root_path)

    for path, qualified_names in includes.items():
        for qname in qualified_names:
            current = root
            for part in split_name(qname):
                if part not in current.children:
                    current.children[part] = NamespaceNode(name=part)
                current = current.children[part]
            current.source_path = path

    return root


def find_source_path(tree: NamespaceNode, qualified_name: str) -> Optional[str]:
    """Path of the most specific document that contributed qualified_name."""
    result = tree.source_path
    current = tree
    for part in split_name(qualified_name):
        current = current.children.get(part)
        if current is None:
            break
        if current.source_path is not None:
            result = current.source_path
    return result
