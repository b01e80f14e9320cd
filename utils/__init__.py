from .logging_config import configure_logging
from .xml import xml_text, element_children, first_child, node_path

__all__ = [
    "configure_logging",
    "xml_text",
    "element_children",
    "first_child",
    "node_path",
]
