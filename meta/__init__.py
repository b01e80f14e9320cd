from .sdf_meta import SdfMetaModel

DEFAULT_META = SdfMetaModel()

__all__ = [
    "SdfMetaModel",
    "DEFAULT_META",
]
