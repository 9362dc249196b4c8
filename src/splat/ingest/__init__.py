from .python_ingest import (
    DecoratedClass,
    annotation_arguments,
    class_from_cst,
    collect_decorated_classes,
    find_decorator,
    ingest_source,
    iter_python_paths,
)

__all__ = [
    "DecoratedClass",
    "annotation_arguments",
    "class_from_cst",
    "collect_decorated_classes",
    "find_decorator",
    "ingest_source",
    "iter_python_paths",
]
