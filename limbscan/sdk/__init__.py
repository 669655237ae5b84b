from .run import (
    LoadResult,
    RunResult,
    export_cloud,
    load_file,
    load_image,
    load_text,
    run_from_config,
)

__all__ = [
    "LoadResult",
    "RunResult",
    "export_cloud",
    "load_file",
    "load_image",
    "load_text",
    "run_from_config",
]
