from .run import run, run_job
from .version import __version__


__all__ = [
    "run",
    "run_job",
    "__version__",
]
