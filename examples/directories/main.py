"""
Directory Management Example - Create and manage directories.

Declares a small application tree under scratch/ and converges it. Run it
twice: the second run reports no changes.
"""

from dirconverge import ConvergenceEngine, DirConvergeError
from dirconverge.resources import DirectoryResource

# Top level; parents are created because recursive is set
app_dir = DirectoryResource(
    description="Main application directory at scratch/myapp",
    path="scratch/myapp",
    recursive=True,
)

# Restricted access
data_dir = DirectoryResource(
    description="Application data storage with restricted access",
    path="scratch/myapp/data",
    mode="700",
)

logs_dir = DirectoryResource(
    description="Application logs directory",
    path="scratch/myapp/logs",
    mode="755",
)

# Left over from an older layout; must be empty to be removed
cache_dir = DirectoryResource(
    description="Obsolete cache directory",
    path="scratch/myapp/cache",
    present=False,
)


if __name__ == "__main__":
    engine = ConvergenceEngine()
    for resource in (app_dir, data_dir, logs_dir, cache_dir):
        try:
            result = resource.converge(engine)
        except DirConvergeError as e:
            print(f"✗ {resource.path}: {e}")
            continue
        status = "changed" if result.changed else "ok"
        print(f"{status:8} {resource.path}")
        for operation in result.operations:
            print(f"         - {operation}")
