"""
Root conftest.py for pytest configuration.
Adds the src directory to the Python path so tests run against the working tree.
"""
import sys
from pathlib import Path

# Get the project root directory
PROJECT_ROOT = Path(__file__).parent

src_dir = PROJECT_ROOT / "src"
if src_dir.exists():
    src_path = str(src_dir.absolute())
    if src_path not in sys.path:
        sys.path.insert(0, src_path)
