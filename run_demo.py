#!/usr/bin/env python
"""
Convenience launcher for demos.

Run specific demo:
  python run_demo.py geometry

Or run from demos folder:
  python demos/demo_geometry.py
"""

import sys
import runpy
from pathlib import Path

DEMO_DIR = Path(__file__).parent / "demos"

DEMOS = {
    "geometry": DEMO_DIR / "demo_geometry.py",
}


def main():
    if len(sys.argv) < 2:
        print("Available demos:")
        for name in DEMOS:
            print(f"  python run_demo.py {name}")
        print("\nOr run directly:")
        print("  python demos/demo_geometry.py")
        sys.exit(1)

    demo = sys.argv[1].lower()
    demo_file = DEMOS.get(demo)
    if demo_file is None:
        print(f"Unknown demo: {demo}")
        sys.exit(1)

    if not demo_file.exists():
        print(f"Demo file not found: {demo_file}")
        sys.exit(1)

    runpy.run_path(str(demo_file), run_name="__main__")


if __name__ == "__main__":
    main()
