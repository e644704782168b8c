"""
Load a geometry document (YAML or JSON), report its entities and plot them.
"""

import sys
import argparse
import logging
from pathlib import Path

# Add src to path
sys.path.insert(0, str(Path(__file__).parent / "src"))

from spatial3d import GeometryError, setup_logging
from spatial3d.io import GeometryReader, GeometryWriter


def main():
    parser = argparse.ArgumentParser(description="Inspect a spatial3d geometry document")
    parser.add_argument("case_file", type=str, help="Path to YAML/JSON geometry document")
    parser.add_argument("--plot", action="store_true", help="Plot the entities")
    parser.add_argument("--output", type=str, default=None,
                        help="Save the plot here instead of results/<name>_geometry.png")
    parser.add_argument("--convert", type=str, default=None,
                        help="Write the document to this path (format from the suffix)")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    args = parser.parse_args()

    setup_logging(logging.DEBUG if args.verbose else logging.INFO)

    case_path = Path(args.case_file).resolve()
    if not case_path.exists():
        print(f"Error: Geometry file not found: {case_path}")
        sys.exit(1)

    print(f"Loading geometry: {case_path.name}")
    try:
        scene = GeometryReader.read(case_path)
    except (GeometryError, ValueError) as e:
        print(f"Error loading geometry: {e}")
        sys.exit(1)

    print(f"Geometry '{scene.name}' loaded successfully.")
    if scene.description:
        print(f"  {scene.description}")
    for name in scene:
        entity = scene[name]
        print(f"  {name:<16} {type(entity).__name__:<20} {entity}")

    if args.convert:
        written = GeometryWriter.write(scene, args.convert)
        print(f"Document written to {written}")

    if args.plot:
        import matplotlib
        matplotlib.use("Agg")
        from spatial3d.visualization import GeometryPlotter

        print("Generating visualization...")
        plotter = GeometryPlotter()
        plotter.plot(scene.entities, title=scene.name)

        output_file = Path(args.output) if args.output else Path("results") / f"{case_path.stem}_geometry.png"
        plotter.save(output_file)
        plotter.close()
        print(f"Plot saved to {output_file}")

    print("Done.")


if __name__ == "__main__":
    main()
