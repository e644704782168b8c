"""
Demo: Geometry kernel.

Shows closest points, plane intersections, frames and document loading.
"""

import sys
import math
from pathlib import Path

# Add src to path (go up to project root, then into src)
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from spatial3d.geometry import (
    Point3D, Vector3D, UnitVector3D, Line3D, LineSegment3D, Plane3D, CoordinateSystem3D, Circle3D,
)
from spatial3d.io import GeometryReader, to_xml
from spatial3d.visualization import GeometryPlotter


def demo_closest_points():
    """Demo 1: Closest points between skew lines and segments."""
    print("\n" + "="*60)
    print("DEMO 1: Closest Points")
    print("="*60)

    l1 = Line3D(Point3D(0, 0, 0), Point3D(1, 0, 0))
    l2 = Line3D(Point3D(0.5, 1, 1), Point3D(0.5, 2, 1))
    p, q = l1.closest_points_between(l2)
    print(f"Lines:    {p}  <->  {q}   distance = {p.distance_to(q):.4f}")

    s1 = LineSegment3D(Point3D(0, 0, 0), Point3D(1, 0, 0))
    s2 = LineSegment3D(Point3D(3, 1, 0), Point3D(3, 2, 0))
    p, q = s1.closest_points_between(s2)
    print(f"Segments: {p}  <->  {q}   distance = {p.distance_to(q):.4f}")


def demo_planes():
    """Demo 2: Planes, projection and intersection."""
    print("\n" + "="*60)
    print("DEMO 2: Planes")
    print("="*60)

    base = Plane3D.from_points(Point3D(0, 0, 0), Point3D(1, 0, 0), Point3D(0, 1, 0))
    wall = Plane3D.from_normal_and_point(UnitVector3D.x_axis(), Point3D(2, 0, 0))
    print(f"Base: {base}")
    print(f"Wall: {wall}")

    crease = base.intersection_with(wall)
    print(f"Intersection: {crease}")

    p = Point3D(1, 2, 3)
    print(f"Projection of {p} on base: {base.project(p)}")
    print(f"Mirror of {p} about base: {base.mirror_about(p)}")


def demo_frames():
    """Demo 3: Coordinate systems."""
    print("\n" + "="*60)
    print("DEMO 3: Coordinate Systems")
    print("="*60)

    cs = CoordinateSystem3D.rotation_yaw_pitch_roll(math.radians(90), 0, 0).offset_by(Vector3D(1, 0, 0))
    p = Point3D(1, 0, 0)
    global_p = cs.transform(p)
    print(f"Frame: {cs}")
    print(f"Local {p} -> global {global_p}")
    print(f"Back to local: {cs.transform_to_coord_sys(global_p)}")

    circle = Circle3D.from_points(Point3D(1, 0, 0), Point3D(0, 1, 0), Point3D(-1, 0, 0))
    print(f"Circle through three points: {circle}")
    print(f"As XML: {to_xml(circle)}")


def demo_document(output_dir: Path):
    """Demo 4: Load a geometry document and plot it."""
    print("\n" + "="*60)
    print("DEMO 4: Geometry Document")
    print("="*60)

    case_path = Path(__file__).parent.parent / "cases/bracket.yaml"
    if not case_path.exists():
        print(f"⚠ Geometry file not found: {case_path}")
        print("Skipping this demo.")
        return

    scene = GeometryReader.read(case_path)
    print(f"Loaded '{scene.name}': {len(scene)} entities")

    strut = scene["strut"]
    hit = scene["base"].intersection_with(strut)
    print(f"Strut meets base at {hit}")

    plotter = GeometryPlotter()
    plotter.plot(scene.entities, title=scene.name)
    saved = plotter.save(output_dir / "bracket.png")
    plotter.close()
    print(f"Plot saved to {saved}")


def main():
    """Run all geometry demos."""
    print("\n")
    print("╔" + "=" * 58 + "╗")
    print("║" + "  SPATIAL3D - GEOMETRY DEMO  ".center(58) + "║")
    print("╚" + "=" * 58 + "╝")

    output_dir = Path(__file__).parent.parent / "results"

    demo_closest_points()
    demo_planes()
    demo_frames()
    demo_document(output_dir)

    print("\n" + "="*60)
    print("✓ ALL GEOMETRY DEMOS COMPLETED")
    print("="*60)


if __name__ == "__main__":
    main()
