"""Fastener demo: build a bolt, a nut and a swept star ring, optionally export STL."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parents[1] / "src"))

from loguru import logger

from scadmesh.combine import Boolean
from scadmesh.fasteners import hex_bolt, hex_nut
from scadmesh.geom import Pt3
from scadmesh.geometry_checks import faces_oriented, mesh_watertight
from scadmesh.polyhedron import Polyhedron
from scadmesh.profiles import bezier_star, circle


def build_scene(m: int, length: float, segments: int) -> Boolean:
    bolt = hex_bolt(m, length, m * 0.7, segments, lead_in_degrees=90.0, chamfered=True)
    nut = hex_nut(m, m * 0.8, segments, chamfered=True)
    nut.translate(Pt3(3.0 * m, 0.0, 0.0))

    path = [p.as_pt3() for p in circle(4.0 * m, segments)]
    ring = Polyhedron.sweep(bezier_star(5, 1.0, 0.3, 2.0, 0.3, 4), path,
                            twist_degrees=360.0, closed=True)
    ring.translate(Pt3(-6.0 * m, 0.0, 0.0))

    return Boolean('union', [bolt, nut, ring]).finalize()


def report(scene: Boolean) -> None:
    for mesh in scene.meshes():
        watertight = mesh_watertight(mesh)
        oriented = faces_oriented(mesh)
        logger.info("{}: watertight={} oriented={}", mesh, watertight.ok, oriented.ok)


def export_stl(scene: Boolean, output: Path) -> None:
    import trimesh

    meshes = [mesh.to_trimesh() for mesh in scene.meshes()]
    trimesh.util.concatenate(meshes).export(output)
    print(f"Wrote {output}")


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("--m", type=int, default=8, help="metric size")
    parser.add_argument("--length", type=float, default=20.0)
    parser.add_argument("--segments", type=int, default=32)
    parser.add_argument("--output", type=Path, help="write the meshes to this STL file")
    args = parser.parse_args(argv)

    scene = build_scene(args.m, args.length, args.segments)
    report(scene)
    if args.output is not None:
        export_stl(scene, args.output)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
