"""Helical thread mesh generator for scadmesh."""

from __future__ import annotations

from dataclasses import dataclass
from typing import List

from loguru import logger

from scadmesh.combine import Boolean
from scadmesh.geom import Pt3, Pt3s, dcos, dsin
from scadmesh.polyhedron import Polyhedron

__all__ = [
    "THREAD_CORE_OVERSIZE",
    "ThreadSection",
    "thread_mesh",
    "threaded_cylinder",
]

# the core cylinder is grown slightly so it overlaps the thread shell
THREAD_CORE_OVERSIZE = 1.0e-4

_RH_START = [[0, 1, 2], [2, 1, 3]]
_LH_START = [[2, 1, 0], [3, 1, 2]]
_RH_STEP = [[1, 5, 3], [3, 5, 7], [0, 4, 1], [1, 4, 5],
            [2, 6, 0], [0, 6, 4], [3, 7, 2], [2, 7, 6]]
_LH_STEP = [[3, 5, 1], [7, 5, 3], [1, 4, 0], [5, 4, 1],
            [0, 6, 2], [4, 6, 0], [2, 7, 3], [6, 7, 2]]
_RH_END = [[6, 7, 5], [6, 5, 4]]
_LH_END = [[5, 7, 6], [4, 5, 6]]


@dataclass(frozen=True)
class ThreadSection:
    """Four point thread cross-section in the X/Z plane.

    ``root_top`` and ``root_bottom`` sit on the minor diameter, ``crest_top``
    and ``crest_bottom`` on the major diameter (or closer in during a lead
    in or lead out).
    """

    root_top: Pt3
    crest_top: Pt3
    root_bottom: Pt3
    crest_bottom: Pt3

    def placed(self, angle: float, z: float) -> List[Pt3]:
        c = dcos(angle)
        s = dsin(angle)
        return [Pt3(c * p.x, s * p.x, z + p.z)
                for p in (self.root_top, self.crest_top, self.root_bottom, self.crest_bottom)]

    def with_crest(self, crest_top: Pt3, crest_bottom: Pt3) -> "ThreadSection":
        return ThreadSection(self.root_top, crest_top, self.root_bottom, crest_bottom)


def _lerp(start: Pt3, end: Pt3, n_steps: int, step: int) -> Pt3:
    return start + (end - start) / n_steps * step


def thread_mesh(d_min: float, d_maj: float, pitch: float, length: float,
                segments: int, lead_in_degrees: float = 0.0,
                lead_out_degrees: float = 0.0,
                left_hand_thread: bool = False) -> Polyhedron:
    """Build the helical thread shell, without its core cylinder.

    One cross-section is placed every ``360 / segments`` degrees while
    climbing ``pitch`` per turn.  During the lead in the crest grows from
    the minor diameter to full depth; during the lead out it shrinks back.
    """

    if pitch <= 0.0:
        raise ValueError('thread pitch must be positive, got {}'.format(pitch))
    if d_maj <= d_min:
        raise ValueError('major diameter {} must exceed minor diameter {}'.format(d_maj, d_min))
    if segments < 3:
        raise ValueError('thread needs at least 3 segments per turn, got {}'.format(segments))

    lead_in = lead_in_degrees > 0.0
    lead_out = lead_out_degrees > 0.0
    thread_length = length - 0.7 * pitch
    n_steps = int(thread_length / pitch * segments)
    if n_steps < 2:
        raise ValueError('thread of length {} is too short for pitch {}'.format(length, pitch))
    z_step = thread_length / n_steps
    step_angle = 360.0 / segments
    n_lead_in = int(segments * lead_in_degrees / 360.0 + 2.0)
    n_lead_out = int(segments * lead_out_degrees / 360.0)

    full = ThreadSection(Pt3(d_min / 2.0, 0.0, 3.0 / 4.0 * pitch),
                         Pt3(d_maj / 2.0, 0.0, 7.0 / 16.0 * pitch),
                         Pt3(d_min / 2.0, 0.0, 0.0),
                         Pt3(d_maj / 2.0, 0.0, 5.0 / 16.0 * pitch))
    flush_top = Pt3(d_min / 2.0, 0.0, 7.0 / 16.0 * pitch)
    flush_bottom = Pt3(d_min / 2.0, 0.0, 5.0 / 16.0 * pitch)

    lead_in_step = 2
    start = full.with_crest(_lerp(flush_top, full.crest_top, n_lead_in, lead_in_step),
                            _lerp(flush_bottom, full.crest_bottom, n_lead_in, lead_in_step))
    lead_in_step += 1

    lead_out_step = n_lead_out
    if n_lead_out > 0:
        end_top = _lerp(flush_top, full.crest_top, n_lead_out, 1)
        end_bottom = _lerp(flush_bottom, full.crest_bottom, n_lead_out, 1)
    else:
        end_top = full.crest_top
        end_bottom = full.crest_bottom

    start_faces, step_faces, end_faces = (
        (_LH_START, _LH_STEP, _LH_END) if left_hand_thread
        else (_RH_START, _RH_STEP, _RH_END))

    vertices = Pt3s(start.placed(0.0, 0.0))
    faces = [list(f) for f in start_faces]

    lead_in_section = start
    lead_out_section = full
    for step in range(n_steps - 1):
        angle = step_angle * (step + 1)
        if left_hand_thread:
            angle = -angle
        z = z_step * step
        if lead_in and lead_in_step < n_lead_in:
            vertices.extend(lead_in_section.placed(angle, z))
            lead_in_step += 1
            lead_in_section = full.with_crest(
                _lerp(start.crest_top, full.crest_top, n_lead_in, lead_in_step),
                _lerp(start.crest_bottom, full.crest_bottom, n_lead_in, lead_in_step))
        elif lead_out and lead_out_step > 0 and step >= n_steps - n_lead_out:
            vertices.extend(lead_out_section.placed(angle, z))
            lead_out_step -= 1
            lead_out_section = full.with_crest(
                _lerp(full.crest_top, end_top, n_lead_out, n_lead_out - lead_out_step),
                _lerp(full.crest_bottom, end_bottom, n_lead_out, n_lead_out - lead_out_step))
        else:
            vertices.extend(full.placed(angle, z))

        offset = 4 * step
        faces.extend([i + offset for i in f] for f in step_faces)

    offset = (n_steps - 2) * 4
    faces.extend([i + offset for i in f] for f in end_faces)

    logger.debug('thread mesh: {} steps, {} points, {} faces',
                 n_steps, len(vertices), len(faces))
    return Polyhedron(vertices, faces,
                      'thread_mesh(d_min={}, d_maj={}, pitch={}, length={})'
                      .format(d_min, d_maj, pitch, length))


def threaded_cylinder(d_min: float, d_maj: float, pitch: float, length: float,
                      segments: int, lead_in_degrees: float = 0.0,
                      lead_out_degrees: float = 0.0,
                      left_hand_thread: bool = False,
                      center: bool = False) -> Boolean:
    """Union of a thread shell and the core cylinder it wraps."""

    threads = thread_mesh(d_min, d_maj, pitch, length, segments,
                          lead_in_degrees, lead_out_degrees, left_hand_thread)
    core = Polyhedron.cylinder(d_min / 2.0 + THREAD_CORE_OVERSIZE, length, segments)
    if center:
        offset = Pt3(0.0, 0.0, -length / 2.0)
        threads.translate(offset)
        core.translate(offset)
    return Boolean('union', [threads, core]).finalize()
