# geometry/mesh.py
import logging
import os
from typing import List, Optional, Tuple, Union

from pathtracer.core.vector import Vector3
from pathtracer.geometry.triangle import Triangle

logger = logging.getLogger(__name__)


def _resolve_index(token: str, count: int) -> int:
    """OBJ indices are 1-based; negative values count back from the end."""
    index = int(token)
    if index < 0:
        return count + index
    return index - 1


def _parse_face_vertex(token: str, vertex_count: int, normal_count: int) -> Tuple[int, Optional[int]]:
    # Face vertices come as v, v/vt, v//vn or v/vt/vn; texture indices are ignored
    parts = token.split('/')
    v_idx = _resolve_index(parts[0], vertex_count)
    n_idx = _resolve_index(parts[2], normal_count) if len(parts) > 2 and parts[2] else None
    return v_idx, n_idx


def load_obj(filename: Union[str, os.PathLike], material) -> List[Triangle]:
    """
    Load the faces of a Wavefront OBJ file as triangles sharing one material.

    Polygons with more than three vertices are fan-triangulated (they are
    assumed convex). Vertex normals are used when every corner of a face
    names one, otherwise the triangle falls back to its face normal.
    Raises ValueError on a malformed line.
    """
    vertices: List[Vector3] = []
    normals: List[Vector3] = []
    triangles: List[Triangle] = []

    logger.info("Loading mesh from %s", filename)
    with open(filename, 'r') as f:
        for line_num, line in enumerate(f, 1):
            values = line.split()
            if not values or values[0].startswith('#'):
                continue

            try:
                if values[0] == 'v':
                    vertices.append(Vector3(float(values[1]), float(values[2]), float(values[3])))
                elif values[0] == 'vn':
                    normals.append(Vector3(float(values[1]), float(values[2]), float(values[3])).normalize())
                elif values[0] == 'f':
                    corners = [_parse_face_vertex(v, len(vertices), len(normals)) for v in values[1:]]
                    if len(corners) < 3:
                        raise ValueError("face needs at least three vertices")

                    for i in range(1, len(corners) - 1):
                        (v0, n0), (v1, n1), (v2, n2) = corners[0], corners[i], corners[i + 1]
                        if n0 is not None and n1 is not None and n2 is not None:
                            face_normals = (normals[n0], normals[n1], normals[n2])
                        else:
                            face_normals = None
                        triangles.append(Triangle(vertices[v0], vertices[v1], vertices[v2],
                                                  material, face_normals))
            except (ValueError, IndexError) as e:
                logger.error("Error processing %s line %d: %s", filename, line_num, line.strip())
                raise ValueError(f"{filename}:{line_num}: malformed OBJ line ({e})") from e

    logger.info("Loaded %d vertices, %d normals, %d triangles",
                len(vertices), len(normals), len(triangles))
    return triangles
