# geometry/bvh.py
import logging
from typing import Dict, List, Optional, Sequence, Tuple

import numpy as np

from pathtracer.core.aabb import AABB
from pathtracer.core.ray import Ray
from pathtracer.geometry.hittable import HitRecord, Hittable

logger = logging.getLogger(__name__)

# Marks a node slot that does not apply (no child / no primitive).
NO_INDEX = -1


class BVHBuildError(ValueError):
    """Raised when a hierarchy cannot be built over the given primitives."""


class BVH(Hittable):
    """
    Bounding volume hierarchy stored as an arena of nodes.

    Node 0 is the root. A node is either a leaf, holding the index of one
    primitive, or a branch, holding the indices of its two children. Every
    node stores its box; a branch box is the union of its children's boxes.
    The structure is never modified after construction, so render threads
    can share it without locking.
    """
    def __init__(self, objects: Sequence[Hittable]):
        if len(objects) == 0:
            logger.error("Refusing to build a BVH over an empty primitive list")
            raise BVHBuildError("cannot build a BVH over an empty primitive list")

        self.primitives: List[Hittable] = list(objects)
        primitive_boxes = []
        for obj in self.primitives:
            box = obj.bounding_box()
            if box is None:
                logger.error("Primitive %r cannot be bound", obj)
                raise BVHBuildError(f"primitive {obj!r} has no bounding box")
            primitive_boxes.append(box)
        self._primitive_boxes = primitive_boxes

        self.boxes: List[AABB] = []
        self.left: List[int] = []
        self.right: List[int] = []
        self.primitive: List[int] = []

        self._build(list(range(len(self.primitives))))
        del self._primitive_boxes

        logger.debug("Built BVH over %d primitives: %d nodes, depth %d",
                     len(self.primitives), self.node_count, self.depth())

    def _new_node(self) -> int:
        self.boxes.append(None)
        self.left.append(NO_INDEX)
        self.right.append(NO_INDEX)
        self.primitive.append(NO_INDEX)
        return len(self.boxes) - 1

    def _largest_extent_axis(self, indices: List[int]) -> int:
        """
        Axis along which the primitives' box centroids are spread the widest.
        """
        centroids = [self._primitive_boxes[i].centroid() for i in indices]
        best_axis = 0
        best_extent = float("-inf")
        for axis in range(3):
            values = [c[axis] for c in centroids]
            extent = max(values) - min(values)
            if extent > best_extent:
                best_extent = extent
                best_axis = axis
        return best_axis

    def _build(self, indices: List[int]) -> int:
        node = self._new_node()

        if len(indices) == 1:
            self.primitive[node] = indices[0]
            self.boxes[node] = self._primitive_boxes[indices[0]]
            return node

        axis = self._largest_extent_axis(indices)
        indices.sort(key=lambda i: self._primitive_boxes[i].minimum[axis])
        mid = len(indices) // 2

        left = self._build(indices[:mid])
        right = self._build(indices[mid:])
        self.left[node] = left
        self.right[node] = right
        self.boxes[node] = AABB.surrounding_box(self.boxes[left], self.boxes[right])
        return node

    @property
    def node_count(self) -> int:
        return len(self.boxes)

    def is_leaf(self, node: int) -> bool:
        return self.primitive[node] != NO_INDEX

    def depth(self, node: int = 0) -> int:
        if self.is_leaf(node):
            return 1
        return 1 + max(self.depth(self.left[node]), self.depth(self.right[node]))

    def check_invariants(self) -> bool:
        """
        True if every branch box is exactly the union of its children's boxes.
        """
        for node in range(self.node_count):
            if self.is_leaf(node):
                continue
            union = AABB.surrounding_box(self.boxes[self.left[node]], self.boxes[self.right[node]])
            if self.boxes[node] != union:
                return False
        return True

    def hit(self, ray: Ray, t_min: float, t_max: float) -> Optional[HitRecord]:
        return self.hit_counted(ray, t_min, t_max)[1]

    def hit_counted(self, ray: Ray, t_min: float, t_max: float) -> Tuple[int, Optional[HitRecord]]:
        """
        Closest hit in [t_min, t_max], plus the number of leaves whose
        primitive had to be tested to find it.

        Nodes are visited depth-first, left child first. Once something is hit
        the far end of the interval shrinks to it, so boxes lying entirely
        behind the closest hit so far are skipped.
        """
        closest = t_max
        hit_record = None
        leaf_visits = 0
        stack = [0]
        while stack:
            node = stack.pop()
            if not self.boxes[node].hit(ray, t_min, closest):
                continue
            primitive = self.primitive[node]
            if primitive != NO_INDEX:
                leaf_visits += 1
                rec = self.primitives[primitive].hit(ray, t_min, closest)
                if rec is not None:
                    closest = rec.t
                    hit_record = rec
            else:
                # Right is pushed first so the left subtree is searched first.
                stack.append(self.right[node])
                stack.append(self.left[node])
        return leaf_visits, hit_record

    def bounding_box(self) -> AABB:
        return self.boxes[0]

    def to_arrays(self) -> Dict[str, np.ndarray]:
        """
        Flat numpy view of the arena, one row per node:
          - bbox_min, bbox_max: (n, 3) box corners
          - left, right: child indices, -1 for leaves
          - primitive: primitive index for leaves, -1 for branches
        """
        n = self.node_count
        bbox_min = np.array([[b.minimum.x, b.minimum.y, b.minimum.z] for b in self.boxes], dtype=np.float64)
        bbox_max = np.array([[b.maximum.x, b.maximum.y, b.maximum.z] for b in self.boxes], dtype=np.float64)
        return {
            "bbox_min": bbox_min.reshape(n, 3),
            "bbox_max": bbox_max.reshape(n, 3),
            "left": np.array(self.left, dtype=np.int32),
            "right": np.array(self.right, dtype=np.int32),
            "primitive": np.array(self.primitive, dtype=np.int32),
        }

    def __len__(self) -> int:
        return len(self.primitives)
