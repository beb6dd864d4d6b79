# !/usr/bin/python
# coding=utf-8
"""Static 3D nearest-neighbour index used to remap per-point data."""
from typing import List, Optional, Sequence

import numpy as np


class _KDNode:
    def __init__(self, pivot, pivot_idx: int, axis: int):
        self.pivot = pivot
        self.pivot_idx = pivot_idx
        self.axis = axis
        self.lr: List[Optional["_KDNode"]] = [None, None]


class KDTree:
    """KD-tree over a fixed point array.

    The tree partitions an index permutation with a median-of-three pivot on
    axis ``depth % 3``; the point array itself is never reordered, so
    :meth:`find_nearest` returns indices into the array as given.

    Parameters:
        points (array-like): (N, 3) point coordinates.
        start (int): First index of the range to index.
        end (int): Last index (inclusive) of the range to index. Negative means
            the last point.

    Example:
        tree = KDTree([(0, 0, 0), (10, 0, 0), (5, 0, 0)])
        tree.find_nearest((4, 0, 0))  # 2
    """

    dimension = 3

    def __init__(self, points: Sequence, start: int = 0, end: int = -1):
        points = np.asarray(points, dtype=float)
        if points.size == 0:
            points = points.reshape(0, self.dimension)
        if points.ndim != 2 or points.shape[1] != self.dimension:
            raise ValueError(
                f"KDTree expects an (N, {self.dimension}) array, got {points.shape}"
            )

        self.points = points
        # Python floats are far quicker than numpy scalars in the walk below.
        self._coords = points.tolist()

        count = len(self._coords)
        end = count - 1 if end < 0 else min(end, count - 1)
        start = max(start, 0)
        self.root = self._build(list(range(count)), start, end)

    # --------------------------------------------------------------------------------------------
    # Construction
    # --------------------------------------------------------------------------------------------

    def _build(self, inds: List[int], start: int, end: int) -> Optional[_KDNode]:
        if start > end:
            return None

        root = None
        # (depth, start, end, parent, side); ranges are disjoint, so the order in
        # which they are partitioned does not change the resulting tree.
        stack = [(0, start, end, None, 0)]
        while stack:
            depth, st, en, parent, side = stack.pop()
            axis = depth % self.dimension
            split = self._split_by_axis(inds, st, en, axis)

            pivot_idx = inds[split]
            node = _KDNode(self._coords[pivot_idx], pivot_idx, axis)
            if parent is None:
                root = node
            else:
                parent.lr[side] = node

            if split + 1 <= en:
                stack.append((depth + 1, split + 1, en, node, 1))
            if split - 1 >= st:
                stack.append((depth + 1, st, split - 1, node, 0))

        return root

    def _find_median_idx(self, inds: List[int], start: int, end: int, axis: int) -> int:
        """Median of three over the first, last and middle values of the range."""
        coords = self._coords
        a = coords[inds[start]][axis]
        b = coords[inds[end]][axis]
        mid = (start + end) // 2
        m = coords[inds[mid]][axis]

        if a > b:
            if m > a:
                return start
            return end if b > m else mid
        if a > m:
            return start
        return end if m > b else mid

    def _split_by_axis(self, inds: List[int], start: int, end: int, axis: int) -> int:
        """Partition the range around the median-of-three pivot.

        Values greater than the pivot go right, the rest left.

        Returns:
            (int) The pivot's final position in ``inds``.
        """
        coords = self._coords
        split = self._find_median_idx(inds, start, end, axis)
        pivot_value = coords[inds[split]][axis]

        inds[start], inds[split] = inds[split], inds[start]
        start += 1

        while start <= end:
            if coords[inds[start]][axis] > pivot_value:
                inds[start], inds[end] = inds[end], inds[start]
                end -= 1
            else:
                inds[start - 1], inds[start] = inds[start], inds[start - 1]
                start += 1

        return start - 1

    # --------------------------------------------------------------------------------------------
    # Queries
    # --------------------------------------------------------------------------------------------

    def find_nearest(self, point: Sequence[float]) -> int:
        """Index of the indexed point closest to ``point``.

        Distances are squared Euclidean; on a tie the first point found keeps
        its place.

        Returns:
            (int) Index into the original point array, -1 for an empty tree.
        """
        if self.root is None:
            return -1

        query = [float(v) for v in point]
        best_sq_dist = float("inf")
        best_idx = -1

        # (True, node, _) visits a node; (False, node, axis_dist) is its far-side
        # check, popped only once the near side has been fully searched.
        stack = [(True, self.root, 0.0)]
        while stack:
            visit, node, axis_dist = stack.pop()
            if visit:
                pivot = node.pivot
                dx = pivot[0] - query[0]
                dy = pivot[1] - query[1]
                dz = pivot[2] - query[2]
                sq_dist = dx * dx + dy * dy + dz * dz
                if sq_dist < best_sq_dist:
                    best_sq_dist = sq_dist
                    best_idx = node.pivot_idx

                diff = query[node.axis] - pivot[node.axis]
                near = 0 if diff <= 0 else 1
                stack.append((False, node, diff))
                if node.lr[near] is not None:
                    stack.append((True, node.lr[near], 0.0))
            else:
                far = 1 if axis_dist <= 0 else 0
                if node.lr[far] is not None and best_sq_dist > axis_dist * axis_dist:
                    stack.append((True, node.lr[far], 0.0))

        return best_idx

    def find_nearest_many(self, points: Sequence) -> np.ndarray:
        """Vector of :meth:`find_nearest` results, one per query point."""
        return np.array([self.find_nearest(p) for p in points], dtype=int)

    def __len__(self) -> int:
        count = 0
        stack = [self.root] if self.root is not None else []
        while stack:
            node = stack.pop()
            count += 1
            stack.extend(child for child in node.lr if child is not None)
        return count
