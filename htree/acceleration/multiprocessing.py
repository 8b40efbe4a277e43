"""
Parallel backend for H-tree rasterization.

Lines are partitioned across a worker pool; each worker walks its lines and
returns the set of canvas indices they cover. Results are merged by set
union, so the canvas itself is never shared with the workers.
"""

import time
import logging
import multiprocessing as mp
from concurrent.futures import ProcessPoolExecutor, ThreadPoolExecutor, as_completed
from dataclasses import dataclass
from typing import FrozenSet, Iterable, List, Optional, Sequence, Set, Tuple

from ..core.geometry import Line

logger = logging.getLogger(__name__)


@dataclass
class PartitionResult:
    """Result from rasterizing a single partition."""
    partition_id: int
    indices: FrozenSet[int]
    processing_time: float


def partition_lines(lines: Iterable[Line], num_partitions: int) -> List[List[Line]]:
    """
    Split lines round-robin into at most ``num_partitions`` groups.

    Args:
        lines: Lines to distribute
        num_partitions: Target number of groups

    Returns:
        Non-empty partitions (fewer than requested if there are few lines)
    """
    if num_partitions < 1:
        raise ValueError("num_partitions must be >= 1")

    partitions: List[List[Line]] = [[] for _ in range(num_partitions)]
    for i, line in enumerate(lines):
        partitions[i % num_partitions].append(line)

    return [part for part in partitions if part]


def rasterize_partition(args: Tuple[Sequence[Line], int]) -> FrozenSet[int]:
    """
    Compute canvas indices covered by a group of lines.

    Args:
        args: Tuple of (lines, canvas_width)

    Returns:
        Indices ``y * canvas_width + x`` of every in-bounds point
    """
    lines, canvas_width = args

    indices: Set[int] = set()
    for line in lines:
        for point in line.points_along():
            if point.is_inside(0, canvas_width):
                indices.add(point.y * canvas_width + point.x)

    return frozenset(indices)


def _process_partition(args: Tuple[int, Sequence[Line], int]) -> PartitionResult:
    partition_id, lines, canvas_width = args
    start_time = time.time()
    indices = rasterize_partition((lines, canvas_width))
    return PartitionResult(partition_id, indices, time.time() - start_time)


class ParallelRasterizer:
    """Fork-join computation of pixel indices over a worker pool."""

    def __init__(self, num_workers: Optional[int] = None, use_threads: bool = True):
        """
        Initialize parallel rasterizer.

        Args:
            num_workers: Number of workers (None for optimal count)
            use_threads: Use a thread pool instead of a process pool
        """
        if num_workers is None:
            self.num_workers = get_optimal_worker_count()
        else:
            self.num_workers = max(1, num_workers)

        self.use_threads = use_threads
        logger.debug(f"Parallel rasterizer: {self.num_workers} "
                     f"{'threads' if use_threads else 'processes'}")

    def pixel_indices(self, lines: Iterable[Line], canvas_width: int) -> FrozenSet[int]:
        """
        Gather covered canvas indices from all lines.

        Args:
            lines: Lines to rasterize
            canvas_width: Width and height of the square canvas

        Returns:
            Deduplicated set of covered indices
        """
        partitions = partition_lines(lines, self.num_workers)

        if len(partitions) <= 1 or self.num_workers == 1:
            merged: Set[int] = set()
            for part in partitions:
                merged |= rasterize_partition((part, canvas_width))
            return frozenset(merged)

        start_time = time.time()
        executor_cls = ThreadPoolExecutor if self.use_threads else ProcessPoolExecutor

        merged = set()
        total_processing_time = 0.0

        with executor_cls(max_workers=self.num_workers) as executor:
            futures = [executor.submit(_process_partition, (i, part, canvas_width))
                       for i, part in enumerate(partitions)]

            for future in as_completed(futures):
                result = future.result()
                merged |= result.indices
                total_processing_time += result.processing_time
                logger.debug(f"Partition {result.partition_id}: {len(result.indices)} pixels "
                             f"in {result.processing_time:.3f}s")

        total_time = time.time() - start_time
        logger.debug(f"Rasterized {len(partitions)} partitions in {total_time:.3f}s "
                     f"({total_processing_time:.3f}s worker time)")

        return frozenset(merged)


def get_optimal_worker_count() -> int:
    """Get optimal number of workers for rasterization."""
    # Leave one core for the frame encoder
    return max(1, mp.cpu_count() - 1)
