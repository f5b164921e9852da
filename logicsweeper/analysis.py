"""Analysis and benchmarking tools for no-guess board generation."""

import random
import time
from typing import Dict, List, Optional, Union

import matplotlib.pyplot as plt
import numpy as np

from .board import Board
from .engine import DIFFICULTY_LEVELS, DensityRange, generate_mines, mine_count_for


def run_generation_single_test(
    width: int,
    height: int,
    mine_density_range: DensityRange,
    *,
    require_unambiguous: bool = True,
    show_board: bool = False,
    seed: Optional[int] = None,
    max_depth: Union[int, float] = float("inf"),
) -> Dict[str, float]:
    """
    Generate one board and report how much work it took.

    Args:
        width: Board width.
        height: Board height.
        mine_density_range: (lo, hi) fraction of cells holding mines.
        require_unambiguous: Reject boards that need a guess.
        show_board: If True, print the generated board and the area opened
            by the first click.
        seed: Optional seed for a reproducible run.
        max_depth: Nesting limit for the hypothesis search.

    Returns:
        Dict with "attempts", "elapsed_seconds", "mine_count" and
        "revealed_from_first_click".
    """
    rng = random.Random(seed)
    board = Board(width, height, mine_count_for(width, height, mine_density_range, rng))
    first_x, first_y = width // 2, height // 2

    start = time.perf_counter()
    attempts = generate_mines(
        board,
        first_x,
        first_y,
        require_unambiguous,
        rng=rng,
        max_depth=max_depth,
    )
    elapsed = time.perf_counter() - start

    opened = board.clone()
    revealed_from_first_click = len(opened.reveal(first_x, first_y))

    if show_board:
        print(f"Generated after {attempts} attempts in {elapsed:.3f}s")
        print("Underlying board (mines visible):")
        print(board.format_board(reveal_all=True, highlight=(first_x, first_y)))
        print()
        print("After the first click:")
        print(opened.format_board())

    return {
        "attempts": float(attempts),
        "elapsed_seconds": elapsed,
        "mine_count": float(board.mine_count),
        "revealed_from_first_click": float(revealed_from_first_click),
    }


def run_generation_many_tests(
    width: int,
    height: int,
    mine_density_range: DensityRange,
    runs: int,
    *,
    require_unambiguous: bool = True,
    seed: Optional[int] = None,
    max_depth: Union[int, float] = float("inf"),
) -> Dict[str, float]:
    """
    Generate many boards and summarize attempts and timings.

    Args:
        width: Board width.
        height: Board height.
        mine_density_range: (lo, hi) fraction of cells holding mines.
        runs: Number of boards to generate, must be > 0.
        require_unambiguous: Reject boards that need a guess.
        seed: Optional base seed; run ``i`` uses ``seed + i``.
        max_depth: Nesting limit for the hypothesis search.

    Returns:
        Averages of the single-test metrics (prefixed with "avg_"), plus:
        - p50_attempts, p90_attempts, max_attempts
        - p50_elapsed_seconds, p90_elapsed_seconds
        - acceptance_rate (boards per placement drawn)
    """
    if runs <= 0:
        raise ValueError("runs must be positive.")

    samples: Dict[str, List[float]] = {
        "attempts": [],
        "elapsed_seconds": [],
        "mine_count": [],
        "revealed_from_first_click": [],
    }

    for i in range(runs):
        payload = run_generation_single_test(
            width,
            height,
            mine_density_range,
            require_unambiguous=require_unambiguous,
            seed=None if seed is None else seed + i,
            max_depth=max_depth,
        )
        for k in samples:
            samples[k].append(payload[k])

    out: Dict[str, float] = {
        f"avg_{k}": float(np.mean(values)) for k, values in samples.items()
    }

    attempts = np.asarray(samples["attempts"])
    elapsed = np.asarray(samples["elapsed_seconds"])
    out["p50_attempts"] = float(np.percentile(attempts, 50))
    out["p90_attempts"] = float(np.percentile(attempts, 90))
    out["max_attempts"] = float(attempts.max())
    out["p50_elapsed_seconds"] = float(np.percentile(elapsed, 50))
    out["p90_elapsed_seconds"] = float(np.percentile(elapsed, 90))
    out["acceptance_rate"] = float(runs / attempts.sum())

    return out


def run_generation_difficulty_analysis(
    runs: int,
    *,
    require_unambiguous: bool = True,
    seed: Optional[int] = None,
    max_depth: Union[int, float] = float("inf"),
    plot: bool = True,
) -> Dict[str, Dict[str, float]]:
    """
    Run generation benchmarks on every preset in ``DIFFICULTY_LEVELS`` and plot summaries.

    Args:
        runs: Number of boards per difficulty level.
        require_unambiguous: Reject boards that need a guess.
        seed: Optional base seed.
        max_depth: Nesting limit for the hypothesis search.
        plot: If True, show bar charts of attempts, time and acceptance rate.

    Returns:
        Mapping from level name to statistics dict returned by
        run_generation_many_tests().
    """
    results: Dict[str, Dict[str, float]] = {}
    for level, (w, h, density) in DIFFICULTY_LEVELS.items():
        results[level] = run_generation_many_tests(
            w,
            h,
            density,
            runs,
            require_unambiguous=require_unambiguous,
            seed=seed,
            max_depth=max_depth,
        )

    if not plot:
        return results

    level_names = list(DIFFICULTY_LEVELS.keys())
    x = np.arange(len(level_names))
    bar_w = 0.35

    # 1) Placements drawn per accepted board
    plt.figure()  # type: ignore[misc]
    plt.bar(  # type: ignore[misc]
        x - bar_w / 2,
        [results[n]["avg_attempts"] for n in level_names],
        width=bar_w,
        label="mean",
    )
    plt.bar(  # type: ignore[misc]
        x + bar_w / 2,
        [results[n]["p90_attempts"] for n in level_names],
        width=bar_w,
        label="p90",
    )
    plt.xticks(x, level_names)  # type: ignore[misc]
    plt.ylabel("Placements drawn")  # type: ignore[misc]
    plt.title("Placements drawn per accepted board")  # type: ignore[misc]
    plt.legend()  # type: ignore[misc]
    plt.tight_layout()
    plt.show()  # type: ignore[misc]

    # 2) Generation time
    plt.figure()  # type: ignore[misc]
    plt.bar(  # type: ignore[misc]
        x - bar_w / 2,
        [results[n]["avg_elapsed_seconds"] for n in level_names],
        width=bar_w,
        label="mean",
    )
    plt.bar(  # type: ignore[misc]
        x + bar_w / 2,
        [results[n]["p90_elapsed_seconds"] for n in level_names],
        width=bar_w,
        label="p90",
    )
    plt.xticks(x, level_names)  # type: ignore[misc]
    plt.ylabel("Seconds")  # type: ignore[misc]
    plt.title("Generation time per board")  # type: ignore[misc]
    plt.legend()  # type: ignore[misc]
    plt.tight_layout()
    plt.show()  # type: ignore[misc]

    # 3) Acceptance rate by level
    plt.figure()  # type: ignore[misc]
    plt.bar(x, [results[n]["acceptance_rate"] for n in level_names])  # type: ignore[misc]
    plt.xticks(x, level_names)  # type: ignore[misc]
    plt.ylabel("Accepted boards per placement")  # type: ignore[misc]
    plt.ylim(0.0, 1.0)  # type: ignore[misc]
    plt.title("Acceptance rate by difficulty level")  # type: ignore[misc]
    plt.tight_layout()
    plt.show()  # type: ignore[misc]

    return results
