"""Run solver benchmarks: python -m benchmarks.run [step|pressure|all]."""

import argparse
import traceback

from benchmarks.step_cost import PressureIterationBenchmark, StepCostBenchmark

BENCHMARKS = {
    "step": StepCostBenchmark,
    "pressure": PressureIterationBenchmark,
}


def main():
    parser = argparse.ArgumentParser(description="fluidsplat Benchmark Harness")
    parser.add_argument(
        "benchmark",
        nargs="?",
        choices=list(BENCHMARKS.keys()) + ["all"],
        default="all",
        help="Benchmark to run (default: all)"
    )
    parser.add_argument(
        "--profile",
        action="store_true",
        help="Enable Taichi kernel profiler"
    )
    parser.add_argument(
        "--backend",
        type=str,
        help="Taichi backend (default: FLUIDSPLAT_BACKEND or auto-detect)"
    )
    parser.add_argument("--steps", type=int, default=100, help="Timed steps per case")

    args = parser.parse_args()

    names = list(BENCHMARKS) if args.benchmark == "all" else [args.benchmark]

    for name in names:
        bench_cls = BENCHMARKS[name]
        print(f"\nRunning {name} ({bench_cls.__name__})...")
        try:
            # ti.init is global; every benchmark re-initializes with the same backend
            b = bench_cls(profile=args.profile, backend=args.backend)
            b.run(steps=args.steps)
        except Exception as e:
            print(f"Error running benchmark: {e}")
            traceback.print_exc()


if __name__ == "__main__":
    main()
