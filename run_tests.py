#!/usr/bin/env python3
"""
Visitor Analytics Test Runner
=============================
Run all tests with proper configuration and reporting.

Usage:
    python run_tests.py              # Run all tests
    python run_tests.py --coverage   # Run with coverage report
    python run_tests.py -k summary   # Extra args go straight to pytest
"""
import subprocess
import sys
import os


def main():
    """Run the test suite."""
    os.chdir(os.path.dirname(os.path.abspath(__file__)))

    cmd = [
        sys.executable, "-m", "pytest",
        "tests/",
        "-v",
        "--tb=short",
    ]

    args = sys.argv[1:]

    if "--coverage" in args:
        cmd.extend([
            "--cov=visitor_analytics",
            "--cov-report=term-missing",
        ])
        args.remove("--coverage")

    cmd.extend(args)

    print("=" * 60)
    print("Visitor Analytics Test Suite")
    print("=" * 60)
    print(f"Running: {' '.join(cmd)}")
    print("-" * 60)

    result = subprocess.run(cmd)

    print("-" * 60)
    if result.returncode == 0:
        print("All tests passed")
    else:
        print(f"Tests failed with exit code {result.returncode}")

    return result.returncode


if __name__ == "__main__":
    sys.exit(main())
