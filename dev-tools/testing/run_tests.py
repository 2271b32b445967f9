#!/usr/bin/env python3
"""Test runner script for the resource acceptance-test toolkit."""
import argparse
import logging
import os
import subprocess
import sys
from typing import List

# Configure logging
logging.basicConfig(level=logging.INFO, format='%(levelname)s: %(message)s')
logger = logging.getLogger(__name__)


def run_command(cmd: List[str], description: str, env: dict) -> bool:
    """Run a command and return success status."""
    logger.info(f"Running: {description}")
    logger.debug(f"Command: {' '.join(cmd)}")

    try:
        subprocess.run(cmd, check=True, capture_output=False, env=env)
        logger.info(f"PASS {description}")
        return True
    except subprocess.CalledProcessError as e:
        logger.error(f"FAIL {description} (exit code: {e.returncode})")
        return False
    except FileNotFoundError:
        logger.error(f"FAIL {description} (command not found)")
        return False


def main():
    """Main test runner function."""
    parser = argparse.ArgumentParser(description="Run tests for the resource acceptance-test toolkit")
    parser.add_argument("--unit", action="store_true", help="Run unit tests only")
    parser.add_argument("--acceptance", action="store_true", help="Run acceptance scenarios only")
    parser.add_argument("--live", action="store_true",
                        help="Run acceptance scenarios against real AWS (sets ACCTEST_LIVE=1)")
    parser.add_argument("--coverage", action="store_true", help="Run tests with coverage")
    parser.add_argument("--parallel", action="store_true", help="Run tests in parallel")
    parser.add_argument("--verbose", "-v", action="store_true", help="Verbose output")
    parser.add_argument("--keyword", "-k", type=str, help="Run tests matching keyword")
    parser.add_argument("--maxfail", type=int, default=5, help="Stop after N failures")
    parser.add_argument("--timeout", type=int, default=1800, help="Test timeout in seconds")

    args = parser.parse_args()

    pytest_cmd = [sys.executable, "-m", "pytest", "-v" if args.verbose else "-q"]
    if args.parallel:
        pytest_cmd.extend(["-n", "auto"])
    pytest_cmd.extend(["--timeout", str(args.timeout), "--maxfail", str(args.maxfail)])

    if args.coverage:
        pytest_cmd.extend(
            ["--cov=resource_acctest", "--cov-report=term-missing", "--cov-branch", "--no-cov-on-fail"]
        )

    markers = []
    if args.unit:
        markers.append("unit")
    if args.acceptance or args.live:
        markers.append("acceptance")
    if markers:
        pytest_cmd.extend(["-m", " or ".join(markers)])
    if args.keyword:
        pytest_cmd.extend(["-k", args.keyword])
    pytest_cmd.append("tests/")

    env = dict(os.environ)
    if args.live:
        env["ACCTEST_LIVE"] = "1"

    if not run_command(pytest_cmd, "Running Tests", env):
        print("\nSome tests failed!")
        sys.exit(1)
    print("\nAll tests passed!")


if __name__ == "__main__":
    main()
