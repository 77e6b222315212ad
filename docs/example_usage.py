"""
Basic usage example for eventlog-checker.

Runs the check twice against an in-memory Application log: the first run
records a baseline, the second counts only the records written in between.
Works on any platform.
"""

import sys
import tempfile
from pathlib import Path

# Add src to the path so the package imports without installing
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from eventlog_checker.core.check import EventLogCheck
from eventlog_checker.core.log_source import MemoryLogSource
from eventlog_checker.core.resolver import StaticMessageResolver
from eventlog_checker.exceptions import EventLogCheckError
from eventlog_checker.models.query import LogQuery

ERROR = 0x0001
WARNING = 0x0002
INFORMATION = 0x0004


def main():
    """Main function of the example."""

    print("🔍 eventlog-checker - Usage Example")
    print("=" * 50)

    with tempfile.TemporaryDirectory() as state_dir:
        try:
            # 1. Build an in-memory log with some history
            print("\n1. Creating in-memory Application log...")
            source = MemoryLogSource()
            log = source.add_log("Application")
            for _ in range(20):
                log.add_event(1000, INFORMATION, "App", strings=["startup"])
            print(f"✓ Log holds records {log.oldest} to {log.newest}")

            resolver = StaticMessageResolver({
                ("App", 1000): "Service %1 finished",
                ("App", 1001): "Service %1 failed: %2",
                ("Disk", 7): "The device %1 has a bad block.",
            })

            query = LogQuery.from_options(
                state_dir=Path(state_dir),
                type="Error,Warning",
                critical_over=0,
                return_content=True,
                orig_args=["--type", "Error,Warning", "-r"],
            )
            check = EventLogCheck(query, source=source, resolver=resolver)

            # 2. First run only records where the log ends
            print("\n2. First run...")
            result = check.run()
            print(f"   {result.format()}")

            # 3. New events arrive between runs
            print("\n3. Writing new events...")
            log.add_event(1001, ERROR, "App", strings=["Spooler", "access denied"])
            log.add_event(7, WARNING, "Disk", strings=["\\Device\\Harddisk1\\DR1"])
            log.add_event(1000, INFORMATION, "App", strings=["Spooler"])
            print(f"✓ Log now ends at record {log.newest}")

            # 4. Second run counts only the new records
            print("\n4. Second run...")
            result = check.run()
            print("-" * 80)
            print(result.format())
            print("-" * 80)
            print(f"   Exit code: {result.exit_code}")

            print("\n" + "=" * 50)
            print("✓ Example completed successfully")

        except EventLogCheckError as e:
            print(f"\n✗ Error during execution: {e}")
            return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
