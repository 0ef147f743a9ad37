import json
from dataclasses import asdict, dataclass
from typing import Dict, Iterator, List

from rich.console import Console
from rich.markup import escape

console = Console(stderr=True)


@dataclass
class CheckFailure:
    """Why a single endpoint did not pass"""
    url: str
    msg: str

    def to_dict(self) -> Dict[str, str]:
        return asdict(self)


class FailureReport:
    """Collects failures in the order the checks ran"""

    def __init__(self, output: Console = None):
        self.console = output or console
        self.failures: List[CheckFailure] = []

    def add(self, failure: CheckFailure):
        self.failures.append(failure)

    def __len__(self):
        return len(self.failures)

    def __iter__(self) -> Iterator[CheckFailure]:
        return iter(self.failures)

    def to_list(self) -> List[Dict[str, str]]:
        return [f.to_dict() for f in self.failures]

    def to_json(self) -> str:
        return json.dumps(self.to_list(), ensure_ascii=False)

    def print_failure(self, failure: CheckFailure):
        self.console.print(f"[red]❌ Failed URL: {escape(failure.url)}[/red]")
        self.console.print(f"   ====> {escape(failure.msg)}", highlight=False)

    def print_ok(self, url: str):
        self.console.print(f"[green]✅ {escape(url)} OK[/green]")

    def print_summary(self, total: int):
        if self.failures:
            self.console.print(f"[yellow]⚠️ {len(self.failures)} of {total} endpoints failed[/yellow]")
        else:
            self.console.print(f"[green]✅ All {total} endpoints passed[/green]")

    def save(self, filename: str):
        """Write the JSON report to a file"""
        with open(filename, 'w', encoding='utf-8') as f:
            json.dump(self.to_list(), f, indent=2, ensure_ascii=False)
        self.console.print(f"[green]✅ Report saved: {escape(filename)}[/green]")
