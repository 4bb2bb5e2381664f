"""
List-level sort adapters.

Each module exposes the benchmark contract

    sort(a: list[int], *, config: dict | None = None) -> list[int]

returning a new sorted list and leaving `a` untouched. The benchmark runner
resolves algorithms by module name: `recsort.algorithms.<name>`.
"""
