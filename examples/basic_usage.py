#!/usr/bin/env python3
"""
Example: Basic usage of cyberdoc-tree as a Python library
"""

from cyberdoc_tree import HierarchyIndex, HierarchyQuery, RecordStore

records = [
    {"index": 1, "base": 0, "name": "IScriptable"},
    {"index": 2, "base": 1, "name": "Entity"},
    {"index": 3, "base": 2, "name": "Player"},
    {"index": 4, "base": 2, "name": "Vehicle"},
]

index = HierarchyIndex.build(RecordStore.from_records(records))
query = HierarchyQuery(index)

print("Roots:", ", ".join(r.name for r in index.roots))

trace = query.build_trace(["IScriptable", "Entity"], filters=["player"])
for node_id, label, parent in zip(trace.ids, trace.labels, trace.parents):
    print(f"  {node_id:>3} {label:<12} parent={parent or '-'}")
print(f"Zoom level: {trace.level}")

print("Route of 3:", query.build_route(3))
