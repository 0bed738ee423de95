"""
Interactive console for the Equality Vanguard admin data.
Browse any admin resource with the same filters, paging and RBAC as the API.
"""

from urllib.parse import parse_qsl

import pandas as pd

from vanguard_admin.config import MAX_PREVIEW_ROWS
from vanguard_admin.database import StorageHandle
from vanguard_admin.errors import AdminError
from vanguard_admin.rbac import load_access_context
from vanguard_admin.resources import ADMIN_CATALOG
from vanguard_admin.service import AdminQueryService

HELP = """Commands:
  <resource> [query-string]   e.g. members status=active&search=jane&page=2
  list                        show resources
  quit                        leave"""


def parse_command(line: str):
    """Split ``members status=active&page=2`` into (name, args)."""
    name, _, query = line.strip().partition(" ")
    return name.strip().lower(), dict(parse_qsl(query.strip(), keep_blank_values=False))


def render_listing(body: dict, collection: str) -> str:
    data = body["data"]
    items = data.get(collection, [])
    lines = []
    if not items:
        lines.append("(no rows returned)")
    else:
        df = pd.json_normalize(items)
        lines.append(df.head(MAX_PREVIEW_ROWS).to_string(index=False))

    p = data["pagination"]
    lines.append(
        f"\n[page {p['page']}/{p['totalPages']}] {p['total']} total, "
        f"{p['limit']} per page"
        + (" (more: page=" + str(p["page"] + 1) + ")" if p["hasNextPage"] else "")
    )
    for key in ("filters", "stats", "totals", "statusCounts"):
        if data.get(key):
            lines.append(f"[{key}] {data[key]}")
    return "\n".join(lines)


def main():
    print("=== Equality Vanguard: Admin Data Console ===\n")

    storage = StorageHandle()
    engine = storage.acquire()
    services = {name: AdminQueryService(spec, engine) for name, spec in ADMIN_CATALOG.items()}

    # ── Login ────────────────────────────────────────────────────────
    try:
        api_key = input("Enter access key (or 'quit'): ").strip()
    except (EOFError, KeyboardInterrupt):
        print("\nExiting.")
        storage.release()
        return

    if not api_key or api_key.lower() in {"quit", "exit"}:
        print("Goodbye.")
        storage.release()
        return

    try:
        ctx = load_access_context(engine, api_key)
    except ValueError as e:
        print("\n[ERROR] Login failed.")
        print("Details:", e)
        storage.release()
        return

    print(f"\n[auth] Logged in as: {ctx.display_name} (role={ctx.role})")
    print(HELP)

    # ── REPL ─────────────────────────────────────────────────────────
    try:
        while True:
            try:
                line = input("\nadmin> ").strip()
            except (EOFError, KeyboardInterrupt):
                print("\nExiting.")
                break

            if not line:
                continue
            if line.lower() in {"quit", "exit"}:
                print("Goodbye.")
                break
            if line.lower() in {"list", "help"}:
                print("Resources:", ", ".join(sorted(services)))
                continue

            name, args = parse_command(line)
            svc = services.get(name)
            if svc is None:
                print(f"[ERROR] Unknown resource '{name}'. Type 'list' to see them.")
                continue

            try:
                body = svc.list(ctx, args)
            except AdminError as e:
                print(f"\n[{e.status}] {e.message}")
                if e.details and e.status < 500:
                    print("Details:", e.details)
                continue

            print(render_listing(body, svc.spec.collection))
    finally:
        storage.release()


if __name__ == "__main__":
    main()
